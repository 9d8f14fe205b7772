"""
account_opening.services.account_requests

Request Lifecycle Manager for account-opening requests.

Responsibilities:
- Create requests (always Pending) attributed to the advisor's role binding.
- Move Pending requests to Approved or Rejected with a single guarded update.
- Serve newest-first reads joined with client and creator identity.

State machine:
    Pending -> Approved
    Pending -> Rejected
Approved and Rejected are terminal. Returned exists in the schema but nothing leads there.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from account_opening.db.models import AccountRequest, RequestState
from account_opening.db.repositories.account_requests import AccountRequestRepo
from account_opening.errors import EmptyComment, RequestNotFound, storage_errors
from account_opening.observability.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ArtifactUpload:
    content: bytes
    content_type: str


class AccountRequestService:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._requests = AccountRequestRepo(session)

    async def create(
        self,
        *,
        client_id: int,
        creator_binding_id: int,
        comment: str | None = None,
        artifact: ArtifactUpload | None = None,
    ) -> int:
        # Client resolution happens in the caller; `client_id` is already known to exist.
        comment = comment.strip() if comment and comment.strip() else None
        with storage_errors("requests.create", client_id=client_id):
            req = await self._requests.create(
                client_id=client_id,
                creator_binding_id=creator_binding_id,
                advisor_comment=comment,
                artifact=artifact.content if artifact else None,
                artifact_type=artifact.content_type if artifact else None,
            )
            request_id = req.id
            await self._session.commit()

        log.info(
            "request.created",
            request_id=request_id,
            client_id=client_id,
            binding_id=creator_binding_id,
            has_artifact=artifact is not None,
        )
        return request_id

    async def get(self, request_id: int) -> AccountRequest:
        with storage_errors("requests.get", request_id=request_id):
            req = await self._requests.get(request_id)
        if req is None:
            raise RequestNotFound()
        return req

    async def get_detail(self, request_id: int) -> AccountRequest:
        # Same as `get`, plus the client's contact/profile row.
        with storage_errors("requests.get_detail", request_id=request_id):
            req = await self._requests.get(request_id, with_profile=True)
        if req is None:
            raise RequestNotFound()
        return req

    async def list(
        self,
        *,
        state: RequestState | None = None,
        creator_binding_id: int | None = None,
    ) -> list[AccountRequest]:
        with storage_errors("requests.list"):
            return await self._requests.list(state=state, creator_binding_id=creator_binding_id)

    async def approve(self, request_id: int) -> bool:
        return await self._resolve(request_id, to_state=RequestState.approved)

    async def reject(self, request_id: int, comment: str) -> bool:
        # Precondition checked before any storage access.
        if comment is None or not comment.strip():
            raise EmptyComment()
        return await self._resolve(
            request_id, to_state=RequestState.rejected, director_comment=comment.strip()
        )

    async def delete(self, request_id: int) -> bool:
        # Administrative removal; not a lifecycle transition.
        with storage_errors("requests.delete", request_id=request_id):
            deleted = await self._requests.delete(request_id)
            await self._session.commit()
        if deleted:
            log.info("request.deleted", request_id=request_id)
        return deleted

    async def _resolve(
        self,
        request_id: int,
        *,
        to_state: RequestState,
        director_comment: str | None = None,
    ) -> bool:
        with storage_errors("requests.resolve", request_id=request_id, to_state=to_state.value):
            changed = await self._requests.resolve(
                request_id, to_state=to_state, director_comment=director_comment
            )
            await self._session.commit()

        # False covers both "no such request" and "already resolved".
        if changed:
            log.info("request.resolved", request_id=request_id, state=to_state.value)
        else:
            log.info("request.resolve_skipped", request_id=request_id, state=to_state.value)
        return changed


# --- Module Notes -----------------------------------------------------------
# Approvals record only the outcome and `resolved_at`; the acting director's binding
# is not persisted for either transition.
