"""
account_opening.db.repositories.account_requests

Repository for `AccountRequest` entities.

Responsibilities:
- Insert new requests (always Pending).
- Guarded single-statement state transitions.
- Read queries joined with client and creator identity, newest first.
- Artifact column access (write-once attach, read).
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import Select, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from account_opening.db.models import (
    AccountRequest,
    Client,
    ProductType,
    RequestState,
    RoleBinding,
)


def _with_identity(stmt: Select, *, profile: bool = False) -> Select:
    client = selectinload(AccountRequest.client)
    if profile:
        client = client.selectinload(Client.profile)
    creator = selectinload(AccountRequest.creator)
    # populate_existing: guarded updates bypass the identity map, so reload on read.
    return stmt.options(
        client,
        creator.selectinload(RoleBinding.user),
        creator.selectinload(RoleBinding.role),
    ).execution_options(populate_existing=True)


class AccountRequestRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        client_id: int,
        creator_binding_id: int,
        advisor_comment: str | None = None,
        artifact: bytes | None = None,
        artifact_type: str | None = None,
    ) -> AccountRequest:
        req = AccountRequest(
            client_id=client_id,
            creator_binding_id=creator_binding_id,
            product_type=ProductType.savings,
            state=RequestState.pending,
            advisor_comment=advisor_comment,
            artifact=artifact,
            artifact_type=artifact_type if artifact is not None else None,
        )
        self._session.add(req)
        await self._session.flush()
        return req

    async def get(self, request_id: int, *, with_profile: bool = False) -> AccountRequest | None:
        stmt = _with_identity(
            select(AccountRequest).where(AccountRequest.id == request_id), profile=with_profile
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list(
        self,
        *,
        state: RequestState | None = None,
        creator_binding_id: int | None = None,
        limit: int = 500,
    ) -> list[AccountRequest]:
        stmt = select(AccountRequest)
        if state is not None:
            stmt = stmt.where(AccountRequest.state == state)
        if creator_binding_id is not None:
            stmt = stmt.where(AccountRequest.creator_binding_id == creator_binding_id)
        stmt = _with_identity(
            stmt.order_by(AccountRequest.created_at.desc(), AccountRequest.id.desc()).limit(limit)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def resolve(
        self,
        request_id: int,
        *,
        to_state: RequestState,
        director_comment: str | None = None,
    ) -> bool:
        # The state predicate is the only concurrency guard: check and write are one statement.
        values: dict[str, object] = {"state": to_state, "resolved_at": datetime.now(tz=UTC)}
        if director_comment is not None:
            values["director_comment"] = director_comment
        stmt = (
            update(AccountRequest)
            .where(
                AccountRequest.id == request_id,
                AccountRequest.state == RequestState.pending,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0

    async def delete(self, request_id: int) -> bool:
        stmt = delete(AccountRequest).where(AccountRequest.id == request_id)
        result = await self._session.execute(stmt.execution_options(synchronize_session=False))
        return result.rowcount > 0

    async def attach_artifact(self, request_id: int, *, content: bytes, content_type: str) -> bool:
        # Write-once: a request that already carries a document is left untouched.
        stmt = (
            update(AccountRequest)
            .where(AccountRequest.id == request_id, AccountRequest.artifact.is_(None))
            .values(artifact=content, artifact_type=content_type)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0

    async def read_artifact(self, request_id: int) -> tuple[bytes, str | None] | None:
        stmt = select(AccountRequest.artifact, AccountRequest.artifact_type).where(
            AccountRequest.id == request_id, AccountRequest.artifact.is_not(None)
        )
        row = (await self._session.execute(stmt)).one_or_none()
        return None if row is None else (row[0], row[1])


# --- Module Notes -----------------------------------------------------------
# `artifact` is a deferred column so list/detail queries never pull document bytes.
