from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from account_opening.db.repositories.account_requests import AccountRequestRepo
from account_opening.errors import ArtifactNotFound, storage_errors
from account_opening.observability.logging import get_logger

log = get_logger(__name__)

DEFAULT_ARTIFACT_TYPE = "pdf"


@dataclass(frozen=True, slots=True)
class StoredArtifact:
    content: bytes
    content_type: str


class ArtifactStore:
    """
    Opaque supporting-document bytes keyed by request id.

    Type and size checks belong to the upload gate (`api.uploads`), not here.
    """

    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._requests = AccountRequestRepo(session)

    async def attach(self, request_id: int, content: bytes, content_type: str) -> bool:
        # Write-once; returns False when the request is missing or already has a document.
        with storage_errors("artifacts.attach", request_id=request_id):
            attached = await self._requests.attach_artifact(
                request_id, content=content, content_type=content_type
            )
            await self._session.commit()
        if attached:
            log.info("artifact.attached", request_id=request_id, size=len(content))
        return attached

    async def read(self, request_id: int) -> StoredArtifact:
        with storage_errors("artifacts.read", request_id=request_id):
            row = await self._requests.read_artifact(request_id)
        if row is None:
            raise ArtifactNotFound()
        content, content_type = row
        return StoredArtifact(content=content, content_type=content_type or DEFAULT_ARTIFACT_TYPE)
