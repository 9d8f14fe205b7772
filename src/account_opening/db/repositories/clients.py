from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from account_opening.db.models import Client


class ClientRepo:
    """
    Client reference data. Clients are onboarded elsewhere; this service only looks
    them up by national id before creating a request.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_national_id(self, national_id: str) -> Client | None:
        stmt = select(Client).where(Client.national_id == national_id.strip())
        return (await self._session.execute(stmt)).scalar_one_or_none()
