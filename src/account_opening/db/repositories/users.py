from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from account_opening.auth.roles import normalize_handle
from account_opening.db.models import User


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, full_name: str, login_handle: str, password_hash: str) -> User:
        user = User(
            full_name=full_name.strip(),
            login_handle=normalize_handle(login_handle),
            password_hash=password_hash,
            is_active=True,
        )
        self._session.add(user)
        await self._session.flush()
        return user

    async def get(self, user_id: int) -> User | None:
        return await self._session.get(User, user_id)

    async def get_by_handle(self, login_handle: str) -> User | None:
        stmt = select(User).where(User.login_handle == normalize_handle(login_handle))
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list(self) -> list[User]:
        stmt = select(User).order_by(User.created_at.desc(), User.id.desc())
        return list((await self._session.execute(stmt)).scalars().all())

    async def set_active(self, user_id: int, is_active: bool) -> bool:
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(is_active=is_active)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0
