"""
account_opening.db.repositories.roles

Repositories for the role catalog and principal-role bindings.

Responsibilities:
- Catalog lookups by normalized key.
- Binding inserts that rely on the (user_id, role_id) unique constraint.
- The joined principal/role/binding lookup used for legacy credentials.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from account_opening.auth.roles import normalize_handle, normalize_role
from account_opening.db.models import Role, RoleBinding, User


class RoleRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_name(self, name: str) -> Role | None:
        stmt = select(Role).where(Role.key == normalize_role(name))
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list_all(self) -> list[Role]:
        stmt = select(Role).order_by(Role.name)
        return list((await self._session.execute(stmt)).scalars().all())


class RoleBindingRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, *, user_id: int, role_id: int) -> RoleBinding | None:
        stmt = select(RoleBinding).where(
            RoleBinding.user_id == user_id, RoleBinding.role_id == role_id
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def insert(self, *, user_id: int, role_id: int) -> RoleBinding:
        # Raises IntegrityError when the pair already exists; callers decide what that means.
        binding = RoleBinding(user_id=user_id, role_id=role_id)
        self._session.add(binding)
        await self._session.flush()
        return binding

    async def get_or_create(self, *, user_id: int, role_id: int) -> tuple[RoleBinding, bool]:
        """
        Atomic get-or-create for a (user, role) pair.

        Two concurrent callers may both miss the initial read; the unique constraint
        rejects the loser, which rolls back and re-reads the winner's row. The session
        must not carry other pending writes, since the rollback discards them.
        """

        existing = await self.get(user_id=user_id, role_id=role_id)
        if existing is not None:
            return existing, False
        try:
            return await self.insert(user_id=user_id, role_id=role_id), True
        except IntegrityError:
            await self._session.rollback()
            winner = await self.get(user_id=user_id, role_id=role_id)
            if winner is None:
                # The violation came from something other than the pair (e.g. a bad FK).
                raise
            return winner, False

    async def roles_for_handle(self, login_handle: str, *, active_only: bool = True) -> list[Role]:
        stmt = (
            select(Role)
            .join(RoleBinding, RoleBinding.role_id == Role.id)
            .join(User, User.id == RoleBinding.user_id)
            .where(User.login_handle == normalize_handle(login_handle))
            .order_by(Role.name)
        )
        if active_only:
            stmt = stmt.where(User.is_active.is_(True))
        return list((await self._session.execute(stmt)).scalars().all())

    async def exists_for_handle(self, login_handle: str, role_name: str) -> bool:
        stmt = (
            select(RoleBinding.id)
            .join(User, User.id == RoleBinding.user_id)
            .join(Role, Role.id == RoleBinding.role_id)
            .where(
                User.login_handle == normalize_handle(login_handle),
                Role.key == normalize_role(role_name),
            )
            .limit(1)
        )
        return (await self._session.execute(stmt)).scalar_one_or_none() is not None

    async def binding_for(self, principal_id: int, role_name: str) -> int | None:
        stmt = (
            select(RoleBinding.id)
            .join(User, User.id == RoleBinding.user_id)
            .join(Role, Role.id == RoleBinding.role_id)
            .where(User.id == principal_id, Role.key == normalize_role(role_name))
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()

