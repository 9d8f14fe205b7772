"""
account_opening.services.users

Principal registration and administration.

Responsibilities:
- Register principals (bcrypt-hashed secret, default role binding).
- Handle lookups for the sign-up form.
- Administrative listing and activation toggling.
"""

from __future__ import annotations

import asyncio
import re

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from account_opening.auth.passwords import hash_secret
from account_opening.db.models import User
from account_opening.db.repositories.roles import RoleBindingRepo, RoleRepo
from account_opening.db.repositories.users import UserRepo
from account_opening.errors import (
    HandleAlreadyRegistered,
    InvalidRegistration,
    UnknownPrincipal,
    UnknownRole,
    storage_errors,
)
from account_opening.observability.logging import get_logger
from account_opening.settings import Settings

log = get_logger(__name__)

_HANDLE_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_NAME_LENGTH = 3
MIN_SECRET_LENGTH = 8


class UserService:
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings
        self._users = UserRepo(session)
        self._roles = RoleRepo(session)
        self._bindings = RoleBindingRepo(session)

    async def register(
        self,
        *,
        full_name: str,
        login_handle: str,
        secret: str,
        role: str | None = None,
    ) -> User:
        if not _HANDLE_RE.match(login_handle.strip()):
            raise InvalidRegistration("Invalid email format")
        if len(full_name.strip()) < MIN_NAME_LENGTH:
            raise InvalidRegistration(f"Name must be at least {MIN_NAME_LENGTH} characters")
        if len(secret) < MIN_SECRET_LENGTH:
            raise InvalidRegistration(f"Password must be at least {MIN_SECRET_LENGTH} characters")

        role_name = role or self._settings.default_role
        password_hash = await asyncio.to_thread(
            hash_secret, secret, rounds=self._settings.bcrypt_rounds
        )

        with storage_errors("users.register"):
            if await self._users.get_by_handle(login_handle) is not None:
                raise HandleAlreadyRegistered()
            default_role = await self._roles.get_by_name(role_name)
            if default_role is None:
                raise UnknownRole(f"Role {role_name} does not exist")
            try:
                user = await self._users.create(
                    full_name=full_name, login_handle=login_handle, password_hash=password_hash
                )
                await self._bindings.insert(user_id=user.id, role_id=default_role.id)
                await self._session.commit()
            except IntegrityError as e:
                # Lost a race with a concurrent registration of the same handle.
                await self._session.rollback()
                raise HandleAlreadyRegistered() from e

        log.info("user.registered", user_id=user.id, role=default_role.name)
        return user

    async def handle_exists(self, login_handle: str) -> bool:
        with storage_errors("users.handle_exists"):
            return await self._users.get_by_handle(login_handle) is not None

    async def list_users(self) -> list[User]:
        with storage_errors("users.list"):
            return await self._users.list()

    async def set_active(self, user_id: int, is_active: bool) -> None:
        with storage_errors("users.set_active", user_id=user_id):
            changed = await self._users.set_active(user_id, is_active)
            await self._session.commit()
        if not changed:
            raise UnknownPrincipal()
        log.info("user.activation_changed", user_id=user_id, is_active=is_active)
