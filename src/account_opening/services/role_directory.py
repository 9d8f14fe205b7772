"""
account_opening.services.role_directory

Role Directory: the many-to-many relation between principals and roles.

Responsibilities:
- Read the catalog and a principal's bound roles.
- Assign roles with unique-constraint-backed idempotence.
- Provide the atomic get-or-create used by login-time provisioning.
- Resolve binding ids for legacy credentials.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from account_opening.db.models import Role, RoleBinding
from account_opening.db.repositories.roles import RoleBindingRepo, RoleRepo
from account_opening.db.repositories.users import UserRepo
from account_opening.errors import AlreadyGranted, UnknownPrincipal, UnknownRole, storage_errors
from account_opening.observability.logging import get_logger

log = get_logger(__name__)


class RoleDirectory:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._users = UserRepo(session)
        self._roles = RoleRepo(session)
        self._bindings = RoleBindingRepo(session)

    async def roles_of(self, login_handle: str) -> list[Role]:
        with storage_errors("roles.roles_of"):
            return await self._bindings.roles_for_handle(login_handle)

    async def all_roles(self) -> list[Role]:
        with storage_errors("roles.all_roles"):
            return await self._roles.list_all()

    async def find_role(self, role_name: str) -> Role | None:
        with storage_errors("roles.find_role"):
            return await self._roles.get_by_name(role_name)

    async def has_role(self, login_handle: str, role_name: str) -> bool:
        with storage_errors("roles.has_role"):
            return await self._bindings.exists_for_handle(login_handle, role_name)

    async def assign(self, login_handle: str, role_name: str) -> RoleBinding:
        with storage_errors("roles.assign", role=role_name):
            user = await self._users.get_by_handle(login_handle)
            if user is None:
                raise UnknownPrincipal()
            role = await self._roles.get_by_name(role_name)
            if role is None:
                raise UnknownRole(f"Role {role_name} does not exist")
            user_id, role_id, name = user.id, role.id, role.name

            # No pre-check: the unique constraint decides, so identical concurrent calls
            # produce one binding and one AlreadyGranted.
            try:
                binding = await self._bindings.insert(user_id=user_id, role_id=role_id)
                await self._session.commit()
            except IntegrityError as e:
                await self._session.rollback()
                raise AlreadyGranted() from e

        log.info("role_binding.assigned", user_id=user_id, role=name, binding_id=binding.id)
        return binding

    async def get_or_create(self, *, user_id: int, role_id: int) -> tuple[RoleBinding, bool]:
        with storage_errors("roles.get_or_create", user_id=user_id, role_id=role_id):
            binding, created = await self._bindings.get_or_create(user_id=user_id, role_id=role_id)
            if created:
                await self._session.commit()
        return binding, created

    async def binding_for(self, principal_id: int, role_name: str) -> int | None:
        with storage_errors("roles.binding_for", principal_id=principal_id):
            return await self._bindings.binding_for(principal_id, role_name)


# --- Module Notes -----------------------------------------------------------
# `binding_for` satisfies `auth.verifier.BindingLookup`, so the legacy credential path
# depends on this directory and nothing else.
