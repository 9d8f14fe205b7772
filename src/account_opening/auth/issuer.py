"""
account_opening.auth.issuer

Credential Issuer: login with a selected role.

Responsibilities:
- Verify the principal's secret (bcrypt) without revealing which check failed.
- Resolve or lazily provision the (principal, role) binding.
- Mint a role-scoped credential that embeds the binding id.
"""

from __future__ import annotations

import asyncio
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from account_opening.auth.jwt import JwtConfig, issue_token
from account_opening.auth.models import IssuedCredential
from account_opening.auth.passwords import burn_verification, verify_secret
from account_opening.db.repositories.users import UserRepo
from account_opening.errors import (
    AccountInactive,
    InvalidCredentials,
    UnknownRole,
    storage_errors,
)
from account_opening.observability.logging import get_logger
from account_opening.services.role_directory import RoleDirectory
from account_opening.settings import Settings

log = get_logger(__name__)


class CredentialIssuer:
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._settings = settings
        self._users = UserRepo(session)
        self._directory = RoleDirectory(session=session)

    async def authenticate(
        self, *, login_handle: str, secret: str, requested_role: str
    ) -> IssuedCredential:
        with storage_errors("auth.authenticate"):
            user = await self._users.get_by_handle(login_handle)

        # bcrypt is CPU bound; keep it off the event loop.
        if user is None:
            await asyncio.to_thread(
                burn_verification, secret, rounds=self._settings.bcrypt_rounds
            )
            log.info("login.failed", reason="unknown_handle")
            raise InvalidCredentials()
        if not await asyncio.to_thread(verify_secret, secret, user.password_hash):
            log.info("login.failed", reason="bad_secret", user_id=user.id)
            raise InvalidCredentials()
        if not user.is_active:
            log.info("login.failed", reason="inactive", user_id=user.id)
            raise AccountInactive()

        role = await self._directory.find_role(requested_role)
        if role is None:
            raise UnknownRole(f"Role {requested_role} does not exist")

        # Plain values only from here: a lost provisioning race rolls the session back,
        # which expires every loaded instance.
        user_id, handle, full_name = user.id, user.login_handle, user.full_name
        role_id, role_name = role.id, role.name

        binding, created = await self._directory.get_or_create(user_id=user_id, role_id=role_id)
        binding_id = binding.id
        if created:
            log.info(
                "role_binding.provisioned", user_id=user_id, role=role_name, binding_id=binding_id
            )

        token, expires_at = issue_token(
            cfg=JwtConfig.from_settings(self._settings),
            principal_id=user_id,
            login_handle=handle,
            role=role_name,
            binding_id=binding_id,
            ttl=timedelta(hours=self._settings.token_ttl_hours),
        )
        log.info("login.succeeded", user_id=user_id, role=role_name, binding_id=binding_id)
        return IssuedCredential(
            token=token,
            expires_at=expires_at,
            principal_id=user_id,
            login_handle=handle,
            full_name=full_name,
            role=role_name,
            binding_id=binding_id,
        )


# --- Module Notes -----------------------------------------------------------
# Any authenticated principal can self-grant any catalog role by naming it at login.
# There is no separate provisioning workflow.
