"""
account_opening.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Convert a bearer token into a typed `Principal`.
- Enforce role allow-lists via reusable dependency factories.
"""

from __future__ import annotations

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from account_opening.api.deps import db_session, settings_dep
from account_opening.auth.jwt import JwtConfig
from account_opening.auth.models import Principal
from account_opening.auth.verifier import CredentialVerifier, require_any_of
from account_opening.services.role_directory import RoleDirectory
from account_opening.settings import Settings

_bearer = HTTPBearer(auto_error=False)


async def get_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_dep),
    session: AsyncSession = Depends(db_session),
) -> Principal:
    # The session only does I/O on the legacy-credential path.
    verifier = CredentialVerifier(
        cfg=JwtConfig.from_settings(settings),
        bindings=RoleDirectory(session=session),
    )
    return await verifier.authorize(creds.credentials if creds is not None else None)


def require_roles(*allowed: str):
    def _dep(principal: Principal = Depends(get_principal)) -> Principal:
        return require_any_of(principal, *allowed)

    return _dep


# --- Module Notes -----------------------------------------------------------
# Routers take the returned Principal as a parameter and hand it to services
# explicitly; there is no ambient "current user".
