"""
account_opening.auth.verifier

Credential Verifier: the request gate in front of every protected operation.

Responsibilities:
- Decode the credential once into a canonical `Principal`.
- Trust current-shape credentials as-is; re-validate legacy ones against the directory.
- Enforce per-operation role allow-lists (`require_any_of`).
"""

from __future__ import annotations

from typing import Protocol

from account_opening.auth.jwt import CurrentClaims, JwtConfig, decode_claims
from account_opening.auth.models import Principal
from account_opening.errors import (
    ExpiredCredential,
    Forbidden,
    MalformedCredential,
    MissingCredential,
    RoleNotGranted,
)
from account_opening.observability.logging import get_logger

log = get_logger(__name__)


class BindingLookup(Protocol):
    async def binding_for(self, principal_id: int, role_name: str) -> int | None: ...


class CredentialVerifier:
    def __init__(self, *, cfg: JwtConfig, bindings: BindingLookup) -> None:
        self._cfg = cfg
        self._bindings = bindings

    async def authorize(self, raw_credential: str | None) -> Principal:
        if not raw_credential:
            log.info("credential.rejected", reason="missing")
            raise MissingCredential()

        try:
            claims = decode_claims(cfg=self._cfg, token=raw_credential)
        except ExpiredCredential:
            log.info("credential.rejected", reason="expired")
            raise
        except MalformedCredential as e:
            log.info("credential.rejected", reason="malformed", detail=e.reason)
            raise

        if isinstance(claims, CurrentClaims):
            # Current shape: the binding id is authoritative, no lookup.
            return Principal(
                principal_id=claims.principal_id,
                login_handle=claims.login_handle,
                role=claims.role,
                binding_id=claims.binding_id,
            )

        # Legacy shape: recover the binding, which also re-checks the grant on every call.
        binding_id = await self._bindings.binding_for(claims.principal_id, claims.role)
        if binding_id is None:
            log.info(
                "credential.rejected",
                reason="role_not_granted",
                principal_id=claims.principal_id,
                role=claims.role,
            )
            raise RoleNotGranted()
        return Principal(
            principal_id=claims.principal_id,
            login_handle=claims.login_handle,
            role=claims.role,
            binding_id=binding_id,
        )


def require_any_of(principal: Principal, *roles: str) -> Principal:
    if not principal.has_any_role(*roles):
        raise Forbidden(f"Access denied; requires role: {' or '.join(roles)}")
    return principal


# --- Module Notes -----------------------------------------------------------
# A current-shape credential stays valid after its binding disappears, until it expires;
# a legacy one does not. Both paths return the same `Principal` type.
