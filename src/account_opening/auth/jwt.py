"""
account_opening.auth.jwt

JWT issuing and decoding for role-scoped credentials.

Responsibilities:
- Issue credentials bound to exactly one role (and, in the current shape, one binding).
- Decode and validate credentials into a tagged variant: `CurrentClaims` when the
  binding id is embedded, `LegacyClaims` when it has to be recovered by lookup.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import ExpiredSignatureError, InvalidTokenError

from account_opening.errors import ExpiredCredential, MalformedCredential
from account_opening.settings import Settings


@dataclass(frozen=True, slots=True)
class JwtConfig:
    # Algorithm/issuer/audience are enforced during decoding.
    alg: str
    issuer: str
    audience: str
    secret: str

    @classmethod
    def from_settings(cls, settings: Settings) -> JwtConfig:
        return cls(
            alg=settings.jwt_alg,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            secret=settings.jwt_secret,
        )


@dataclass(frozen=True, slots=True)
class CurrentClaims:
    principal_id: int
    login_handle: str
    role: str
    binding_id: int


@dataclass(frozen=True, slots=True)
class LegacyClaims:
    principal_id: int
    login_handle: str
    role: str


Claims = CurrentClaims | LegacyClaims


def issue_token(
    *,
    cfg: JwtConfig,
    principal_id: int,
    login_handle: str,
    role: str,
    binding_id: int | None,
    ttl: timedelta = timedelta(hours=24),
) -> tuple[str, datetime]:
    now = datetime.now(tz=UTC)
    expires_at = now + ttl
    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": str(principal_id),
        "login": login_handle,
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    # Without "bid" the token has the legacy shape.
    if binding_id is not None:
        payload["bid"] = binding_id
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg), expires_at


def decode_claims(*, cfg: JwtConfig, token: str) -> Claims:
    try:
        payload = jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={"require": ["exp", "iat", "iss", "aud", "sub"]},
        )
    except ExpiredSignatureError as e:
        raise ExpiredCredential() from e
    except InvalidTokenError as e:
        raise MalformedCredential(reason=str(e)) from e

    try:
        principal_id = int(payload["sub"])
    except (TypeError, ValueError) as e:
        raise MalformedCredential(reason="subject is not an integer") from e

    login_handle = payload.get("login")
    role = payload.get("role")
    if not isinstance(login_handle, str) or not login_handle:
        raise MalformedCredential(reason="missing login claim")
    if not isinstance(role, str) or not role:
        raise MalformedCredential(reason="missing role claim")

    binding_id = payload.get("bid")
    if binding_id is None:
        return LegacyClaims(principal_id=principal_id, login_handle=login_handle, role=role)
    if not isinstance(binding_id, int) or isinstance(binding_id, bool):
        raise MalformedCredential(reason="binding claim is not an integer")
    return CurrentClaims(
        principal_id=principal_id, login_handle=login_handle, role=role, binding_id=binding_id
    )


# --- Module Notes -----------------------------------------------------------
# Issuing is used by `auth.issuer`; decoding by `auth.verifier`. Nothing else should
# read raw JWT payloads.
