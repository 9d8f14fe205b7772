"""
account_opening.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`Principal`) passed into services.
- Define the result of a successful login (`IssuedCredential`).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from account_opening.auth.roles import normalize_role


@dataclass(frozen=True, slots=True)
class Principal:
    """
    A principal acting in exactly one role.

    `binding_id` is the actor reference written into every mutation.
    """

    principal_id: int
    login_handle: str
    role: str
    binding_id: int

    def has_any_role(self, *roles: str) -> bool:
        mine = normalize_role(self.role)
        return any(normalize_role(r) == mine for r in roles)


@dataclass(frozen=True, slots=True)
class IssuedCredential:
    token: str
    expires_at: datetime
    principal_id: int
    login_handle: str
    full_name: str
    role: str
    binding_id: int


# --- Module Notes -----------------------------------------------------------
# Keep this model minimal; it is used across API and service boundaries.
