"""
account_opening.auth.roles

The closed role catalog and its single normalization function.

Role names double as display text and authorization keys, so every comparison goes
through `normalize_role` (case-fold + separator-fold).
"""

from __future__ import annotations

import enum
import re

_SEPARATORS = re.compile(r"[\s_.\-]+")


class RoleName(enum.StrEnum):
    advisor = "Advisor"
    operations_director = "Operations-Director"
    administrator = "Administrator"
    cashier = "Cashier"


ROLE_DESCRIPTIONS: dict[RoleName, str] = {
    RoleName.advisor: "Front-line staff who submit account-opening requests",
    RoleName.operations_director: "Operations manager who approves or rejects requests",
    RoleName.administrator: "Manages users and role assignments",
    RoleName.cashier: "Branch cashier",
}


def normalize_role(name: str) -> str:
    return _SEPARATORS.sub("-", name.strip().casefold()).strip("-")


def normalize_handle(login_handle: str) -> str:
    return login_handle.strip().lower()
