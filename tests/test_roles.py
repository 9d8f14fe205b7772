from __future__ import annotations

import pytest

from account_opening.auth.models import Principal
from account_opening.auth.roles import RoleName, normalize_handle, normalize_role


@pytest.mark.parametrize(
    "raw",
    ["Operations-Director", "operations director", "OPERATIONS_DIRECTOR", " operations.director "],
)
def test_role_spellings_fold_to_one_key(raw: str) -> None:
    assert normalize_role(raw) == "operations-director"


def test_every_catalog_role_has_a_distinct_key() -> None:
    assert len({normalize_role(r.value) for r in RoleName}) == len(RoleName)


def test_handles_are_trimmed_and_lowercased() -> None:
    assert normalize_handle("  Ana@Bank.TEST ") == "ana@bank.test"


def test_principal_role_check_uses_normalized_names() -> None:
    p = Principal(principal_id=1, login_handle="a@b.co", role="Operations-Director", binding_id=3)
    assert p.has_any_role("operations director")
    assert not p.has_any_role(RoleName.advisor, RoleName.administrator)
