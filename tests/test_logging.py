from __future__ import annotations

from account_opening.observability.logging import REDACTED, SENSITIVE_KEYS, redact_keys


def test_credential_fields_are_redacted() -> None:
    processor = redact_keys(SENSITIVE_KEYS)
    event = processor(
        None,
        "info",
        {"event": "login.failed", "Password": "Secreto123", "token": "eyJ...", "user_id": 3},
    )
    assert event == {"event": "login.failed", "Password": REDACTED, "token": REDACTED, "user_id": 3}


def test_absent_values_stay_absent() -> None:
    event = redact_keys({"secret"})(None, "info", {"event": "x", "secret": None})
    assert event["secret"] is None
