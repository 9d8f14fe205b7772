"""
account_opening.auth.passwords

bcrypt hashing helpers.
"""

from __future__ import annotations

from functools import lru_cache

import bcrypt


def hash_secret(secret: str, *, rounds: int = 12) -> str:
    return bcrypt.hashpw(secret.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("ascii")


def verify_secret(secret: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(secret.encode("utf-8"), password_hash.encode("ascii"))
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False


@lru_cache(maxsize=4)
def _dummy_hash(rounds: int) -> str:
    return hash_secret("unused-dummy-secret", rounds=rounds)


def burn_verification(secret: str, *, rounds: int = 12) -> None:
    """Spend the same bcrypt work as a real check when there is no user to check against."""
    verify_secret(secret, _dummy_hash(rounds))
