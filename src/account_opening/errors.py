"""
account_opening.errors

Domain error taxonomy shared by services, auth and the API layer.

Responsibilities:
- Define the five error families (validation, not-found, conflict, auth, storage).
- Provide `storage_errors`, the guard that turns driver failures into opaque errors.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from account_opening.observability.logging import get_logger

log = get_logger(__name__)


class DomainError(Exception):
    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError):
    default_message = "Invalid input"


class NotFoundError(DomainError):
    default_message = "Not found"


class ConflictError(DomainError):
    default_message = "Conflict"


class AuthError(DomainError):
    default_message = "Unauthorized"


class StorageError(DomainError):
    default_message = "Storage unavailable"


# Validation


class EmptyComment(ValidationError):
    default_message = "A rejection comment is required"


class InvalidRegistration(ValidationError):
    pass


class UnsupportedArtifact(ValidationError):
    default_message = "File type not allowed; only PDF, images and Word documents are accepted"


class ArtifactTooLarge(ValidationError):
    default_message = "File exceeds the maximum allowed size"


# Not found


class UnknownPrincipal(NotFoundError):
    default_message = "User not found"


class UnknownRole(NotFoundError):
    default_message = "Role does not exist"


class ClientNotFound(NotFoundError):
    default_message = "Client not found"


class RequestNotFound(NotFoundError):
    default_message = "Request not found"


class ArtifactNotFound(NotFoundError):
    default_message = "Artifact not found"


class RequestAlreadyProcessed(NotFoundError):
    # approve/reject cannot tell a missing request from a resolved one.
    default_message = "Request not found or already processed"


# Conflict


class AlreadyGranted(ConflictError):
    default_message = "User already holds this role"


class HandleAlreadyRegistered(ConflictError):
    default_message = "Login handle is already registered"


# Auth


class MissingCredential(AuthError):
    default_message = "Missing bearer token"


class ExpiredCredential(AuthError):
    default_message = "Token expired"


class MalformedCredential(AuthError):
    default_message = "Invalid token"

    def __init__(self, *, reason: str | None = None) -> None:
        # `reason` is for logs only; callers always see the default message.
        super().__init__()
        self.reason = reason


class InvalidCredentials(AuthError):
    default_message = "Invalid credentials"


class AccountInactive(AuthError):
    default_message = "User is inactive; contact an administrator"


class RoleNotGranted(AuthError):
    default_message = "User does not hold the role named by the token"


class Forbidden(AuthError):
    default_message = "Insufficient role"


@contextmanager
def storage_errors(operation: str, **context: Any) -> Iterator[None]:
    """
    Re-raise database failures as an opaque `StorageError`.

    The original exception is logged with the operation name and context; callers only
    ever see the generic message so query structure never leaks.
    """

    try:
        yield
    except SQLAlchemyError as e:
        log.error("storage.failed", operation=operation, error=str(e), **context)
        raise StorageError() from e


# --- Module Notes -----------------------------------------------------------
# HTTP status mapping for these classes lives in `api.errors`; services never import
# FastAPI types.
