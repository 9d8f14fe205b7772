from __future__ import annotations

import pytest

from account_opening.api.errors import status_for
from account_opening.api.uploads import mime_for_tag, tag_for_mime
from account_opening.errors import (
    AlreadyGranted,
    ArtifactTooLarge,
    Forbidden,
    MissingCredential,
    RequestAlreadyProcessed,
    RoleNotGranted,
    StorageError,
    UnknownRole,
)


@pytest.mark.parametrize(
    ("mime", "tag"),
    [
        ("application/pdf", "pdf"),
        ("image/JPEG", "jpg"),
        ("image/png; charset=binary", "png"),
        ("application/vnd.openxmlformats-officedocument.wordprocessingml.document", "docx"),
        ("text/html", None),
        ("", None),
    ],
)
def test_tag_for_mime(mime: str, tag: str | None) -> None:
    assert tag_for_mime(mime) == tag


def test_unknown_tag_downloads_as_octet_stream() -> None:
    assert mime_for_tag("pdf") == "application/pdf"
    assert mime_for_tag("exe") == "application/octet-stream"


@pytest.mark.parametrize(
    ("error", "status"),
    [
        (MissingCredential(), 401),
        (Forbidden(), 403),
        (RoleNotGranted(), 403),
        (ArtifactTooLarge(), 400),
        (UnknownRole(), 404),
        (RequestAlreadyProcessed(), 404),
        (AlreadyGranted(), 409),
        (StorageError(), 500),
    ],
)
def test_error_statuses(error, status: int) -> None:
    assert status_for(error) == status
