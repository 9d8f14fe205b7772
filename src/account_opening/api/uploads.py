"""
account_opening.api.uploads

Upload gate for supporting documents.

Responsibilities:
- Allow-list document MIME types and enforce the size limit.
- Translate between MIME types and the short type tags stored with a request.
- Build the download response for a stored document.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import UploadFile
from fastapi.responses import Response

from account_opening.errors import ArtifactTooLarge, UnsupportedArtifact
from account_opening.services.artifacts import StoredArtifact

_TAG_BY_MIME: dict[str, str] = {
    "application/pdf": "pdf",
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "application/msword": "doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
}

_MIME_BY_TAG: dict[str, str] = {
    "pdf": "application/pdf",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


@dataclass(frozen=True, slots=True)
class AcceptedUpload:
    content: bytes
    type_tag: str
    filename: str


def tag_for_mime(mime_type: str) -> str | None:
    return _TAG_BY_MIME.get(mime_type.split(";")[0].strip().lower())


def mime_for_tag(tag: str) -> str:
    return _MIME_BY_TAG.get(tag.lower(), "application/octet-stream")


async def accept_upload(upload: UploadFile, *, max_bytes: int) -> AcceptedUpload:
    tag = tag_for_mime(upload.content_type or "")
    if tag is None:
        raise UnsupportedArtifact()
    # Read one byte past the limit so oversize files are rejected without buffering them whole.
    content = await upload.read(max_bytes + 1)
    if len(content) > max_bytes:
        raise ArtifactTooLarge(f"File exceeds the maximum allowed size of {max_bytes} bytes")
    return AcceptedUpload(content=content, type_tag=tag, filename=upload.filename or "")


def artifact_response(request_id: int, stored: StoredArtifact) -> Response:
    return Response(
        content=stored.content,
        media_type=mime_for_tag(stored.content_type),
        headers={
            "Content-Disposition": (
                f'attachment; filename="request_{request_id}.{stored.content_type}"'
            )
        },
    )


# --- Module Notes -----------------------------------------------------------
# Everything past this gate treats the document as opaque bytes plus a tag.
