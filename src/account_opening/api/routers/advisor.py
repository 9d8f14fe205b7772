"""
account_opening.api.routers.advisor

Advisor-facing endpoints.

Responsibilities:
- Client lookup by national id (collaborator boundary).
- Create account-opening requests with an optional supporting document.
- Read requests and their documents; administrative delete.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from account_opening.api.deps import db_session, settings_dep
from account_opening.api.schemas import AccountRequestOut, ClientOut, Envelope
from account_opening.api.uploads import accept_upload, artifact_response
from account_opening.auth.deps import require_roles
from account_opening.auth.models import Principal
from account_opening.auth.roles import RoleName
from account_opening.db.repositories.clients import ClientRepo
from account_opening.errors import ClientNotFound, RequestNotFound, storage_errors
from account_opening.services.account_requests import AccountRequestService, ArtifactUpload
from account_opening.services.artifacts import ArtifactStore
from account_opening.settings import Settings

router = APIRouter(prefix="/v1/advisor", tags=["advisor"])

_advisor = require_roles(RoleName.advisor)
_readers = require_roles(RoleName.advisor, RoleName.operations_director)


@router.get("/clients/{national_id}", response_model=Envelope)
async def find_client(
    national_id: str,
    _: Principal = Depends(_advisor),
    session: AsyncSession = Depends(db_session),
) -> Envelope:
    with storage_errors("clients.find", national_id=national_id):
        client = await ClientRepo(session).find_by_national_id(national_id)
    if client is None:
        raise ClientNotFound()
    return Envelope(data=ClientOut.from_row(client))


@router.post("/requests", status_code=201, response_model=Envelope)
async def create_request(
    national_id: str = Form(min_length=1),
    comment: str | None = Form(default=None),
    document: UploadFile | None = File(default=None),
    principal: Principal = Depends(_advisor),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> Envelope:
    artifact = None
    if document is not None and document.filename:
        accepted = await accept_upload(document, max_bytes=settings.max_artifact_bytes)
        artifact = ArtifactUpload(content=accepted.content, content_type=accepted.type_tag)

    with storage_errors("clients.find", national_id=national_id):
        client = await ClientRepo(session).find_by_national_id(national_id)
    if client is None:
        raise ClientNotFound("No client found with the given national id")
    client_id = client.id

    # The creator is the binding the credential was issued for, never the raw user id.
    request_id = await AccountRequestService(session=session).create(
        client_id=client_id,
        creator_binding_id=principal.binding_id,
        comment=comment,
        artifact=artifact,
    )
    return Envelope(
        message="Request created",
        data={
            "request_id": request_id,
            "client_id": client_id,
            "creator_binding_id": principal.binding_id,
            "created_by": principal.login_handle,
        },
    )


@router.get("/requests", response_model=Envelope)
async def list_requests(
    principal: Principal = Depends(_readers),
    session: AsyncSession = Depends(db_session),
) -> Envelope:
    # Advisors see what their own binding created; directors see everything.
    creator = principal.binding_id if principal.has_any_role(RoleName.advisor) else None
    rows = await AccountRequestService(session=session).list(creator_binding_id=creator)
    return Envelope(data=[AccountRequestOut.from_row(r) for r in rows])


@router.get("/requests/{request_id}", response_model=Envelope)
async def get_request(
    request_id: int,
    _: Principal = Depends(_readers),
    session: AsyncSession = Depends(db_session),
) -> Envelope:
    req = await AccountRequestService(session=session).get(request_id)
    return Envelope(data=AccountRequestOut.from_row(req))


@router.delete(
    "/requests/{request_id}",
    response_model=Envelope,
    dependencies=[Depends(require_roles(RoleName.advisor, RoleName.administrator))],
)
async def delete_request(
    request_id: int,
    session: AsyncSession = Depends(db_session),
) -> Envelope:
    if not await AccountRequestService(session=session).delete(request_id):
        raise RequestNotFound()
    return Envelope(message="Request deleted")


@router.get("/requests/{request_id}/artifact")
async def download_artifact(
    request_id: int,
    _: Principal = Depends(_readers),
    session: AsyncSession = Depends(db_session),
) -> Response:
    stored = await ArtifactStore(session=session).read(request_id)
    return artifact_response(request_id, stored)


# --- Module Notes -----------------------------------------------------------
# The director router reuses the same services; only the allowed roles differ.
