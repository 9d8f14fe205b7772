"""
account_opening.api.routers.director

Operations-director endpoints: review and resolve account-opening requests.

Responsibilities:
- List requests (optionally by state or by creating advisor binding).
- Full detail view including the client's contact/profile data.
- Approve / reject Pending requests.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from account_opening.api.deps import db_session
from account_opening.api.schemas import AccountRequestDetailOut, AccountRequestOut, Envelope
from account_opening.api.uploads import artifact_response
from account_opening.auth.deps import require_roles
from account_opening.auth.roles import RoleName
from account_opening.db.models import RequestState
from account_opening.errors import RequestAlreadyProcessed
from account_opening.services.account_requests import AccountRequestService
from account_opening.services.artifacts import ArtifactStore

router = APIRouter(
    prefix="/v1/director",
    tags=["director"],
    dependencies=[Depends(require_roles(RoleName.operations_director))],
)


class RejectRequest(BaseModel):
    # Blank comments are rejected by the service so the message matches other failures.
    comment: str = Field(default="", max_length=2000)


@router.get("/requests", response_model=Envelope)
async def list_requests(
    state: RequestState | None = None,
    session: AsyncSession = Depends(db_session),
) -> Envelope:
    rows = await AccountRequestService(session=session).list(state=state)
    return Envelope(data=[AccountRequestOut.from_row(r) for r in rows])


@router.get("/requests/by-advisor/{binding_id}", response_model=Envelope)
async def list_by_advisor(
    binding_id: int,
    session: AsyncSession = Depends(db_session),
) -> Envelope:
    rows = await AccountRequestService(session=session).list(creator_binding_id=binding_id)
    return Envelope(data=[AccountRequestOut.from_row(r) for r in rows])


@router.get("/requests/{request_id}", response_model=Envelope)
async def request_detail(
    request_id: int,
    session: AsyncSession = Depends(db_session),
) -> Envelope:
    req = await AccountRequestService(session=session).get_detail(request_id)
    return Envelope(data=AccountRequestDetailOut.from_row(req))


@router.put("/requests/{request_id}/approve", response_model=Envelope)
async def approve_request(
    request_id: int,
    session: AsyncSession = Depends(db_session),
) -> Envelope:
    if not await AccountRequestService(session=session).approve(request_id):
        raise RequestAlreadyProcessed()
    return Envelope(message="Request approved")


@router.put("/requests/{request_id}/reject", response_model=Envelope)
async def reject_request(
    request_id: int,
    body: RejectRequest,
    session: AsyncSession = Depends(db_session),
) -> Envelope:
    if not await AccountRequestService(session=session).reject(request_id, body.comment):
        raise RequestAlreadyProcessed()
    return Envelope(message="Request rejected")


@router.get("/requests/{request_id}/artifact")
async def download_artifact(
    request_id: int,
    session: AsyncSession = Depends(db_session),
) -> Response:
    stored = await ArtifactStore(session=session).read(request_id)
    return artifact_response(request_id, stored)


# --- Module Notes -----------------------------------------------------------
# The acting director is authorized but not recorded; see `services.account_requests`.
