"""
account_opening.api.schemas

Response models shared by the advisor and director routers.

Responsibilities:
- The `{"success", "message", "data"}` envelope returned by every endpoint.
- Read-side views of account requests joined with client and creator identity.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field

from account_opening.db.models import AccountRequest, Client, ClientProfile


class Envelope(BaseModel):
    success: bool = True
    message: str = ""
    data: Any = None


class ClientOut(BaseModel):
    id: int
    national_id: str
    document_type: str
    first_name: str
    middle_name: str | None = None
    last_name: str
    second_last_name: str | None = None
    full_name: str

    @classmethod
    def from_row(cls, client: Client) -> ClientOut:
        return cls(
            id=client.id,
            national_id=client.national_id,
            document_type=client.document_type,
            first_name=client.first_name,
            middle_name=client.middle_name,
            last_name=client.last_name,
            second_last_name=client.second_last_name,
            full_name=client.full_name,
        )


class CreatorOut(BaseModel):
    binding_id: int
    name: str
    login_handle: str
    role: str


class AccountRequestOut(BaseModel):
    id: int
    client_id: int
    creator_binding_id: int
    product_type: str
    state: str
    advisor_comment: str | None = None
    director_comment: str | None = None
    has_artifact: bool
    artifact_type: str | None = None
    created_at: datetime
    resolved_at: datetime | None = None
    client: ClientOut
    created_by: CreatorOut

    @classmethod
    def from_row(cls, req: AccountRequest) -> AccountRequestOut:
        binding = req.creator
        return cls(
            id=req.id,
            client_id=req.client_id,
            creator_binding_id=req.creator_binding_id,
            product_type=req.product_type.value,
            state=req.state.value,
            advisor_comment=req.advisor_comment,
            director_comment=req.director_comment,
            has_artifact=req.has_artifact,
            artifact_type=req.artifact_type,
            created_at=req.created_at,
            resolved_at=req.resolved_at,
            client=ClientOut.from_row(req.client),
            created_by=CreatorOut(
                binding_id=binding.id,
                name=binding.user.full_name,
                login_handle=binding.user.login_handle,
                role=binding.role.name,
            ),
        )


class ClientProfileOut(BaseModel):
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    department: str | None = None
    country: str | None = None
    occupation: str | None = None
    profession: str | None = None


class ClientDetailOut(ClientOut):
    gender: str | None = None
    marital_status: str | None = None
    nationality: str | None = None
    birth_date: date | None = None


class AccountRequestDetailOut(AccountRequestOut):
    client: ClientDetailOut
    profile: ClientProfileOut = Field(default_factory=ClientProfileOut)

    @classmethod
    def from_row(cls, req: AccountRequest) -> AccountRequestDetailOut:
        base = AccountRequestOut.from_row(req).model_dump(exclude={"client"})
        client = req.client
        return cls(
            **base,
            client=ClientDetailOut(
                **ClientOut.from_row(client).model_dump(),
                gender=client.gender,
                marital_status=client.marital_status,
                nationality=client.nationality,
                birth_date=client.birth_date,
            ),
            profile=_profile_out(client.profile),
        )


def _profile_out(profile: ClientProfile | None) -> ClientProfileOut:
    if profile is None:
        return ClientProfileOut()
    return ClientProfileOut(
        email=profile.email,
        phone=profile.phone,
        address=profile.address,
        city=profile.city,
        department=profile.department,
        country=profile.country,
        occupation=profile.occupation,
        profession=profile.profession,
    )
