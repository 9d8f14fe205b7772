"""
account_opening.api.routers.auth

Registration, login, and role directory endpoints.

Responsibilities:
- Public sign-up and role-selecting login.
- Role catalog and per-user role queries.
- Administrator-only role assignment and user activation.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from account_opening.api.deps import db_session, settings_dep
from account_opening.api.schemas import Envelope
from account_opening.auth.deps import require_roles
from account_opening.auth.issuer import CredentialIssuer
from account_opening.auth.roles import RoleName
from account_opening.db.models import Role, User
from account_opening.services.role_directory import RoleDirectory
from account_opening.services.users import UserService
from account_opening.settings import Settings

router = APIRouter(prefix="/v1/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    full_name: str = Field(min_length=1, max_length=256)
    login_handle: str = Field(min_length=1, max_length=256)
    password: str = Field(min_length=1, max_length=256)
    role: str | None = Field(default=None, max_length=64)


class LoginRequest(BaseModel):
    login_handle: str = Field(min_length=1, max_length=256)
    password: str = Field(min_length=1, max_length=256)
    role: str = Field(min_length=1, max_length=64)


class AssignRoleRequest(BaseModel):
    login_handle: str = Field(min_length=1, max_length=256)
    role: str = Field(min_length=1, max_length=64)


class SetActiveRequest(BaseModel):
    is_active: bool


class UserOut(BaseModel):
    id: int
    full_name: str
    login_handle: str
    is_active: bool
    created_at: datetime


class RoleOut(BaseModel):
    id: int
    name: str
    description: str | None = None


class LoginData(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: dict[str, object]


def _user_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        full_name=user.full_name,
        login_handle=user.login_handle,
        is_active=user.is_active,
        created_at=user.created_at,
    )


def _roles_out(roles: list[Role]) -> list[RoleOut]:
    return [RoleOut(id=r.id, name=r.name, description=r.description) for r in roles]


@router.post("/register", status_code=201, response_model=Envelope)
async def register(
    body: RegisterRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> Envelope:
    user = await UserService(session=session, settings=settings).register(
        full_name=body.full_name,
        login_handle=body.login_handle,
        secret=body.password,
        role=body.role,
    )
    return Envelope(message="User registered", data=_user_out(user))


@router.get("/handle-exists", response_model=Envelope)
async def handle_exists(
    login_handle: str = Query(min_length=1),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> Envelope:
    exists = await UserService(session=session, settings=settings).handle_exists(login_handle)
    return Envelope(data={"exists": exists})


@router.post("/login", response_model=Envelope)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> Envelope:
    issued = await CredentialIssuer(session=session, settings=settings).authenticate(
        login_handle=body.login_handle, secret=body.password, requested_role=body.role
    )
    return Envelope(
        message="Login succeeded",
        data=LoginData(
            access_token=issued.token,
            expires_at=issued.expires_at,
            user={
                "id": issued.principal_id,
                "login_handle": issued.login_handle,
                "full_name": issued.full_name,
                "role": issued.role,
                "binding_id": issued.binding_id,
            },
        ),
    )


@router.get("/roles", response_model=Envelope)
async def all_roles(session: AsyncSession = Depends(db_session)) -> Envelope:
    roles = await RoleDirectory(session=session).all_roles()
    return Envelope(data=_roles_out(roles))


@router.get("/roles/available", response_model=Envelope)
async def available_roles(
    login_handle: str = Query(min_length=1),
    session: AsyncSession = Depends(db_session),
) -> Envelope:
    roles = await RoleDirectory(session=session).roles_of(login_handle)
    return Envelope(data=_roles_out(roles))


@router.get("/roles/check", response_model=Envelope)
async def check_role(
    login_handle: str = Query(min_length=1),
    role: str = Query(min_length=1),
    session: AsyncSession = Depends(db_session),
) -> Envelope:
    has_role = await RoleDirectory(session=session).has_role(login_handle, role)
    return Envelope(data={"has_role": has_role})


@router.post(
    "/roles/assign",
    response_model=Envelope,
    dependencies=[Depends(require_roles(RoleName.administrator))],
)
async def assign_role(
    body: AssignRoleRequest,
    session: AsyncSession = Depends(db_session),
) -> Envelope:
    binding = await RoleDirectory(session=session).assign(body.login_handle, body.role)
    return Envelope(message="Role assigned", data={"binding_id": binding.id})


@router.get(
    "/users",
    response_model=Envelope,
    dependencies=[Depends(require_roles(RoleName.administrator))],
)
async def list_users(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> Envelope:
    users = await UserService(session=session, settings=settings).list_users()
    return Envelope(data=[_user_out(u) for u in users])


@router.patch(
    "/users/{user_id}/active",
    response_model=Envelope,
    dependencies=[Depends(require_roles(RoleName.administrator))],
)
async def set_user_active(
    user_id: int,
    body: SetActiveRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> Envelope:
    await UserService(session=session, settings=settings).set_active(user_id, body.is_active)
    return Envelope(message="User updated")


# --- Module Notes -----------------------------------------------------------
# Every failure path raises a domain error; `api.errors` renders the envelope/status.
