"""
account_opening.db.models

Core persistence schema.

Responsibilities:
- Define ORM models for identity and the request workflow:
  - User: an authenticable principal
  - Role / RoleBinding: the flat role catalog and principal-role pairs
  - Client / ClientProfile: client reference data (owned by another team)
  - AccountRequest: one account-opening application and its attached document
"""

from __future__ import annotations

import enum
from datetime import UTC, date, datetime

from sqlalchemy import (
    Boolean,
    Date,
    Enum,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from account_opening.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


def _values(enum_cls: type[enum.Enum]) -> list[str]:
    # Persist enum values ("Pending"), not member names ("pending").
    return [m.value for m in enum_cls]


class RequestState(enum.StrEnum):
    pending = "Pending"
    approved = "Approved"
    rejected = "Rejected"
    # Reserved: no transition leads here.
    returned = "Returned"


class ProductType(enum.StrEnum):
    savings = "Savings"


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    full_name: Mapped[str] = mapped_column(String(256), nullable=False)
    login_handle: Mapped[str] = mapped_column(String(256), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    bindings: Mapped[list[RoleBinding]] = relationship(back_populates="user")


class Role(Base):
    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    # normalize_role(name); every lookup goes through this column.
    key: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(String(256), nullable=True)


class RoleBinding(Base):
    __tablename__ = "role_bindings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    role_id: Mapped[int] = mapped_column(ForeignKey("roles.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    user: Mapped[User] = relationship(back_populates="bindings")
    role: Mapped[Role] = relationship()

    __table_args__ = (UniqueConstraint("user_id", "role_id", name="uq_role_bindings_user_role"),)


class Client(Base):
    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    national_id: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    document_type: Mapped[str] = mapped_column(String(32), nullable=False, default="CC")
    first_name: Mapped[str] = mapped_column(String(64), nullable=False)
    middle_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    last_name: Mapped[str] = mapped_column(String(64), nullable=False)
    second_last_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    gender: Mapped[str | None] = mapped_column(String(8), nullable=True)
    marital_status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    nationality: Mapped[str | None] = mapped_column(String(64), nullable=True)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    profile: Mapped[ClientProfile | None] = relationship(back_populates="client", uselist=False)

    @property
    def full_name(self) -> str:
        parts = (self.first_name, self.middle_name, self.last_name, self.second_last_name)
        return " ".join(p for p in parts if p)


class ClientProfile(Base):
    # Contact and economic-activity details; read only by detail views.
    __tablename__ = "client_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    client_id: Mapped[int] = mapped_column(ForeignKey("clients.id"), nullable=False, unique=True)
    email: Mapped[str | None] = mapped_column(String(256), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    address: Mapped[str | None] = mapped_column(String(256), nullable=True)
    city: Mapped[str | None] = mapped_column(String(64), nullable=True)
    department: Mapped[str | None] = mapped_column(String(64), nullable=True)
    country: Mapped[str | None] = mapped_column(String(64), nullable=True)
    occupation: Mapped[str | None] = mapped_column(String(128), nullable=True)
    profession: Mapped[str | None] = mapped_column(String(128), nullable=True)

    client: Mapped[Client] = relationship(back_populates="profile")


class AccountRequest(Base):
    __tablename__ = "account_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    client_id: Mapped[int] = mapped_column(ForeignKey("clients.id"), nullable=False, index=True)
    creator_binding_id: Mapped[int] = mapped_column(
        ForeignKey("role_bindings.id"), nullable=False, index=True
    )

    product_type: Mapped[ProductType] = mapped_column(
        Enum(ProductType, values_callable=_values), nullable=False, default=ProductType.savings
    )
    state: Mapped[RequestState] = mapped_column(
        Enum(RequestState, values_callable=_values), nullable=False
    )

    advisor_comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    director_comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    artifact: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True, deferred=True)
    artifact_type: Mapped[str | None] = mapped_column(String(16), nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    resolved_at: Mapped[datetime | None] = mapped_column(nullable=True)

    client: Mapped[Client] = relationship()
    creator: Mapped[RoleBinding] = relationship()

    __table_args__ = (Index("ix_account_requests_state_created", "state", "created_at"),)

    @property
    def has_artifact(self) -> bool:
        return self.artifact_type is not None


# --- Module Notes -----------------------------------------------------------
# The acting director's binding is intentionally not stored on resolution; only the
# outcome, the optional comment and `resolved_at` are recorded.
