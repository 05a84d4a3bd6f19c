# app/models/user.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy import Enum as SAEnum
from datetime import datetime, timezone
import uuid
from typing import Optional

from app.core.policy import CommitteeRole, Role


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    username: str = Field(
        sa_column=Column(String(64), nullable=False, unique=True, index=True)
    )
    email: Optional[str] = Field(
        default=None,
        sa_column=Column(String, nullable=True, unique=True, index=True)
    )
    password_hash: str = Field(nullable=False)

    full_name: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))

    # role saved by value ("student", "admin" ...) so the hosted DB stays readable
    role: Role = Field(
        default=Role.Student,
        sa_column=Column(
            SAEnum(Role, name="user_role", native_enum=False, values_callable=_enum_values),
            nullable=False,
        )
    )

    # --- committee attributes (orthogonal to role) ---
    is_committee: bool = Field(default=False, sa_column=Column(Boolean, nullable=False, default=False))
    is_executive: bool = Field(default=False, sa_column=Column(Boolean, nullable=False, default=False))
    is_representative: bool = Field(default=False, sa_column=Column(Boolean, nullable=False, default=False))
    is_developer: bool = Field(default=False, sa_column=Column(Boolean, nullable=False, default=False))

    committee_post: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    committee_role: Optional[CommitteeRole] = Field(
        default=None,
        sa_column=Column(
            SAEnum(CommitteeRole, name="committee_role", native_enum=False, values_callable=_enum_values),
            nullable=True,
        )
    )
    managed_department: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))

    # --- student profile ---
    department: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True, index=True))
    year: Optional[int] = Field(default=None, sa_column=Column(Integer, nullable=True))
    roll_number: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    profile_photo_url: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True)
    )
