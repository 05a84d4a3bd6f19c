from datetime import date, datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr, field_validator

from app.core.policy import CommitteeRole, Role
from app.models.enums import DEPARTMENTS


def _check_department(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in DEPARTMENTS:
        raise ValueError(f"Unknown department '{value}'. Allowed: {DEPARTMENTS}")
    return value


# ---------------------------------------------------------
# READ USER (response)
# ---------------------------------------------------------
class UserRead(BaseModel):
    id: UUID
    username: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: Role
    department: Optional[str] = None
    year: Optional[int] = None
    roll_number: Optional[str] = None
    profile_photo_url: Optional[str] = None

    is_committee: bool = False
    is_executive: bool = False
    is_representative: bool = False
    is_developer: bool = False
    committee_post: Optional[str] = None
    committee_role: Optional[CommitteeRole] = None
    managed_department: Optional[str] = None

    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserSummary(BaseModel):
    id: UUID
    username: str
    full_name: Optional[str] = None
    profile_photo_url: Optional[str] = None
    department: Optional[str] = None
    year: Optional[int] = None

    class Config:
        from_attributes = True



class CommitteeMember(BaseModel):
    id: UUID
    username: str
    full_name: Optional[str] = None
    committee_post: Optional[str] = None
    department: Optional[str] = None
    profile_photo_url: Optional[str] = None

    class Config:
        from_attributes = True

# ---------------------------------------------------------
# UPDATE OWN PROFILE (or Admin edits)
# Role, flags and password are deliberately absent.
# ---------------------------------------------------------
class UserProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    email: Optional[EmailStr] = None
    department: Optional[str] = None
    year: Optional[int] = None
    roll_number: Optional[str] = None
    profile_photo_url: Optional[str] = None

    @field_validator("department")
    @classmethod
    def check_department(cls, v):
        return _check_department(v)


# ---------------------------------------------------------
# UPDATE ROLE & COMMITTEE ATTRIBUTES (Admin only)
# ---------------------------------------------------------
class UserRoleUpdate(BaseModel):
    role: Optional[Role] = None
    is_committee: Optional[bool] = None
    is_executive: Optional[bool] = None
    is_representative: Optional[bool] = None
    is_developer: Optional[bool] = None
    committee_post: Optional[str] = None
    committee_role: Optional[CommitteeRole] = None
    managed_department: Optional[str] = None

    @field_validator("managed_department")
    @classmethod
    def check_managed_department(cls, v):
        return _check_department(v)


# ---------------------------------------------------------
# ADMIN: ADD STUDENT / FACULTY
# ---------------------------------------------------------
class AdminStudentCreate(BaseModel):
    surname: str
    full_name: Optional[str] = None
    dob: date
    email: Optional[EmailStr] = None
    department: str
    year: int = 1
    roll_number: Optional[str] = None
    password: str

    @field_validator("department")
    @classmethod
    def check_department(cls, v):
        return _check_department(v)


class AdminFacultyCreate(BaseModel):
    full_name: Optional[str] = None
    email: EmailStr
    department: Optional[str] = None
    password: str

    @field_validator("department")
    @classmethod
    def check_department(cls, v):
        return _check_department(v)


class AdminPasswordReset(BaseModel):
    username: str
    new_password: str


# ---------------------------------------------------------
# DEPARTMENT HEADS: EDIT STUDENT
# ---------------------------------------------------------
class DepartmentStudentUpdate(BaseModel):
    year: Optional[int] = None
    roll_number: Optional[str] = None
