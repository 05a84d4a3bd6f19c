from pydantic import BaseModel, EmailStr
from typing import Optional

from app.schemas.user import UserRead


# -------------------------------------------------------------------
# LOGIN REQUEST (username or email)
# -------------------------------------------------------------------
class LoginRequest(BaseModel):
    username: str
    password: str


# -------------------------------------------------------------------
# SELF REGISTRATION (always creates a student)
# -------------------------------------------------------------------
class RegisterRequest(BaseModel):
    username: str
    email: EmailStr
    password: str
    full_name: Optional[str] = None

    class Config:
        json_schema_extra = {
            "examples": [
                {
                    "username": "asha0101",
                    "email": "asha@example.com",
                    "password": "password123",
                    "full_name": "Asha Rao"
                }
            ]
        }


class RegisterResponse(BaseModel):
    message: str
    user_id: str


# -------------------------------------------------------------------
# TOKEN + USER DETAILS (login response)
# -------------------------------------------------------------------
class TokenWithUser(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    user: UserRead


class ChangePasswordRequest(BaseModel):
    old_password: str
    new_password: str
