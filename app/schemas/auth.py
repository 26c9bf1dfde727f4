"""
app/schemas/auth.py

Purpose: Account request schemas

- Login / registration payloads
- Password change and reset payloads
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class LoginRequest(BaseModel):
    email: str
    password: str


class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    name: Optional[str] = None
    phone: Optional[str] = None
    birthday: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "amy@example.com",
                "password": "secret123",
                "name": "Amy",
                "phone": "0912345678",
                "birthday": "1995-04-12"
            }
        }
    )


class ChangePasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    old_password: str = Field(..., alias="oldPassword")
    new_password: str = Field(..., alias="newPassword", min_length=1)


class ForgotPasswordRequest(BaseModel):
    email: str


class ResetPasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str
    new_password: str = Field(..., alias="newPassword", min_length=1)

