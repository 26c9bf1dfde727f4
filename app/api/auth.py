"""
app/api/auth.py

Purpose: Account endpoints

- POST /register         create account, returns user + token
- POST /login            returns token + user
- POST /forgot-password  issues a reset token and link
- POST /reset-password   sets a new password with a reset token
"""

from fastapi import APIRouter

from app.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
)
from app.schemas.response import success_response
from app.services import auth_service, password_reset_service

router = APIRouter()


@router.post("/login")
async def login(payload: LoginRequest):
    user, token = await auth_service.login(payload.email, payload.password)
    return success_response("Login successful", {"token": token, "user": user})


@router.post("/register")
async def register(payload: RegisterRequest):
    user, token = await auth_service.register_user(
        email=payload.email,
        password=payload.password,
        name=payload.name,
        phone=payload.phone,
        birthday=payload.birthday,
    )
    return success_response("Registration successful", {"user": user, "token": token})


@router.post("/forgot-password")
async def forgot_password(payload: ForgotPasswordRequest):
    """
    The link is returned to the caller rather than emailed.
    """
    token, reset_link = await password_reset_service.request_password_reset(payload.email)
    return success_response("Reset link generated", {"token": token, "resetLink": reset_link})


@router.post("/reset-password")
async def reset_password(payload: ResetPasswordRequest):
    await password_reset_service.reset_password(payload.token, payload.new_password)
    return success_response("Password has been reset")
