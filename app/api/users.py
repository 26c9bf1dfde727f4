"""
app/api/users.py

Purpose: User account changes

- PATCH /users/{user_id}  change own password (oldPassword, newPassword)
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_current_user_id
from app.schemas.auth import ChangePasswordRequest
from app.schemas.response import success_response
from app.services.auth_service import change_password

router = APIRouter()


@router.patch("/users/{user_id}")
async def update_password(
    user_id: str,
    payload: ChangePasswordRequest,
    requester_id: str = Depends(get_current_user_id),
):
    await change_password(user_id, requester_id, payload.old_password, payload.new_password)
    return success_response("Password changed")
