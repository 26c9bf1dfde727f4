"""
app/api/deps.py

Purpose: Shared route dependencies

- Bearer token authentication for protected routes
"""

from typing import Optional

from fastapi import Header

from app.services.auth_service import authenticate


async def get_current_user_id(authorization: Optional[str] = Header(None)) -> str:
    """
    Resolves `Authorization: Bearer <token>` to a user ID or raises UnauthorizedError (401).
    """
    return await authenticate(authorization)
