"""
app/services/auth_service.py

Purpose: Identity and credential management

- Registers users with sequential IDs and hashed passwords
- Verifies credentials and issues session tokens
- Resolves bearer tokens to user IDs
- Changes passwords for the authenticated owner
"""

from typing import Any, Dict, Optional, Tuple

from fastapi.concurrency import run_in_threadpool

from app.core.exceptions import (
    DuplicateEmailError,
    ForbiddenError,
    InvalidPasswordError,
    UnauthorizedError,
    UnknownEmailError,
    UserNotFoundError,
    WrongOldPasswordError,
)
from app.core.logging import get_logger, LogContext
from app.core.security import (
    create_session_token,
    decode_session_token,
    extract_bearer_token,
    hash_password,
    is_password_hash,
    verify_password,
)
from app.db.store import get_store
from app.models.user import format_user_id, highest_user_sequence, new_user_document, public_user
from utils.time_utils import utc_now_iso

logger = get_logger(__name__)


def find_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    users = get_store().collection("user")
    return next((u for u in users if u.get("email") == email), None)


def find_user_by_id(user_id: str) -> Optional[Dict[str, Any]]:
    users = get_store().collection("user")
    return next((u for u in users if u.get("id") == user_id), None)


async def register_user(
    email: str,
    password: str,
    name: Optional[str] = None,
    phone: Optional[str] = None,
    birthday: Optional[str] = None,
) -> Tuple[Dict[str, Any], str]:
    """
    Creates a new user.

    Args:
        email: Login email, unique across users
        password: Plaintext password (stored as a bcrypt hash)
        name, phone, birthday: Profile fields, stored as given

    Returns:
        (public user, session token)

    Raises:
        DuplicateEmailError: email already registered
    """
    store = get_store()
    password_hash = await run_in_threadpool(hash_password, password)

    with store.transaction():
        if find_user_by_email(email):
            logger.warning("Registration rejected: email already registered")
            raise DuplicateEmailError()

        users = store.collection("user")
        sequence = store.next_sequence("user", seed=highest_user_sequence(users))
        user = new_user_document(
            user_id=format_user_id(sequence),
            email=email,
            password_hash=password_hash,
            name=name,
            phone=phone,
            birthday=birthday,
            created_at=utc_now_iso(),
        )
        users.append(user)

    with LogContext(user_id=user["id"]):
        logger.info("New user registered")

    return public_user(user), create_session_token(user)


async def login(email: str, password: str) -> Tuple[Dict[str, Any], str]:
    """
    Verifies credentials and issues a session token.

    Returns:
        (public user, session token)

    Raises:
        UnknownEmailError: no user with this email
        InvalidPasswordError: password does not match
    """
    user = find_user_by_email(email)
    if not user:
        logger.info("Login failed: unknown email")
        raise UnknownEmailError()

    with LogContext(user_id=user["id"]):
        if not await run_in_threadpool(verify_password, password, user.get("password")):
            logger.info("Login failed: wrong password")
            raise InvalidPasswordError()

        if not is_password_hash(user.get("password")):
            # Stored before hashing was introduced
            await set_password(user, password)
            logger.info("Upgraded plaintext password to bcrypt hash")

        logger.info("User logged in")

    return public_user(user), create_session_token(user)


async def authenticate(authorization: Optional[str]) -> str:
    """
    Resolves an Authorization header to the ID of an existing user.

    Raises:
        UnauthorizedError: header missing or malformed, token invalid,
            or the user no longer exists
    """
    token = extract_bearer_token(authorization)
    if not token:
        raise UnauthorizedError("Unauthorized, missing token")

    claims = decode_session_token(token)
    if not claims:
        raise UnauthorizedError("Invalid token")

    user = find_user_by_id(claims["sub"])
    if not user:
        raise UnauthorizedError("Invalid token")

    if "ver" in claims and claims["ver"] != user.get("sessionVersion", 0):
        logger.info("Rejected revoked session token", extra={"user_id": user["id"]})
        raise UnauthorizedError("Invalid token")

    return user["id"]


async def change_password(user_id: str, requester_id: str, old_password: str, new_password: str) -> bool:
    """
    Replaces a user's password after checking the old one.

    Raises:
        ForbiddenError: requester is not the target user
        UserNotFoundError: target user does not exist
        WrongOldPasswordError: old password does not match
    """
    with LogContext(user_id=user_id):
        if user_id != requester_id:
            logger.warning("Password change rejected: requester is not the owner")
            raise ForbiddenError()

        user = find_user_by_id(user_id)
        if not user:
            raise UserNotFoundError()

        if not await run_in_threadpool(verify_password, old_password, user.get("password")):
            logger.info("Password change rejected: wrong old password")
            raise WrongOldPasswordError()

        await set_password(user, new_password)
        logger.info("Password changed")

    return True


async def set_password(user: Dict[str, Any], new_password: str, revoke_sessions: bool = False):
    """
    Stores a bcrypt hash of `new_password`; hashing runs off the event loop.
    """
    password_hash = await run_in_threadpool(hash_password, new_password)
    with get_store().transaction():
        user["password"] = password_hash
        if revoke_sessions:
            user["sessionVersion"] = user.get("sessionVersion", 0) + 1
