"""
app/services/password_reset_service.py

Purpose: Forgot / reset password flow

- Issues random single-use reset tokens
- Keeps token -> user mapping in process memory (lost on restart)
- Expires tokens after RESET_TOKEN_TTL_MINUTES
- Consumes a token to set a new password and revoke old sessions
"""

from dataclasses import dataclass
from datetime import datetime
from threading import Lock
from typing import Dict, Optional, Tuple
import uuid

from app.core.config import settings
from app.core.exceptions import InvalidResetTokenError, UnknownEmailError, UserNotFoundError
from app.core.logging import get_logger, LogContext
from app.services.auth_service import find_user_by_email, find_user_by_id, set_password
from utils.time_utils import is_expired, utc_now

logger = get_logger(__name__)


@dataclass
class ResetTokenEntry:
    user_id: str
    issued_at: datetime


class ResetTokenTable:
    """
    In-memory reset tokens. A user may hold several live tokens at once.
    Expired entries are purged whenever a new token is issued.
    """

    def __init__(self, ttl_minutes: Optional[int] = None):
        self._ttl_minutes = ttl_minutes
        self._entries: Dict[str, ResetTokenEntry] = {}
        self._lock = Lock()

    @property
    def ttl_minutes(self) -> int:
        if self._ttl_minutes is None:
            return settings.RESET_TOKEN_TTL_MINUTES
        return self._ttl_minutes

    def issue(self, user_id: str) -> str:
        token = str(uuid.uuid4())
        now = utc_now()
        with self._lock:
            self._purge_expired(now)
            self._entries[token] = ResetTokenEntry(user_id=user_id, issued_at=now)
        return token

    def take(self, token: str) -> Optional[ResetTokenEntry]:
        """
        Removes and returns the entry for a live token, so only one caller
        can redeem it. Expired entries are dropped and yield None.
        """
        now = utc_now()
        with self._lock:
            entry = self._entries.pop(token, None)
            if entry is None or is_expired(entry.issued_at, self.ttl_minutes, now):
                return None
            return entry

    def restore(self, token: str, entry: ResetTokenEntry):
        """Puts back a taken entry whose reset did not complete."""
        with self._lock:
            self._entries.setdefault(token, entry)

    def clear(self):
        with self._lock:
            self._entries.clear()

    def _purge_expired(self, now: datetime):
        ttl = self.ttl_minutes
        expired = [t for t, e in self._entries.items() if is_expired(e.issued_at, ttl, now)]
        for token in expired:
            del self._entries[token]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


reset_tokens = ResetTokenTable()


def build_reset_link(token: str) -> str:
    return f"{settings.RESET_LINK_PATH}?token={token}"


async def request_password_reset(email: str) -> Tuple[str, str]:
    """
    Issues a reset token for the account registered under `email`.

    Returns:
        (token, reset link)

    Raises:
        UnknownEmailError: no such email (404, body code 1)
    """
    user = find_user_by_email(email)
    if not user:
        logger.info("Password reset requested for unknown email")
        raise UnknownEmailError("Email does not exist", status_code=404, code=1)

    token = reset_tokens.issue(user["id"])

    with LogContext(user_id=user["id"]):
        logger.info("Password reset token issued")

    return token, build_reset_link(token)


async def reset_password(token: str, new_password: str) -> bool:
    """
    Sets a new password using a reset token. The token is single-use and
    every session token issued before the reset stops working.

    Raises:
        InvalidResetTokenError: token unknown, consumed or expired
        UserNotFoundError: the token's user no longer exists
    """
    entry = reset_tokens.take(token)
    if entry is None:
        raise InvalidResetTokenError()

    with LogContext(user_id=entry.user_id):
        user = find_user_by_id(entry.user_id)
        if not user:
            logger.warning("Reset token refers to a missing user")
            raise UserNotFoundError("No user matches this token")

        try:
            await set_password(user, new_password, revoke_sessions=True)
        except Exception:
            reset_tokens.restore(token, entry)
            raise
        logger.info("Password reset completed")

    return True
