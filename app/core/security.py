"""
app/core/security.py

Purpose: Credential primitives

- bcrypt password hashing and verification
- Session token issue / verification (signed JWT or legacy fake-jwt-token)
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
import hmac

import bcrypt
import jwt

from app.core.config import settings

LEGACY_TOKEN_PREFIX = "fake-jwt-token-"
BEARER_PREFIX = "Bearer "
JWT_ALGORITHM = "HS256"

_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def hash_password(password: str) -> str:
    return bcrypt.hashpw(
        password.encode("utf-8"),
        bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    ).decode("utf-8")


def is_password_hash(stored: Optional[str]) -> bool:
    return bool(stored) and stored.startswith(_BCRYPT_PREFIXES)


def verify_password(password: str, stored: Optional[str]) -> bool:
    """
    Checks `password` against a stored value.

    Stored values written before hashing was introduced are plaintext; they
    are compared in constant time and the caller is expected to rehash them.
    """
    if not stored or password is None:
        return False

    if is_password_hash(stored):
        try:
            return bcrypt.checkpw(password.encode("utf-8"), stored.encode("utf-8"))
        except ValueError:
            return False

    return hmac.compare_digest(password.encode("utf-8"), stored.encode("utf-8"))


def create_session_token(user: Dict[str, Any]) -> str:
    """
    Issues a bearer token for a user document.

    jwt:    HS256 with sub, ver (sessionVersion), iat and exp claims
    legacy: fake-jwt-token-<id>, identical on every call
    """
    if settings.TOKEN_SCHEME == "legacy":
        return f"{LEGACY_TOKEN_PREFIX}{user['id']}"

    now = datetime.now(timezone.utc)
    claims = {
        "sub": user["id"],
        "ver": user.get("sessionVersion", 0),
        "iat": now,
        "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_session_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Returns the token claims (`sub` and, for jwt, `ver`), or None when the
    token is malformed, tampered with or expired.
    """
    if not token:
        return None

    if settings.TOKEN_SCHEME == "legacy":
        if not token.startswith(LEGACY_TOKEN_PREFIX):
            return None
        user_id = token[len(LEGACY_TOKEN_PREFIX):]
        return {"sub": user_id} if user_id else None

    try:
        claims = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[JWT_ALGORITHM],
            options={"require": ["sub", "exp", "iat"]}
        )
    except jwt.PyJWTError:
        return None

    if not isinstance(claims.get("sub"), str):
        return None
    return claims


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None
