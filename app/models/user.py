"""
app/models/user.py

Purpose: User document model

- Sequential customer IDs (C01, C02, ...)
- Stored document shape (hashed password, sessionVersion)
- Public projection without credentials
"""

import re
from typing import Any, Dict, Iterable, Optional

USER_ID_PREFIX = "C"
PUBLIC_FIELDS = ("id", "name", "email", "phone", "birthday", "createdAt")

_USER_ID_PATTERN = re.compile(rf"^{USER_ID_PREFIX}(\d+)$")


def format_user_id(sequence: int) -> str:
    return f"{USER_ID_PREFIX}{sequence:02d}"


def highest_user_sequence(users: Iterable[Dict[str, Any]]) -> int:
    """
    Largest numeric suffix among existing IDs, or the user count when that is larger.
    Seeds the user counter for documents written before it existed.
    """
    users = list(users)
    highest = 0
    for user in users:
        match = _USER_ID_PATTERN.match(str(user.get("id", "")))
        if match:
            highest = max(highest, int(match.group(1)))
    return max(highest, len(users))


def new_user_document(
    user_id: str,
    email: str,
    password_hash: str,
    name: Optional[str],
    phone: Optional[str],
    birthday: Optional[str],
    created_at: str,
) -> Dict[str, Any]:
    return {
        "id": user_id,
        "email": email,
        "password": password_hash,
        "name": name,
        "phone": phone,
        "birthday": birthday,
        "createdAt": created_at,
        "sessionVersion": 0,
    }


def public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    return {field: user.get(field) for field in PUBLIC_FIELDS}
