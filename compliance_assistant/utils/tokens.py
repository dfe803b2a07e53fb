"""Session token utilities (JWT)"""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict

import jwt

from compliance_assistant.config import settings

TOKEN_TYPE = "session"


def create_session_token(account_id: str) -> str:
    """Create a signed session token naming the account."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": account_id,
        "sid": uuid.uuid4().hex,
        "iat": now,
        "exp": now + timedelta(days=settings.SESSION_TOKEN_EXPIRE_DAYS),
        "type": TOKEN_TYPE,
    }
    return jwt.encode(payload, settings.SESSION_SECRET_KEY, algorithm=settings.SESSION_ALGORITHM)


def verify_session_token(token: str) -> Dict:
    """Verify session token and return its payload.

    Raises:
        jwt.ExpiredSignatureError: If token expired
        jwt.InvalidTokenError: If token is malformed or not a session token
    """
    payload = jwt.decode(
        token,
        settings.SESSION_SECRET_KEY,
        algorithms=[settings.SESSION_ALGORITHM],
    )

    if payload.get("type") != TOKEN_TYPE:
        raise jwt.InvalidTokenError("Not a session token")

    return payload
