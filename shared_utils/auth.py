"""
User authentication helpers
Issues and verifies the HS256 access tokens shared by the REST API and the
WebSocket handshake, and exposes the current-user dependencies
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError
from fastapi import Depends, HTTPException, Request
from sqlalchemy import orm

from config.database import get_db
from config.settings import JWT_SECRET, JWT_ALGORITHM, ACCESS_TOKEN_TTL_MINUTES
from models import User

logger = logging.getLogger(__name__)

__all__ = [
    "ExpiredSignatureError",
    "InvalidTokenError",
    "create_access_token",
    "decode_access_token",
    "get_current_user",
    "require_roles",
]


def create_access_token(user: User, ttl_minutes: int = ACCESS_TOKEN_TTL_MINUTES) -> str:
    """
    Create a signed access token for a user

    Args:
        user: User row the token is issued to
        ttl_minutes: Token lifetime

    Returns:
        Encoded JWT carrying sub, society_id and role
    """
    now = datetime.utcnow()
    payload = {
        "sub": str(user.id),
        "society_id": user.society_id,
        "role": user.role,
        "iat": now,
        "exp": now + timedelta(minutes=ttl_minutes),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Decode and verify a token. Raises ExpiredSignatureError / InvalidTokenError."""
    return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM], options={"verify_aud": False})


def get_current_user(request: Request, db: orm.Session = Depends(get_db)) -> User:
    user_id = getattr(request.state, "user_id", None)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Authentication required")

    try:
        user = db.query(User).filter(User.id == int(user_id)).first()
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token subject")

    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Unknown or inactive user")
    if user.society_id is None:
        raise HTTPException(status_code=403, detail="User is not a member of any society")
    return user


def require_roles(*roles: str):
    """Dependency factory restricting an endpoint to the given roles"""

    def dependency(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            logger.warning(f"Role '{user.role}' denied (requires one of {roles}) for user {user.id}")
            raise HTTPException(status_code=403, detail=f"Requires role: {', '.join(roles)}")
        return user

    return dependency
