"""
Authentication utilities: password hashing, JWT handling and the auth resolver.

Clients send:
- Authorization: Bearer <token>   (token from POST /auth/register or /auth/login)

`get_current_user` resolves the bearer into a `User`; route handlers pass that
user explicitly into the songwriting service, whose operations start with
`require_user`.
"""

from __future__ import annotations

import logging
import os
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.orm import Session

from src.api.db import db_session_dep
from src.api.errors import Unauthorized
from src.api.models import User

logger = logging.getLogger(__name__)

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
_bearer_scheme = HTTPBearer(auto_error=False)

_DEFAULT_EXP_MINUTES = 4320  # 3 days


def _jwt_secret() -> str:
    secret = os.getenv("JWT_SECRET")
    if not secret:
        raise RuntimeError("JWT_SECRET env var is required.")
    return secret


def _jwt_algorithm() -> str:
    return os.getenv("JWT_ALGORITHM", "HS256")


def _jwt_exp_minutes() -> int:
    try:
        return int(os.getenv("JWT_EXPIRES_MINUTES", str(_DEFAULT_EXP_MINUTES)))
    except ValueError:
        return _DEFAULT_EXP_MINUTES


# PUBLIC_INTERFACE
def hash_password(password: str) -> str:
    """Hash a plain-text password."""
    return _pwd_context.hash(password)


# PUBLIC_INTERFACE
def verify_password(password: str, password_hash: str) -> bool:
    """Verify a plain-text password against a hash."""
    return _pwd_context.verify(password, password_hash)


# PUBLIC_INTERFACE
def create_access_token(*, user_id: uuid.UUID, email: str, expires_minutes: Optional[int] = None) -> str:
    """
    Create a signed JWT access token.

    Token contains:
      - sub: user_id (string UUID)
      - email
      - iat, exp

    Returns:
        JWT string.
    """
    now = datetime.now(timezone.utc)
    minutes = _jwt_exp_minutes() if expires_minutes is None else expires_minutes
    exp = now + timedelta(minutes=minutes)
    payload: Dict[str, Any] = {
        "sub": str(user_id),
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, _jwt_secret(), algorithm=_jwt_algorithm())


def _decode_token(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, _jwt_secret(), algorithms=[_jwt_algorithm()])
    except JWTError:
        raise Unauthorized("Invalid or expired token.")


# PUBLIC_INTERFACE
def require_user(user: Optional[User]) -> User:
    """Fail closed with UNAUTHORIZED unless a user has been resolved."""
    if user is None:
        raise Unauthorized()
    return user


# PUBLIC_INTERFACE
def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    db: Session = Depends(db_session_dep),
) -> User:
    """
    FastAPI dependency that returns the authenticated user.

    Raises UNAUTHORIZED (401) if the token is missing/invalid or the user doesn't exist.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise Unauthorized()

    payload = _decode_token(credentials.credentials)
    sub = payload.get("sub")
    if not sub:
        raise Unauthorized("Invalid token payload.")

    try:
        user_id = uuid.UUID(str(sub))
    except ValueError:
        raise Unauthorized("Invalid token payload.")

    user = db.execute(select(User).where(User.id == user_id)).scalar_one_or_none()
    if user is None:
        logger.info("auth_unknown_user: user_id=%s", user_id)
        raise Unauthorized("User not found.")
    return user
