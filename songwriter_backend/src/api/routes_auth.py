"""
Auth endpoints:
- POST /auth/register
- POST /auth/login
- GET  /auth/me

Register and login return { token, token_type }; the token goes into
`Authorization: Bearer <token>` for every songwriting endpoint.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.api.auth import create_access_token, get_current_user, hash_password, verify_password
from src.api.db import db_session_dep, transaction
from src.api.errors import Unauthorized
from src.api.models import User
from src.api.schemas import AuthLoginRequest, AuthRegisterRequest, AuthTokenResponse, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def _email_taken() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"error": "EMAIL_TAKEN", "message": "Email is already registered."},
    )


@router.post(
    "/register",
    response_model=AuthTokenResponse,
    summary="Register a new user",
    description="Creates a new user and returns a JWT token.",
    operation_id="register_user",
)
def register(req: AuthRegisterRequest, db: Session = Depends(db_session_dep)) -> AuthTokenResponse:
    """Register a new user with email/password."""
    email = req.email.lower().strip()

    existing = db.execute(select(User).where(User.email == email)).scalar_one_or_none()
    if existing:
        raise _email_taken()

    user = User(
        id=uuid.uuid4(),
        email=email,
        password_hash=hash_password(req.password),
        created_at=datetime.now(timezone.utc),
    )
    with transaction(db):
        db.add(user)
        try:
            db.flush()
        except IntegrityError:
            raise _email_taken()
        token = create_access_token(user_id=user.id, email=user.email)

    logger.info("user_registered: user_id=%s", user.id)
    return AuthTokenResponse(token=token, token_type="bearer")


@router.post(
    "/login",
    response_model=AuthTokenResponse,
    summary="Login",
    description="Validates credentials and returns a JWT token.",
    operation_id="login_user",
)
def login(req: AuthLoginRequest, db: Session = Depends(db_session_dep)) -> AuthTokenResponse:
    """Login an existing user."""
    email = req.email.lower().strip()

    user = db.execute(select(User).where(User.email == email)).scalar_one_or_none()
    if not user or not verify_password(req.password, user.password_hash):
        logger.info("login_rejected: known_user=%s", user is not None)
        raise Unauthorized("Invalid email or password.")

    token = create_access_token(user_id=user.id, email=user.email)
    return AuthTokenResponse(token=token, token_type="bearer")


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Current user",
    description="Returns the account behind the bearer token.",
    operation_id="current_user",
)
def me(user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse(id=user.id, email=user.email, created_at=user.created_at)
