import os

os.environ["JWT_SECRET"] = "test-secret"
os.environ.pop("JWT_ALGORITHM", None)
os.environ["DB_AUTO_CREATE"] = "false"

import uuid
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from src.api.auth import create_access_token
from src.api.db import db_session_dep, make_engine
from src.api.main import app
from src.api.models import Base, User


@pytest.fixture()
def engine():
    eng = make_engine("sqlite+pysqlite:///:memory:")
    Base.metadata.create_all(bind=eng)
    try:
        yield eng
    finally:
        Base.metadata.drop_all(bind=eng)
        eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture()
def client(session_factory):
    """TestClient whose requests use the per-test SQLite engine."""

    def _override_db():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[db_session_dep] = _override_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(db_session_dep, None)


def new_user(session, email=None):
    user = User(
        id=uuid.uuid4(),
        email=email or f"{uuid.uuid4().hex[:10]}@example.com",
        password_hash="unused",
        created_at=datetime.now(timezone.utc),
    )
    session.add(user)
    session.flush()
    return user


@pytest.fixture()
def make_user(session_factory):
    """Persist a user outside any request and return a detached copy."""

    def _make(email=None):
        session = session_factory()
        try:
            user = new_user(session, email)
            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user
        finally:
            session.close()

    return _make


def bearer(user):
    token = create_access_token(user_id=user.id, email=user.email)
    return {"Authorization": f"Bearer {token}"}
