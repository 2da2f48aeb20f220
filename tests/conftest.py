# tests/conftest.py

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config.security import SecurityConfig
from app.database import Base, get_db, init_db
from main import app

from .fakes import CommitFailure


@pytest.fixture(autouse=True)
def fast_hashing(monkeypatch: pytest.MonkeyPatch) -> None:
    """Lowest bcrypt cost so the suite stays quick; hashing is otherwise real."""
    monkeypatch.setitem(SecurityConfig.PASSWORDS, "bcrypt_rounds", 4)


@pytest.fixture()
def engine():
    # One shared in-memory database per test
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session(session_factory) -> Session:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory) -> TestClient:
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def register(client: TestClient):
    """Register a user through the API and return the response body."""

    def _register(username: str = "alice", email: str = "alice@example.com",
                  password: str = "secret123", **extra) -> dict:
        payload = {"username": username, "email": email, "password": password, **extra}
        response = client.post("/api/users/register", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture()
def commit_failure(monkeypatch: pytest.MonkeyPatch) -> CommitFailure:
    failure = CommitFailure()
    real_commit = Session.commit
    real_rollback = Session.rollback

    def commit(self) -> None:
        if failure.error is not None:
            error, failure.error = failure.error, None
            raise error
        real_commit(self)

    def rollback(self) -> None:
        failure.rollbacks += 1
        real_rollback(self)

    monkeypatch.setattr(Session, "commit", commit)
    monkeypatch.setattr(Session, "rollback", rollback)
    return failure
