"""
Shared fixtures: an in-memory SQLite database, signed-in test clients and
stub LLM providers.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["APP_TIMEZONE"] = "UTC"

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.auth import SESSION_COOKIE, create_session_token, hash_password
from app.database import Base, get_db
from app.main import app
from app.models import Note, User
from app.services.errors import ProviderError
from app.services.summarizer import PRIMARY, SECONDARY, SummaryOrchestrator, get_orchestrator


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def override_db(session_factory):
    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    yield
    app.dependency_overrides.clear()


def make_user(db, email):
    user = User(email=email, password_hash=hash_password("password123"), full_name="Test User")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def user(db_session):
    return make_user(db_session, "alice@example.com")


@pytest.fixture
def other_user(db_session):
    return make_user(db_session, "bob@example.com")


@pytest.fixture
def anon_client():
    return TestClient(app)


@pytest.fixture
def client(user):
    """Client signed in as ``user``."""
    client = TestClient(app)
    client.cookies.set(SESSION_COOKIE, create_session_token(user.id))
    return client


@pytest.fixture
def add_notes(db_session):
    def _add(owner, *contents):
        notes = []
        for content in contents:
            note = Note(user_id=owner.id, content=content)
            db_session.add(note)
            db_session.commit()
            notes.append(note)
        return notes
    return _add


def stub_provider(name, reply=None, error=None):
    """A provider client whose complete() returns ``reply`` or raises ``error``."""
    provider = Mock()
    provider.name = name
    if error is not None:
        provider.complete.side_effect = error
    else:
        provider.complete.return_value = reply
    return provider


@pytest.fixture
def use_providers():
    """Install a stub primary/secondary chain for the /summarize route."""
    def _use(primary, secondary):
        orchestrator = SummaryOrchestrator([(PRIMARY, primary), (SECONDARY, secondary)])
        app.dependency_overrides[get_orchestrator] = lambda: orchestrator
        return orchestrator
    return _use


def provider_failure(name="qwen", status=500, body="Internal Server Error"):
    return ProviderError(name, status, body)
