# tests/conftest.py
import os

# Settings are read at import time, so the environment is prepared first.
os.environ.setdefault("ENV", "local")
os.environ.setdefault("DATABASE_URL_LOCAL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("REGISTRATION_KEY", "test-registration-key")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from checkin import models  # noqa: F401
from checkin.db.base_class import Base
from checkin.models.tag import Tag
from checkin.services.check_in import CheckInStateMachine
from checkin.services.notifier import ChangeNotifier


@pytest.fixture(scope="function")
def db_session():
    """A fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def make_tag(db_session):
    def _make_tag(name="hackgt", warn_on_duplicates=True, start=None, end=None):
        tag = Tag(
            name=name,
            warn_on_duplicates=warn_on_duplicates,
            start=start,
            end=end,
        )
        db_session.add(tag)
        db_session.commit()
        return tag

    return _make_tag


@pytest.fixture
def notifier():
    return ChangeNotifier()


@pytest.fixture
def state_machine(notifier):
    return CheckInStateMachine(notifier)


# --- Test Client Fixture ---
@pytest.fixture(scope="function")
def client(db_session):
    """
    Provides a TestClient on the in-memory database. The lifespan builds the
    real collaborators; tests swap the registration client on app.state.
    """
    from fastapi.testclient import TestClient

    from checkin.db.session import get_db
    from checkin.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
