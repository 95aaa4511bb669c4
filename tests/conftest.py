# tests/conftest.py

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from user_service.core.config import Settings
from user_service.core.memory_store import InMemoryUserStore
from user_service.core.store import SQLUserStore
from user_service.database import get_store, init_db
from user_service.main import create_app


API_KEY = "test-key"


@pytest.fixture
def settings():
    s = Settings()
    s.API_KEY = API_KEY
    s.REQUEST_TIMEOUT = 5
    return s


@pytest.fixture
def session_factory():
    """In-memory SQLite shared by every session of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def memory_store():
    return InMemoryUserStore()


@pytest.fixture
def sql_store(session_factory):
    db = session_factory()
    yield SQLUserStore(db)
    db.close()


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Runs a test once per store implementation."""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def app(settings, memory_store):
    app = create_app(settings, create_schema=False)
    app.dependency_overrides[get_store] = lambda: memory_store
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def sql_client(settings, session_factory):
    app = create_app(settings, create_schema=False)

    def override_store():
        db = session_factory()
        try:
            yield SQLUserStore(db)
        finally:
            db.close()

    app.dependency_overrides[get_store] = override_store
    return TestClient(app)


@pytest.fixture
def john(client):
    res = client.post(
        "/api/users",
        json={"username": "john", "email": "john@example.com", "password": "secret"},
    )
    assert res.status_code == 201
    return res.json()
