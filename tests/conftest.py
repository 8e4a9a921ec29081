import os

# settings are read at import time, so the environment has to be ready first
os.environ.setdefault("JWT_SECRET_KEY", "test-signing-key-4f0c9e1d2b7a48c6a3e5")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CELERY_BROKER_URL", "memory://")
os.environ.setdefault("CELERY_RESULT_BACKEND", "cache+memory://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.data.database import Base, get_db
from app.data.seed import seed
from app.main import create_app
from app.repos.product_repo import ProductRepo
from app.utils.security import TokenSigner

TEST_SECRET = "unit-test-secret-7d1b5f3a9c2e4b60a8d1"
TEST_KEY_ID = "test"
DEFAULT_PASSWORD = "ValidPassword123!"


@pytest.fixture(scope="function")
def engine():
    """
    A fresh in-memory SQLite database per test. StaticPool keeps the single
    connection alive so every session sees the same data.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def signer():
    return TokenSigner(secret=TEST_SECRET, key_id=TEST_KEY_ID)


@pytest.fixture(scope="function")
def notifications(mocker):
    """Keeps Celery out of the tests and records queued order notifications."""
    return mocker.patch(
        "app.services.notification_service.NotificationService.send_order_notification",
        return_value=None,
    )


@pytest.fixture(scope="function")
def app(session_factory, signer, notifications):
    app = create_app(signer=signer)

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def products(db_session):
    """Demo catalogue, keyed by product name."""
    seed(db_session)
    return {p.name: p for p in ProductRepo(db_session).list_products()}


@pytest.fixture(scope="function")
def register(client, signer):
    """
    Signs a user up through the API and returns (user_id, auth_headers).
    """

    def _register(email="test@example.com", name="Test User", password=DEFAULT_PASSWORD):
        response = client.post(
            "/auth/signup",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        token = response.json()["token"]
        return signer.verify(token), {"Authorization": f"Bearer {token}"}

    return _register


@pytest.fixture(scope="function")
def auth_user(register):
    return register()
