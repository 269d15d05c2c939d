import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine, StaticPool  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from app.database import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.services.catalog_loader import load_catalog  # noqa: E402

engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db
load_catalog()


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    return TestClient(app)


TEST_PASSWORD = "testpassword123"


def register(client, email: str, password: str = TEST_PASSWORD, display_name: str | None = None):
    payload = {"email": email, "password": password}
    if display_name is not None:
        payload["display_name"] = display_name
    return client.post("/api/auth/register", json=payload)


@pytest.fixture
def auth_headers(client):
    response = register(client, "alice@example.com")
    assert response.status_code == 201
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_headers(client):
    response = register(client, "bob@example.com")
    assert response.status_code == 201
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def db_session():
    """Provide a database session for direct DB checks."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
