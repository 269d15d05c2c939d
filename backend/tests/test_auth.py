"""Tests for registration, sign-in, sessions and session-change notifications."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from app.config import settings
from app.models.user import User
from app.services import session_events
from app.services.auth_service import ALGORITHM
from tests.conftest import TEST_PASSWORD, register


@pytest.fixture
def received():
    events = []
    unsubscribe = session_events.subscribe(events.append)
    yield events
    unsubscribe()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


# ── Registration ───────────────────────────────────────────────────────

def test_register(client):
    r = register(client, "carol@example.com", display_name="Carol")
    assert r.status_code == 201
    data = r.json()
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["user"]["email"] == "carol@example.com"
    assert data["user"]["display_name"] == "Carol"


def test_register_default_display_name(client):
    r = register(client, "dave@example.com")
    assert r.json()["user"]["display_name"] == "dave"


def test_register_normalizes_email(client):
    r = register(client, "Erin@Example.COM")
    assert r.status_code == 201
    assert r.json()["user"]["email"] == "erin@example.com"


def test_register_duplicate_email(client):
    assert register(client, "carol@example.com").status_code == 201
    r = register(client, "CAROL@example.com")
    assert r.status_code == 409


@pytest.mark.parametrize(
    "email,password",
    [
        ("not-an-email", TEST_PASSWORD),
        ("carol@example.com", "short"),
        ("carol@example.com", "x" * 129),
    ],
)
def test_register_validation(client, email, password):
    assert register(client, email, password).status_code == 422


def test_register_disabled(client, monkeypatch):
    monkeypatch.setattr(settings, "registration_enabled", False)
    r = register(client, "carol@example.com")
    assert r.status_code == 403


def test_password_is_hashed(client, db_session):
    register(client, "carol@example.com")
    user = db_session.query(User).filter(User.email == "carol@example.com").one()
    assert user.password_hash != TEST_PASSWORD
    assert user.password_hash.startswith("$2")


# ── Login ─────────────────────────────────────────────────────────────

def test_login(client):
    register(client, "carol@example.com")
    r = client.post("/api/auth/login", json={"email": "carol@example.com", "password": TEST_PASSWORD})
    assert r.status_code == 200
    assert r.json()["user"]["email"] == "carol@example.com"


def test_login_is_case_insensitive_on_email(client):
    register(client, "carol@example.com")
    r = client.post("/api/auth/login", json={"email": " Carol@Example.com", "password": TEST_PASSWORD})
    assert r.status_code == 200


def test_login_wrong_password(client):
    register(client, "carol@example.com")
    r = client.post("/api/auth/login", json={"email": "carol@example.com", "password": "wrong-password"})
    assert r.status_code == 401


def test_login_unknown_user(client):
    r = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": TEST_PASSWORD})
    assert r.status_code == 401


def test_login_inactive_user(client, db_session):
    register(client, "carol@example.com")
    user = db_session.query(User).filter(User.email == "carol@example.com").one()
    user.is_active = False
    db_session.commit()

    r = client.post("/api/auth/login", json={"email": "carol@example.com", "password": TEST_PASSWORD})
    assert r.status_code == 403


def test_login_updates_last_login(client, db_session):
    register(client, "carol@example.com")
    user = db_session.query(User).filter(User.email == "carol@example.com").one()
    first_login = user.last_login

    client.post("/api/auth/login", json={"email": "carol@example.com", "password": TEST_PASSWORD})
    db_session.refresh(user)
    assert user.last_login >= first_login


# ── Session ───────────────────────────────────────────────────────────

def test_session(client, auth_headers):
    r = client.get("/api/auth/session", headers=auth_headers)
    assert r.status_code == 200
    data = r.json()
    assert data["user"]["email"] == "alice@example.com"
    assert data["user"]["is_active"] is True
    expires_at = datetime.fromisoformat(data["expires_at"])
    assert expires_at > datetime.now(timezone.utc)


def test_session_without_token(client):
    r = client.get("/api/auth/session")
    assert r.status_code == 401
    assert r.headers["WWW-Authenticate"] == "Bearer"


def test_session_with_garbage_token(client):
    assert client.get("/api/auth/session", headers=bearer("not-a-jwt")).status_code == 401


def test_session_with_expired_token(client, auth_headers):
    past = datetime.now(timezone.utc) - timedelta(minutes=5)
    token = jwt.encode({"sub": "1", "exp": past}, settings.secret_key, algorithm=ALGORITHM)
    assert client.get("/api/auth/session", headers=bearer(token)).status_code == 401


def test_session_with_non_numeric_subject(client):
    future = datetime.now(timezone.utc) + timedelta(minutes=5)
    token = jwt.encode({"sub": "alice", "exp": future}, settings.secret_key, algorithm=ALGORITHM)
    assert client.get("/api/auth/session", headers=bearer(token)).status_code == 401


def test_session_for_deactivated_user(client, auth_headers, db_session):
    user = db_session.query(User).filter(User.email == "alice@example.com").one()
    user.is_active = False
    db_session.commit()
    assert client.get("/api/auth/session", headers=auth_headers).status_code == 401
    assert client.get("/api/cards", headers=auth_headers).status_code == 401


def test_logout(client, auth_headers):
    r = client.post("/api/auth/logout", headers=auth_headers)
    assert r.status_code == 204


def test_logout_requires_auth(client):
    assert client.post("/api/auth/logout").status_code == 401


# ── Session events ────────────────────────────────────────────────────

def test_session_events_published(client, received):
    r = register(client, "carol@example.com")
    token = r.json()["access_token"]
    client.post("/api/auth/login", json={"email": "carol@example.com", "password": TEST_PASSWORD})
    client.post("/api/auth/logout", headers=bearer(token))

    assert [e.kind for e in received] == ["signed_up", "signed_in", "signed_out"]
    assert {e.email for e in received} == {"carol@example.com"}
    assert len({e.user_id for e in received}) == 1


def test_failed_login_publishes_nothing(client, received):
    client.post("/api/auth/login", json={"email": "nobody@example.com", "password": TEST_PASSWORD})
    assert received == []


def test_unsubscribe_stops_delivery(client):
    events = []
    before = session_events.listener_count()
    unsubscribe = session_events.subscribe(events.append)
    assert session_events.listener_count() == before + 1
    unsubscribe()
    unsubscribe()
    assert session_events.listener_count() == before

    register(client, "carol@example.com")
    assert events == []


def test_failing_listener_does_not_block_others(client, received, caplog):
    def broken(event):
        raise RuntimeError("listener exploded")

    unsubscribe = session_events.subscribe(broken)
    try:
        r = register(client, "carol@example.com")
    finally:
        unsubscribe()

    assert r.status_code == 201
    assert [e.kind for e in received] == ["signed_up"]
    assert "listener exploded" in caplog.text


def test_listener_may_unsubscribe_itself(client):
    events = []

    def once(event):
        events.append(event)
        unsubscribe()

    unsubscribe = session_events.subscribe(once)
    register(client, "carol@example.com")
    register(client, "dave@example.com")
    assert [e.email for e in events] == ["carol@example.com"]
