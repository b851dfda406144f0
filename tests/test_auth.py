import pytest
from fastapi.testclient import TestClient

from creche_api.app.db.base import Base
from creche_api.app.db.session import engine
from creche_api.app.main import app


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def test_register_and_login_returns_token():
    client = TestClient(app)
    reg = client.post("/auth/register", json={"email": "Parent@Example.com", "password": "secret"})
    assert reg.status_code == 201
    assert reg.json()["email"] == "parent@example.com"

    login = client.post("/auth/login", json={"email": "parent@example.com", "password": "secret"})
    assert login.status_code == 200
    token = login.json()["access_token"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "parent@example.com"


def test_register_duplicate_email_is_conflict():
    client = TestClient(app)
    client.post("/auth/register", json={"email": "dup@example.com", "password": "secret"})
    resp = client.post("/auth/register", json={"email": "dup@example.com", "password": "secret"})
    assert resp.status_code == 409
    assert resp.json()["kind"] == "conflict"


def test_register_rejects_short_password_and_mismatch():
    client = TestClient(app)
    short = client.post("/auth/register", json={"email": "short@example.com", "password": "abc"})
    assert short.status_code == 422
    mismatch = client.post(
        "/auth/register",
        json={"email": "mismatch@example.com", "password": "secret1", "confirm_password": "secret2"},
    )
    assert mismatch.status_code == 422


def test_register_rejects_malformed_email():
    client = TestClient(app)
    resp = client.post("/auth/register", json={"email": "not-an-email", "password": "secret"})
    assert resp.status_code == 422


def test_login_wrong_password_is_invalid_credentials():
    client = TestClient(app)
    client.post("/auth/register", json={"email": "wrong@example.com", "password": "secret"})
    resp = client.post("/auth/login", json={"email": "wrong@example.com", "password": "nope123"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["kind"] == "invalid_credentials"
    assert body["detail"] == "Invalid login credentials"


def test_invalid_token_rejected():
    client = TestClient(app)
    resp = client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401
