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


def register_and_login(client: TestClient, email: str, password: str) -> str:
    client.post("/auth/register", json={"email": email, "password": password})
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return response.json()["access_token"]


def test_get_profile_defaults():
    client = TestClient(app)
    token = register_and_login(client, "profile@example.com", "secret")
    resp = client.get("/profile/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["email"] == "profile@example.com"
    assert body["first_name"] is None
    assert body["last_login"] is not None


def test_update_profile_keeps_fields_not_sent():
    client = TestClient(app)
    token = register_and_login(client, "update@example.com", "secret")
    headers = {"Authorization": f"Bearer {token}"}

    first = client.put(
        "/profile/me",
        json={"first_name": "Thandi", "last_name": "Mokoena", "phone_number": "0821234567", "city": "Durban"},
        headers=headers,
    )
    assert first.status_code == 200

    second = client.put("/profile/me", json={"suburb": "Berea"}, headers=headers)
    assert second.status_code == 200
    body = second.json()
    assert body["first_name"] == "Thandi"
    assert body["phone_number"] == "0821234567"
    assert body["suburb"] == "Berea"
    assert body["city"] == "Durban"


def test_profile_requires_auth():
    client = TestClient(app)
    assert client.get("/profile/me").status_code == 401
