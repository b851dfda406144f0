from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from creche_api.app.core.time import utc_now
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
    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return resp.json()["access_token"]


def months_ago(months: int) -> str:
    today = utc_now().date()
    year, month = today.year, today.month - months
    while month < 1:
        month += 12
        year -= 1
    return f"{year:04d}-{month:02d}-01"


def test_create_and_list_children():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {register_and_login(client, 'kids@example.com', 'secret')}"}

    resp = client.post(
        "/children",
        json={"first_name": " Lwazi ", "last_name": "Nkosi", "date_of_birth": months_ago(14), "gender": "male"},
        headers=headers,
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["first_name"] == "Lwazi"
    assert body["age_in_months"] == 14
    assert body["is_owner"] is True

    listed = client.get("/children", headers=headers)
    assert [child["id"] for child in listed.json()] == [body["id"]]
    assert client.get(f"/children/{body['id']}", headers=headers).json()["last_name"] == "Nkosi"


def test_create_rejects_blank_name_and_future_birth_date():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {register_and_login(client, 'bad@example.com', 'secret')}"}

    blank = client.post("/children", json={"first_name": " ", "last_name": "X", "date_of_birth": "2022-01-01"}, headers=headers)
    assert blank.status_code == 422

    tomorrow = (utc_now().date() + timedelta(days=2)).isoformat()
    future = client.post("/children", json={"first_name": "A", "last_name": "B", "date_of_birth": tomorrow}, headers=headers)
    assert future.status_code == 400
    assert future.json()["detail"] == "Date of birth cannot be in the future"


def test_update_is_owner_only_and_partial():
    client = TestClient(app)
    owner = {"Authorization": f"Bearer {register_and_login(client, 'owner@example.com', 'secret')}"}
    stranger = {"Authorization": f"Bearer {register_and_login(client, 'stranger@example.com', 'secret')}"}
    child = client.post(
        "/children",
        json={"first_name": "Thabo", "last_name": "Sithole", "date_of_birth": "2021-06-01"},
        headers=owner,
    ).json()

    updated = client.put(f"/children/{child['id']}", json={"first_name": "Thabiso"}, headers=owner)
    assert updated.status_code == 200
    assert updated.json()["first_name"] == "Thabiso"
    assert updated.json()["last_name"] == "Sithole"

    assert client.put(f"/children/{child['id']}", json={"first_name": "  "}, headers=owner).status_code == 400
    assert client.put(f"/children/{child['id']}", json={"first_name": "X"}, headers=stranger).status_code == 404
    assert client.get(f"/children/{child['id']}", headers=stranger).status_code == 404


def test_linked_parent_can_view_but_not_edit_and_can_be_removed():
    client = TestClient(app)
    owner = {"Authorization": f"Bearer {register_and_login(client, 'first@example.com', 'secret')}"}
    second = {"Authorization": f"Bearer {register_and_login(client, 'second@example.com', 'secret')}"}
    child = client.post(
        "/children",
        json={"first_name": "Amahle", "last_name": "Zulu", "date_of_birth": "2022-02-02"},
        headers=owner,
    ).json()
    invite = client.post(f"/children/{child['id']}/invites", json={"relationship": "guardian"}, headers=owner).json()
    client.post(f"/invites/{invite['id']}/accept", headers=second)

    assert client.get(f"/children/{child['id']}", headers=second).json()["is_owner"] is False
    assert client.put(f"/children/{child['id']}", json={"first_name": "Y"}, headers=second).status_code == 403

    parents = client.get(f"/children/{child['id']}/parents", headers=second).json()
    assert parents[0]["relationship"] == "guardian"
    link_id = parents[0]["id"]

    assert client.delete(f"/children/{child['id']}/parents/{link_id}", headers=second).status_code == 403
    assert client.delete(f"/children/{child['id']}/parents/{link_id}", headers=owner).status_code == 204
    assert client.get("/children", headers=second).json() == []
    assert client.delete(f"/children/{child['id']}/parents/{link_id}", headers=owner).status_code == 404
