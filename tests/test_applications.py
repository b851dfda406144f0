from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from creche_api.app.core.time import utc_now
from creche_api.app.db.base import Base
from creche_api.app.db.session import SessionLocal, engine
from creche_api.app.main import app
from creche_api.app.models.application import Application
from creche_api.app.models.child import Child
from creche_api.app.models.creche import Creche
from creche_api.app.models.user import User


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


def seed_applications(email: str, statuses: list[str]) -> list[int]:
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == email).one()
        ids = []
        now = utc_now()
        for index, status in enumerate(statuses):
            creche = Creche(name=f"Creche {index}")
            child = Child(user_id=user.id, first_name=f"Kid{index}", last_name="Test", date_of_birth=date(2022, 1, 1))
            db.add_all([creche, child])
            db.flush()
            application = Application(
                creche_id=creche.id,
                child_id=child.id,
                user_id=user.id,
                application_status=status,
                created_at=now + timedelta(minutes=index),
                updated_at=now + timedelta(minutes=index),
            )
            db.add(application)
            db.flush()
            ids.append(application.id)
        db.commit()
        return ids
    finally:
        db.close()


def test_list_is_newest_first_with_summaries():
    client = TestClient(app)
    token = register_and_login(client, "apps@example.com", "secret")
    headers = {"Authorization": f"Bearer {token}"}
    ids = seed_applications("apps@example.com", ["New", "Pending", "Approved"])

    resp = client.get("/applications", headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    assert [item["id"] for item in body] == list(reversed(ids))
    assert body[0]["creche"]["name"] == "Creche 2"
    assert body[0]["child"]["first_name"] == "Kid2"
    assert [item["can_edit"] for item in body] == [False, True, True]

    pending = client.get("/applications", params={"status_filter": "pending"}, headers=headers)
    assert [item["id"] for item in pending.json()] == [ids[1]]
    everything = client.get("/applications", params={"status_filter": "all"}, headers=headers)
    assert len(everything.json()) == 3


def test_history_only_closed_applications():
    client = TestClient(app)
    token = register_and_login(client, "history@example.com", "secret")
    headers = {"Authorization": f"Bearer {token}"}
    ids = seed_applications("history@example.com", ["New", "Declined", "withdrawn"])

    resp = client.get("/applications/history", headers=headers)
    assert resp.status_code == 200
    assert [item["id"] for item in resp.json()] == [ids[2], ids[1]]


def test_withdraw_only_when_editable():
    client = TestClient(app)
    token = register_and_login(client, "withdraw@example.com", "secret")
    headers = {"Authorization": f"Bearer {token}"}
    new_id, approved_id = seed_applications("withdraw@example.com", ["New", "Approved"])

    resp = client.post(f"/applications/{new_id}/withdraw", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["application_status"] == "withdrawn"
    assert resp.json()["can_edit"] is False

    again = client.post(f"/applications/{new_id}/withdraw", headers=headers)
    assert again.status_code == 400
    rejected = client.post(f"/applications/{approved_id}/withdraw", headers=headers)
    assert rejected.status_code == 400
    assert rejected.json()["kind"] == "validation"


def test_offer_response():
    client = TestClient(app)
    token = register_and_login(client, "offer@example.com", "secret")
    headers = {"Authorization": f"Bearer {token}"}
    offered, declined, pending = seed_applications("offer@example.com", ["Offer Made", "Offer Made", "Pending"])

    accepted = client.post(f"/applications/{offered}/offer-response", json={"response": "ACCEPTED"}, headers=headers)
    assert accepted.status_code == 200
    assert accepted.json()["offer_response"] == "ACCEPTED"
    assert accepted.json()["application_status"] == "Approved"

    rejected = client.post(f"/applications/{declined}/offer-response", json={"response": "REJECTED"}, headers=headers)
    assert rejected.status_code == 200
    assert rejected.json()["offer_response"] == "REJECTED"
    assert rejected.json()["application_status"] == "Offer Made"

    no_offer = client.post(f"/applications/{pending}/offer-response", json={"response": "ACCEPTED"}, headers=headers)
    assert no_offer.status_code == 400

    bad_value = client.post(f"/applications/{offered}/offer-response", json={"response": "MAYBE"}, headers=headers)
    assert bad_value.status_code == 422


def test_applications_are_scoped_to_owner():
    client = TestClient(app)
    owner_token = register_and_login(client, "owner@example.com", "secret")
    other_token = register_and_login(client, "other@example.com", "secret")
    (app_id,) = seed_applications("owner@example.com", ["New"])
    other = {"Authorization": f"Bearer {other_token}"}

    assert client.get(f"/applications/{app_id}", headers=other).status_code == 404
    assert client.delete(f"/applications/{app_id}", headers=other).status_code == 404
    assert client.get("/applications", headers=other).json() == []

    owner = {"Authorization": f"Bearer {owner_token}"}
    assert client.get(f"/applications/{app_id}", headers=owner).status_code == 200
    assert client.delete(f"/applications/{app_id}", headers=owner).status_code == 204
    assert client.get(f"/applications/{app_id}", headers=owner).status_code == 404
