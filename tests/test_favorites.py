import pytest
from fastapi.testclient import TestClient

from creche_api.app.db.base import Base
from creche_api.app.db.session import SessionLocal, engine
from creche_api.app.main import app
from creche_api.app.models.creche import Creche
from creche_api.app.models.favorite import UserFavorite
from creche_api.app.models.user import User
from creche_api.app.services import favorites as favorites_service


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


def seed_creches(*names: str) -> list[int]:
    db = SessionLocal()
    try:
        creches = [Creche(name=name, city="Cape Town") for name in names]
        db.add_all(creches)
        db.commit()
        return [creche.id for creche in creches]
    finally:
        db.close()


def test_add_is_idempotent_and_lists_with_creche():
    client = TestClient(app)
    token = register_and_login(client, "fav@example.com", "secret")
    headers = {"Authorization": f"Bearer {token}"}
    (creche_id,) = seed_creches("Rainbow Kids")

    first = client.post("/favorites", json={"creche_id": creche_id}, headers=headers)
    second = client.post("/favorites", json={"creche_id": creche_id}, headers=headers)
    assert first.status_code == 201
    assert second.status_code == 201
    assert first.json()["id"] == second.json()["id"]

    listed = client.get("/favorites", headers=headers)
    assert listed.status_code == 200
    assert len(listed.json()) == 1
    assert listed.json()[0]["creche"]["name"] == "Rainbow Kids"


def test_add_unknown_creche_is_not_found():
    client = TestClient(app)
    token = register_and_login(client, "missing@example.com", "secret")
    resp = client.post("/favorites", json={"creche_id": 42}, headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 404


def test_toggle_flips_state():
    client = TestClient(app)
    token = register_and_login(client, "toggle@example.com", "secret")
    headers = {"Authorization": f"Bearer {token}"}
    (creche_id,) = seed_creches("Happy Feet")

    on = client.post(f"/favorites/toggle/{creche_id}", headers=headers)
    assert on.json() == {"creche_id": creche_id, "is_favorite": True}
    assert client.get(f"/creches/{creche_id}", headers=headers).json()["is_favorite"] is True

    off = client.post(f"/favorites/toggle/{creche_id}", headers=headers)
    assert off.json()["is_favorite"] is False
    assert client.get("/favorites", headers=headers).json() == []


def test_remove_only_touches_own_favorites():
    client = TestClient(app)
    mine = {"Authorization": f"Bearer {register_and_login(client, 'mine@example.com', 'secret')}"}
    theirs = {"Authorization": f"Bearer {register_and_login(client, 'theirs@example.com', 'secret')}"}
    first, second = seed_creches("Alpha", "Beta")

    my_fav = client.post("/favorites", json={"creche_id": first}, headers=mine).json()
    client.post("/favorites", json={"creche_id": second}, headers=mine)
    their_fav = client.post("/favorites", json={"creche_id": first}, headers=theirs).json()

    assert client.delete(f"/favorites/{their_fav['id']}", headers=mine).status_code == 404
    assert client.delete(f"/favorites/{my_fav['id']}", headers=mine).status_code == 204

    assert [item["creche_id"] for item in client.get("/favorites", headers=mine).json()] == [second]
    assert [item["creche_id"] for item in client.get("/favorites", headers=theirs).json()] == [first]


def test_service_is_favorite():
    client = TestClient(app)
    register_and_login(client, "svc@example.com", "secret")
    (creche_id,) = seed_creches("Gamma")
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == "svc@example.com").one()
        assert not favorites_service.is_favorite(db, user.id, creche_id)
        assert favorites_service.toggle_favorite(db, user.id, creche_id) is True
        assert favorites_service.is_favorite(db, user.id, creche_id)
        assert db.query(UserFavorite).count() == 1
    finally:
        db.close()
