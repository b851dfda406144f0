import pytest
from fastapi.testclient import TestClient

from creche_api.app.db.base import Base
from creche_api.app.db.session import SessionLocal, engine
from creche_api.app.main import app
from creche_api.app.models.creche import Creche, CrecheClass, EnrolledStudent
from creche_api.app.services.creches import capacity_label


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


def seed() -> int:
    db = SessionLocal()
    try:
        open_creche = Creche(name="Bright Minds", city="Pretoria", suburb="Hatfield")
        closed = Creche(name="Bright Closed", city="Pretoria", accepting_applications=False)
        other = Creche(name="Little Acorns", city="Cape Town")
        db.add_all([open_creche, closed, other])
        db.flush()
        full = CrecheClass(creche_id=open_creche.id, name="Grade R", capacity=10, min_age_months=48, max_age_months=72)
        db.add(full)
        db.flush()
        db.add_all([EnrolledStudent(creche_id=open_creche.id, class_id=full.id) for _ in range(9)])
        db.commit()
        return open_creche.id
    finally:
        db.close()


def test_capacity_labels():
    assert capacity_label(95) == "Almost Full"
    assert capacity_label(90) == "Almost Full"
    assert capacity_label(75) == "Limited Spots"
    assert capacity_label(74) == "Available"
    assert capacity_label(0) == "Available"


def test_search_filters_and_hides_closed_creches():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {register_and_login(client, 'browse@example.com', 'secret')}"}
    seed()

    everything = client.get("/creches", headers=headers)
    assert [item["name"] for item in everything.json()] == ["Bright Minds", "Little Acorns"]

    by_name = client.get("/creches", params={"q": "bright"}, headers=headers)
    assert [item["name"] for item in by_name.json()] == ["Bright Minds"]

    by_city = client.get("/creches", params={"city": "cape town"}, headers=headers)
    assert [item["name"] for item in by_city.json()] == ["Little Acorns"]

    by_suburb = client.get("/creches", params={"suburb": "Hatfield"}, headers=headers)
    assert len(by_suburb.json()) == 1


def test_detail_includes_class_capacity():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {register_and_login(client, 'detail@example.com', 'secret')}"}
    creche_id = seed()

    resp = client.get(f"/creches/{creche_id}", headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Bright Minds"
    assert body["is_favorite"] is False
    grade_r = body["classes"][0]
    assert grade_r["current_enrollment"] == 9
    assert grade_r["capacity_percentage"] == 90
    assert grade_r["capacity_label"] == "Almost Full"

    assert client.get("/creches/999", headers=headers).status_code == 404
