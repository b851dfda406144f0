from fastapi.testclient import TestClient

from creche_api.app.main import app


def test_root_and_health():
    client = TestClient(app)
    root = client.get("/")
    assert root.status_code == 200
    assert root.json()["status"] == "ok"
    health = client.get("/health")
    assert health.status_code == 200
    assert health.json() == {"status": "ok"}


def test_protected_route_requires_token():
    client = TestClient(app)
    resp = client.get("/children")
    assert resp.status_code == 401
