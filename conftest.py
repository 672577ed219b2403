import pytest
from fastapi.testclient import TestClient

from main import create_app
from stores import AppContext


@pytest.fixture
def context():
    """Fresh, empty stores for every test."""
    return AppContext()


@pytest.fixture
def client(context):
    return TestClient(create_app(context), raise_server_exceptions=False)


@pytest.fixture
def make_teapot(client):
    def _make(**overrides):
        body = {"name": "Test Teapot", "material": "ceramic", "capacityMl": 500, "style": "english"}
        body.update(overrides)
        r = client.post("/teapots", json=body)
        assert r.status_code == 201, r.json()
        return r.json()
    return _make


@pytest.fixture
def make_tea(client):
    def _make(**overrides):
        body = {
            "name": "Test Tea",
            "type": "green",
            "caffeineLevel": "medium",
            "steepTempCelsius": 80,
            "steepTimeSeconds": 180,
        }
        body.update(overrides)
        r = client.post("/teas", json=body)
        assert r.status_code == 201, r.json()
        return r.json()
    return _make


@pytest.fixture
def make_brew(client, make_teapot, make_tea):
    def _make(**overrides):
        body = {}
        if "teapotId" not in overrides:
            body["teapotId"] = make_teapot()["id"]
        if "teaId" not in overrides:
            body["teaId"] = make_tea()["id"]
        body.update(overrides)
        r = client.post("/brews", json=body)
        assert r.status_code == 201, r.json()
        return r.json()
    return _make
