import httpx
import pytest
from fastapi.testclient import TestClient

import web.backend.routers.state as state_router
from core.exceptions import ConfigError, StoreWriteError
from core.state_service import StateService
from core.stores import InMemoryStateStore, RestKVStateStore
from core.stores.base import StateStore
from web.backend.app import create_app


class FailingWriteStore(InMemoryStateStore):
    def save(self, snapshot):
        raise StoreWriteError("quota exceeded", "memory")


@pytest.fixture
def store():
    return InMemoryStateStore()


@pytest.fixture
def client(store, monkeypatch):
    service = StateService(store)
    monkeypatch.setattr(state_router, "get_state_service", lambda: service)
    return TestClient(create_app())


def test_post_then_get_round_trip(client):
    body = {"allWeeksData": {"week_1": {"completed": 42, "target": 40}}, "allWeeklyGoals": {}, "sessions": []}

    response = client.post("/state", json=body)
    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["state"]["allWeeksData"]["week_1"]["bankedForNextWeek"] == 2

    fetched = client.get("/state")
    assert fetched.status_code == 200
    assert fetched.json()["allWeeksData"]["week_1"]["bankedForNextWeek"] == 2


def test_api_prefix_serves_same_state(client):
    client.post("/api/state", json={"allWeeksData": {"week_1": {"completed": 45}}})
    assert client.get("/state").json()["allWeeksData"]["week_1"]["surplus"] == 5


def test_post_defaults_missing_sections(client, store):
    response = client.post("/state", json={})

    assert response.status_code == 200
    saved = store.load()
    assert saved["allWeeksData"] == {}
    assert saved["allWeeklyGoals"] == {}
    assert saved["sessions"] == []
    assert saved["lastModified"]


def test_post_ignores_client_derived_values(client):
    body = {
        "allWeeksData": {
            "week_1": {"weekNum": 1, "completed": 40, "target": 40, "bankedForNextWeek": 500},
            "week_2": {"weekNum": 2, "completed": 41, "target": 40, "bankedFromPrevious": 500},
        }
    }

    weeks = client.post("/state", json=body).json()["state"]["allWeeksData"]

    assert weeks["week_1"]["bankedForNextWeek"] == 0
    assert weeks["week_2"]["bankedFromPrevious"] == 0
    assert weeks["week_2"]["bankedForNextWeek"] == 1


def test_get_on_empty_store_returns_seed(client):
    response = client.get("/state")

    assert response.status_code == 200
    week = response.json()["allWeeksData"]["week_1"]
    assert week["completed"] == 42
    assert week["bankedForNextWeek"] == 2


@pytest.mark.parametrize(
    "raw_body",
    [
        b"{not json",
        b"[1, 2, 3]",
        b'"text"',
        b'{"allWeeksData": "oops"}',
        b'{"sessions": {"a": 1}}',
        b'{"allWeeksData": {"week_1": {"completed": NaN}}}',
        b'{"sessions": [-Infinity]}',
        b'{"allWeeksData": {"week_1": {"completed": 1e400}}}',
    ],
)
def test_post_malformed_body_is_400(client, store, raw_body):
    response = client.post("/state", content=raw_body, headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert store.load() is None


def test_post_write_failure_is_500(monkeypatch):
    service = StateService(FailingWriteStore())
    monkeypatch.setattr(state_router, "get_state_service", lambda: service)
    client = TestClient(create_app())

    response = client.post("/state", json={"allWeeksData": {}})

    assert response.status_code == 500
    assert "quota exceeded" in response.json()["detail"]


def test_get_with_misconfigured_store_returns_seed(monkeypatch):
    def broken_factory():
        raise ConfigError("GitHub store requires 'owner' and 'repo'")

    monkeypatch.setattr(state_router, "get_state_service", broken_factory)
    client = TestClient(create_app())

    response = client.get("/state")

    assert response.status_code == 200
    assert response.json()["allWeeksData"]["week_1"]["bankedForNextWeek"] == 2


def test_get_with_unreachable_store_returns_seed(monkeypatch):
    class Unreachable(StateStore):
        def load(self):
            from core.exceptions import StoreUnavailableError
            raise StoreUnavailableError("timeout", "kv")

        def save(self, snapshot):
            pass

        def get_name(self):
            return "kv"

    service = StateService(Unreachable())
    monkeypatch.setattr(state_router, "get_state_service", lambda: service)
    client = TestClient(create_app())

    response = client.get("/state")
    assert response.status_code == 200
    assert "week_1" in response.json()["allWeeksData"]


def test_options_preflight(client):
    plain = client.options("/state")
    assert plain.status_code == 200
    assert plain.content == b""

    preflight = client.options(
        "/api/state",
        headers={"Origin": "https://tracker.example.com", "Access-Control-Request-Method": "POST"},
    )
    assert preflight.status_code == 200
    assert preflight.headers["access-control-allow-origin"] == "*"


def test_unsupported_method_is_405(client):
    assert client.delete("/state").status_code == 405


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


def test_non_finite_post_leaves_state_readable(client):
    rejected = client.post(
        "/state",
        content=b'{"allWeeksData": {"week_1": {"completed": NaN, "target": 40}}}',
        headers={"Content-Type": "application/json"},
    )
    assert rejected.status_code == 400

    response = client.get("/state")
    assert response.status_code == 200
    assert response.json()["allWeeksData"]["week_1"]["bankedForNextWeek"] == 2


@pytest.mark.parametrize("kv_body", [b'["x"]', b'{"result": "[1, 2]"}', b"<html></html>"])
def test_get_with_unexpected_kv_response_returns_seed(monkeypatch, kv_body):
    kv = RestKVStateStore(
        {"url": "https://kv.example.com"},
        transport=httpx.MockTransport(lambda request: httpx.Response(200, content=kv_body)),
    )
    service = StateService(kv)
    monkeypatch.setattr(state_router, "get_state_service", lambda: service)
    client = TestClient(create_app())

    response = client.get("/state")

    assert response.status_code == 200
    assert "week_1" in response.json()["allWeeksData"]
