"""Tests for the REST server that hosts a projector instance."""

import json

import pytest
from fastapi.testclient import TestClient

from christie_projector.rest_server import proj_api, get_projector_host, get_raw_config


@pytest.fixture
def client(tmp_path, monkeypatch):
    """A TestClient for the REST server, started with an empty configuration."""
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({}))
    monkeypatch.setenv("CHRISTIE_PROJECTOR_CONFIG", str(config_file))
    with TestClient(proj_api) as test_client:
        yield test_client


class TestRestServer:
    """Tests for the REST routes."""

    def test_startup_state(self, client):
        """Test the instance is initialized from the config file at startup."""
        assert get_raw_config() == {}
        response = client.get("/api/status")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["power_state"] is None
        assert body["input_state"] is None

    def test_config_fields(self, client):
        response = client.get("/api/config-fields")
        assert response.status_code == 200
        assert [f["id"] for f in response.json()] == ["host", "port", "password"]

    def test_definitions(self, client):
        actions = client.get("/api/actions").json()
        assert actions["power_on"]["name"] == "Power On"
        assert set(client.get("/api/feedbacks").json()) == {"power_state", "input_source"}

    def test_action_without_host_not_accepted(self, client):
        """Test an action is refused when no host is configured."""
        response = client.post("/api/actions/power_on")
        assert response.status_code == 200
        assert response.json() == {"action": "power_on", "accepted": False}
        assert ("error", "Host not configured") in get_projector_host().log_messages

    def test_unknown_action_not_accepted(self, client):
        response = client.post("/api/actions/warp_drive")
        assert response.json() == {"action": "warp_drive", "accepted": False}

    def test_feedback_inactive_without_state(self, client):
        response = client.get("/api/feedbacks/power_state", params={"value": "00"})
        assert response.status_code == 200
        assert response.json() == {"kind": "power_state", "value": "00", "active": False}

    def test_unknown_feedback(self, client):
        response = client.get("/api/feedbacks/lamp_hours", params={"value": "1"})
        assert response.status_code == 404

    def test_put_invalid_config(self, client):
        """Test a malformed port is rejected and the configuration is unchanged."""
        response = client.put("/api/config", json={"host": "10.0.0.5", "port": "abc"})
        assert response.status_code == 422
        assert client.get("/api/config").json() == {"host": None, "port": 10000}

    def test_put_config(self, client, closed_port):
        """Test a valid configuration replaces the instance configuration."""
        response = client.put("/api/config", json={"host": "127.0.0.1", "port": closed_port})
        assert response.status_code == 200
        assert response.json() == {"host": "127.0.0.1", "port": closed_port}
        assert client.get("/api/config").json() == {"host": "127.0.0.1", "port": closed_port}

    def test_variables_initially_empty(self, client):
        assert client.get("/api/variables").json() == {}
