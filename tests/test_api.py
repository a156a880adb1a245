"""Tests for API endpoints."""

import logging
import time
import pytest
from fastapi.testclient import TestClient
from console_server.config import Config, LoggingConfig
from console_server.main import create_app, setup_logging
from console_server.monitor import HealthSampler, SystemSnapshot


class StaticSampler(HealthSampler):
    def __init__(self, snapshot):
        super().__init__()
        self._fixed = snapshot

    def refresh(self):
        self._snapshot = self._fixed
        self._sampled_at = time.time()
        return self._fixed


class RecordingBridge:
    def __init__(self):
        self.calls = []

    async def send_command(self, session_name, raw_command):
        self.calls.append((session_name, raw_command))


@pytest.fixture
def client():
    app = create_app(Config(), sampler=StaticSampler(SystemSnapshot(ram=(1, 10))), bridge=RecordingBridge())
    return TestClient(app)


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["clients"] == 0


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["service"] == "console-server"
    assert response.json()["auth"] is False


def test_system(client):
    response = client.get("/system")
    assert response.status_code == 200
    data = response.json()
    assert data["healthy"] is True
    assert data["ram"] == [1, 10]
    assert data["disk_low"] is None
    assert data["sampled_at"] is not None


def test_system_reports_overload():
    sampler = StaticSampler(SystemSnapshot(ram=(9, 10)))
    client = TestClient(create_app(Config(), sampler=sampler, bridge=RecordingBridge()))
    assert client.get("/system").json()["healthy"] is False


def test_setup_logging_applies_level_when_already_configured():
    root = logging.getLogger()
    original = root.level
    try:
        setup_logging(LoggingConfig(level="debug"))
        assert root.level == logging.DEBUG
        setup_logging(LoggingConfig(level="WARNING"))
        assert root.level == logging.WARNING
    finally:
        root.setLevel(original)
