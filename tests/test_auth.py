"""Tests for API key authentication."""

import pytest
from types import SimpleNamespace
from fastapi import WebSocketDisconnect, WebSocketException
from fastapi.testclient import TestClient
from console_server.auth.api_key import generate_api_key, hash_api_key, verify_api_key
from console_server.config import AuthConfig, Config
from console_server.main import create_app


def fake_websocket(auth: AuthConfig):
    """Just enough of a WebSocket for the dependency to reach the config."""
    return SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace(config=Config(auth=auth))))


def test_generate_api_key():
    """Test API key generation."""
    key = generate_api_key()
    assert key.startswith("console_")
    assert len(key) > 20

    # Test custom prefix
    key = generate_api_key(prefix="test")
    assert key.startswith("test_")


def test_hash_api_key():
    """Test API key hashing."""
    key = "test_key_123"
    hash1 = hash_api_key(key)
    hash2 = hash_api_key(key)

    # Same key should produce same hash
    assert hash1 == hash2

    # Different keys should produce different hashes
    hash3 = hash_api_key("different_key")
    assert hash1 != hash3


@pytest.mark.asyncio
async def test_verify_api_key_disabled():
    """Test that verification passes unauthenticated when auth is disabled."""
    ws = fake_websocket(AuthConfig(enabled=False))
    result = await verify_api_key(ws, None, None)
    assert result is False


@pytest.mark.asyncio
async def test_verify_api_key_missing():
    """Test that missing key is a policy violation when auth is enabled."""
    ws = fake_websocket(AuthConfig(enabled=True, api_keys=["valid_key_123"]))
    with pytest.raises(WebSocketException) as exc_info:
        await verify_api_key(ws, None, None)
    assert exc_info.value.code == 1008


@pytest.mark.asyncio
async def test_verify_api_key_invalid():
    """Test that invalid key is rejected."""
    ws = fake_websocket(AuthConfig(enabled=True, api_keys=["valid_key_123"]))
    with pytest.raises(WebSocketException) as exc_info:
        await verify_api_key(ws, "wrong_key", None)
    assert exc_info.value.code == 1008


@pytest.mark.asyncio
async def test_verify_api_key_valid():
    """Test that valid key is accepted from header or query."""
    valid_key = "test_key_456"
    ws = fake_websocket(AuthConfig(enabled=True, api_keys=[valid_key]))

    assert await verify_api_key(ws, valid_key, None) is True
    assert await verify_api_key(ws, None, valid_key) is True


class NullBridge:
    async def send_command(self, session_name, raw_command):
        pass


def test_websocket_rejects_without_key():
    app = create_app(Config(auth=AuthConfig(enabled=True, api_keys=["k1"])), bridge=NullBridge())
    client = TestClient(app)
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect("/ws") as ws:
            ws.receive_text()
    assert exc_info.value.code == 1008


def test_websocket_accepts_header_key():
    app = create_app(Config(auth=AuthConfig(enabled=True, api_keys=["k1"])), bridge=NullBridge())
    client = TestClient(app)
    with client.websocket_connect("/ws", headers={"X-API-Key": "k1"}) as ws:
        ws.send_text("CMD")
        assert ws.receive_text() == "invalid command"
