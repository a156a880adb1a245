"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError
from console_server.config import CONFIG_ENV_VAR, Config, SessionDescriptor, load_config

EXAMPLE = """
restart_script = "/opt/restart.sh"

[server]
port = 9000

[auth]
enabled = true
api_keys = ["k1"]

[health]
sample_interval_seconds = 5

[[sessions]]
name = "survival"
handle = "mc-survival"

[[sessions]]
name = "creative"
"""


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(str(tmp_path / "absent.toml"))
    assert config == Config()
    assert config.server.port == 8001
    assert config.restart_script is None
    assert config.sessions == ()
    assert not config.auth.enabled


def test_load_from_file(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(EXAMPLE)

    config = load_config(str(path))

    assert config.server.port == 9000
    assert config.server.host == "0.0.0.0"
    assert config.restart_script == "/opt/restart.sh"
    assert config.auth.api_keys == ["k1"]
    assert config.health.sample_interval_seconds == 5
    assert config.sessions == (
        SessionDescriptor(name="survival", handle="mc-survival"),
        SessionDescriptor(name="creative", handle="creative"),
    )


def test_path_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "other.toml"
    path.write_text("[server]\nport = 1234\n")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

    assert load_config().server.port == 1234


def test_duplicate_session_names_rejected():
    with pytest.raises(ValidationError):
        Config(sessions=[{"name": "a"}, {"name": "a", "handle": "other"}])


def test_sessions_are_read_only():
    config = Config(sessions=[{"name": "a"}])
    with pytest.raises(ValidationError):
        config.sessions[0].name = "b"
    with pytest.raises(ValidationError):
        config.restart_script = "/tmp/x.sh"


def test_sample_interval_minimum():
    with pytest.raises(ValidationError):
        Config(health={"sample_interval_seconds": 0.1})
