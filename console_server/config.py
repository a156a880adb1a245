"""Configuration management."""

import os
from pathlib import Path
import tomli
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

CONFIG_ENV_VAR = "CONSOLE_SERVER_CONFIG"


class AuthConfig(BaseModel):
    # defaults when config.toml is missing
    enabled: bool = False
    api_keys: list[str] = []


class ServerConfig(BaseModel):
    # defaults when config.toml is missing
    host: str = "0.0.0.0"
    port: int = 8001


class LoggingConfig(BaseModel):
    # defaults when config.toml is missing
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class HealthConfig(BaseModel):
    # defaults when config.toml is missing
    sample_interval_seconds: float = Field(default=30.0, ge=1.0)


class BridgeConfig(BaseModel):
    # defaults when config.toml is missing
    tmux: str = "tmux"
    chat_template: str = "tellraw @a {payload}"


class SessionDescriptor(BaseModel):
    """A named console session and the tmux target that hosts it."""

    model_config = ConfigDict(frozen=True)

    name: str
    handle: str = ""

    @model_validator(mode="before")
    @classmethod
    def _default_handle(cls, data):
        if isinstance(data, dict) and not data.get("handle"):
            data = {**data, "handle": data.get("name", "")}
        return data


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    server: ServerConfig = ServerConfig()
    auth: AuthConfig = AuthConfig()
    logging: LoggingConfig = LoggingConfig()
    health: HealthConfig = HealthConfig()
    bridge: BridgeConfig = BridgeConfig()
    restart_script: str | None = None
    sessions: tuple[SessionDescriptor, ...] = ()

    @field_validator("sessions")
    @classmethod
    def _unique_names(cls, sessions):
        seen = set()
        for session in sessions:
            if session.name in seen:
                raise ValueError(f"duplicate session name: {session.name}")
            seen.add(session.name)
        return sessions


def default_config_path() -> str:
    """Config path from the environment, falling back to ./config.toml."""
    return os.environ.get(CONFIG_ENV_VAR, "config.toml")


def load_config(config_path: str | None = None) -> Config:
    """Load configuration from TOML file."""
    config_file = Path(config_path or default_config_path())

    if not config_file.exists():
        return Config()
    with open(config_file, "rb") as f:
        data = tomli.load(f)
    return Config(**data)
