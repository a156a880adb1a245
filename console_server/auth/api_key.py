"""API Key authentication for operator connections."""

import secrets
import hashlib
import logging
from fastapi import Header, Query, WebSocket, WebSocketException, status
from ..config import AuthConfig

logger = logging.getLogger(__name__)


def hash_api_key(api_key: str) -> str:
    """Hash an API key using SHA-256 for storage comparison."""
    return hashlib.sha256(api_key.encode()).hexdigest()


def generate_api_key(prefix: str = "console") -> str:
    """
    Generate a secure random API key.

    Args:
        prefix: Prefix to identify the key (default: "console")

    Returns:
        API key in format: prefix_<random_hex>
    """
    random_part = secrets.token_hex(32)  # 64 character hex string
    return f"{prefix}_{random_part}"


def check_api_key(api_key: str | None, auth: AuthConfig) -> bool:
    """
    Validate a presented key against the configured ones.

    Returns:
        True if the key is valid, False if auth is disabled

    Raises:
        WebSocketException: If auth is enabled and key is invalid/missing
    """
    # If auth is disabled, allow all connections
    if not auth.enabled:
        return False

    if not api_key:
        logger.warning("Connection rejected: Missing API key")
        raise WebSocketException(
            code=status.WS_1008_POLICY_VIOLATION,
            reason="Missing API key. Include X-API-Key header or api_key query parameter.",
        )

    provided_hash = hash_api_key(api_key)

    for valid_key in auth.api_keys:
        if secrets.compare_digest(provided_hash, hash_api_key(valid_key)):
            logger.debug("API key validated successfully")
            return True

    logger.warning("Connection rejected: Invalid API key")
    raise WebSocketException(
        code=status.WS_1008_POLICY_VIOLATION,
        reason="Invalid API key",
    )


async def verify_api_key(
    websocket: WebSocket,
    x_api_key: str | None = Header(None, alias="X-API-Key"),
    api_key: str | None = Query(None),
) -> bool:
    """
    FastAPI dependency gating the operator WebSocket.

    Browsers cannot set headers on WebSocket handshakes, so the key may also
    be passed as the ``api_key`` query parameter.
    """
    return check_api_key(x_api_key or api_key, websocket.app.state.config.auth)


def is_auth_enabled(auth: AuthConfig) -> bool:
    """Check if authentication is enabled."""
    return auth.enabled
