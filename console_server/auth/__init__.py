"""Authentication module for Console Server."""

from .api_key import check_api_key, verify_api_key, generate_api_key, is_auth_enabled

__all__ = ["check_api_key", "verify_api_key", "generate_api_key", "is_auth_enabled"]
