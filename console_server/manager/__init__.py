"""Connection management module."""

from .registry import ClientEntry, ClientRegistry
from .connection import handle_connection, new_client_id

__all__ = [
    'ClientEntry',
    'ClientRegistry',
    'handle_connection',
    'new_client_id',
]
