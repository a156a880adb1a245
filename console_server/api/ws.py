"""Operator WebSocket endpoint."""

from fastapi import APIRouter, Depends, WebSocket

from ..auth import verify_api_key
from ..manager import handle_connection

router = APIRouter()


@router.websocket("/ws")
async def operator_socket(websocket: WebSocket, authenticated: bool = Depends(verify_api_key)):
    """Accept an operator connection and serve its commands."""
    await websocket.accept()
    state = websocket.app.state
    await handle_connection(websocket, state.registry, state.dispatcher, authenticated=authenticated)
