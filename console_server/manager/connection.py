"""Per-connection lifecycle for operator WebSockets."""

import asyncio
import logging
import uuid

from .registry import CLOSED, ClientEntry, ClientRegistry

logger = logging.getLogger(__name__)


def new_client_id() -> str:
    """Mint a 128-bit random connection identity."""
    return uuid.uuid4().hex


async def forward_outbound(client_id: str, queue: asyncio.Queue, websocket) -> None:
    """Drain a connection's outbound queue to the socket in FIFO order."""
    while True:
        message = await queue.get()
        if message is CLOSED:
            return
        try:
            await websocket.send_text(message)
        except Exception as e:
            logger.warning(f"Error sending websocket message to {client_id}: {e}")
            return


async def dispatch_inbound(client_id: str, inbound: asyncio.Queue, registry: ClientRegistry, dispatcher) -> None:
    """
    Run received commands one at a time in arrival order.

    Commands keep running after the connection is gone; their responses are
    then dropped by the registry.
    """
    while True:
        text = await inbound.get()
        if text is CLOSED:
            return
        try:
            response = await dispatcher.dispatch(text)
        except Exception:
            # a failing command never closes the connection
            logger.exception(f"Error handling message from {client_id}")
            continue
        if response is not None and not await registry.send(client_id, response):
            logger.debug(f"Dropped response for departed client {client_id}")


async def handle_connection(websocket, registry: ClientRegistry, dispatcher, authenticated: bool = False) -> str:
    """
    Serve one accepted WebSocket until it disconnects.

    Inbound text frames are queued for this connection's dispatch task and
    any response is routed back to this connection only. Binary frames are
    ignored. The identity is deregistered as soon as the stream ends; the
    call returns once commands already received have finished.

    Args:
        websocket: Accepted Starlette/FastAPI WebSocket.
        registry: Shared client registry.
        dispatcher: Object exposing ``async dispatch(text) -> str | None``.
        authenticated: Whether the connection passed the API-key gate.

    Returns:
        The identity the connection was registered under.
    """
    client_id = new_client_id()
    entry = ClientEntry(authenticated=authenticated)
    inbound: asyncio.Queue = asyncio.Queue()
    forwarder = asyncio.create_task(
        forward_outbound(client_id, entry.sender, websocket),
        name=f"forward-{client_id}",
    )
    worker = asyncio.create_task(
        dispatch_inbound(client_id, inbound, registry, dispatcher),
        name=f"dispatch-{client_id}",
    )
    await registry.insert(client_id, entry)
    logger.info(f"Client {client_id} connected")

    try:
        while True:
            try:
                message = await websocket.receive()
            except Exception as e:
                logger.warning(f"Error receiving message for {client_id}: {e}")
                break
            if message["type"] == "websocket.disconnect":
                break
            text = message.get("text")
            if text is not None:
                inbound.put_nowait(text)
    finally:
        await registry.remove(client_id)
        inbound.put_nowait(CLOSED)
        await forwarder
        logger.info(f"Client {client_id} disconnected")
        await worker

    return client_id
