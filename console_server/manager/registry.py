"""Registry of live operator connections."""

import asyncio
from dataclasses import dataclass, field


# Pushed onto an outbound queue to tell its forwarder to stop.
CLOSED = None


@dataclass
class ClientEntry:
    """Outbound side of one connection, owned by the registry."""

    sender: asyncio.Queue | None = field(default_factory=asyncio.Queue)
    authenticated: bool = False

    @property
    def is_open(self) -> bool:
        return self.sender is not None

    def send(self, text: str) -> bool:
        """Enqueue a message; returns False once the entry is closed."""
        if self.sender is None:
            return False
        self.sender.put_nowait(text)
        return True

    def close(self) -> None:
        """Signal end-of-stream to the forwarder and drop the sender."""
        if self.sender is not None:
            self.sender.put_nowait(CLOSED)
            self.sender = None


class ClientRegistry:
    """
    Mapping of connection identity to ClientEntry.

    Every operation runs under a single lock which is only held for the map
    access and the non-blocking enqueue, never across network I/O.
    """

    def __init__(self) -> None:
        self._clients: dict[str, ClientEntry] = {}
        self._lock = asyncio.Lock()

    async def insert(self, client_id: str, entry: ClientEntry) -> None:
        async with self._lock:
            previous = self._clients.get(client_id)
            if previous is not None:
                previous.close()
            self._clients[client_id] = entry

    async def remove(self, client_id: str) -> bool:
        """Remove and close an entry. Returns False if it was not present."""
        async with self._lock:
            entry = self._clients.pop(client_id, None)
            if entry is None:
                return False
            entry.close()
            return True

    async def send(self, client_id: str, text: str) -> bool:
        """Deliver text to one connection's outbound queue."""
        async with self._lock:
            entry = self._clients.get(client_id)
            if entry is None:
                return False
            return entry.send(text)

    async def get(self, client_id: str) -> ClientEntry | None:
        async with self._lock:
            return self._clients.get(client_id)

    async def ids(self) -> list[str]:
        async with self._lock:
            return list(self._clients)

    def __len__(self) -> int:
        return len(self._clients)

    def __contains__(self, client_id: str) -> bool:
        return client_id in self._clients
