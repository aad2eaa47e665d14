"""Connection registry — the set of currently open subscriber connections.

The registry is the only shared mutable state in the service. One instance
lives for the lifetime of the app (created in create_app, stored on
app.state) and is handed to the WebSocket route and the Broadcaster.

Learn: Membership is in-memory only. A restart drops every subscriber;
clients are expected to reconnect. The lock is held only for the set
operation itself, never across an await, so it is safe to touch from the
event loop and from worker threads alike.
"""

import threading
from typing import Any, Callable, Iterator

import structlog

logger = structlog.get_logger()


class ConnectionRegistry:
    """Thread-safe set of subscriber connections.

    Connections are opaque handles (Starlette WebSockets in production,
    plain fakes in tests). Iteration always works on a snapshot, so
    connections admitted or removed mid-iteration never break a loop.
    """

    def __init__(self) -> None:
        self._connections: set[Any] = set()
        self._lock = threading.Lock()

    def admit(self, connection: Any) -> None:
        with self._lock:
            self._connections.add(connection)
            size = len(self._connections)
        logger.info("registry.admitted", subscribers=size)

    def remove(self, connection: Any) -> bool:
        """Drop a connection. Returns False if it was already gone."""
        with self._lock:
            if connection not in self._connections:
                return False
            self._connections.discard(connection)
            size = len(self._connections)
        logger.info("registry.removed", subscribers=size)
        return True

    def snapshot(self) -> tuple[Any, ...]:
        with self._lock:
            return tuple(self._connections)

    def for_each(self, fn: Callable[[Any], Any]) -> list[Any]:
        """Apply fn to every connection in a snapshot; return the results."""
        return [fn(connection) for connection in self.snapshot()]

    async def close_all(self, code: int = 1001) -> None:
        """Close every connection and empty the registry (shutdown path)."""
        with self._lock:
            connections = list(self._connections)
            self._connections.clear()

        for connection in connections:
            try:
                await connection.close(code=code)
            except Exception as e:
                logger.warning("registry.close_failed", error=str(e))

        if connections:
            logger.info("registry.closed_all", closed=len(connections))

    def __len__(self) -> int:
        with self._lock:
            return len(self._connections)

    def __contains__(self, connection: Any) -> bool:
        with self._lock:
            return connection in self._connections

    def __iter__(self) -> Iterator[Any]:
        return iter(self.snapshot())
