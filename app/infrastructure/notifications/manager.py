"""Connection management helpers for notification websockets."""

from __future__ import annotations

from collections import defaultdict
from typing import Any, DefaultDict, Set

from fastapi import WebSocket


class NotificationConnectionManager:
    """Manage active websocket connections grouped by channel (audience)."""

    def __init__(self) -> None:
        self._connections: DefaultDict[str, Set[WebSocket]] = defaultdict(set)

    async def connect(self, channel: str, websocket: WebSocket) -> None:
        """Accept the websocket connection and register it under ``channel``."""

        await websocket.accept()
        self._connections[channel].add(websocket)

    def disconnect(self, channel: str, websocket: WebSocket) -> None:
        """Remove ``websocket`` from the pool for ``channel``."""

        connections = self._connections.get(channel)
        if connections is None:
            return
        connections.discard(websocket)
        if not connections:
            self._connections.pop(channel, None)

    def has_connections(self) -> bool:
        return any(self._connections.values())

    async def send_to_channel(self, channel: str, message: dict[str, Any]) -> None:
        """Send ``message`` to every active connection in ``channel``."""

        connections = list(self._connections.get(channel, set()))
        for connection in connections:
            try:
                await connection.send_json(message)
            except Exception:  # pragma: no cover - stale connection cleanup
                self.disconnect(channel, connection)

    async def broadcast(self, message: dict[str, Any]) -> None:
        """Send ``message`` to every connection regardless of channel."""

        for channel in list(self._connections):
            await self.send_to_channel(channel, message)


notification_manager = NotificationConnectionManager()


__all__ = ["NotificationConnectionManager", "notification_manager"]
