"""Live roster feed: every subscriber receives its owner's full roster after each write."""
from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Any, Dict, List

from fastapi import WebSocket

logger = logging.getLogger(__name__)

Documents = List[Dict[str, Any]]


class RosterFeed:
    """Subscribers grouped by roster owner; messages are whole snapshots, never diffs."""

    channel = "employees"

    def __init__(self) -> None:
        self._subscribers: Dict[int, List[WebSocket]] = defaultdict(list)
        self._lock = asyncio.Lock()

    @classmethod
    def snapshot(cls, documents: Documents) -> Dict[str, Any]:
        return {"channel": cls.channel, "action": "snapshot", "data": documents}

    async def subscribe(self, owner_id: int, websocket: WebSocket, documents: Documents) -> None:
        """Accept the socket and hand it the current roster before any push."""
        await websocket.accept()
        await websocket.send_json(self.snapshot(documents))
        async with self._lock:
            self._subscribers[owner_id].append(websocket)
        logger.debug("Owner %s now has %s roster subscriber(s)", owner_id, self.subscriber_count(owner_id))

    async def unsubscribe(self, owner_id: int, websocket: WebSocket) -> None:
        async with self._lock:
            sockets = self._subscribers.get(owner_id)
            if sockets is None:
                return
            sockets[:] = [s for s in sockets if s is not websocket]
            if not sockets:
                del self._subscribers[owner_id]

    def subscriber_count(self, owner_id: int) -> int:
        return len(self._subscribers.get(owner_id, ()))

    async def publish_snapshot(self, owner_id: int, documents: Documents) -> int:
        """Push ``documents`` to the owner's subscribers; returns how many received it."""
        async with self._lock:
            targets = list(self._subscribers.get(owner_id, ()))

        message = self.snapshot(documents)
        delivered = 0
        for websocket in targets:
            try:
                await websocket.send_json(message)
            except Exception as exc:  # pragma: no cover - closed sockets
                logger.warning("Dropping stale subscriber of owner %s: %s", owner_id, exc)
                await self.unsubscribe(owner_id, websocket)
            else:
                delivered += 1
        return delivered


roster_feed = RosterFeed()
