from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Sequence

from fastapi import WebSocket


logger = logging.getLogger(__name__)


class PlayerWebSocketHub:
    """In-process WebSocket pub/sub keyed by player_id.

    A player may have several tabs open; every connection for that player
    receives the same `state_updated` pushes after a mutating request. Clients
    refetch the session on that event; the mailbox keeps the durable copy of
    any unlocks it mentions.

    Payloads should be JSON-serializable dicts.
    """

    def __init__(self) -> None:
        self._by_player: dict[str, set[WebSocket]] = defaultdict(set)
        self._lock = asyncio.Lock()

    async def connect(self, player_id: str, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            self._by_player[player_id].add(websocket)

    async def disconnect(self, player_id: str, websocket: WebSocket) -> None:
        async with self._lock:
            conns = self._by_player.get(player_id)
            if not conns:
                return
            conns.discard(websocket)
            if not conns:
                self._by_player.pop(player_id, None)

    def connection_count(self, player_id: str) -> int:
        return len(self._by_player.get(player_id, ()))

    async def broadcast(self, player_id: str, payload: dict[str, object]) -> int:
        """Send to every live connection; returns how many sends succeeded."""

        async with self._lock:
            conns = list(self._by_player.get(player_id, set()))

        if not conns:
            return 0

        dead: list[WebSocket] = []
        for ws in conns:
            try:
                await ws.send_json(payload)
            except Exception:
                logger.debug("dropping dead websocket for %s", player_id, exc_info=True)
                dead.append(ws)

        if dead:
            async with self._lock:
                conns_now = self._by_player.get(player_id)
                if conns_now is not None:
                    for ws in dead:
                        conns_now.discard(ws)
                    if not conns_now:
                        self._by_player.pop(player_id, None)

        return len(conns) - len(dead)

    async def notify_state_updated(self, player_id: str, *, unlocked: Sequence[str] = ()) -> int:
        payload: dict[str, object] = {"type": "state_updated", "player_id": player_id}
        if unlocked:
            payload["unlocked"] = list(unlocked)
        return await self.broadcast(player_id, payload)


hub = PlayerWebSocketHub()
