from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from uuid import uuid4

import redis


def lock_key(player_id: str) -> str:
    return f"lock:clicker:{player_id}"


@contextmanager
def player_lock(*, r: redis.Redis, player_id: str, ttl_ms: int = 5_000) -> Iterator[str]:
    """Per-player lock around load -> mutate -> save.

    The engine itself is single-writer; this keeps two requests for the same
    player from interleaving their read-modify-write cycles. Each holder owns a
    unique token and only releases the key while it still holds that token, so
    a request that outlived its TTL cannot drop a lock someone else now holds.
    """

    key = lock_key(player_id)
    token = uuid4().hex
    if not r.set(key, token, nx=True, px=ttl_ms):
        raise ValueError("Session is busy")
    try:
        yield token
    finally:
        with r.pipeline() as pipe:
            try:
                pipe.watch(key)
                if pipe.get(key) == token:
                    pipe.multi()
                    pipe.delete(key)
                    pipe.execute()
            except redis.WatchError:
                # Key changed hands between the check and the delete; it is not ours.
                pass
