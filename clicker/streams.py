"""Per-player notification mailboxes on Redis Streams.

Unlock notifications are appended after the snapshot is saved, so a reader
never sees a reward the stored session does not have yet. Clients page
through a mailbox with stream ids (`start` / `end`).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import cast

import redis

from clicker.api.models import AchievementNotification


# Oldest entries are trimmed once a mailbox grows past this.
MAILBOX_MAXLEN = 500


@dataclass(frozen=True, slots=True)
class Mailbox:
    player_id: str

    @property
    def key(self) -> str:
        return f"mailbox:clicker:{self.player_id}"


def unlock_fields(player_id: str, notification: AchievementNotification) -> dict[str, str]:
    return {
        "type": "achievement_unlocked",
        "player_id": player_id,
        "achievement_id": notification.achievement_id,
        "rarity": notification.rarity,
        "reward_coins": str(notification.reward_coins),
        "notification_id": notification.id,
        "ts": str(notification.timestamp),
    }


def publish_unlocks(
    *,
    r: redis.Redis,
    player_id: str,
    notifications: Iterable[AchievementNotification],
    maxlen: int = MAILBOX_MAXLEN,
) -> list[str]:
    """Append one `achievement_unlocked` entry per notification, in unlock order."""

    pending = list(notifications)
    if not pending:
        return []

    key = Mailbox(player_id=player_id).key
    with r.pipeline(transaction=False) as pipe:
        for notification in pending:
            pipe.xadd(key, unlock_fields(player_id, notification), maxlen=maxlen, approximate=False)
        ids = pipe.execute()
    return [cast(str, stream_id) for stream_id in ids]


def read_mailbox(*, r: redis.Redis, mailbox: Mailbox, count: int = 20, start: str = "-", end: str = "+") -> list[dict[str, object]]:
    entries = r.xrange(mailbox.key, min=start, max=end, count=count)
    return [{"id": mid, "fields": fields} for mid, fields in entries]
