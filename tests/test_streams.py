from __future__ import annotations

import fakeredis

from clicker.api.models import AchievementNotification
from clicker.streams import Mailbox, publish_unlocks, read_mailbox


def _notification(i: int) -> AchievementNotification:
    return AchievementNotification(
        id=f"n{i}",
        achievement_id=f"ach_{i}",
        timestamp=1_000.0 + i,
        rarity="common",
        reward_coins=5,
    )


def test_publish_unlocks_appends_in_unlock_order() -> None:
    r = fakeredis.FakeRedis(decode_responses=True)

    ids = publish_unlocks(r=r, player_id="p1", notifications=[_notification(1), _notification(2)])

    assert len(ids) == 2
    messages = read_mailbox(r=r, mailbox=Mailbox(player_id="p1"))
    assert [m["id"] for m in messages] == ids
    assert [m["fields"]["achievement_id"] for m in messages] == ["ach_1", "ach_2"]
    assert messages[0]["fields"]["type"] == "achievement_unlocked"
    assert messages[0]["fields"]["reward_coins"] == "5.0"


def test_nothing_to_publish_leaves_no_stream() -> None:
    r = fakeredis.FakeRedis(decode_responses=True)

    assert publish_unlocks(r=r, player_id="p1", notifications=[]) == []
    assert not r.exists(Mailbox(player_id="p1").key)


def test_mailbox_is_trimmed_to_maxlen() -> None:
    r = fakeredis.FakeRedis(decode_responses=True)

    publish_unlocks(r=r, player_id="p1", notifications=[_notification(i) for i in range(5)], maxlen=3)

    messages = read_mailbox(r=r, mailbox=Mailbox(player_id="p1"))
    assert [m["fields"]["achievement_id"] for m in messages] == ["ach_2", "ach_3", "ach_4"]
