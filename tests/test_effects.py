from __future__ import annotations

from clicker.api.models import ParticleKind
from clicker.effects import EffectBuffer, particle_kind_for


def test_particle_kind_priority() -> None:
    assert particle_kind_for(critical=True, streak=20, coins_gained=5) == ParticleKind.critical
    assert particle_kind_for(critical=False, streak=10, coins_gained=5) == ParticleKind.combo
    assert particle_kind_for(critical=False, streak=3, coins_gained=1) == ParticleKind.coin
    assert particle_kind_for(critical=False, streak=0, coins_gained=0) == ParticleKind.click


def test_full_buffer_drops_new_particle_until_one_expires() -> None:
    buf = EffectBuffer(ttl_seconds=2.0, capacity=3)
    for i in range(3):
        assert buf.push(x=i, y=i, value=1, kind=ParticleKind.click, now=10.0 + i * 0.1) is not None

    assert buf.push(x=9, y=9, value=1, kind=ParticleKind.click, now=11.0) is None
    assert len(buf) == 3

    # The first particle (t=10.0) is now older than the TTL and gets replaced in place.
    replacement = buf.push(x=7, y=7, value=2, kind=ParticleKind.coin, now=12.05)
    assert replacement is not None
    assert buf.items[0] is replacement
    assert len(buf) == 3


def test_prune_removes_expired() -> None:
    buf = EffectBuffer(ttl_seconds=2.0, capacity=50)
    buf.push(x=0, y=0, value=1, kind=ParticleKind.click, now=0.0)
    buf.push(x=0, y=0, value=1, kind=ParticleKind.click, now=1.5)

    assert buf.prune(3.0) == 1
    assert [p.timestamp for p in buf.items] == [1.5]

    buf.clear()
    assert len(buf) == 0
