from __future__ import annotations

from collections.abc import Callable
from uuid import uuid4

from clicker.api.models import Particle, ParticleKind


# External visual-effect collaborator; receives each particle as it is emitted.
EffectSink = Callable[[Particle], None]


def particle_kind_for(*, critical: bool, streak: int, coins_gained: float) -> ParticleKind:
    if critical:
        return ParticleKind.critical
    if streak >= 10:
        return ParticleKind.combo
    if coins_gained > 0:
        return ParticleKind.coin
    return ParticleKind.click


class EffectBuffer:
    """Bounded buffer of recent visual-effect descriptors.

    When full, a new particle replaces the first expired one; if none has
    expired yet the new particle is dropped.
    """

    def __init__(self, *, ttl_seconds: float, capacity: int) -> None:
        self._ttl = ttl_seconds
        self._capacity = capacity
        self._items: list[Particle] = []

    @property
    def items(self) -> tuple[Particle, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def push(self, *, x: float, y: float, value: float, kind: ParticleKind, now: float) -> Particle | None:
        particle = Particle(id=uuid4().hex[:9], x=x, y=y, value=value, timestamp=now, kind=kind)

        if len(self._items) < self._capacity:
            self._items.append(particle)
            return particle

        for idx, existing in enumerate(self._items):
            if now - existing.timestamp > self._ttl:
                self._items[idx] = particle
                return particle
        return None

    def prune(self, now: float) -> int:
        cutoff = now - self._ttl
        before = len(self._items)
        self._items = [p for p in self._items if p.timestamp >= cutoff][-self._capacity :]
        return before - len(self._items)

    def clear(self) -> None:
        self._items.clear()
