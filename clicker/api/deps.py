from __future__ import annotations

import random
import time
from collections.abc import Callable, Generator

import redis

from clicker.clicks import RandomSource
from clicker.infra.redis_client import create_redis


def get_redis() -> Generator[redis.Redis, None, None]:
    client = create_redis()
    try:
        yield client
    finally:
        client.close()


def get_clock() -> Callable[[], float]:
    return time.time


def get_rng() -> RandomSource:
    # Overridden in tests to pin critical hits.
    return random.Random()
