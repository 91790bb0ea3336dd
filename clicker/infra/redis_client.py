from __future__ import annotations

import os

import redis


DEFAULT_REDIS_URL = "redis://localhost:6379/0"


def get_redis_url() -> str:
    """CLICKER_REDIS_URL wins over the generic REDIS_URL so the service can share a host env."""

    return os.environ.get("CLICKER_REDIS_URL") or os.environ.get("REDIS_URL") or DEFAULT_REDIS_URL


def create_redis(url: str | None = None) -> redis.Redis:
    # Sessions are JSON and stream fields are text: decode to str on read.
    return redis.Redis.from_url(
        url or get_redis_url(),
        decode_responses=True,
        health_check_interval=30,
    )
