from __future__ import annotations

import os
from pathlib import Path

import pytest


class FixedRandom:
    """RandomSource stub: always returns the same roll."""

    def __init__(self, value: float = 0.99) -> None:
        self.value = value

    def random(self) -> float:
        return self.value


class FakeClock:
    """Controllable wall clock (seconds)."""

    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


@pytest.fixture(scope="session", autouse=True)
def _load_dotenv_for_tests() -> None:
    """Load repo .env for local runs (PyCharm/CLI).

    In CI, we *don't* auto-load `.env` by default, so local CLICKER_* tuning
    overrides can't leak into the suite unless explicitly opted-in.
    """

    # Opt-in on CI with: CLICKER_LOAD_DOTENV_FOR_TESTS=1
    if os.environ.get("CI") and os.environ.get("CLICKER_LOAD_DOTENV_FOR_TESTS") != "1":
        return

    env_path = Path(__file__).resolve().parents[1] / ".env"
    if env_path.exists():
        from dotenv import load_dotenv

        load_dotenv(dotenv_path=env_path, override=False)


@pytest.fixture(autouse=True)
def _hermetic_engine_config(monkeypatch: pytest.MonkeyPatch):
    """Every test starts from the built-in catalog and default tuning constants."""

    for key in list(os.environ):
        if key.startswith("CLICKER_"):
            monkeypatch.delenv(key, raising=False)

    from clicker.catalog.singleton import init_catalog, reset_catalog_for_tests
    from clicker.config import reset_settings_for_tests

    reset_settings_for_tests()
    reset_catalog_for_tests()
    init_catalog()
    yield
    reset_settings_for_tests()
    reset_catalog_for_tests()


@pytest.fixture()
def catalog():
    from clicker.catalog.defaults import default_catalog

    return default_catalog()


@pytest.fixture()
def settings():
    from clicker.config import EngineSettings

    return EngineSettings()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def no_crit() -> FixedRandom:
    return FixedRandom(0.99)


@pytest.fixture()
def always_crit() -> FixedRandom:
    return FixedRandom(0.0)


@pytest.fixture()
def engine(catalog, settings, clock, no_crit):
    from clicker.engine import GameEngine

    return GameEngine(catalog=catalog, settings=settings, rng=no_crit, clock=clock)


@pytest.fixture()
def client_and_redis(clock: FakeClock, no_crit: FixedRandom):
    """FastAPI TestClient wired to fakeredis, a fake clock and a no-crit RNG."""

    from collections.abc import Generator

    import fakeredis
    from fastapi.testclient import TestClient

    from clicker.api.deps import get_clock, get_redis, get_rng
    from clicker.main import app

    r = fakeredis.FakeRedis(decode_responses=True)

    def _override() -> Generator[fakeredis.FakeRedis, None, None]:
        yield r

    app.dependency_overrides[get_redis] = _override
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_rng] = lambda: no_crit
    with TestClient(app) as c:
        yield c, r
    app.dependency_overrides.clear()
