from __future__ import annotations

import asyncio
import os
from collections.abc import Generator
from pathlib import Path

import fakeredis
import pytest
from fastapi.testclient import TestClient

from blockbot.commands import build_default_registry
from blockbot.config import Settings
from blockbot.core.context import RunContext


@pytest.fixture(scope="session", autouse=True)
def _load_dotenv_for_tests() -> None:
    """Load repo .env for local runs (PyCharm/CLI).

    In CI, we *don't* auto-load `.env` by default.
    Opt-in with: BLOCKBOT_LOAD_DOTENV_FOR_TESTS=1
    """

    if os.environ.get("CI") and os.environ.get("BLOCKBOT_LOAD_DOTENV_FOR_TESTS") != "1":
        return

    env_path = Path(__file__).resolve().parents[1] / ".env"
    if env_path.exists():
        from dotenv import load_dotenv

        load_dotenv(dotenv_path=env_path, override=False)


class RecordingSleep:
    """Pacing stub: records requested pauses and yields to the loop once."""

    def __init__(self) -> None:
        self.calls: list[int] = []

    async def __call__(self, ms: int) -> None:
        self.calls.append(ms)
        await asyncio.sleep(0)


@pytest.fixture()
def sleeper() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture()
def ctx(sleeper: RecordingSleep) -> RunContext:
    return RunContext(registry=build_default_registry(), settings=Settings(), sleep=sleeper)


@pytest.fixture()
def client_and_redis() -> Generator[tuple[TestClient, fakeredis.FakeRedis], None, None]:
    """FastAPI TestClient backed by fakeredis and a zero-delay session."""

    from blockbot.api.deps import get_redis
    from blockbot.main import app
    from blockbot.session import init_session, reset_session_for_tests

    reset_session_for_tests()
    init_session(settings=Settings(step_delay_ms=0, bounds_delay_ms=0))

    r = fakeredis.FakeRedis(decode_responses=True)

    def _override() -> Generator[fakeredis.FakeRedis, None, None]:
        yield r

    app.dependency_overrides[get_redis] = _override
    with TestClient(app) as c:
        yield c, r
    app.dependency_overrides.clear()
    reset_session_for_tests()
