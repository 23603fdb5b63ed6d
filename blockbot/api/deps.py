from __future__ import annotations

from collections.abc import Generator

import redis

from blockbot.infra.redis_client import create_redis
from blockbot.session import Session, get_session


def get_redis() -> Generator[redis.Redis, None, None]:
    client = create_redis()
    try:
        yield client
    finally:
        try:
            client.close()
        except Exception:
            # Some redis client versions don't require explicit close.
            pass


def get_current_session() -> Session:
    return get_session()
