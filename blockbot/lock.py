from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from uuid import uuid4

import redis

from blockbot.fsm import RunInProgressError


def _lock_key(session_id: str) -> str:
    return f"lock:run:{session_id}"


@contextmanager
def run_lock(*, r: redis.Redis, session_id: str, ttl_ms: int = 300_000) -> Iterator[str]:
    """Single-flight lock for runs on one session, shared across processes.

    Each holder stores a unique token and only deletes the key if it still
    holds that token, so an expired-and-reacquired lock is left alone.
    The check-and-delete is not atomic (no Lua).
    """

    key = _lock_key(session_id)
    token = uuid4().hex
    acquired = r.set(key, token, nx=True, px=ttl_ms)
    if not acquired:
        raise RunInProgressError("A run is already in progress")
    try:
        yield token
    finally:
        if r.get(key) == token:
            r.delete(key)

