from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import cast

import redis

from blockbot.api.models import RunEventModel


def run_stream_key(session_id: str) -> str:
    return f"runs:{session_id}"


def event_stream_fields(event: RunEventModel) -> dict[str, str]:
    return {
        "type": event.type,
        "run_id": str(event.run_id),
        "payload": json.dumps(event.payload, sort_keys=True),
        "ts": event.ts.isoformat(),
    }


def publish_many(*, r: redis.Redis, entries: Sequence[tuple[str, Mapping[str, str]]]) -> list[str]:
    ids: list[str] = []
    for key, fields in entries:
        # redis-py stubs expect field/value unions; we only use string fields/values.
        stream_id = r.xadd(key, {str(k): str(v) for k, v in fields.items()})
        ids.append(cast(str, stream_id))
    return ids


def publish_run_events(*, r: redis.Redis, session_id: str, events: Sequence[RunEventModel]) -> list[str]:
    key = run_stream_key(session_id)
    return publish_many(r=r, entries=[(key, event_stream_fields(ev)) for ev in events])
