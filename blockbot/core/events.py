from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Literal
from uuid import UUID

EventType = Literal[
    "RUN_STARTED",
    "STEP_STARTED",
    "STEP_SKIPPED",
    "BOUNDS_HIT",
    "RUN_COMPLETED",
    "RUN_ABORTED",
]


@dataclass(frozen=True, slots=True)
class RunEvent:
    type: EventType
    run_id: UUID
    payload: dict[str, Any]
    ts: datetime

    @staticmethod
    def now(*, type: EventType, run_id: UUID, payload: dict[str, Any]) -> "RunEvent":
        return RunEvent(type=type, run_id=run_id, payload=payload, ts=datetime.now(timezone.utc))

