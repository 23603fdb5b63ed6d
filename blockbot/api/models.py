from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class Actor(BaseModel):
    # Pixel coordinates of the occupied cell's top-left corner.
    x: int = 0
    y: int = 0

    # Raw accumulated degrees; normalized only when computing a move.
    angle: int = 0

    is_moving: bool = False
    is_hitting_bounds: bool = False


class CommandKind(StrEnum):
    basic = "basic"
    loop = "loop"


class CommandInfo(BaseModel):
    id: str
    type: CommandKind
    label: str
    color: str

    # Loop-only fields.
    repeats: int | None = None
    children: list[str] | None = None


class CommandListResponse(BaseModel):
    commands: list[CommandInfo]


class LoopUpdateRequest(BaseModel):
    repeats: int | None = Field(default=None, ge=0)
    children: list[str] | None = None


class ActorResetRequest(BaseModel):
    x: int = 0
    y: int = 0
    angle: int = 0


class RunRequest(BaseModel):
    command_ids: list[str] = Field(default_factory=list)


class RunStatus(StrEnum):
    completed = "completed"
    aborted = "aborted"


class RunEventModel(BaseModel):
    type: str
    run_id: UUID
    payload: dict[str, Any]
    ts: datetime


class RunResult(BaseModel):
    run_id: UUID
    status: RunStatus
    steps_executed: int
    error: str | None = None
    actor: Actor
    events: list[RunEventModel] = Field(default_factory=list)


class GridConfigResponse(BaseModel):
    cell_size: int
    cols: int
    rows: int
    icon_size: int
    width: int
    height: int
