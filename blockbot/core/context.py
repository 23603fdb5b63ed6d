from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from uuid import UUID

from blockbot.api.models import Actor
from blockbot.config import Settings
from blockbot.core.events import EventType, RunEvent
from blockbot.core.observable import ObservableValue
from blockbot.fsm import RunFSM, RunInProgressError
from blockbot.geometry import is_cell_aligned, is_out_of_bounds

if TYPE_CHECKING:
    from blockbot.commands import CommandRegistry

# Pacing strategy: suspend for a number of milliseconds.
Sleep = Callable[[int], Awaitable[None]]

IDLE_INDEX = -1


async def asyncio_sleep_ms(ms: int) -> None:
    await asyncio.sleep(ms / 1000)


def _new_actor_store() -> ObservableValue[Actor]:
    return ObservableValue(Actor())


def _new_index_store() -> ObservableValue[int]:
    return ObservableValue(IDLE_INDEX)


@dataclass(slots=True)
class RunContext:
    """Everything a run touches: the shared actor, the catalog, and pacing.

    UI code observes `actor` and `active_index`; commands mutate `actor`
    through `ObservableValue.update` so every change is published.
    """

    registry: "CommandRegistry"
    settings: Settings = field(default_factory=Settings)
    sleep: Sleep = asyncio_sleep_ms
    actor: ObservableValue[Actor] = field(default_factory=_new_actor_store)
    active_index: ObservableValue[int] = field(default_factory=_new_index_store)
    fsm: RunFSM = field(default_factory=RunFSM)

    # Per-run bookkeeping, owned by the interpreter.
    run_id: UUID | None = None
    events: list[RunEvent] = field(default_factory=list)
    actions_completed: int = 0

    async def pause(self, ms: int) -> None:
        await self.sleep(ms)

    def record(self, type: EventType, payload: dict[str, Any] | None = None) -> None:
        if self.run_id is None:
            return
        self.events.append(RunEvent.now(type=type, run_id=self.run_id, payload=payload or {}))

    def reset_actor(self, *, x: int = 0, y: int = 0, angle: int = 0) -> Actor:
        if self.fsm.is_running:
            raise RunInProgressError("Cannot reset the actor while a run is in progress")
        grid = self.settings.grid
        if is_out_of_bounds(x, y, grid):
            raise ValueError(f"Start cell ({x}, {y}) is outside the grid (max {grid.max_x}, {grid.max_y})")
        if not is_cell_aligned(x, y, grid):
            raise ValueError(f"Start cell ({x}, {y}) is not aligned to cell size {grid.cell_size}")
        actor = Actor(x=x, y=y, angle=angle)
        self.actor.set(actor)
        return actor
