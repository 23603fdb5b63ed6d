"""Command catalog: the blocks a program is assembled from.

Basic commands perform one state transition on the shared actor and then
pause for the animation delay. The loop command carries `repeats` and
`children`, which the UI may edit between runs; expansion itself lives in
`blockbot.interpreter` so there is exactly one path that iterates children.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from blockbot.api.models import CommandInfo, CommandKind
from blockbot.geometry import is_out_of_bounds, movement_delta

if TYPE_CHECKING:
    from blockbot.core.context import RunContext

Action = Callable[["RunContext"], Awaitable[None]]

logger = logging.getLogger(__name__)

DEFAULT_LOOP_REPEATS = 2


@dataclass(frozen=True, slots=True)
class BasicCommand:
    id: str
    label: str
    color: str
    action: Action

    kind = CommandKind.basic

    def info(self) -> CommandInfo:
        return CommandInfo(id=self.id, type=self.kind, label=self.label, color=self.color)


@dataclass(slots=True)
class LoopCommand:
    id: str
    label: str
    color: str
    repeats: int = DEFAULT_LOOP_REPEATS
    children: list[str] = field(default_factory=list)

    kind = CommandKind.loop

    async def action(self, ctx: "RunContext") -> None:
        # Re-resolve so direct invocation sees the catalog's current repeats/children.
        from blockbot.interpreter import run_command

        current = ctx.registry.lookup(self.id)
        if current is None:
            return
        await run_command(ctx, current)

    def info(self) -> CommandInfo:
        return CommandInfo(
            id=self.id,
            type=self.kind,
            label=self.label,
            color=self.color,
            repeats=self.repeats,
            children=list(self.children),
        )


Command = BasicCommand | LoopCommand


async def _step(ctx: "RunContext", *, direction: int) -> None:
    actor = ctx.actor.value
    grid = ctx.settings.grid
    dx, dy = movement_delta(actor.angle, grid)
    next_x = actor.x + direction * dx
    next_y = actor.y + direction * dy

    if is_out_of_bounds(next_x, next_y, grid):
        logger.debug("Blocked move to (%s, %s)", next_x, next_y)
        ctx.record("BOUNDS_HIT", {"x": actor.x, "y": actor.y, "target_x": next_x, "target_y": next_y})
        ctx.actor.update(is_hitting_bounds=True)
        try:
            await ctx.pause(ctx.settings.bounds_delay_ms)
        finally:
            ctx.actor.update(is_hitting_bounds=False)
    else:
        ctx.actor.update(x=next_x, y=next_y)

    await ctx.pause(ctx.settings.step_delay_ms)


async def move_forward(ctx: "RunContext") -> None:
    await _step(ctx, direction=1)


async def move_back(ctx: "RunContext") -> None:
    await _step(ctx, direction=-1)


async def turn_right(ctx: "RunContext") -> None:
    ctx.actor.update(angle=ctx.actor.value.angle + 90)
    await ctx.pause(ctx.settings.step_delay_ms)


async def turn_left(ctx: "RunContext") -> None:
    ctx.actor.update(angle=ctx.actor.value.angle - 90)
    await ctx.pause(ctx.settings.step_delay_ms)


class CommandRegistry:
    """Fixed catalog addressed by command id."""

    def __init__(self, commands: Iterable[Command]) -> None:
        self._by_id: dict[str, Command] = {}
        for cmd in commands:
            if cmd.id in self._by_id:
                raise ValueError(f"Duplicate command id: {cmd.id}")
            self._by_id[cmd.id] = cmd

    def lookup(self, command_id: str) -> Command | None:
        return self._by_id.get(command_id)

    def commands(self) -> list[Command]:
        return list(self._by_id.values())

    def update_loop(
        self,
        command_id: str,
        *,
        repeats: int | None = None,
        children: list[str] | None = None,
    ) -> LoopCommand:
        cmd = self._by_id.get(command_id)
        if cmd is None:
            raise KeyError(command_id)
        if not isinstance(cmd, LoopCommand):
            raise ValueError(f"Command '{command_id}' is not a loop")
        if repeats is not None:
            if repeats < 0:
                raise ValueError("repeats must be >= 0")
            cmd.repeats = repeats
        if children is not None:
            cmd.children = list(children)
        return cmd


def build_default_registry() -> CommandRegistry:
    return CommandRegistry(
        [
            BasicCommand(id="moveForward", label="Move Forward", color="bg-blue-500", action=move_forward),
            BasicCommand(id="moveBack", label="Move Back", color="bg-indigo-500", action=move_back),
            BasicCommand(id="turnRight", label="Turn Right", color="bg-purple-500", action=turn_right),
            BasicCommand(id="turnLeft", label="Turn Left", color="bg-violet-500", action=turn_left),
            LoopCommand(id="loop", label="Repeat", color="bg-yellow-500"),
        ]
    )
