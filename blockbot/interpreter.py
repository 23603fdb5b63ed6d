from __future__ import annotations

import logging
from collections.abc import Sequence
from uuid import uuid4

from blockbot.api.models import RunEventModel, RunResult, RunStatus
from blockbot.commands import Command, LoopCommand
from blockbot.core.context import IDLE_INDEX, RunContext

logger = logging.getLogger(__name__)

# Loops may contain loops; this bounds the recursion (a loop listing itself
# among its children would otherwise never terminate).
MAX_LOOP_DEPTH = 8


class LoopDepthError(RuntimeError):
    pass


async def run_command(ctx: RunContext, command: Command, *, depth: int = 0) -> None:
    """Invoke one resolved command, expanding loops in place."""

    if not isinstance(command, LoopCommand):
        await command.action(ctx)
        ctx.actions_completed += 1
        return

    if depth >= MAX_LOOP_DEPTH:
        raise LoopDepthError(f"Loop nesting exceeds {MAX_LOOP_DEPTH} levels at '{command.id}'")

    # repeats/children are read here, at execution time, never cached.
    for _ in range(command.repeats):
        for child_id in list(command.children):
            child = ctx.registry.lookup(child_id)
            if child is None:
                ctx.record("STEP_SKIPPED", {"command_id": child_id, "parent_id": command.id})
                continue
            await run_command(ctx, child, depth=depth + 1)


async def execute_commands(ctx: RunContext, command_ids: Sequence[str]) -> RunResult:
    """Run a program against the context's actor, one command at a time.

    - Unknown ids are skipped and leave the actor untouched.
    - An exception from any action aborts the remainder; it is logged and
      reported in the returned result rather than raised.
    - `active_index`, `is_moving` and `is_hitting_bounds` are reset on every
      exit path.

    Raises `RunInProgressError` if a run is already active on `ctx`.
    """

    ctx.fsm.begin()

    run_id = uuid4()
    ctx.run_id = run_id
    ctx.events = []
    ctx.actions_completed = 0
    status = RunStatus.completed
    error: str | None = None

    ctx.record("RUN_STARTED", {"command_ids": list(command_ids)})
    logger.info("Run %s started with %d command(s)", run_id, len(command_ids))

    try:
        ctx.actor.update(is_moving=True)
        for index, command_id in enumerate(command_ids):
            ctx.active_index.set(index)
            command = ctx.registry.lookup(command_id)
            if command is None:
                ctx.record("STEP_SKIPPED", {"index": index, "command_id": command_id})
                continue
            ctx.record("STEP_STARTED", {"index": index, "command_id": command_id})
            await run_command(ctx, command)
    except Exception as e:
        status = RunStatus.aborted
        error = f"{type(e).__name__}: {e}"
        logger.exception("Run %s aborted at step %s", run_id, ctx.active_index.value)
    finally:
        ctx.active_index.set(IDLE_INDEX)
        ctx.actor.update(is_moving=False, is_hitting_bounds=False)
        ctx.fsm.end()

    steps_executed = ctx.actions_completed

    if status == RunStatus.completed:
        ctx.record("RUN_COMPLETED", {"steps_executed": steps_executed})
        logger.info("Run %s completed (%d action(s))", run_id, steps_executed)
    else:
        ctx.record("RUN_ABORTED", {"steps_executed": steps_executed, "error": error})

    events = [RunEventModel.model_validate(ev, from_attributes=True) for ev in ctx.events]
    ctx.run_id = None

    return RunResult(
        run_id=run_id,
        status=status,
        steps_executed=steps_executed,
        error=error,
        actor=ctx.actor.value,
        events=events,
    )
