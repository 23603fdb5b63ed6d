"""Run dispatch shared by the HTTP routes and tests.

Applies a program by:
- taking the per-session run lock (Redis, cross-process)
- running the interpreter against the session's context
- publishing the run's events to the session's Redis stream
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import redis

from blockbot.api.models import Actor, RunResult
from blockbot.commands import LoopCommand
from blockbot.fsm import RunInProgressError
from blockbot.interpreter import execute_commands
from blockbot.lock import run_lock
from blockbot.session import Session
from blockbot.streams import publish_run_events

logger = logging.getLogger(__name__)


def _require_idle(session: Session) -> None:
    if session.ctx.fsm.is_running:
        raise RunInProgressError("A run is already in progress")


async def dispatch_run(*, r: redis.Redis, session: Session, command_ids: Sequence[str]) -> RunResult:
    _require_idle(session)

    with run_lock(r=r, session_id=session.session_id):
        result = await execute_commands(session.ctx, command_ids)
        ids = publish_run_events(r=r, session_id=session.session_id, events=result.events)

    logger.debug("Published %d run event(s) for run %s", len(ids), result.run_id)
    return result


def edit_loop(
    *,
    session: Session,
    command_id: str,
    repeats: int | None = None,
    children: list[str] | None = None,
) -> LoopCommand:
    _require_idle(session)
    return session.ctx.registry.update_loop(command_id, repeats=repeats, children=children)


def reset_actor(*, session: Session, x: int = 0, y: int = 0, angle: int = 0) -> Actor:
    return session.ctx.reset_actor(x=x, y=y, angle=angle)
