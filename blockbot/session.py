from __future__ import annotations

from dataclasses import dataclass

from blockbot.api.models import Actor
from blockbot.commands import build_default_registry
from blockbot.config import Settings, load_settings
from blockbot.core.context import RunContext, Sleep, asyncio_sleep_ms
from blockbot.websocket_hub import hub

DEFAULT_SESSION_ID = "default"


@dataclass(frozen=True, slots=True)
class Session:
    """The single shared actor the UI drives, plus its catalog and pacing."""

    session_id: str
    ctx: RunContext


_SESSION: Session | None = None


def _forward_to_hub(ctx: RunContext) -> None:
    def _on_actor(actor: Actor) -> None:
        hub.publish({"type": "actor_changed", "actor": actor.model_dump()})

    def _on_index(index: int) -> None:
        hub.publish({"type": "active_step", "index": index})

    ctx.actor.subscribe(_on_actor)
    ctx.active_index.subscribe(_on_index)


def init_session(
    *,
    settings: Settings | None = None,
    sleep: Sleep = asyncio_sleep_ms,
    session_id: str = DEFAULT_SESSION_ID,
) -> Session:
    """Create the session once and cache it.

    Safe to call multiple times; subsequent calls return the existing session.
    """

    global _SESSION
    if _SESSION is None:
        ctx = RunContext(
            registry=build_default_registry(),
            settings=settings or load_settings(),
            sleep=sleep,
        )
        _forward_to_hub(ctx)
        _SESSION = Session(session_id=session_id, ctx=ctx)
    return _SESSION


def reset_session_for_tests() -> None:
    global _SESSION
    _SESSION = None


def get_session() -> Session:
    if _SESSION is None:
        raise RuntimeError("Session not initialized. Call init_session() at startup.")
    return _SESSION
