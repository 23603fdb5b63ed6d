from __future__ import annotations

import json

import fakeredis
import pytest

from blockbot.api.models import RunStatus
from blockbot.commands import build_default_registry
from blockbot.config import Settings
from blockbot.core.context import RunContext
from blockbot.fsm import RunInProgressError
from blockbot.lock import run_lock
from blockbot.runs import dispatch_run, edit_loop
from blockbot.session import Session
from blockbot.streams import run_stream_key


@pytest.fixture()
def session(ctx: RunContext) -> Session:
    return Session(session_id="s1", ctx=ctx)


@pytest.mark.asyncio
async def test_dispatch_run_publishes_events_and_releases_lock(session: Session) -> None:
    r = fakeredis.FakeRedis(decode_responses=True)

    result = await dispatch_run(r=r, session=session, command_ids=["moveForward", "nope"])

    assert result.status == RunStatus.completed
    entries = r.xrange(run_stream_key("s1"))
    types = [fields["type"] for _, fields in entries]
    assert types == ["RUN_STARTED", "STEP_STARTED", "STEP_SKIPPED", "RUN_COMPLETED"]
    assert all(fields["run_id"] == str(result.run_id) for _, fields in entries)
    assert json.loads(entries[0][1]["payload"]) == {"command_ids": ["moveForward", "nope"]}

    assert r.get("lock:run:s1") is None


@pytest.mark.asyncio
async def test_dispatch_run_rejected_while_lock_held_elsewhere(session: Session) -> None:
    r = fakeredis.FakeRedis(decode_responses=True)
    r.set("lock:run:s1", "other-process")

    with pytest.raises(RunInProgressError):
        await dispatch_run(r=r, session=session, command_ids=["moveForward"])

    assert session.ctx.actor.value.x == 0
    # Someone else's lock is left alone.
    assert r.get("lock:run:s1") == "other-process"


def test_run_lock_does_not_delete_a_lock_it_no_longer_holds() -> None:
    r = fakeredis.FakeRedis(decode_responses=True)

    with run_lock(r=r, session_id="s2") as token:
        assert r.get("lock:run:s2") == token
        # Simulate expiry + reacquire by another holder.
        r.set("lock:run:s2", "new-holder")

    assert r.get("lock:run:s2") == "new-holder"


def test_edit_loop_refused_while_running() -> None:
    ctx = RunContext(registry=build_default_registry(), settings=Settings())
    session = Session(session_id="s3", ctx=ctx)
    ctx.fsm.begin()

    with pytest.raises(RunInProgressError):
        edit_loop(session=session, command_id="loop", repeats=5)

    ctx.fsm.end()
    assert edit_loop(session=session, command_id="loop", repeats=5).repeats == 5
