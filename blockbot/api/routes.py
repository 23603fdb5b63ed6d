from __future__ import annotations

import json

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status
import redis

from blockbot.api.deps import get_current_session, get_redis
from blockbot.api.models import (
    Actor,
    ActorResetRequest,
    CommandInfo,
    CommandListResponse,
    GridConfigResponse,
    LoopUpdateRequest,
    RunRequest,
    RunResult,
)
from blockbot.fsm import RunInProgressError
from blockbot.runs import dispatch_run, edit_loop, reset_actor
from blockbot.session import Session
from blockbot.streams import run_stream_key
from blockbot.websocket_hub import hub

router = APIRouter()


@router.websocket("/ws/actor")
async def actor_updates_ws(websocket: WebSocket, session: Session = Depends(get_current_session)) -> None:
    await hub.connect(websocket)

    try:
        # Initial snapshot so late subscribers can render immediately.
        await websocket.send_json({"type": "actor_changed", "actor": session.ctx.actor.value.model_dump()})
        await websocket.send_json({"type": "active_step", "index": session.ctx.active_index.value})
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await hub.disconnect(websocket)
    except Exception:
        await hub.disconnect(websocket)
        raise


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/config", response_model=GridConfigResponse)
async def grid_config_route(session: Session = Depends(get_current_session)) -> GridConfigResponse:
    grid = session.ctx.settings.grid
    return GridConfigResponse(
        cell_size=grid.cell_size,
        cols=grid.cols,
        rows=grid.rows,
        icon_size=grid.icon_size,
        width=grid.width,
        height=grid.height,
    )


@router.get("/commands", response_model=CommandListResponse)
async def list_commands_route(session: Session = Depends(get_current_session)) -> CommandListResponse:
    return CommandListResponse(commands=[cmd.info() for cmd in session.ctx.registry.commands()])


@router.get("/commands/{command_id}", response_model=CommandInfo)
async def get_command_route(command_id: str, session: Session = Depends(get_current_session)) -> CommandInfo:
    cmd = session.ctx.registry.lookup(command_id)
    if cmd is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Command not found")
    return cmd.info()


@router.put("/commands/{command_id}/loop", response_model=CommandInfo)
async def update_loop_route(
    command_id: str,
    payload: LoopUpdateRequest,
    session: Session = Depends(get_current_session),
) -> CommandInfo:
    try:
        cmd = edit_loop(session=session, command_id=command_id, repeats=payload.repeats, children=payload.children)
    except KeyError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Command not found") from e
    except RunInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    return cmd.info()


@router.get("/actor", response_model=Actor)
async def get_actor_route(session: Session = Depends(get_current_session)) -> Actor:
    return session.ctx.actor.value


@router.post("/actor/reset", response_model=Actor)
async def reset_actor_route(payload: ActorResetRequest, session: Session = Depends(get_current_session)) -> Actor:
    try:
        actor = reset_actor(session=session, x=payload.x, y=payload.y, angle=payload.angle)
    except RunInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    return actor


@router.post("/run", response_model=RunResult)
async def run_route(
    payload: RunRequest,
    session: Session = Depends(get_current_session),
    r: redis.Redis = Depends(get_redis),
) -> RunResult:
    try:
        return await dispatch_run(r=r, session=session, command_ids=payload.command_ids)
    except RunInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e


@router.get("/runs/events")
async def run_events_route(
    count: int = 50,
    session: Session = Depends(get_current_session),
    r: redis.Redis = Depends(get_redis),
) -> dict[str, object]:
    """Debug endpoint: read the most recent entries of the run event stream."""

    if count < 1 or count > 500:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="count must be between 1 and 500")

    stream_key = run_stream_key(session.session_id)
    entries = r.xrevrange(stream_key, count=count)
    events = [
        {"id": eid, **fields, "payload": json.loads(fields.get("payload") or "{}")}
        for eid, fields in reversed(entries)
    ]
    return {"stream": stream_key, "events": events}
