from __future__ import annotations

from collections.abc import Callable
from dataclasses import asdict
from typing import Any

import redis
from fastapi import APIRouter, Body, Depends, HTTPException, WebSocket, WebSocketDisconnect, status

from clicker.actions import apply_vip_status, dispatch_action
from clicker.api.deps import get_clock, get_redis, get_rng
from clicker.api.models import ActionResponse, CatalogResponse, GameState, VipStatusRequest
from clicker.catalog.singleton import get_catalog
from clicker.clicks import RandomSource
from clicker.game_store import create_session, list_player_ids, load_engine, validate_player_id
from clicker.streams import Mailbox, read_mailbox
from clicker.websocket_hub import hub

router = APIRouter()


def _unprocessable(e: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.websocket("/ws/players/{player_id}")
async def player_updates_ws(websocket: WebSocket, player_id: str) -> None:
    await hub.connect(player_id, websocket)

    try:
        # Keep the socket open; client can optionally send pings.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await hub.disconnect(player_id, websocket)
    except Exception:
        await hub.disconnect(player_id, websocket)
        raise


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/catalog", response_model=CatalogResponse)
async def catalog_route() -> CatalogResponse:
    catalog = get_catalog()
    return CatalogResponse(
        buildings=[asdict(d) for d in catalog.buildings],
        upgrades=[asdict(d) for d in catalog.upgrades],
        achievements=[asdict(d) for d in catalog.achievements],
        coin_shop=[asdict(d) for d in catalog.coin_shop],
    )


@router.get("/players")
async def list_players_route(r: redis.Redis = Depends(get_redis)) -> dict[str, list[str]]:
    return {"players": list_player_ids(r=r)}


@router.post("/players/{player_id}/session", response_model=GameState, status_code=status.HTTP_201_CREATED)
async def create_session_route(
    player_id: str,
    r: redis.Redis = Depends(get_redis),
    clock: Callable[[], float] = Depends(get_clock),
) -> GameState:
    try:
        engine = create_session(r=r, player_id=player_id, clock=clock)
    except ValueError as e:
        raise _unprocessable(e) from e

    await hub.notify_state_updated(player_id)
    return engine.state


@router.get("/players/{player_id}/session", response_model=GameState)
async def get_session_route(
    player_id: str,
    r: redis.Redis = Depends(get_redis),
    clock: Callable[[], float] = Depends(get_clock),
) -> GameState:
    try:
        engine = load_engine(r=r, player_id=player_id, clock=clock)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return engine.state


@router.post("/players/{player_id}/actions/{action}", response_model=ActionResponse)
async def action_route(
    player_id: str,
    action: str,
    body: dict[str, Any] | None = Body(default=None),
    r: redis.Redis = Depends(get_redis),
    clock: Callable[[], float] = Depends(get_clock),
    rng: RandomSource = Depends(get_rng),
) -> ActionResponse:
    try:
        result = dispatch_action(r=r, player_id=player_id, action=action, payload=body or {}, clock=clock, rng=rng)
    except ValueError as e:
        raise _unprocessable(e) from e

    await hub.notify_state_updated(player_id, unlocked=[n.achievement_id for n in result.notifications])
    return ActionResponse(
        state=result.state,
        ok=result.ok,
        effects=result.effects,
        notifications=result.notifications,
    )


@router.put("/players/{player_id}/vip", response_model=GameState)
async def vip_status_route(
    player_id: str,
    payload: VipStatusRequest,
    r: redis.Redis = Depends(get_redis),
    clock: Callable[[], float] = Depends(get_clock),
) -> GameState:
    """Written by the store backend when a VIP purchase settles or lapses."""

    try:
        state = apply_vip_status(r=r, player_id=player_id, tier=payload.tier, clock=clock)
    except ValueError as e:
        raise _unprocessable(e) from e

    await hub.notify_state_updated(player_id)
    return state


@router.get("/players/{player_id}/mailbox")
async def get_player_mailbox_route(
    player_id: str,
    count: int = 20,
    start: str = "-",
    end: str = "+",
    r: redis.Redis = Depends(get_redis),
) -> dict[str, object]:
    """Read a player's notification mailbox (Redis Stream)."""

    if count < 1 or count > 200:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="count must be between 1 and 200")

    try:
        pid = validate_player_id(player_id)
    except ValueError as e:
        raise _unprocessable(e) from e

    mailbox = Mailbox(player_id=pid)
    try:
        messages = read_mailbox(r=r, mailbox=mailbox, count=count, start=start, end=end)
    except redis.ResponseError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e

    return {"player_id": pid, "stream": mailbox.key, "messages": messages}
