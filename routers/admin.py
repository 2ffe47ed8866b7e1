from __future__ import annotations

from fastapi import APIRouter, Request

from core.scheduler import PollingScheduler
from core.state import BoardState
from models.polling import PollingChange

router = APIRouter(tags=["admin"])


def _scheduler(request: Request) -> PollingScheduler:
    return request.app.state.scheduler


def _polling_dict(scheduler: PollingScheduler, state: BoardState) -> dict:
    return {
        "enabled": state.enabled,
        "message": state.message,
        "fetch_interval_s": scheduler.fetch_interval_s,
        "tick_interval_s": scheduler.tick_interval_s,
    }


@router.get("/api/polling")
def polling_status(request: Request) -> dict:
    scheduler = _scheduler(request)
    return _polling_dict(scheduler, scheduler.state)


@router.post("/api/polling")
async def set_polling(payload: PollingChange, request: Request) -> dict:
    scheduler = _scheduler(request)
    if payload.enabled:
        state = await scheduler.enable()
    else:
        state = await scheduler.disable()
    return _polling_dict(scheduler, state)


@router.post("/api/polling/toggle")
async def toggle_polling(request: Request) -> dict:
    scheduler = _scheduler(request)
    state = await scheduler.toggle()
    return _polling_dict(scheduler, state)


@router.get("/health")
def health(request: Request) -> dict:
    state = _scheduler(request).state
    return {
        "ok": True,
        "polling": state.enabled,
        "monitor_connected": state.connected,
        "monitor_url": request.app.state.config.monitor_url,
    }
