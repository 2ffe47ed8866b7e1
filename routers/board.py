from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from core.scheduler import PollingScheduler
from core.view import board_to_dict, format_age, stats_to_dict

router = APIRouter(tags=["board"])


def _scheduler(request: Request) -> PollingScheduler:
    return request.app.state.scheduler


@router.get("/api/services")
def api_services(request: Request) -> dict:
    return board_to_dict(_scheduler(request).board())


@router.get("/api/stats")
def api_stats(request: Request) -> dict:
    return stats_to_dict(_scheduler(request).board().stats)


@router.post("/api/refresh")
async def refresh(request: Request) -> dict:
    board = await _scheduler(request).refresh_now()
    return board_to_dict(board)


@router.get("/txt", response_class=PlainTextResponse)
def txt_board(request: Request) -> str:
    board = _scheduler(request).board()
    stats = board.stats
    lines = [f"total={stats.total} healthy={stats.healthy} dead={stats.dead}"]
    if not board.services:
        lines.append("no services registered")
    for view in board.services:
        status = view.presentation_status.ljust(7)
        name = view.name.upper().ljust(18)[:18]
        age = format_age(view.seconds_since_heartbeat).rjust(4)
        lines.append(f"{status} {name} {age} ago  {view.host or '-'}:{view.port if view.port is not None else '-'}")
    lines.append(board.message)
    return "\n".join(lines) + "\n"
