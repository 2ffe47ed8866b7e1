# core/view.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional

from core.fleet import FleetStats, aggregate
from core.health import DEFAULT_WARNING_BAND, DerivedServiceView, WarningBand, classify_snapshot
from core.state import BoardState


@dataclass(frozen=True)
class BoardView:
    services: List[DerivedServiceView]
    stats: FleetStats
    message: str
    error: bool
    enabled: bool
    last_fetch_at: Optional[datetime]
    current_time: datetime
    # what the monitor said about its own snapshot; display only
    captured_at: Optional[datetime] = None
    reported_total: Optional[int] = None
    reported_at: Optional[str] = None


def build_board(state: BoardState, *, band: WarningBand = DEFAULT_WARNING_BAND) -> BoardView:
    now = state.current_time
    return BoardView(
        services=classify_snapshot(state.snapshot, now, band=band),
        stats=aggregate(state.snapshot.services),
        message=state.message,
        error=state.error,
        enabled=state.enabled,
        last_fetch_at=state.last_fetch_at,
        current_time=now,
        captured_at=state.snapshot.captured_at,
        reported_total=state.snapshot.reported_total,
        reported_at=state.snapshot.reported_at,
    )


def format_age(age_s: int) -> str:
    if age_s < 60:
        return f"{age_s}s"
    if age_s < 3600:
        return f"{age_s // 60}m"
    if age_s < 86400:
        return f"{age_s // 3600}h"
    return f"{age_s // 86400}d"


def view_to_dict(view: DerivedServiceView) -> dict[str, Any]:
    return {
        "name": view.name,
        "status": view.presentation_status,
        "server_status": view.server_status,
        "seconds_since_heartbeat": view.seconds_since_heartbeat,
        "age": format_age(view.seconds_since_heartbeat),
        "last_seen": view.display_timestamp.isoformat(),
        "host": view.host,
        "port": view.port,
    }


def stats_to_dict(stats: FleetStats) -> dict[str, int]:
    return {"total": stats.total, "healthy": stats.healthy, "dead": stats.dead}


def board_to_dict(board: BoardView) -> dict[str, Any]:
    return {
        "services": [view_to_dict(v) for v in board.services],
        "count": len(board.services),
        "stats": stats_to_dict(board.stats),
        "message": board.message,
        "error": board.error,
        "enabled": board.enabled,
        "last_fetch_at": board.last_fetch_at.isoformat() if board.last_fetch_at else None,
        "current_time": board.current_time.isoformat(),
        "monitor": {
            "captured_at": board.captured_at.isoformat() if board.captured_at else None,
            "total_services": board.reported_total,
            "timestamp": board.reported_at,
        },
    }
