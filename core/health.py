# core/health.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional, Union

from monitor.base import ServiceRecord, Snapshot

from core.timestamps import clamp_elapsed, display_instant, parse_heartbeat, raw_elapsed

log = logging.getLogger("heartboard.health")

PresentationStatus = Literal["HEALTHY", "WARNING", "DEAD"]


@dataclass(frozen=True)
class WarningBand:
    """Half-open window [start_s, end_s) of heartbeat age shown as WARNING."""

    start_s: int = 10
    end_s: int = 15

    def __post_init__(self) -> None:
        if self.start_s < 0 or self.end_s <= self.start_s:
            raise ValueError(f"invalid warning band [{self.start_s}, {self.end_s})")

    def __contains__(self, seconds: int) -> bool:
        return self.start_s <= seconds < self.end_s


DEFAULT_WARNING_BAND = WarningBand()


@dataclass(frozen=True)
class DerivedServiceView:
    name: str
    presentation_status: PresentationStatus
    seconds_since_heartbeat: int
    display_timestamp: datetime
    server_status: str = ""
    host: Optional[str] = None
    port: Optional[Union[int, str]] = None


def classify(
    name: str,
    record: ServiceRecord,
    now: datetime,
    *,
    band: WarningBand = DEFAULT_WARNING_BAND,
) -> DerivedServiceView:
    outcome = parse_heartbeat(record.last_heartbeat)
    seconds = clamp_elapsed(raw_elapsed(outcome, now), outcome)

    # The monitor decides alive/dead; age only adds the warning emphasis.
    status: PresentationStatus
    if not record.is_healthy:
        status = "DEAD"
    elif seconds in band:
        status = "WARNING"
    else:
        status = "HEALTHY"

    return DerivedServiceView(
        name=name,
        presentation_status=status,
        seconds_since_heartbeat=seconds,
        display_timestamp=display_instant(outcome, now),
        server_status=record.status,
        host=record.host,
        port=record.port,
    )


def classify_snapshot(
    snapshot: Snapshot,
    now: datetime,
    *,
    band: WarningBand = DEFAULT_WARNING_BAND,
) -> list[DerivedServiceView]:
    views: list[DerivedServiceView] = []
    for name, record in snapshot.services.items():
        try:
            views.append(classify(name, record, now, band=band))
        except Exception:
            log.exception("classification failed for %s", name)
            views.append(
                DerivedServiceView(
                    name=name,
                    presentation_status="DEAD",
                    seconds_since_heartbeat=0,
                    display_timestamp=now,
                    server_status=getattr(record, "status", ""),
                )
            )
    return views
