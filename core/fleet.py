# core/fleet.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from monitor.base import ServiceRecord


@dataclass(frozen=True)
class FleetStats:
    total: int = 0
    healthy: int = 0
    dead: int = 0


def aggregate(services: Mapping[str, ServiceRecord]) -> FleetStats:
    """Fleet counts from the monitor's verdict alone; the warning band is not a state here."""
    healthy = sum(1 for record in services.values() if record.is_healthy)
    total = len(services)
    return FleetStats(total=total, healthy=healthy, dead=total - healthy)
