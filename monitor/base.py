# monitor/base.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Mapping, Optional, Protocol, Union

HEALTHY = "HEALTHY"


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


class FetchError(Exception):
    """Monitor could not be reached or answered with something unusable."""


@dataclass(frozen=True)
class ServiceRecord:
    status: str = ""
    last_heartbeat: str = ""
    host: Optional[str] = None
    port: Optional[Union[int, str]] = None

    @property
    def is_healthy(self) -> bool:
        # The monitor's verdict is the only liveness signal.
        return self.status == HEALTHY

    @classmethod
    def from_raw(cls, raw: Any) -> "ServiceRecord":
        """Build a record from one JSON value. Never raises."""
        if not isinstance(raw, dict):
            return cls()

        status = raw.get("status")
        heartbeat = raw.get("lastHeartbeat")
        host = raw.get("host")
        port = raw.get("port")
        return cls(
            status=status if isinstance(status, str) else "",
            last_heartbeat=heartbeat if isinstance(heartbeat, str) else "",
            host=None if host is None else str(host),
            port=port if isinstance(port, (int, str)) and not isinstance(port, bool) else None,
        )


def _frozen(services: Mapping[str, ServiceRecord]) -> Mapping[str, ServiceRecord]:
    return MappingProxyType(dict(services))


@dataclass(frozen=True)
class Snapshot:
    services: Mapping[str, ServiceRecord] = field(default_factory=lambda: _frozen({}))
    captured_at: Optional[datetime] = None
    reported_total: Optional[int] = None
    reported_at: Optional[str] = None   # monitor's own clock, display only

    def __post_init__(self) -> None:
        if not isinstance(self.services, MappingProxyType):
            object.__setattr__(self, "services", _frozen(self.services))

    @classmethod
    def empty(cls) -> "Snapshot":
        return cls()

    def __len__(self) -> int:
        return len(self.services)


@dataclass(frozen=True)
class FetchOutcome:
    ok: bool
    snapshot: Snapshot
    ts: datetime
    error: Optional[str] = None


class Fetcher(Protocol):
    url: str

    def fetch(self) -> Snapshot:
        """Fetch the current snapshot. Raises on any failure."""
        ...
