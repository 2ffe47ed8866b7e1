# monitor/__init__.py
from __future__ import annotations

from .base import FetchError, FetchOutcome, Fetcher, HEALTHY, ServiceRecord, Snapshot, now_utc
from .http import DEFAULT_MONITOR_URL, MonitorFetcher, parse_snapshot

__all__ = [
    "DEFAULT_MONITOR_URL",
    "FetchError",
    "FetchOutcome",
    "Fetcher",
    "HEALTHY",
    "MonitorFetcher",
    "ServiceRecord",
    "Snapshot",
    "load_fetcher",
    "now_utc",
    "parse_snapshot",
]


def load_fetcher(url: str, timeout_s: float) -> Fetcher:
    """Single data source: the health monitor's services endpoint."""
    if not url:
        raise ValueError("monitor url is required")
    return MonitorFetcher(url=url.rstrip("/"), timeout_s=timeout_s)
