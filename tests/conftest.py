"""
Heartboard test configuration.
Shared fixtures: a fixed clock and scripted fetchers, so nothing touches the network.
"""
import os
import sys
import threading
from datetime import datetime, timedelta, timezone

import pytest

# Ensure project root is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from monitor.base import ServiceRecord, Snapshot  # noqa: E402
from monitor.http import parse_snapshot  # noqa: E402

NOW = datetime(2026, 1, 31, 8, 14, 0, tzinfo=timezone.utc)


def stamp(seconds_ago: float, now: datetime = NOW) -> str:
    """Naive monitor-style heartbeat stamp, nanosecond precision like the real one."""
    ts = (now - timedelta(seconds=seconds_ago)).replace(tzinfo=None)
    return ts.strftime("%Y-%m-%dT%H:%M:%S.%f") + "617"


def snapshot_of(services: dict) -> Snapshot:
    return parse_snapshot({"services": services})


class ScriptedFetcher:
    """Returns (or raises) the scripted items in order; the last one repeats."""

    url = "http://monitor.test/monitor/services"

    def __init__(self, *script, gates=None):
        self.script = list(script)
        self.calls = 0
        # gates: call number (1-based) -> threading.Event to wait on before answering
        self.gates = gates or {}

    def fetch(self):
        self.calls += 1
        gate = self.gates.get(self.calls)
        if gate is not None:
            gate.wait(timeout=5)
        item = self.script[min(self.calls, len(self.script)) - 1]
        if isinstance(item, BaseException):
            raise item
        return item


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def healthy_record():
    return ServiceRecord(status="HEALTHY", last_heartbeat=stamp(5), host="localhost", port=8081)


@pytest.fixture
def gate():
    return threading.Event()
