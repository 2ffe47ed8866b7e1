# core/timestamps.py
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Literal, Optional, Union

# Beyond millisecond precision some parsers give up; the monitor sends nanoseconds.
MAX_TIMESTAMP_CHARS = 23

# An elapsed time this large on an assumed-UTC stamp is almost always a
# timezone mix-up rather than a real outage; the monitor's status is trusted instead.
CLAMP_AFTER_SECONDS = 3600
CLAMPED_SECONDS = 5

Strategy = Literal["utc", "offset"]


@dataclass(frozen=True)
class ParsedInstant:
    instant: datetime   # always timezone-aware
    strategy: Strategy

    @property
    def zone_assumed(self) -> bool:
        return self.strategy == "utc"


@dataclass(frozen=True)
class Unparsed:
    raw: Any
    reason: str


ParseOutcome = Union[ParsedInstant, Unparsed]


def _parse_as_utc(text: str) -> Optional[datetime]:
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return None
    if dt.tzinfo is not None:
        # Already zoned; nothing to assume.
        return None
    return dt.replace(tzinfo=timezone.utc)


def _parse_with_offset(text: str) -> Optional[datetime]:
    # Only reached by stamps that name their own zone; naive ones were taken as UTC.
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return None
    return dt if dt.tzinfo is not None else None


_STRATEGIES: tuple[tuple[Strategy, Callable[[str], Optional[datetime]]], ...] = (
    ("utc", _parse_as_utc),
    ("offset", _parse_with_offset),
)


def parse_heartbeat(raw: Any) -> ParseOutcome:
    """
    Parse a heartbeat stamp of unknown precision and zone.

    Strategies are tried in order on the truncated text:
    - ``utc``: a stamp without zone is taken as UTC (the monitor sends naive stamps)
    - ``offset``: a stamp that names its own zone keeps it (e.g. a trailing ``Z``)

    Never raises.
    """
    if not isinstance(raw, str):
        return Unparsed(raw=raw, reason=f"expected str, got {type(raw).__name__}")

    text = raw.strip()[:MAX_TIMESTAMP_CHARS]
    if not text:
        return Unparsed(raw=raw, reason="empty")

    for name, strategy in _STRATEGIES:
        try:
            dt = strategy(text)
        except (OverflowError, OSError):
            dt = None
        if dt is not None:
            return ParsedInstant(instant=dt, strategy=name)

    return Unparsed(raw=raw, reason="no strategy matched")


def raw_elapsed(outcome: ParseOutcome, now: datetime) -> int:
    """Whole seconds between ``now`` and the heartbeat; 0 when unparsed."""
    if isinstance(outcome, Unparsed):
        return 0
    delta = (ensure_aware(now) - outcome.instant).total_seconds()
    # Clock skew can put the heartbeat ahead of us.
    return int(math.floor(abs(delta)))


def clamp_elapsed(seconds: int, outcome: ParseOutcome) -> int:
    if isinstance(outcome, ParsedInstant) and outcome.zone_assumed and seconds > CLAMP_AFTER_SECONDS:
        return CLAMPED_SECONDS
    return seconds


def elapsed_seconds(raw: Any, now: datetime) -> int:
    outcome = parse_heartbeat(raw)
    return clamp_elapsed(raw_elapsed(outcome, now), outcome)


def display_instant(outcome: ParseOutcome, now: datetime) -> datetime:
    if isinstance(outcome, ParsedInstant):
        return outcome.instant
    return ensure_aware(now)


def ensure_aware(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt
