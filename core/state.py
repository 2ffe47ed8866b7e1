# core/state.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from monitor.base import Snapshot, now_utc

from core.messages import IDLE_MESSAGE


@dataclass(frozen=True)
class BoardState:
    """
    Everything the board shows, as one value.

    The scheduler never mutates this; it swaps in a new instance with
    ``dataclasses.replace``. A reader holding a state keeps a consistent view
    even while a fetch or tick is being applied.
    """

    snapshot: Snapshot = field(default_factory=Snapshot.empty)
    enabled: bool = False
    connected: Optional[bool] = None    # None until the first fetch resolves
    error: bool = False
    message: str = IDLE_MESSAGE
    last_fetch_at: Optional[datetime] = None
    current_time: datetime = field(default_factory=now_utc)
