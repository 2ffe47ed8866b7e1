# core/messages.py
from __future__ import annotations

from datetime import datetime

IDLE_MESSAGE = "Loading..."


def _fmt_clock(ts: datetime) -> str:
    return ts.astimezone().strftime("%H:%M:%S")


def fetch_succeeded(at: datetime) -> str:
    return f"✅ Connected - Last updated: {_fmt_clock(at)}"


def fetch_failed(reason: str | None) -> str:
    return f"❌ {reason or 'Health Monitor not responding'}"


def polling_enabled(interval_s: float) -> str:
    return f"🔄 Auto-refresh enabled (every {interval_s:g} seconds)"


def polling_disabled() -> str:
    return "⏸️ Auto-refresh stopped"
