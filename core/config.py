from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from monitor.http import DEFAULT_MONITOR_URL

log = logging.getLogger("heartboard")

_TRUTHY = {"1", "true", "yes", "on"}


def _env_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        log.warning("ignoring %s=%r (not a number), using %s", key, raw, default)
        return default


def _env_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class BoardConfig:
    monitor_url: str = DEFAULT_MONITOR_URL
    fetch_interval_s: float = 3.0
    tick_interval_s: float = 1.0
    fetch_timeout_s: float = 2.0
    autostart: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        for name in ("fetch_interval_s", "tick_interval_s", "fetch_timeout_s"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value!r}")

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "BoardConfig":
        env = os.environ if env is None else env
        return cls(
            monitor_url=env.get("HEARTBOARD_MONITOR_URL", DEFAULT_MONITOR_URL).strip() or DEFAULT_MONITOR_URL,
            fetch_interval_s=_env_float(env, "HEARTBOARD_FETCH_INTERVAL_S", 3.0),
            tick_interval_s=_env_float(env, "HEARTBOARD_TICK_INTERVAL_S", 1.0),
            fetch_timeout_s=_env_float(env, "HEARTBOARD_FETCH_TIMEOUT_S", 2.0),
            autostart=_env_bool(env, "HEARTBOARD_AUTOSTART", False),
            log_level=env.get("HEARTBOARD_LOG_LEVEL", "INFO").strip().upper() or "INFO",
        )
