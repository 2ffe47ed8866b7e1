from __future__ import annotations

# =============================================================================
# Heartboard (FastAPI)
#
# Responsibilities:
# - Poll the health monitor (/monitor/services) via PollingScheduler
# - Derive per-service health (HEALTHY / WARNING / DEAD) and fleet counts
# - Expose the board as JSON (/api/services, /api/stats) and text (/txt)
# - Manual refresh (/api/refresh) and auto-refresh control (/api/polling)
# =============================================================================

# ---- stdlib ----
import logging
from contextlib import asynccontextmanager
from typing import Optional

# ---- web ----
from fastapi import FastAPI

# ---- local ----
from core.config import BoardConfig
from core.scheduler import PollingScheduler
from monitor import Fetcher, load_fetcher
from routers import admin, board

log = logging.getLogger("heartboard")


# =============================================================================
# Logging
# =============================================================================

def _configure_logging(level_name: str) -> None:
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        log.warning("unknown log level %r, keeping INFO", level_name)
        level = logging.INFO
    log.setLevel(level)


# =============================================================================
# App factory
# =============================================================================

@asynccontextmanager
async def _lifespan(app: FastAPI):
    scheduler: PollingScheduler = app.state.scheduler
    config: BoardConfig = app.state.config

    # Initial load happens whether or not auto-refresh is on.
    await scheduler.poll_once()
    if config.autostart:
        await scheduler.enable()

    try:
        yield
    finally:
        await scheduler.aclose()


def create_app(
    config: Optional[BoardConfig] = None,
    *,
    fetcher: Optional[Fetcher] = None,
    scheduler: Optional[PollingScheduler] = None,
) -> FastAPI:
    config = config or BoardConfig.from_env()
    _configure_logging(config.log_level)

    if scheduler is None:
        scheduler = PollingScheduler(
            fetcher or load_fetcher(config.monitor_url, config.fetch_timeout_s),
            fetch_interval_s=config.fetch_interval_s,
            tick_interval_s=config.tick_interval_s,
            fetch_timeout_s=config.fetch_timeout_s,
        )

    app = FastAPI(title="Heartboard", version="0.1", lifespan=_lifespan)
    app.state.config = config
    app.state.scheduler = scheduler
    app.include_router(board.router)
    app.include_router(admin.router)

    log.info("monitor=%s autostart=%s", config.monitor_url, config.autostart)
    return app


app = create_app()
