from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional

from monitor.base import FetchError, FetchOutcome, Fetcher, Snapshot, now_utc

from core import messages
from core.health import DEFAULT_WARNING_BAND, WarningBand
from core.state import BoardState
from core.view import BoardView, build_board

log = logging.getLogger("heartboard.scheduler")

Clock = Callable[[], datetime]


def _safe_fetch(fetcher: Fetcher, clock: Clock) -> FetchOutcome:
    """Fetcher guard. Runs in a worker thread and must never raise."""
    try:
        snapshot = fetcher.fetch()
        if not isinstance(snapshot, Snapshot):
            raise FetchError(f"Expected Snapshot, got {type(snapshot).__name__}")
    except FetchError as exc:
        return FetchOutcome(ok=False, snapshot=Snapshot.empty(), ts=clock(), error=str(exc))
    except Exception as exc:
        return FetchOutcome(
            ok=False,
            snapshot=Snapshot.empty(),
            ts=clock(),
            error=f"{type(exc).__name__}: {exc}",
        )
    return FetchOutcome(ok=True, snapshot=snapshot, ts=clock())


class PollingScheduler:
    """
    Owns the board state and the two timers that keep it current.

    - fetch timer: pulls a new snapshot every ``fetch_interval_s``
    - display timer: only moves ``current_time`` forward every
      ``tick_interval_s`` so heartbeat ages keep counting between fetches

    Both timers are tasks on the running event loop and start/stop as a pair.
    A failed fetch clears the snapshot: an empty board is more honest than
    stale healthy cards after the monitor goes away.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        *,
        fetch_interval_s: float = 3.0,
        tick_interval_s: float = 1.0,
        fetch_timeout_s: float = 2.0,
        band: WarningBand = DEFAULT_WARNING_BAND,
        clock: Clock = now_utc,
    ) -> None:
        for name, value in (
            ("fetch_interval_s", fetch_interval_s),
            ("tick_interval_s", tick_interval_s),
            ("fetch_timeout_s", fetch_timeout_s),
        ):
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value!r}")

        self.fetcher = fetcher
        self.fetch_interval_s = fetch_interval_s
        self.tick_interval_s = tick_interval_s
        self.fetch_timeout_s = fetch_timeout_s
        self.band = band
        self._clock = clock
        self._state = BoardState(current_time=clock())
        self._fetch_task: Optional[asyncio.Task] = None
        self._tick_task: Optional[asyncio.Task] = None
        self._toggle_lock = asyncio.Lock()

    # ---- reads ----

    @property
    def state(self) -> BoardState:
        return self._state

    @property
    def enabled(self) -> bool:
        return self._state.enabled

    def board(self) -> BoardView:
        return build_board(self._state, band=self.band)

    # ---- fetch handling ----

    def _swap(self, **changes) -> BoardState:
        self._state = replace(self._state, **changes)
        return self._state

    async def _fetch(self) -> FetchOutcome:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(_safe_fetch, self.fetcher, self._clock),
                timeout=self.fetch_timeout_s,
            )
        except asyncio.TimeoutError:
            return FetchOutcome(
                ok=False,
                snapshot=Snapshot.empty(),
                ts=self._clock(),
                error=f"Health Monitor timed out after {self.fetch_timeout_s:.2f}s",
            )

    def _apply(self, outcome: FetchOutcome) -> BoardState:
        if outcome.ok:
            log.debug("fetch ok services=%d", len(outcome.snapshot))
            return self._swap(
                snapshot=outcome.snapshot,
                connected=True,
                error=False,
                message=messages.fetch_succeeded(outcome.ts),
                last_fetch_at=outcome.ts,
                current_time=outcome.ts,
            )

        log.warning("fetch failed url=%s error=%s", getattr(self.fetcher, "url", "?"), outcome.error)
        return self._swap(
            snapshot=Snapshot.empty(),
            connected=False,
            error=True,
            message=messages.fetch_failed(outcome.error),
            current_time=outcome.ts,
        )

    async def poll_once(self) -> FetchOutcome:
        outcome = await self._fetch()
        self._apply(outcome)
        return outcome

    async def refresh_now(self) -> BoardView:
        """Manual one-shot fetch. Works whether or not auto-refresh is on."""
        await self.poll_once()
        return self.board()

    # ---- timers ----

    async def _fetch_loop(self) -> None:
        loop = asyncio.get_running_loop()
        next_at = loop.time()
        while True:
            try:
                await self.poll_once()
            except Exception:
                log.exception("unexpected failure in fetch tick")

            # Fixed period measured from the previous start, not from the end of the fetch.
            next_at += self.fetch_interval_s
            now = loop.time()
            if next_at < now:
                # Overran a whole period; start again from here rather than bursting.
                next_at = now
            await asyncio.sleep(next_at - now)

    async def _tick_loop(self) -> None:
        while True:
            await asyncio.sleep(self.tick_interval_s)
            try:
                self._swap(current_time=self._clock())
            except Exception:
                log.exception("unexpected failure in display tick")

    async def _enable(self) -> BoardState:
        if self._fetch_task is not None:
            return self._state

        self._swap(enabled=True, error=False, message=messages.polling_enabled(self.fetch_interval_s))
        # First fetch happens right away inside the fetch loop.
        self._fetch_task = asyncio.create_task(self._fetch_loop(), name="heartboard-fetch")
        self._tick_task = asyncio.create_task(self._tick_loop(), name="heartboard-tick")
        log.info(
            "auto-refresh enabled fetch=%.2fs tick=%.2fs",
            self.fetch_interval_s,
            self.tick_interval_s,
        )
        return self._state

    async def _disable(self) -> BoardState:
        tasks = [task for task in (self._fetch_task, self._tick_task) if task is not None]
        if not tasks:
            return self._state

        # Flag and task references change together, before any await.
        self._fetch_task = None
        self._tick_task = None
        state = self._swap(enabled=False, error=False, message=messages.polling_disabled())

        # A fetch still in flight is abandoned along with its task.
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        log.info("auto-refresh stopped")
        return state

    async def enable(self) -> BoardState:
        async with self._toggle_lock:
            return await self._enable()

    async def disable(self) -> BoardState:
        async with self._toggle_lock:
            return await self._disable()

    async def toggle(self) -> BoardState:
        async with self._toggle_lock:
            if self._fetch_task is not None:
                return await self._disable()
            return await self._enable()

    async def aclose(self) -> None:
        await self.disable()
