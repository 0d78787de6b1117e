"""
drawview/core/controller.py
═══════════════════════════════════════════════════════════════════════════════
Season-keyed data controller.

Owns which draw is published and what status is shown while the next one is
being obtained:

  1. request_season(s) → status WAITING, starts one fetch+prefetch sequence
  2. sequence success  → data published, current_season = s, new render key
  3. sequence failure  → status FAILED with a fixed message, raw error logged,
                         rollback scheduled after recovery_delay_s
  4. rollback          → on_season_change(tournament, stage, last good season
                         or None when that is the default season)

Latest request wins: every sequence carries a number and only the newest one
may touch state when it resolves. Older ones are dropped without a trace.
Network calls are never aborted, only ignored.
═══════════════════════════════════════════════════════════════════════════════
"""

import asyncio
import logging
import uuid
from enum import Enum
from typing import Awaitable, Callable, Iterable, Optional, Protocol

from drawview.core.models import DrawData
from drawview.core.prefetch import flag_urls

log = logging.getLogger("controller")

SeasonChange = Callable[[str, str, Optional[int]], None]


class DrawSource(Protocol):
    def get(self, season: int) -> Awaitable[DrawData]: ...


class Prefetcher(Protocol):
    def warm(self, urls: Iterable[str]) -> Awaitable[None]: ...


class Status(str, Enum):
    IDLE    = "idle"
    WAITING = "waiting"
    READY   = "ready"
    FAILED  = "failed"


def _new_key() -> str:
    return uuid.uuid4().hex[:12]


class SeasonDataController:
    def __init__(
        self,
        source: DrawSource,
        prefetcher: Prefetcher,
        *,
        default_season: int,
        on_season_change: SeasonChange,
        tournament: str = "cl",
        stage: str = "gs",
        recovery_delay_s: float = 1.0,
        error_message: str = "Could not fetch data",
    ):
        self._source           = source
        self._prefetcher       = prefetcher
        self._on_season_change = on_season_change
        self._recovery_delay_s = recovery_delay_s
        self._error_message    = error_message

        self.default_season = default_season
        self.tournament     = tournament
        self.stage          = stage

        self.render_key: str               = _new_key()
        self.data: Optional[DrawData]      = None
        self.status: Status                = Status.IDLE
        self.error: Optional[str]          = None
        self.current_season: int           = default_season
        self.requested_season: Optional[int] = None

        self._seq          = 0
        self._season_prop: Optional[int] = None
        self._reset_token: Optional[str] = None
        self._active: Optional[asyncio.Task]   = None
        self._recovery: Optional[asyncio.Task] = None
        self._tasks: set[asyncio.Task] = set()

    # ── Triggers ──────────────────────────────────────────────────────────────

    def mount(self, season: Optional[int] = None, reset_token: Optional[str] = None) -> asyncio.Task:
        """First request, with the season from the route (or the default)."""
        self._season_prop = season if season is not None else self.default_season
        self._reset_token = reset_token
        return self.request_season(self._season_prop)

    def update(
        self,
        season: Optional[int],
        reset_token: Optional[str] = None,
        tournament: Optional[str] = None,
        stage: Optional[str] = None,
    ) -> Optional[asyncio.Task]:
        """
        Route changed. A different season starts a new sequence; the same
        season with a new reset token only regenerates the render key.
        """
        if tournament:
            self.tournament = tournament
        if stage:
            self.stage = stage
        season = season if season is not None else self.default_season

        if season != self._season_prop:
            self._season_prop = season
            self._reset_token = reset_token
            return self.request_season(season)

        if reset_token != self._reset_token:
            self._reset_token = reset_token
            self.render_key = _new_key()
            log.debug(f"Season {season}: restarted, render key {self.render_key}")
        return None

    def request_season(self, season: int) -> asyncio.Task:
        self._cancel_recovery()
        self._seq += 1
        self.requested_season = season
        self.status = Status.WAITING
        task = self._spawn(self._run(self._seq, season))
        self._active = task
        return task

    # ── Sequence ──────────────────────────────────────────────────────────────

    async def _run(self, seq: int, season: int) -> None:
        try:
            pots = await self._source.get(season)
            await self._prefetcher.warm(flag_urls(pots))
        except Exception as ex:
            if seq == self._seq:
                self._fail(seq, season, ex)
            return

        if seq != self._seq:
            return
        self.data           = pots
        self.current_season = season
        self.render_key     = _new_key()
        self.error          = None
        self.status         = Status.READY
        log.info(f"Season {season}: published {len(pots)} pots")

    def _fail(self, seq: int, season: int, ex: Exception) -> None:
        self.status = Status.FAILED
        self.error  = self._error_message
        log.error(f"Season {season} fetch failed: {ex!r}")
        self._recovery = self._spawn(self._recover(seq))

    async def _recover(self, seq: int) -> None:
        await asyncio.sleep(self._recovery_delay_s)
        self._recovery = None

        target = self.current_season
        if self.data is None or target == self.default_season:
            target = None
        log.info(f"Rolling back to season {target if target is not None else 'default'}")
        try:
            self._on_season_change(self.tournament, self.stage, target)
        except Exception as ex:
            log.error(f"Rollback season change failed: {ex!r}")

        # the rollback usually lands straight back in request_season()
        if seq == self._seq:
            self.error  = None
            self.status = Status.READY if self.data is not None else Status.IDLE

    # ── Housekeeping ──────────────────────────────────────────────────────────

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _cancel_recovery(self) -> None:
        if self._recovery is not None and not self._recovery.done():
            self._recovery.cancel()
        self._recovery = None

    async def settled(self) -> None:
        """Wait until the latest sequence has resolved (success or failure)."""
        while self._active is not None and not self._active.done():
            await asyncio.shield(self._active)

    async def unmount(self) -> None:
        tasks = list(self._tasks)
        for t in tasks:
            t.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._active = None
        self._recovery = None

    @property
    def busy(self) -> bool:
        return self._active is not None and not self._active.done()

    def snapshot(self) -> dict:
        return {
            "status":           self.status.value,
            "busy":             self.busy,
            "error":            self.error,
            "current_season":   self.current_season,
            "requested_season": self.requested_season,
            "render_key":       self.render_key,
            "has_data":         self.data is not None,
        }
