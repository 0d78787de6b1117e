"""
drawview/core/cache.py
═══════════════════════════════════════════════════════════════════════════
Single-flight, per-season draw cache.
  • get(season) loads a season at most once; the parsed draw is kept forever
    (past seasons never change)
  • Concurrent get() calls for the same season share one in-flight task
  • A waiter being cancelled never cancels the shared load (asyncio.shield)
  • Failed loads are evicted → the next get() for that season retries
═══════════════════════════════════════════════════════════════════════════
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable

from drawview.core.models import DrawData

log = logging.getLogger("draw_source")

Loader = Callable[[int], Awaitable[DrawData]]


class SeasonCache:
    def __init__(self, loader: Loader):
        self._loader = loader
        self._entries: dict[int, asyncio.Task] = {}
        self._loaded_at: dict[int, float] = {}

    async def get(self, season: int) -> DrawData:
        task = self._entries.get(season)
        if task is None:
            log.debug(f"Loading season {season}")
            task = asyncio.ensure_future(self._load(season))
            self._entries[season] = task
        return await asyncio.shield(task)

    async def _load(self, season: int) -> DrawData:
        try:
            data = await self._loader(season)
        except BaseException:
            # only evict our own entry; a retry may already have replaced it
            if self._entries.get(season) is asyncio.current_task():
                del self._entries[season]
            raise
        self._loaded_at[season] = time.time()
        log.info(f"Season {season}: cached {sum(len(p) for p in data)} teams")
        return data

    def __contains__(self, season: int) -> bool:
        task = self._entries.get(season)
        return task is not None and task.done() and not task.cancelled() \
            and task.exception() is None

    def summary(self) -> dict:
        """Seasons held, with age. No draw data."""
        now = time.time()
        return {
            str(s): {"age_s": round(now - ts, 1)}
            for s, ts in sorted(self._loaded_at.items())
        }
