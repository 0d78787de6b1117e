"""
drawview/core/prefetch.py
Best-effort image pre-loading.
  • prefetch_image(url) → one GET, raises AssetError on any failure
  • AssetPrefetcher.warm(urls) → fires every load at once, waits for all
    of them to settle, never raises
"""

import asyncio
import logging
from typing import Awaitable, Callable, Iterable, Optional

import httpx

from drawview.core.config import FLAG_CODES, FLAG_URL_TEMPLATE
from drawview.core.errors import AssetError
from drawview.core.http_client import asset_client
from drawview.core.models import DrawData

log = logging.getLogger("prefetch")

ImageLoader = Callable[[str], Awaitable[None]]


def country_flag_url(country: str) -> str:
    code = FLAG_CODES.get(country.upper())
    if code is None:
        log.warning(f"No flag code for association '{country}', using it as is")
        code = country.lower()
    return FLAG_URL_TEMPLATE.format(code=code)


def flag_urls(pots: DrawData) -> list[str]:
    """Flag URL of every team, pot order then team order. Duplicates kept."""
    return [country_flag_url(team.country) for pot in pots for team in pot]


async def prefetch_image(url: str) -> None:
    client = asset_client()
    try:
        resp = await client.get(url)
    except httpx.HTTPError as ex:
        raise AssetError(url, repr(ex)) from ex
    if resp.status_code != 200:
        raise AssetError(url, f"status {resp.status_code}")


class AssetPrefetcher:
    def __init__(self, load: Optional[ImageLoader] = None):
        self._load = load or prefetch_image
        self._warm: set[str] = set()

    async def warm(self, urls: Iterable[str]) -> None:
        pending = [u for u in dict.fromkeys(urls) if u not in self._warm]
        if not pending:
            return
        results = await asyncio.gather(
            *(self._load(u) for u in pending), return_exceptions=True
        )
        failed = 0
        for url, res in zip(pending, results):
            if isinstance(res, BaseException):
                failed += 1
                log.debug(f"Image pre-load failed: {res}")
            else:
                self._warm.add(url)
        log.info(f"Pre-loaded {len(pending) - failed}/{len(pending)} images")
