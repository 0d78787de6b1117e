"""
drawview/core/http_client.py
Shared async httpx clients.
  • plain_client() → HTML pages (pots) and the reachability probe
  • asset_client() → flag images, short timeout so one slow CDN edge
                     cannot hold a draw back for long
"""

import httpx
from drawview.core.config import SCRAPE_HEADERS

_plain_client: httpx.AsyncClient | None = None
_asset_client: httpx.AsyncClient | None = None

_LIMITS        = httpx.Limits(max_connections=10, max_keepalive_connections=5)
_ASSET_LIMITS  = httpx.Limits(max_connections=20, max_keepalive_connections=10)
_TIMEOUT       = httpx.Timeout(30.0, connect=15.0)
_ASSET_TIMEOUT = httpx.Timeout(10.0, connect=5.0)


def plain_client() -> httpx.AsyncClient:
    global _plain_client
    if _plain_client is None or _plain_client.is_closed:
        _plain_client = httpx.AsyncClient(
            headers=SCRAPE_HEADERS,
            timeout=_TIMEOUT,
            follow_redirects=True,
            limits=_LIMITS,
        )
    return _plain_client


def asset_client() -> httpx.AsyncClient:
    global _asset_client
    if _asset_client is None or _asset_client.is_closed:
        _asset_client = httpx.AsyncClient(
            timeout=_ASSET_TIMEOUT,
            follow_redirects=True,
            limits=_ASSET_LIMITS,
        )
    return _asset_client


async def close_all() -> None:
    for c in [_plain_client, _asset_client]:
        if c and not c.is_closed:
            await c.aclose()
