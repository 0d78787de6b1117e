"""
drawview/core/connectivity.py
═══════════════════════════════════════════════════════════════════════════════
Network reachability signal.

  1. ONE monitor instance ever (guarded by _running flag)
  2. Probes CONNECTIVITY_URL every CONNECTIVITY_INTERVAL_S with a HEAD request
  3. Any transport error → offline; any HTTP answer (even 4xx/5xx) → online
  4. Display-only: nothing here triggers a retry or touches draw data
═══════════════════════════════════════════════════════════════════════════════
"""

import asyncio
import logging
from typing import Optional

import httpx

from drawview.core.config import CONNECTIVITY_INTERVAL_S, CONNECTIVITY_URL
from drawview.core.http_client import plain_client

log = logging.getLogger("connectivity")

# ── State ─────────────────────────────────────────────────────────────────────
_running = False
_online  = True


def is_online() -> bool:
    return _online


def set_online(value: bool) -> None:
    global _online
    if value != _online:
        log.warning("Network reachable again" if value else "Network unreachable")
    _online = value


async def probe(client: Optional[httpx.AsyncClient] = None) -> bool:
    client = client or plain_client()
    try:
        await client.head(CONNECTIVITY_URL)
        return True
    except httpx.HTTPError as ex:
        log.debug(f"Probe failed: {ex!r}")
        return False


async def run_monitor() -> None:
    """
    Called once at startup. Runs until cancelled.
    A second call while one is running returns immediately.
    """
    global _running
    if _running:
        log.warning("Connectivity monitor already running — ignoring duplicate start")
        return
    _running = True
    log.info("Connectivity monitor started")

    try:
        while True:
            set_online(await probe())
            await asyncio.sleep(CONNECTIVITY_INTERVAL_S)
    finally:
        _running = False
