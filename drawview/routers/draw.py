"""
drawview/routers/draw.py
═══════════════════════════════════════════════════════════════════════════════
Endpoints:
  GET  /draw                          → what the viewer shows right now
  GET  /seasons                       → season selector options
  GET  /{tournament}/{stage}          → navigate to the default season
  GET  /{tournament}/{stage}/{season} → navigate to a season
  POST /restart                       → re-enter the current route

Navigation endpoints accept ?wait=true to hold the response until the
season's fetch+prefetch has settled. Clients poll /draw, never a navigation
URL: every navigation is a fresh visit and resets the draw view.

Exactly one view is returned, by precedence:
  offline notice > error notice > waiting notice > draw > empty
═══════════════════════════════════════════════════════════════════════════════
"""

import logging
from typing import Callable, Optional

from fastapi import APIRouter, HTTPException, Query

from drawview.core.cache import SeasonCache
from drawview.core.config import (
    CURRENT_SEASON, FIRST_SEASON, DEFAULT_TOURNAMENT, DEFAULT_STAGE,
    RECOVERY_DELAY_S, ERROR_MESSAGE, OFFLINE_NOTICE, WAITING_NOTICE, TOURNAMENTS,
)
from drawview.core.connectivity import is_online
from drawview.core.controller import DrawSource, Prefetcher, SeasonDataController, Status
from drawview.core.errors import RouteError
from drawview.core.navigation import Navigator, parse_season, season_label
from drawview.core.prefetch import AssetPrefetcher, country_flag_url
from drawview.scrapers.pots import load_draw

log    = logging.getLogger("draw_router")
router = APIRouter(tags=["draw"])

# ── Session (one viewer per process) ──────────────────────────────────────────
_source:     Optional[DrawSource]           = None
_navigator:  Optional[Navigator]            = None
_controller: Optional[SeasonDataController] = None
_online: Callable[[], bool] = is_online


def mount(
    source: Optional[DrawSource] = None,
    prefetcher: Optional[Prefetcher] = None,
    *,
    default_season: int = CURRENT_SEASON,
    first_season: int = FIRST_SEASON,
    season: Optional[int] = None,
    online: Callable[[], bool] = is_online,
    recovery_delay_s: float = RECOVERY_DELAY_S,
) -> SeasonDataController:
    """Create the navigator + controller pair and request the first season."""
    global _source, _navigator, _controller, _online
    _source = source or SeasonCache(load_draw)
    _online = online

    nav = Navigator(default_season, first_season, DEFAULT_TOURNAMENT, DEFAULT_STAGE, season)
    ctl = SeasonDataController(
        _source,
        prefetcher or AssetPrefetcher(),
        default_season=default_season,
        on_season_change=nav.navigate,
        tournament=nav.route.tournament,
        stage=nav.route.stage,
        recovery_delay_s=recovery_delay_s,
        error_message=ERROR_MESSAGE,
    )
    nav.subscribe(lambda r: ctl.update(r.season, r.reset_token, r.tournament, r.stage))
    ctl.mount(nav.route.season, nav.route.reset_token)

    _navigator, _controller = nav, ctl
    log.info(f"Mounted at {nav.route.path} (default season {default_season})")
    return ctl


async def unmount() -> None:
    global _navigator, _controller
    if _controller is not None:
        await _controller.unmount()
    _navigator, _controller = None, None


def _session() -> tuple[Navigator, SeasonDataController]:
    if _navigator is None or _controller is None:
        raise HTTPException(503, detail="Viewer is starting up — try again shortly")
    return _navigator, _controller


# ── Presentation ──────────────────────────────────────────────────────────────

def _notice(kind: str, message: str) -> dict:
    return {"view": "notice", "kind": kind, "message": message}


def _team(t) -> dict:
    return {**t.as_dict(), "flag_url": country_flag_url(t.country)}


def present(ctl: SeasonDataController, online: bool) -> dict:
    if not online:
        return _notice("offline", OFFLINE_NOTICE)
    if ctl.status is Status.FAILED:
        return _notice("error", ctl.error or ERROR_MESSAGE)
    if ctl.status is Status.WAITING:
        return _notice("waiting", WAITING_NOTICE)
    if ctl.status is not Status.READY or ctl.data is None:
        return {"view": "empty"}

    stages = TOURNAMENTS[ctl.tournament]["stages"]
    return {
        "view":         "draw",
        "tournament":   ctl.tournament,
        "stage":        ctl.stage,
        "stage_name":   stages.get(ctl.stage, ctl.stage),
        "season":       ctl.current_season,
        "season_label": season_label(ctl.current_season),
        "render_key":   ctl.render_key,
        "pots":         [[_team(t) for t in pot] for pot in ctl.data],
    }


async def _navigate(tournament: str, stage: str, season: Optional[int], wait: bool) -> dict:
    nav, ctl = _session()
    try:
        nav.navigate(tournament, stage, season)
    except RouteError as ex:
        raise HTTPException(ex.status_code, detail=ex.detail)
    if wait:
        await ctl.settled()
    return {"path": nav.route.path, **present(ctl, _online())}


# ── Routes ────────────────────────────────────────────────────────────────────

@router.get("/draw")
async def get_draw():
    nav, ctl = _session()
    return {"path": nav.route.path, **present(ctl, _online())}


@router.get("/seasons")
async def list_seasons():
    nav, _ = _session()
    return [
        {"season": s, "label": season_label(s), "selected": s == nav.season}
        for s in nav.seasons()
    ]


@router.post("/restart")
async def restart():
    nav, ctl = _session()
    nav.restart()
    return {"path": nav.route.path, **present(ctl, _online())}


@router.get("/{tournament}/{stage}")
async def open_default_season(tournament: str, stage: str, wait: bool = Query(False)):
    return await _navigate(tournament, stage, None, wait)


@router.get("/{tournament}/{stage}/{season}")
async def open_season(tournament: str, stage: str, season: str, wait: bool = Query(False)):
    try:
        parsed = parse_season(season)
    except RouteError as ex:
        raise HTTPException(ex.status_code, detail=ex.detail)
    return await _navigate(tournament, stage, parsed, wait)


def health() -> dict:
    """Session metadata for /health."""
    if _navigator is None or _controller is None:
        return {"mounted": False}
    return {
        "mounted":    True,
        "online":     _online(),
        "path":       _navigator.route.path,
        "controller": _controller.snapshot(),
        "cache_keys": _source.summary() if isinstance(_source, SeasonCache) else {},
    }
