"""
drawview/main.py  ── CL draw viewer API
Startup: mounts the draw controller on the default route, launches the
reachability monitor. All endpoints read published controller state;
navigation endpoints only trigger new requests.
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from drawview.core.config import CURRENT_SEASON, FIRST_SEASON, TOURNAMENTS
from drawview.core.connectivity import run_monitor
from drawview.core.http_client import close_all
from drawview.routers import draw

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
log = logging.getLogger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("CL draw viewer starting...")
    draw.mount()
    monitor = asyncio.create_task(run_monitor())
    yield
    log.info("Shutting down...")
    monitor.cancel()
    await asyncio.gather(monitor, return_exceptions=True)
    await draw.unmount()
    await close_all()


app = FastAPI(
    title="CL Draw Viewer",
    description=(
        "Per-season Champions League group-stage pots, served once their "
        "flag images are warm. Poll /draw for the current view."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.get("/", tags=["meta"])
async def root():
    return {
        "status":  "online",
        "version": "1.0.0",
        "seasons": {"first": FIRST_SEASON, "current": CURRENT_SEASON},
        "endpoints": {
            "draw":     "/draw",
            "seasons":  "/seasons",
            "open":     "/{tournament}/{stage}/{season}?wait=true",
            "restart":  "/restart",
            "health":   "/health",
            "docs":     "/docs",
        },
        "tournaments": {
            slug: sorted(cfg["stages"]) for slug, cfg in TOURNAMENTS.items()
        },
    }


@app.get("/health", tags=["meta"])
async def health():
    session = draw.health()
    ready = session.get("controller", {}).get("has_data", False)
    return {
        "status": "healthy" if ready else "warming_up",
        **session,
    }


# registered last: /{tournament}/{stage} matches any two-segment path
app.include_router(draw.router)
