"""
drawview/core/navigation.py
Server-side route state: /{tournament}/{stage}/{season?}

Every navigation gets a fresh reset token, so re-entering the same route
("Restart") reaches the controller as a same-season update with a new token.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Callable, Optional

from drawview.core.config import TOURNAMENTS
from drawview.core.errors import RouteError

log = logging.getLogger("navigation")


@dataclass(frozen=True)
class Route:
    tournament: str
    stage: str
    season: Optional[int]        # None → default season
    reset_token: str

    @property
    def path(self) -> str:
        base = f"/{self.tournament}/{self.stage}"
        return f"{base}/{self.season}" if self.season is not None else base


Listener = Callable[[Route], None]


def season_label(season: int) -> str:
    """2019 → '2019/20'"""
    return f"{season}/{(season + 1) % 100:02d}"


def available_seasons(first: int, current: int) -> list[int]:
    """Season selector options, newest first."""
    return list(range(current, first - 1, -1))


def parse_season(raw: Optional[str]) -> Optional[int]:
    """Path segment → season. Missing segment means default."""
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise RouteError(400, f"Season '{raw}' is not a year")


class Navigator:
    def __init__(
        self,
        default_season: int,
        first_season: int,
        tournament: str = "cl",
        stage: str = "gs",
        season: Optional[int] = None,
    ):
        self.default_season = default_season
        self.first_season   = first_season
        self._validate(tournament, stage, season)
        self.route = Route(tournament, stage, season, uuid.uuid4().hex)
        self._listeners: list[Listener] = []

    def subscribe(self, fn: Listener) -> None:
        self._listeners.append(fn)

    @property
    def season(self) -> int:
        return self.route.season if self.route.season is not None else self.default_season

    def seasons(self) -> list[int]:
        return available_seasons(self.first_season, self.default_season)

    def _validate(self, tournament: str, stage: str, season: Optional[int]) -> None:
        cfg = TOURNAMENTS.get(tournament)
        if not cfg:
            raise RouteError(404, f"Tournament '{tournament}' not found")
        if stage not in cfg["stages"]:
            raise RouteError(404, f"Stage '{stage}' not found. Supported: {sorted(cfg['stages'])}")
        if season is not None and not self.first_season <= season <= self.default_season:
            raise RouteError(
                400, f"Season {season} out of range {self.first_season}–{self.default_season}"
            )

    def navigate(self, tournament: str, stage: str, season: Optional[int] = None) -> Route:
        self._validate(tournament, stage, season)
        self.route = Route(tournament, stage, season, uuid.uuid4().hex)
        log.info(f"Navigate → {self.route.path}")
        for fn in self._listeners:
            fn(self.route)
        return self.route

    def restart(self) -> Route:
        r = self.route
        return self.navigate(r.tournament, r.stage, r.season)
