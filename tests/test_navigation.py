"""Route state, season parsing and selector options."""

import pytest

from drawview.core.errors import RouteError
from drawview.core.navigation import Navigator, available_seasons, parse_season, season_label


def test_season_label():
    assert season_label(2019) == "2019/20"
    assert season_label(2099) == "2099/00"


def test_available_seasons_newest_first():
    seasons = available_seasons(2003, 2024)
    assert seasons[0] == 2024
    assert seasons[-1] == 2003
    assert len(seasons) == 22


@pytest.mark.parametrize("raw, expected", [(None, None), ("", None), ("2019", 2019)])
def test_parse_season(raw, expected):
    assert parse_season(raw) == expected


def test_parse_season_rejects_words():
    with pytest.raises(RouteError) as exc:
        parse_season("latest")
    assert exc.value.status_code == 400


def test_navigate_notifies_listeners_with_new_route():
    nav = Navigator(2024, 2003)
    seen = []
    nav.subscribe(seen.append)

    route = nav.navigate("cl", "last16", 2019)
    assert seen == [route]
    assert route.path == "/cl/last16/2019"
    assert nav.season == 2019


def test_default_route_has_no_season_segment():
    nav = Navigator(2024, 2003)
    assert nav.route.path == "/cl/gs"
    assert nav.season == 2024


def test_restart_keeps_route_but_changes_token():
    nav = Navigator(2024, 2003, season=2020)
    before = nav.route
    after = nav.restart()
    assert (after.tournament, after.stage, after.season) == ("cl", "gs", 2020)
    assert after.reset_token != before.reset_token


@pytest.mark.parametrize("tournament, stage, season, status", [
    ("el", "gs", None, 404),
    ("cl", "final", None, 404),
    ("cl", "gs", 2002, 400),
    ("cl", "gs", 2025, 400),
])
def test_navigate_rejects_unknown_routes(tournament, stage, season, status):
    nav = Navigator(2024, 2003)
    seen = []
    nav.subscribe(seen.append)
    with pytest.raises(RouteError) as exc:
        nav.navigate(tournament, stage, season)
    assert exc.value.status_code == status
    assert seen == []
    assert nav.route.path == "/cl/gs"
