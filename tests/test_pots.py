"""Pots page fetch + parse."""

import asyncio
import logging

import httpx
import pytest

from drawview.core.errors import FetchError
from drawview.core.models import Team
from drawview.scrapers import pots
from drawview.scrapers.pots import fetch_pots, load_draw, parse_gs

PAGE = """
<html><body>
  <h2>UEFA Champions League 2019/20</h2>
  <table class="nav"><tr><td>Home</td><td>Archive</td></tr></table>

  <h3>Pot 1</h3>
  <table>
    <tr><th>Club</th><th>Country</th><th>Coef.</th></tr>
    <tr><td>Liverpool</td><td>ENG</td><td>99.000</td></tr>
    <tr><td>Barcelona</td><td>esp</td><td>138.000</td></tr>
  </table>

  <h3>Pot 2</h3>
  <table>
    <tr><th>Club</th><th>Country</th><th>Coef.</th></tr>
    <tr><td>Real Madrid</td><td>ESP</td><td>146,000</td></tr>
    <tr><td>Ajax</td><td>NED</td><td>-</td></tr>
  </table>

  <table>
    <caption>Pot 3</caption>
    <tr><td>Salzburg</td><td>AUT</td></tr>
  </table>
</body></html>
"""


def test_parse_gs_reads_pots_in_page_order():
    draw = parse_gs(PAGE, 2019)
    assert len(draw) == 3
    assert draw[0] == (
        Team("Liverpool", "ENG", 0, 99.0),
        Team("Barcelona", "ESP", 0, 138.0),
    )
    assert draw[1][0] == Team("Real Madrid", "ESP", 1, 146.0)
    assert draw[1][1].coefficient is None
    assert draw[2] == (Team("Salzburg", "AUT", 2, None),)


@pytest.mark.parametrize("raw, expected", [
    ("1,234.500", 1234.5),
    ("1.234,500", 1234.5),
    ("12 345.0", 12345.0),
    ("-", None),
])
def test_parse_gs_coefficient_formats(raw, expected):
    html = f"<h3>Pot 1</h3><table><tr><td>Bayern</td><td>GER</td><td>{raw}</td></tr></table>"
    assert parse_gs(html, 2019)[0][0].coefficient == expected


def test_parse_gs_unreadable_coefficient_warns(caplog):
    html = "<h3>Pot 1</h3><table><tr><td>Bayern</td><td>GER</td><td>n/a</td></tr></table>"
    with caplog.at_level(logging.WARNING, logger="pots_scraper"):
        assert parse_gs(html, 2019)[0][0].coefficient is None
    assert any("n/a" in r.getMessage() for r in caplog.records)


def test_parse_gs_without_pots_fails():
    with pytest.raises(FetchError):
        parse_gs("<html><table><tr><td>x</td><td>ESP</td></tr></table></html>", 2019)


def test_parse_gs_empty_pot_fails():
    html = "<h3>Pot 1</h3><table><tr><th>Club</th></tr></table>"
    with pytest.raises(FetchError, match="pot 1 is empty"):
        parse_gs(html, 2019)


def test_parse_gs_bad_country_fails():
    html = "<h3>Pot 1</h3><table><tr><td>Celtic</td><td>Scotland</td></tr></table>"
    with pytest.raises(FetchError):
        parse_gs(html, 2019)


def _mock_client(monkeypatch, handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    monkeypatch.setattr(pots, "plain_client", lambda: client)


def test_fetch_pots_formats_season_into_url(monkeypatch):
    seen = []

    def handler(req):
        seen.append(str(req.url))
        return httpx.Response(200, text=PAGE)

    _mock_client(monkeypatch, handler)
    assert asyncio.run(fetch_pots(2019)) == PAGE
    assert seen == ["https://kassiesa.net/uefa/clubs/pots/cl2019.html"]


def test_fetch_pots_non_200_is_fetch_error(monkeypatch):
    _mock_client(monkeypatch, lambda req: httpx.Response(503))
    with pytest.raises(FetchError, match="503"):
        asyncio.run(fetch_pots(2019))


def test_fetch_pots_transport_error_is_fetch_error(monkeypatch):
    def handler(req):
        raise httpx.ReadTimeout("slow", request=req)

    _mock_client(monkeypatch, handler)
    with pytest.raises(FetchError):
        asyncio.run(fetch_pots(2019))


def test_load_draw_fetches_and_parses(monkeypatch):
    _mock_client(monkeypatch, lambda req: httpx.Response(200, text=PAGE))
    draw = asyncio.run(load_draw(2019))
    assert [len(p) for p in draw] == [2, 2, 1]
