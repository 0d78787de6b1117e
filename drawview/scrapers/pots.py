"""
drawview/scrapers/pots.py
═══════════════════════════════════════════════════════════════════════════════
Group-stage pots for one season, scraped from a server-rendered HTML page.

Page shape (one page per season, POTS_URL_TEMPLATE):

  <h3>Pot 1</h3>
  <table>
    <tr><th>Club</th><th>Country</th><th>Coef.</th></tr>
    <tr><td>Real Madrid</td><td>ESP</td><td>136.000</td></tr>
    ...
  </table>
  <h3>Pot 2</h3>
  ...

Any transport problem, non-200 status or unparseable page raises FetchError.
Nothing here retries: the caller decides what a failed season means.
═══════════════════════════════════════════════════════════════════════════════
"""

import logging
import re
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from drawview.core.config import POTS_URL_TEMPLATE
from drawview.core.errors import FetchError
from drawview.core.http_client import plain_client
from drawview.core.models import DrawData, Team

log = logging.getLogger("pots_scraper")

_POT_RE     = re.compile(r"^\s*pot\s*(\d+)", re.IGNORECASE)
_COUNTRY_RE = re.compile(r"^[A-Z]{3}$")


# ── Helpers ───────────────────────────────────────────────────────────────────

def _coefficient(raw: str) -> Optional[float]:
    """
    '136.000' / '136,000' → 136.0
    '1,234.500' / '1.234,500' → 1234.5
    '' / '-' → None
    """
    raw = raw.replace(" ", "").replace("\xa0", "")
    if raw in ("", "-"):
        return None
    if "," in raw and "." in raw:
        # whichever separator comes last is the decimal one
        if raw.rfind(",") > raw.rfind("."):
            raw = raw.replace(".", "").replace(",", ".")
        else:
            raw = raw.replace(",", "")
    else:
        raw = raw.replace(",", ".")
    try:
        return float(raw)
    except ValueError:
        log.warning(f"Unreadable coefficient {raw!r}")
        return None


def _pot_heading(table) -> Optional[str]:
    caption = table.find("caption")
    heading = table.find_previous(["h1", "h2", "h3", "h4"])
    # a heading only names the first table after it
    if heading is not None and heading.find_next("table") is not table:
        heading = None
    for tag in (caption, heading):
        if tag is not None and _POT_RE.match(tag.get_text(strip=True)):
            return tag.get_text(strip=True)
    return None


# ── Fetch ─────────────────────────────────────────────────────────────────────

async def fetch_pots(season: int) -> str:
    client = plain_client()
    url = POTS_URL_TEMPLATE.format(season=season)
    try:
        resp = await client.get(url)
    except httpx.HTTPError as ex:
        raise FetchError(season, f"request to {url} failed: {ex!r}") from ex
    if resp.status_code != 200:
        raise FetchError(season, f"{url} answered {resp.status_code}")
    return resp.text


# ── Parse ─────────────────────────────────────────────────────────────────────

def parse_gs(html: str, season: Optional[int] = None) -> DrawData:
    """Turn a pots page into a DrawData, pots in page order."""
    soup = BeautifulSoup(html, "html.parser")
    pots: list[tuple[Team, ...]] = []

    for table in soup.find_all("table"):
        if _pot_heading(table) is None:
            continue
        idx = len(pots)
        teams = []
        for row in table.find_all("tr"):
            cols = [c.get_text(strip=True) for c in row.find_all("td")]
            if len(cols) < 2 or not cols[0]:
                continue
            country = cols[1].upper()
            if not _COUNTRY_RE.match(country):
                raise FetchError(season, f"pot {idx + 1}: bad country code {cols[1]!r}")
            teams.append(Team(
                name=cols[0],
                country=country,
                pot=idx,
                coefficient=_coefficient(cols[2]) if len(cols) > 2 else None,
            ))
        if not teams:
            raise FetchError(season, f"pot {idx + 1} is empty")
        pots.append(tuple(teams))

    if not pots:
        raise FetchError(season, "no pots found on page")
    return tuple(pots)


async def load_draw(season: int) -> DrawData:
    """Loader for SeasonCache: fetch + parse one season."""
    html = await fetch_pots(season)
    pots = parse_gs(html, season)
    log.info(f"Season {season}: parsed {len(pots)} pots")
    return pots
