"""
drawview/core/config.py  ── CL draw viewer
═══════════════════════════════════════════════════════════════════════════════
SOURCES:

  kassiesa.net   →  per-season group-stage pot lists (server-rendered HTML)
                     one page per season, pots as consecutive <table>s

  flagcdn.com    →  country flag images, pre-loaded before a draw is shown

Every value below can be overridden with an environment variable of the
same name. The controller never reads these globals directly: main.py
passes them in at construction.
═══════════════════════════════════════════════════════════════════════════════
"""

import logging
import os
from datetime import datetime
from typing import Optional

import pytz

log = logging.getLogger("config")

CET = pytz.timezone("Europe/Zurich")


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, str(default)))
    except ValueError:
        log.warning(f"{name} is not an integer — using {default}")
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, str(default)))
    except ValueError:
        log.warning(f"{name} is not a number — using {default}")
        return default


def season_of(dt: Optional[datetime] = None) -> int:
    """
    Season (start year) in progress at `dt`.
    The group-stage draw happens in late August, so July onwards
    already belongs to the new season.
    """
    dt = dt or datetime.now(CET)
    return dt.year if dt.month >= 7 else dt.year - 1


# ── Seasons ───────────────────────────────────────────────────────────────────
FIRST_SEASON   = _env_int("FIRST_SEASON", 2003)
CURRENT_SEASON = _env_int("CURRENT_SEASON", season_of())

# ── Tournaments / stages (route segments) ─────────────────────────────────────
TOURNAMENTS: dict[str, dict] = {
    "cl": {
        "name":   "UEFA Champions League",
        "short":  "UCL",
        "stages": {
            "gs":     "Group stage",
            "last16": "Round of 16",
        },
    },
}
DEFAULT_TOURNAMENT = "cl"
DEFAULT_STAGE      = "gs"

# ── Draw data ─────────────────────────────────────────────────────────────────
POTS_URL_TEMPLATE = os.environ.get(
    "POTS_URL_TEMPLATE", "https://kassiesa.net/uefa/clubs/pots/cl{season}.html"
)
FLAG_URL_TEMPLATE = os.environ.get(
    "FLAG_URL_TEMPLATE", "https://flagcdn.com/w80/{code}.png"
)

# UEFA association code → flagcdn code (ISO 3166 alpha-2, home nations as gb-*)
FLAG_CODES: dict[str, str] = {
    "ALB": "al", "AND": "ad", "ARM": "am", "AUT": "at", "AZE": "az",
    "BEL": "be", "BIH": "ba", "BLR": "by", "BUL": "bg", "CRO": "hr",
    "CYP": "cy", "CZE": "cz", "DEN": "dk", "ENG": "gb-eng", "ESP": "es",
    "EST": "ee", "FIN": "fi", "FRA": "fr", "FRO": "fo", "GEO": "ge",
    "GER": "de", "GIB": "gi", "GRE": "gr", "HUN": "hu", "IRL": "ie",
    "ISL": "is", "ISR": "il", "ITA": "it", "KAZ": "kz", "KOS": "xk",
    "LIE": "li", "LTU": "lt", "LUX": "lu", "LVA": "lv", "MDA": "md",
    "MKD": "mk", "MLT": "mt", "MNE": "me", "NED": "nl", "NIR": "gb-nir",
    "NOR": "no", "POL": "pl", "POR": "pt", "ROU": "ro", "RUS": "ru",
    "SCO": "gb-sct", "SMR": "sm", "SRB": "rs", "SUI": "ch", "SVK": "sk",
    "SVN": "si", "SWE": "se", "TUR": "tr", "UKR": "ua", "WAL": "gb-wls",
}

SCRAPE_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/124.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}

# ── Controller ────────────────────────────────────────────────────────────────
RECOVERY_DELAY_S = _env_float("RECOVERY_DELAY_S", 1.0)
ERROR_MESSAGE    = os.environ.get("ERROR_MESSAGE", "Could not fetch data")

# ── Notices shown instead of the draw ─────────────────────────────────────────
OFFLINE_NOTICE = "you're offline"
WAITING_NOTICE = "wait..."

# ── Reachability probe ────────────────────────────────────────────────────────
CONNECTIVITY_URL        = os.environ.get("CONNECTIVITY_URL", "https://kassiesa.net/")
CONNECTIVITY_INTERVAL_S = _env_int("CONNECTIVITY_INTERVAL_S", 30)
