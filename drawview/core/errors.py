"""
drawview/core/errors.py
Failures the draw pipeline can raise.
  • FetchError → a season's pots could not be retrieved or parsed (user-visible)
  • AssetError → one image failed to pre-load (always swallowed)
  • RouteError → a path the navigator cannot serve (mapped to HTTP status)
"""

from typing import Optional


class RouteError(Exception):
    def __init__(self, status_code: int, detail: str):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


class FetchError(Exception):
    def __init__(self, season: Optional[int], message: str):
        super().__init__(f"season {season}: {message}")
        self.season = season


class AssetError(Exception):
    def __init__(self, url: str, message: str):
        super().__init__(f"{url}: {message}")
        self.url = url
