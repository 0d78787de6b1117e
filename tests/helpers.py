"""Fakes shared by the draw viewer tests."""

import asyncio

from drawview.core.errors import FetchError
from drawview.core.models import Team


def make_pots(season):
    return (
        (Team(f"Club {season} A", "ESP", 0, 120.0), Team(f"Club {season} B", "ENG", 0, 110.0)),
        (Team(f"Club {season} C", "GER", 1, 80.0), Team(f"Club {season} D", "ESP", 1, 70.0)),
    )


class FakeSource:
    """Draw source that records calls; seasons can fail or wait on a gate."""

    def __init__(self, fail=(), gated=()):
        self.calls = []
        self.fail = set(fail)
        self._gated = set(gated)
        self._gates = {}

    def gate(self, season):
        if season not in self._gates:
            self._gates[season] = asyncio.Event()
        return self._gates[season]

    def release(self, season):
        self.gate(season).set()

    async def get(self, season):
        self.calls.append(season)
        if season in self._gated:
            await self.gate(season).wait()
        if season in self.fail:
            raise FetchError(season, "boom")
        return make_pots(season)


class FakePrefetcher:
    def __init__(self):
        self.batches = []

    async def warm(self, urls):
        self.batches.append(list(urls))
