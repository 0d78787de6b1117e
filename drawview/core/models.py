"""
drawview/core/models.py
Draw domain records. A draw is never mutated once parsed.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Team:
    """A club entered in a group-stage pot."""
    name: str
    country: str                 # 3-letter association code, e.g. "ESP"
    pot: int                     # 0-based pot index
    coefficient: Optional[float] = None

    def as_dict(self) -> dict:
        return {
            "name":        self.name,
            "country":     self.country,
            "pot":         self.pot,
            "coefficient": self.coefficient,
        }


# pots in draw order, teams in seeding order within a pot
DrawData = tuple[tuple[Team, ...], ...]
