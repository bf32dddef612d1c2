"""
Coefficient result rows for clubs and nations.

Each row carries the points of the shared window years (newest first),
their total, a rank within its membership tier and, for nations, the
qualification spots allocated from that rank.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from continental.memberships import CHALLENGER, PREMIER


def _as_float(value: Decimal) -> float:
    return float(value)


@dataclass
class CoefficientResult:
    """
    Common fields of club and nation coefficient rows.

    year_points is aligned to the run's window years, so year_points[0]
    is the same literal year for every row of a run.
    """
    name: str
    membership: str
    year_points: tuple[Decimal, ...]
    coefficient_year: str
    order: int = 0
    rank: Optional[int] = None

    @property
    def total_points(self) -> Decimal:
        return sum(self.year_points, Decimal("0"))

    def year_point(self, index: int) -> Decimal:
        """Points for the index-th window year, 1-based, newest first."""
        if 1 <= index <= len(self.year_points):
            return self.year_points[index - 1]
        return Decimal("0")

    def _points_dict(self) -> dict[str, Any]:
        data = {
            f"year_{i}_points": _as_float(points)
            for i, points in enumerate(self.year_points, start=1)
        }
        data["total_points"] = _as_float(self.total_points)
        return data


@dataclass
class ClubCoefficient(CoefficientResult):
    nation_name: Optional[str] = None
    club_id: Any = None
    nation_id: Any = None

    def __repr__(self) -> str:
        return (
            f"<ClubCoefficient({self.membership} #{self.rank} {self.name}, "
            f"total={self.total_points})>"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "club_name": self.name,
            "club_id": self.club_id,
            "nation_name": self.nation_name,
            "nation_id": self.nation_id,
            "membership": self.membership,
            **self._points_dict(),
            "coefficient_year": self.coefficient_year,
            "rank": self.rank,
        }


@dataclass
class NationCoefficient(CoefficientResult):
    nation_id: Any = None
    spots: Optional[int] = None
    champion_qualifier: bool = False
    previous_rank: Optional[int] = None

    @property
    def vcc_spots(self) -> Optional[int]:
        return self.spots if self.membership == PREMIER else None

    @property
    def ccc_spots(self) -> Optional[int]:
        return self.spots if self.membership == CHALLENGER else None

    @property
    def rank_change(self) -> Optional[int]:
        """Places climbed since the previous run (negative = dropped)."""
        if self.rank is None or self.previous_rank is None:
            return None
        return self.previous_rank - self.rank

    @property
    def movement(self) -> str:
        """One of "up", "down", "same", or "new" when there is no previous rank."""
        change = self.rank_change
        if change is None:
            return "new"
        if change > 0:
            return "up"
        if change < 0:
            return "down"
        return "same"

    def __repr__(self) -> str:
        return (
            f"<NationCoefficient({self.membership} #{self.rank} {self.name}, "
            f"total={self.total_points}, spots={self.spots})>"
        )

    def to_dict(self) -> dict[str, Any]:
        data = {
            "nation_name": self.name,
            "nation_id": self.nation_id,
            "membership": self.membership,
            **self._points_dict(),
            "coefficient_year": self.coefficient_year,
            "rank": self.rank,
            "previous_rank": self.previous_rank,
            "spots": self.spots,
            "champion_qualifier": self.champion_qualifier,
        }
        if self.membership == PREMIER:
            data["vcc_spots"] = self.spots
        elif self.membership == CHALLENGER:
            data["ccc_spots"] = self.spots
        return data
