"""
Input record shapes for the coefficient engine.

Records arrive from the storage layer as plain dicts. Clubs and nations
inside matches are referenced by name string, not foreign key, so
nothing here validates that a name exists anywhere else.

Tier classification follows the competition naming conventions:
- "VCC" / names containing "Champions" -> premier tier
- "CCC" / names containing "Challenge" or "Continental" -> challenger tier
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from continental.memberships import CHALLENGER, PREMIER


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_int(value: Any) -> Optional[int]:
    """Coerce a score or rank field, treating anything unparseable as missing."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(float(str(value).strip()))
    except (ValueError, OverflowError):
        return None


@dataclass(frozen=True)
class Competition:
    """A continental competition; only used to classify seasons into tiers."""
    id: Any
    name: str = ""
    short_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Competition":
        return cls(
            id=data.get("id"),
            name=_optional_str(data.get("name")) or "",
            short_name=_optional_str(data.get("short_name")),
        )


@dataclass(frozen=True)
class ContinentalSeason:
    """One edition of a competition. Several seasons may share a year."""
    id: Any
    competition_id: Any
    year: str
    champion_nation: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "ContinentalSeason":
        year = data.get("year")
        return cls(
            id=data.get("id"),
            competition_id=data.get("competition_id"),
            year="" if year is None else str(year).strip(),
            champion_nation=_optional_str(data.get("champion_nation")),
        )


@dataclass(frozen=True)
class ContinentalMatch:
    """
    One knockout tie, played over one or two legs.

    Leg 2 is recorded from the perspective of the leg 2 venue: the club
    named as home_club_name (home in leg 1) is the away side in
    home_score_leg2 / away_score_leg2.
    """
    season_id: Any
    round: str = ""
    home_club_name: Optional[str] = None
    home_club_nation: Optional[str] = None
    away_club_name: Optional[str] = None
    away_club_nation: Optional[str] = None
    home_score_leg1: Optional[int] = None
    away_score_leg1: Optional[int] = None
    home_score_leg2: Optional[int] = None
    away_score_leg2: Optional[int] = None
    is_single_leg: bool = False
    home_club_id: Any = None
    away_club_id: Any = None

    @classmethod
    def from_dict(cls, data: dict) -> "ContinentalMatch":
        return cls(
            season_id=data.get("season_id"),
            round=_optional_str(data.get("round")) or "",
            home_club_name=_optional_str(data.get("home_club_name")),
            home_club_nation=_optional_str(data.get("home_club_nation")),
            away_club_name=_optional_str(data.get("away_club_name")),
            away_club_nation=_optional_str(data.get("away_club_nation")),
            home_score_leg1=_optional_int(data.get("home_score_leg1")),
            away_score_leg1=_optional_int(data.get("away_score_leg1")),
            home_score_leg2=_optional_int(data.get("home_score_leg2")),
            away_score_leg2=_optional_int(data.get("away_score_leg2")),
            is_single_leg=bool(data.get("is_single_leg")),
            home_club_id=data.get("home_club_id"),
            away_club_id=data.get("away_club_id"),
        )


@dataclass(frozen=True)
class Nation:
    id: Any
    name: str

    @classmethod
    def from_dict(cls, data: dict) -> "Nation":
        return cls(id=data.get("id"), name=_optional_str(data.get("name")) or "")


@dataclass(frozen=True)
class Club:
    id: Any
    name: str

    @classmethod
    def from_dict(cls, data: dict) -> "Club":
        return cls(id=data.get("id"), name=_optional_str(data.get("name")) or "")


@dataclass(frozen=True)
class PreviousRank:
    """A nation's rank from an earlier stored run, for movement display."""
    nation_name: str
    membership: str
    rank: Optional[int]

    @classmethod
    def from_dict(cls, data: dict) -> "PreviousRank":
        return cls(
            nation_name=_optional_str(data.get("nation_name")) or "",
            membership=_optional_str(data.get("membership")) or "",
            rank=_optional_int(data.get("rank")),
        )


def classify_competition(competition: Competition) -> Optional[str]:
    """
    Return the membership tier a competition belongs to, or None.

    The premier rule (short name VCC or a name containing "Champions")
    is checked first, so "Continental Champions Cup" is premier whatever
    its short name says.
    """
    short_name = (competition.short_name or "").upper()
    name = competition.name or ""

    if short_name == PREMIER or "Champions" in name:
        return PREMIER
    if short_name == CHALLENGER or "Challenge" in name or "Continental" in name:
        return CHALLENGER
    return None


def tier_competitions(competitions: Iterable[Competition]) -> dict[str, Any]:
    """
    Map each tier to the id of the first competition classified into it.

    Mirrors the "first match wins" lookup: later competitions that also
    look premier or challenger are ignored.
    """
    tiers: dict[str, Any] = {}
    for competition in competitions:
        tier = classify_competition(competition)
        if tier is not None and tier not in tiers:
            tiers[tier] = competition.id
    return tiers
