"""
Points ledgers: per-year point buckets for clubs and nations.

Every match in a processed season credits each participating club, and
the club's nation, with the points its leg outcomes earned in that
round. Credits are additive and keyed by (normalized name, membership),
each entry holding a year -> points mapping.

A Ledger is built fresh for one coefficient run and thrown away after
it; nothing here is shared between runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable, Iterator, Optional

from continental.coefficients.constants import get_round_points
from continental.coefficients.results import resolve_outcomes
from continental.memberships import validate_membership
from continental.names import normalize_name
from continental.records import ContinentalMatch, ContinentalSeason

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass
class LedgerEntry:
    """
    Accumulated points for one club or nation in one membership tier.

    `name` is the first spelling seen; the entry is keyed by its
    normalized form. `order` records first contact and is what the
    "insertion" tie-break sorts by.
    """
    name: str
    membership: str
    order: int
    years: dict[str, Decimal] = field(default_factory=dict)

    # Clubs only: nation as given by the first match seen, and any club
    # id the match record carried
    nation_name: Optional[str] = None
    club_id: Any = None

    @property
    def key(self) -> str:
        return normalize_name(self.name)

    def add(self, year: str, points: Decimal) -> None:
        """Add points into a year's bucket, creating the bucket at zero."""
        self.years[year] = self.years.get(year, ZERO) + points

    def points_for(self, year: Optional[str]) -> Decimal:
        """Points in a year's bucket, zero if nothing was recorded."""
        if year is None:
            return ZERO
        return self.years.get(year, ZERO)


def match_points(match: ContinentalMatch, membership: str, is_home: bool) -> Decimal:
    """
    Points one side of a tie earned, summed over the legs it played.

    Unrecognized rounds and unplayed legs earn zero.
    """
    round_points = get_round_points(membership, match.round)
    if round_points is None:
        return ZERO

    team_name = match.home_club_name if is_home else match.away_club_name
    outcomes = resolve_outcomes(match, team_name, is_home=is_home)
    return sum((round_points.for_outcome(o) for o in outcomes), ZERO)


class Ledger:
    """
    Club and nation point ledgers for one coefficient run.

    Usage:
        ledger = Ledger()
        for season, membership, matches in processed:
            ledger.record_season(season, membership, matches)

        for entry in ledger.nation_entries("VCC"):
            print(entry.name, entry.years)
    """

    def __init__(self) -> None:
        self._clubs: dict[tuple[str, str], LedgerEntry] = {}
        self._nations: dict[tuple[str, str], LedgerEntry] = {}
        self._contacts = 0

    def _entry(
        self,
        table: dict[tuple[str, str], LedgerEntry],
        name: str,
        membership: str,
    ) -> LedgerEntry:
        key = (normalize_name(name), membership)
        entry = table.get(key)
        if entry is None:
            entry = LedgerEntry(name=name.strip(), membership=membership, order=self._contacts)
            self._contacts += 1
            table[key] = entry
        return entry

    def credit(
        self,
        club_name: Optional[str],
        nation_name: Optional[str],
        membership: str,
        year: str,
        points: Decimal,
        club_id: Any = None,
    ) -> None:
        """
        Credit a club (and its nation, if known) with points for a year.

        Entries are created on first contact even when points is zero,
        so a club that played only in unscored rounds still appears.
        """
        validate_membership(membership)
        if not normalize_name(club_name):
            return

        club = self._entry(self._clubs, club_name, membership)
        club.add(year, points)
        if club.nation_name is None and nation_name:
            club.nation_name = nation_name.strip()
        if club.club_id is None and club_id is not None:
            club.club_id = club_id

        if normalize_name(nation_name):
            nation = self._entry(self._nations, nation_name, membership)
            nation.add(year, points)

    def record_match(self, match: ContinentalMatch, membership: str, year: str) -> None:
        """Credit both sides of one tie. Sides without a club name are skipped."""
        if get_round_points(membership, match.round) is None:
            logger.debug("Round %r earns no %s points", match.round, membership)

        for is_home in (True, False):
            if is_home:
                club_name, nation_name, club_id = (
                    match.home_club_name, match.home_club_nation, match.home_club_id,
                )
            else:
                club_name, nation_name, club_id = (
                    match.away_club_name, match.away_club_nation, match.away_club_id,
                )
            if not club_name:
                continue
            points = match_points(match, membership, is_home)
            self.credit(club_name, nation_name, membership, year, points, club_id=club_id)

    def record_season(
        self,
        season: ContinentalSeason,
        membership: str,
        matches: Iterable[ContinentalMatch],
    ) -> int:
        """
        Fold every match of a season into the ledgers.

        Returns:
            Number of matches processed
        """
        count = 0
        for match in matches:
            self.record_match(match, membership, season.year)
            count += 1
        return count

    def club_entries(self, membership: Optional[str] = None) -> Iterator[LedgerEntry]:
        """Club entries in first-contact order, optionally for one tier."""
        for entry in self._clubs.values():
            if membership is None or entry.membership == membership:
                yield entry

    def nation_entries(self, membership: Optional[str] = None) -> Iterator[LedgerEntry]:
        """Nation entries in first-contact order, optionally for one tier."""
        for entry in self._nations.values():
            if membership is None or entry.membership == membership:
                yield entry

    def club(self, name: str, membership: str) -> Optional[LedgerEntry]:
        return self._clubs.get((normalize_name(name), membership))

    def nation(self, name: str, membership: str) -> Optional[LedgerEntry]:
        return self._nations.get((normalize_name(name), membership))

    @property
    def club_count(self) -> int:
        return len(self._clubs)

    @property
    def nation_count(self) -> int:
        return len(self._nations)
