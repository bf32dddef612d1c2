"""
Rolling year window for coefficient totals.

A coefficient sums the most recent WINDOW_YEARS distinct years found
across every processed season of both tiers. The window is chosen once
per run, so year_1 is the same literal year for every club and nation;
entities with no activity in a window year get zero for it.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from continental.coefficients.constants import CURRENT_YEAR_LABEL, WINDOW_YEARS
from continental.coefficients.ledger import Ledger, LedgerEntry
from continental.coefficients.standings import ClubCoefficient, NationCoefficient

_LEADING_NUMBER = re.compile(r"\d+")


def year_sort_key(year: str) -> tuple[int, str]:
    """
    Sort key for season year labels.

    Years are opaque labels ("2024", "2023/24"), ordered by their first
    number and then by the label itself. Labels without any number sort
    before all numbered ones.
    """
    match = _LEADING_NUMBER.search(year)
    number = int(match.group()) if match else -1
    return number, year


def select_window_years(years: Iterable[str], size: int = WINDOW_YEARS) -> list[str]:
    """
    Pick the most recent distinct years, newest first.

    Empty labels are ignored. Fewer than `size` years is fine; the
    caller zero-fills the missing slots.
    """
    distinct = {year for year in years if year}
    return sorted(distinct, key=year_sort_key, reverse=True)[:size]


def coefficient_year_label(window: list[str]) -> str:
    """The label a run is published under: its newest year, or "Current"."""
    return window[0] if window else CURRENT_YEAR_LABEL


def window_points(entry: LedgerEntry, window: list[str], size: int = WINDOW_YEARS) -> tuple:
    """
    An entry's points for each window year, newest first.

    The tuple always has `size` slots; slots with no window year are zero.
    """
    years: list[Optional[str]] = list(window[:size])
    years += [None] * (size - len(years))
    return tuple(entry.points_for(year) for year in years)


def aggregate_clubs(
    ledger: Ledger,
    window: list[str],
    size: int = WINDOW_YEARS,
) -> list[ClubCoefficient]:
    """Build unranked club rows from the ledger, in first-contact order."""
    label = coefficient_year_label(window)
    return [
        ClubCoefficient(
            name=entry.name,
            membership=entry.membership,
            year_points=window_points(entry, window, size),
            coefficient_year=label,
            order=entry.order,
            nation_name=entry.nation_name,
            club_id=entry.club_id,
        )
        for entry in ledger.club_entries()
    ]


def aggregate_nations(
    ledger: Ledger,
    window: list[str],
    size: int = WINDOW_YEARS,
) -> list[NationCoefficient]:
    """Build unranked nation rows from the ledger, in first-contact order."""
    label = coefficient_year_label(window)
    return [
        NationCoefficient(
            name=entry.name,
            membership=entry.membership,
            year_points=window_points(entry, window, size),
            coefficient_year=label,
            order=entry.order,
        )
        for entry in ledger.nation_entries()
    ]
