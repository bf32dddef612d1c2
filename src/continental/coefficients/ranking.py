"""
Ranking and qualification-slot allocation.

Within each membership tier, rows are ordered by total points (highest
first) and numbered 1, 2, 3... in that order. Nations then receive
qualification spots from their rank:

  Premier (VCC): ranks 1-5 get 2 spots, everyone else 1
  Challenger (CCC): ranks 1-9 get 2 spots, everyone else 1

The nation that produced the tier's defending champion gets one spot
fewer than its band gives (2 -> 1, 1 -> 0), because the champion
qualifies through its own automatic berth. That nation is flagged with
champion_qualifier whatever band it sits in.

Rows level on points are ordered by the tie-break mode:
- "name": alphabetical by normalized name (independent of input order)
- "insertion": first-contact order from the ledger fold
"""

from __future__ import annotations

from typing import Callable, Iterable, Mapping, Optional, Sequence, TypeVar

from continental.coefficients.constants import BASE_SPOTS, QUALIFICATION_BANDS, TOP_BAND_SPOTS
from continental.coefficients.standings import CoefficientResult, NationCoefficient
from continental.config import TIE_BREAK_MODES
from continental.memberships import MEMBERSHIPS, validate_membership
from continental.names import normalize_name
from continental.records import PreviousRank

R = TypeVar("R", bound=CoefficientResult)


def _sort_key(tie_break: str) -> Callable[[CoefficientResult], tuple]:
    if tie_break == "name":
        return lambda r: (-r.total_points, normalize_name(r.name), r.order)
    if tie_break == "insertion":
        return lambda r: (-r.total_points, r.order)
    raise ValueError(f"tie_break must be one of {TIE_BREAK_MODES}, got {tie_break!r}")


def rank_tier(results: Iterable[R], membership: str, tie_break: str = "name") -> list[R]:
    """
    Sort one tier's rows and assign 1-based ranks in place.

    Rows from other tiers are ignored.
    """
    validate_membership(membership)
    key = _sort_key(tie_break)
    tier = sorted((r for r in results if r.membership == membership), key=key)
    for position, result in enumerate(tier, start=1):
        result.rank = position
    return tier


def rank_results(results: Sequence[R], tie_break: str = "name") -> list[R]:
    """Rank every tier and concatenate them, premier tier first."""
    ranked: list[R] = []
    for membership in MEMBERSHIPS:
        ranked.extend(rank_tier(results, membership, tie_break))
    return ranked


def spots_for_rank(rank: int, top_band: int, is_champion_nation: bool) -> int:
    """
    Qualification spots for a nation at a given rank.

    Examples:
        spots_for_rank(3, 5, False)  # -> 2
        spots_for_rank(3, 5, True)   # -> 1
        spots_for_rank(7, 5, True)   # -> 0
    """
    spots = TOP_BAND_SPOTS if rank <= top_band else BASE_SPOTS
    if is_champion_nation:
        spots -= 1
    return spots


def allocate_spots(
    nations: Sequence[NationCoefficient],
    top_band: int,
    champion_nation: Optional[str],
) -> None:
    """
    Set spots and champion_qualifier on one tier's ranked nation rows.

    Rows must already carry their rank.
    """
    champion_key = normalize_name(champion_nation)
    for nation in nations:
        if nation.rank is None:
            raise ValueError(f"nation {nation.name!r} has not been ranked")
        is_champion = bool(champion_key) and normalize_name(nation.name) == champion_key
        nation.spots = spots_for_rank(nation.rank, top_band, is_champion)
        nation.champion_qualifier = is_champion


def attach_previous_ranks(
    nations: Iterable[NationCoefficient],
    previous: Iterable[PreviousRank],
) -> None:
    """Copy ranks from an earlier run onto matching (nation, membership) rows."""
    lookup: dict[tuple[str, str], Optional[int]] = {}
    for record in previous:
        key = (normalize_name(record.nation_name), record.membership)
        lookup.setdefault(key, record.rank)

    for nation in nations:
        nation.previous_rank = lookup.get((normalize_name(nation.name), nation.membership))


def rank_nations(
    nations: Sequence[NationCoefficient],
    champion_nations: Mapping[str, Optional[str]],
    bands: Optional[Mapping[str, int]] = None,
    tie_break: str = "name",
) -> list[NationCoefficient]:
    """
    Rank nation rows per tier and allocate qualification spots.

    Args:
        nations: Unranked nation rows of both tiers
        champion_nations: Tier -> defending champion's nation (or None)
        bands: Tier -> size of the two-spot band (defaults to 5 / 9)
        tie_break: "name" or "insertion"

    Returns:
        Ranked rows, premier tier first
    """
    bands = bands or QUALIFICATION_BANDS
    ranked: list[NationCoefficient] = []
    for membership in MEMBERSHIPS:
        tier = rank_tier(nations, membership, tie_break)
        allocate_spots(tier, bands[membership], champion_nations.get(membership))
        ranked.extend(tier)
    return ranked
