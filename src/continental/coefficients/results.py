"""
Per-leg result resolution for two-legged knockout ties.

A tie is stored as one match record with up to two legs of scores. The
record's home/away labels describe leg 1. Leg 2 is played at the other
ground and its score fields are labelled from the leg 2 venue:

  leg 1:  home_club_name (home_score_leg1)  v  away_club_name (away_score_leg1)
  leg 2:  away_club_name (home_score_leg2)  v  home_club_name (away_score_leg2)

So the club named as home reads its leg 2 goals from away_score_leg2,
and the club named as away reads them from home_score_leg2.
"""

from __future__ import annotations

from typing import Optional

from continental.coefficients.constants import DRAW, LOSS, WIN
from continental.names import normalize_name
from continental.records import ContinentalMatch


def _outcome(scored: int, conceded: int) -> str:
    if scored > conceded:
        return WIN
    if scored < conceded:
        return LOSS
    return DRAW


def _leg1_played(match: ContinentalMatch) -> bool:
    return match.home_score_leg1 is not None and match.away_score_leg1 is not None


def _leg2_played(match: ContinentalMatch) -> bool:
    # Single-leg ties never read leg 2, whatever the fields hold
    if match.is_single_leg:
        return False
    return match.home_score_leg2 is not None and match.away_score_leg2 is not None


def leg_outcomes(match: ContinentalMatch, is_home: bool) -> list[str]:
    """
    Outcome tokens for one side of a tie, one per leg played.

    Args:
        match: The tie
        is_home: True for the club named home_club_name (home in leg 1)

    Returns:
        0, 1 or 2 tokens out of "win", "draw", "loss", leg 1 first
    """
    outcomes: list[str] = []

    if _leg1_played(match):
        if is_home:
            outcomes.append(_outcome(match.home_score_leg1, match.away_score_leg1))
        else:
            outcomes.append(_outcome(match.away_score_leg1, match.home_score_leg1))

    if _leg2_played(match):
        # Leg 2 venue is reversed: leg 1 home side is the leg 2 away side
        if is_home:
            outcomes.append(_outcome(match.away_score_leg2, match.home_score_leg2))
        else:
            outcomes.append(_outcome(match.home_score_leg2, match.away_score_leg2))

    return outcomes


def resolve_outcomes(
    match: ContinentalMatch,
    team_name: Optional[str],
    is_home: Optional[bool] = None,
) -> list[str]:
    """
    Outcome tokens for a named club in a tie.

    Names are compared after normalization. If is_home is omitted it is
    inferred from which side carries the name; if it is given it must
    agree with the side that carries the name.

    Returns:
        Per-leg outcome tokens, or an empty list if the club did not take
        part in this tie on the requested side
    """
    key = normalize_name(team_name)
    if not key:
        return []

    on_home = key == normalize_name(match.home_club_name)
    on_away = key == normalize_name(match.away_club_name)

    if is_home is None:
        if not on_home and not on_away:
            return []
        is_home = on_home
    elif (is_home and not on_home) or (not is_home and not on_away):
        return []

    return leg_outcomes(match, is_home)


def aggregate_score(match: ContinentalMatch) -> Optional[tuple[int, int]]:
    """
    Aggregate (home side, away side) goals over the legs played.

    Sides are the leg 1 labels. Returns None if no leg has a score.
    """
    if not _leg1_played(match) and not _leg2_played(match):
        return None

    home_total = 0
    away_total = 0
    if _leg1_played(match):
        home_total += match.home_score_leg1
        away_total += match.away_score_leg1
    if _leg2_played(match):
        home_total += match.away_score_leg2
        away_total += match.home_score_leg2
    return home_total, away_total


def tie_winner_nation(match: ContinentalMatch) -> Optional[str]:
    """
    Nation of the club that won the tie on aggregate.

    Level aggregates return None: penalty shoot-outs are not recorded,
    so the winner cannot be told from the scores.
    """
    totals = aggregate_score(match)
    if totals is None:
        return None
    home_total, away_total = totals
    if home_total > away_total:
        return match.home_club_nation
    if away_total > home_total:
        return match.away_club_nation
    return None
