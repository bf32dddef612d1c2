"""
Continental coefficient module.

Implements the coefficient and qualification engine with:
- Per-leg result resolution with the leg 2 home/away reversal
- Tier-specific round point tables (premier VCC, challenger CCC)
- Club and nation point ledgers over a shared rolling year window
- Per-tier ranking and nation qualification-spot allocation
- Defending-champion spot adjustment
"""

from continental.coefficients.calculator import (
    CoefficientCalculator,
    CoefficientRun,
    calculate_coefficients,
    season_champion_nation,
)
from continental.coefficients.constants import RoundPoints, canonical_round, get_round_points
from continental.coefficients.ledger import Ledger, LedgerEntry
from continental.coefficients.ranking import rank_nations, rank_results, spots_for_rank
from continental.coefficients.results import leg_outcomes, resolve_outcomes
from continental.coefficients.standings import ClubCoefficient, NationCoefficient
from continental.coefficients.window import select_window_years

__all__ = [
    "CoefficientCalculator",
    "CoefficientRun",
    "calculate_coefficients",
    "season_champion_nation",
    "RoundPoints",
    "canonical_round",
    "get_round_points",
    "Ledger",
    "LedgerEntry",
    "rank_nations",
    "rank_results",
    "spots_for_rank",
    "leg_outcomes",
    "resolve_outcomes",
    "ClubCoefficient",
    "NationCoefficient",
    "select_window_years",
]
