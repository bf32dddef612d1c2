"""
Coefficient point tables and qualification constants.

Every leg a club plays in a continental knockout round earns points
according to the round reached and the leg outcome. The two tiers use
separate, non-interchangeable tables:

  Premier (VCC): later rounds are worth far more, a Final win is 1.2
  Challenger (CCC): same shape, roughly a third to a quarter of the value

Points are per leg, so a two-legged tie can earn twice. Values are kept
as Decimal so that sums are exact and do not depend on the order in
which matches are folded.

Round names arrive in several spellings ("Quarter-final" vs
"Quarter-finals", "Round 1" for the Round of 16). All alias handling
lives in ROUND_ALIASES; nothing else should compare round strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from continental.memberships import CHALLENGER, PREMIER, validate_membership


# Outcome tokens produced by the result resolver
WIN = "win"
DRAW = "draw"
LOSS = "loss"
OUTCOMES: tuple[str, ...] = (WIN, DRAW, LOSS)


@dataclass(frozen=True)
class RoundPoints:
    """Points for one leg in one round: (win, draw, loss)."""
    win: Decimal
    draw: Decimal
    loss: Decimal

    def for_outcome(self, outcome: str) -> Decimal:
        """Points earned for a single outcome token."""
        if outcome == WIN:
            return self.win
        if outcome == DRAW:
            return self.draw
        if outcome == LOSS:
            return self.loss
        raise ValueError(f"outcome must be one of {OUTCOMES}, got {outcome!r}")


def _points(win: str, draw: str, loss: str) -> RoundPoints:
    return RoundPoints(Decimal(win), Decimal(draw), Decimal(loss))


# Canonical round names
QUALIFYING_ROUND = "Qualifying Round"
ROUND_OF_32 = "Round of 32"
ROUND_OF_16 = "Round of 16"
QUARTER_FINAL = "Quarter-final"
SEMI_FINAL = "Semi-final"
FINAL = "Final"

ROUNDS: tuple[str, ...] = (
    QUALIFYING_ROUND,
    ROUND_OF_32,
    ROUND_OF_16,
    QUARTER_FINAL,
    SEMI_FINAL,
    FINAL,
)

# Known spellings, keyed by their squashed form (see _squash_round)
ROUND_ALIASES: dict[str, str] = {
    "qualifying round": QUALIFYING_ROUND,
    "qualifying": QUALIFYING_ROUND,
    "round of 32": ROUND_OF_32,
    "round of 16": ROUND_OF_16,
    "round 1": ROUND_OF_16,  # legacy name for the Round of 16
    "quarter final": QUARTER_FINAL,
    "quarter finals": QUARTER_FINAL,
    "semi final": SEMI_FINAL,
    "semi finals": SEMI_FINAL,
    "final": FINAL,
}

# Premier tier (VCC) points per leg
VCC_POINTS: dict[str, RoundPoints] = {
    QUALIFYING_ROUND: _points("0.2", "0.1", "0.05"),
    ROUND_OF_32: _points("0.2", "0.1", "0.05"),
    ROUND_OF_16: _points("0.5", "0.25", "0.12"),
    QUARTER_FINAL: _points("0.7", "0.35", "0.17"),
    SEMI_FINAL: _points("1.0", "0.5", "0.25"),
    FINAL: _points("1.2", "0.8", "0.4"),
}

# Challenger tier (CCC) points per leg
CCC_POINTS: dict[str, RoundPoints] = {
    QUALIFYING_ROUND: _points("0.05", "0.025", "0.015"),
    ROUND_OF_32: _points("0.05", "0.025", "0.015"),
    ROUND_OF_16: _points("0.1", "0.05", "0.025"),
    QUARTER_FINAL: _points("0.25", "0.12", "0.07"),
    SEMI_FINAL: _points("0.35", "0.25", "0.1"),
    FINAL: _points("0.5", "0.35", "0.12"),
}

POINT_TABLES: dict[str, dict[str, RoundPoints]] = {
    PREMIER: VCC_POINTS,
    CHALLENGER: CCC_POINTS,
}

# Default qualification bands: nations ranked inside the band get
# TOP_BAND_SPOTS, everyone else BASE_SPOTS
QUALIFICATION_BANDS: dict[str, int] = {
    PREMIER: 5,
    CHALLENGER: 9,
}
TOP_BAND_SPOTS = 2
BASE_SPOTS = 1

# Number of distinct years summed into a coefficient
WINDOW_YEARS = 4

# Label used for the coefficient year when no seasons exist at all
CURRENT_YEAR_LABEL = "Current"


def _squash_round(round_name: str) -> str:
    """Lowercase, treat hyphens as spaces, collapse whitespace."""
    return " ".join(round_name.replace("-", " ").lower().split())


def canonical_round(round_name: Optional[str]) -> Optional[str]:
    """
    Resolve a round name spelling to its canonical name.

    Returns None for empty or unrecognized rounds.

    Examples:
        canonical_round("Quarter-finals")  # -> "Quarter-final"
        canonical_round("Round 1")         # -> "Round of 16"
        canonical_round("Group Stage")     # -> None
    """
    if not round_name:
        return None
    return ROUND_ALIASES.get(_squash_round(round_name))


def get_round_points(membership: str, round_name: Optional[str]) -> Optional[RoundPoints]:
    """
    Get the (win, draw, loss) points for a round in a membership tier.

    Args:
        membership: Tier code ("VCC" or "CCC")
        round_name: Round name in any known spelling

    Returns:
        RoundPoints, or None if the round earns no points

    Raises:
        ValueError: If membership is not a known tier
    """
    table = POINT_TABLES[validate_membership(membership)]
    canonical = canonical_round(round_name)
    if canonical is None:
        return None
    return table[canonical]
