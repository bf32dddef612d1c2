"""Unit tests for round point lookup and round-name aliases."""

from decimal import Decimal

import pytest

from continental.coefficients.constants import (
    CCC_POINTS,
    FINAL,
    QUARTER_FINAL,
    ROUND_OF_16,
    ROUNDS,
    VCC_POINTS,
    RoundPoints,
    canonical_round,
    get_round_points,
)


class TestCanonicalRound:
    """Every known spelling resolves to one canonical round."""

    @pytest.mark.parametrize("spelling", ["Quarter-final", "Quarter-finals", "quarter final", " QUARTER-FINALS "])
    def test_quarter_final_aliases(self, spelling):
        assert canonical_round(spelling) == QUARTER_FINAL

    def test_round_one_is_round_of_16(self):
        assert canonical_round("Round 1") == ROUND_OF_16
        assert canonical_round("Round of 16") == ROUND_OF_16

    def test_semi_final_aliases(self):
        assert canonical_round("Semi-final") == canonical_round("Semi-finals")

    @pytest.mark.parametrize("name", ["", None, "Group Stage", "Round 2"])
    def test_unrecognized(self, name):
        assert canonical_round(name) is None


class TestGetRoundPoints:
    """Tier tables and the no-points case."""

    def test_premier_final(self):
        points = get_round_points("VCC", "Final")
        assert points == RoundPoints(Decimal("1.2"), Decimal("0.8"), Decimal("0.4"))

    def test_challenger_final(self):
        points = get_round_points("CCC", "Final")
        assert points == RoundPoints(Decimal("0.5"), Decimal("0.35"), Decimal("0.12"))

    def test_aliases_share_a_triple(self):
        assert get_round_points("VCC", "Round 1") == get_round_points("VCC", "Round of 16")
        assert get_round_points("CCC", "Quarter-finals") == get_round_points("CCC", "Quarter-final")

    def test_unknown_round_gives_none(self):
        assert get_round_points("VCC", "Group Stage") is None
        assert get_round_points("CCC", "") is None

    def test_unknown_membership_raises(self):
        with pytest.raises(ValueError):
            get_round_points("UEFA", "Final")

    def test_tables_cover_every_round(self):
        assert set(VCC_POINTS) == set(ROUNDS)
        assert set(CCC_POINTS) == set(ROUNDS)

    def test_tables_are_distinct(self):
        """The premier table is worth more in every round."""
        for round_name in ROUNDS:
            assert VCC_POINTS[round_name].win > CCC_POINTS[round_name].win

    def test_for_outcome(self):
        points = VCC_POINTS[FINAL]
        assert points.for_outcome("win") == Decimal("1.2")
        assert points.for_outcome("draw") == Decimal("0.8")
        assert points.for_outcome("loss") == Decimal("0.4")
        with pytest.raises(ValueError):
            points.for_outcome("walkover")
