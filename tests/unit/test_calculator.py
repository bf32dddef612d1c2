"""
Unit tests for the full coefficient run.

Tests cover:
- The two-season Final scenario end to end
- Window alignment across clubs and nations
- Defending champion derivation
- Id attachment and data-quality warnings
- The dict entry point and output shape
"""

import logging
from decimal import Decimal

import pytest

from conftest import make_match, make_season
from continental.coefficients import CoefficientCalculator, calculate_coefficients, season_champion_nation
from continental.config import settings
from continental.records import Club, Competition, Nation, PreviousRank

ZERO = Decimal("0")


@pytest.fixture
def calculator():
    return CoefficientCalculator(window_years=4, tie_break="name")


@pytest.fixture
def two_finals():
    """Club A beats Club B 3-1 in single-leg Finals in 2023 and 2024."""
    seasons = [make_season("s23", "2023"), make_season("s24", "2024")]
    matches = [
        make_match("s23", "Final", leg1=(3, 1), single=True),
        make_match("s24", "Final", leg1=(3, 1), single=True),
    ]
    return seasons, matches


class TestEndToEnd:
    """Two premier seasons with one Final each."""

    def test_club_points(self, calculator, competitions, two_finals):
        seasons, matches = two_finals
        run = calculator.calculate(competitions, seasons, matches)

        assert run.years == ["2024", "2023"]
        clubs = {c.name: c for c in run.clubs_for("VCC")}

        assert clubs["Club A"].year_points == (Decimal("1.2"), Decimal("1.2"), ZERO, ZERO)
        assert clubs["Club A"].total_points == Decimal("2.4")
        assert clubs["Club B"].total_points == Decimal("0.8")
        assert clubs["Club A"].rank == 1
        assert clubs["Club B"].rank == 2

    def test_nation_points_and_spots(self, calculator, competitions, two_finals):
        seasons, matches = two_finals
        run = calculator.calculate(competitions, seasons, matches)

        avalon, borland = run.nations_for("VCC")
        assert (avalon.name, avalon.total_points, avalon.rank) == ("Avalon", Decimal("2.4"), 1)
        assert (borland.name, borland.total_points, borland.rank) == ("Borland", Decimal("0.8"), 2)

        # Avalon won the newest Final, so it holds the champion's place
        assert run.previous_vcc_champion_nation == "Avalon"
        assert avalon.spots == 1 and avalon.champion_qualifier
        assert borland.spots == 2 and not borland.champion_qualifier
        assert run.previous_ccc_champion_nation is None

    def test_counts(self, calculator, competitions, two_finals):
        seasons, matches = two_finals
        run = calculator.calculate(competitions, seasons, matches)
        assert run.seasons_processed == 2
        assert run.matches_processed == 2
        assert run.coefficient_year == "2024"

    def test_match_order_does_not_matter(self, calculator, competitions):
        seasons = [make_season("s1", "2024")]
        matches = [
            make_match("s1", "Round of 16", home=("Club A", "Avalon"), away=("Club C", "Cedra"), leg1=(2, 0), leg2=(1, 1)),
            make_match("s1", "Quarter-finals", home=("Club A", "Avalon"), away=("Club B", "Borland"), leg1=(0, 0), leg2=(2, 1)),
            make_match("s1", "Final", home=("Club B", "Borland"), away=("Club C", "Cedra"), leg1=(1, 0), single=True),
        ]
        forward = calculator.calculate(competitions, seasons, matches)
        backward = calculator.calculate(competitions, seasons, list(reversed(matches)))

        def totals(run):
            return {(c.name, c.membership): c.total_points for c in run.club_coefficients}

        assert totals(forward) == totals(backward)


class TestWindow:
    """One window shared by both tiers."""

    def test_window_alignment_across_tiers(self, calculator, competitions):
        seasons = [
            make_season("v22", "2022"),
            make_season("c24", "2024", competition_id="ccc"),
        ]
        matches = [
            make_match("v22", "Final", leg1=(1, 0), single=True),
            make_match("c24", "Final", home=("Club C", "Cedra"), away=("Club D", "Dunmore"), leg1=(2, 0), single=True),
        ]
        run = calculator.calculate(competitions, seasons, matches)

        assert run.years == ["2024", "2022"]
        premier_a = next(c for c in run.clubs_for("VCC") if c.name == "Club A")
        challenger_c = next(c for c in run.clubs_for("CCC") if c.name == "Club C")
        # Slot 1 is 2024 for every row
        assert premier_a.year_points[0] == ZERO
        assert premier_a.year_points[1] == Decimal("1.2")
        assert challenger_c.year_points[0] == Decimal("0.5")

    def test_out_of_window_seasons_skipped(self, competitions):
        calculator = CoefficientCalculator(window_years=2)
        seasons = [make_season(f"s{y}", str(y)) for y in (2021, 2022, 2023)]
        matches = [make_match(f"s{y}", "Final", leg1=(1, 0), single=True) for y in (2021, 2022, 2023)]
        run = calculator.calculate(competitions, seasons, matches)

        assert run.years == ["2023", "2022"]
        assert run.seasons_processed == 2
        club_a = run.clubs_for("VCC")[0]
        assert club_a.total_points == Decimal("2.4")

    def test_seasons_of_other_competitions_ignored(self, calculator, competitions):
        seasons = [make_season("s1", "2024"), make_season("x1", "2030", competition_id="friendly")]
        matches = [
            make_match("s1", "Final", leg1=(1, 0), single=True),
            make_match("x1", "Final", leg1=(1, 0), single=True),
        ]
        run = calculator.calculate(competitions, seasons, matches)
        assert run.years == ["2024"]
        assert run.matches_processed == 1


class TestNoCompetitions:

    def test_empty_result(self, calculator, two_finals):
        seasons, matches = two_finals
        run = calculator.calculate([Competition(id="x", name="Friendly Trophy")], seasons, matches)

        assert run.club_coefficients == []
        assert run.nation_coefficients == []
        assert run.years == []
        assert run.previous_vcc_champion_nation is None
        assert run.coefficient_year == "Current"


class TestChampion:
    """Defending champion nation of each tier."""

    def test_recorded_champion_wins(self):
        season = make_season("s1", "2024", champion_nation="Borland")
        assert season_champion_nation(season, [make_match(leg1=(3, 0), single=True)]) == "Borland"

    def test_derived_from_final_aggregate(self):
        season = make_season("s1", "2024")
        final = make_match(round="Final", leg1=(1, 0), leg2=(3, 0))
        # Leg 2 is 3-0 to the leg 2 home side, Club B: aggregate 1-3
        assert season_champion_nation(season, [final]) == "Borland"

    def test_level_final_has_no_champion(self):
        season = make_season("s1", "2024")
        assert season_champion_nation(season, [make_match(leg1=(1, 1), single=True)]) is None

    def test_no_final(self):
        season = make_season("s1", "2024")
        assert season_champion_nation(season, [make_match(round="Semi-final", leg1=(1, 0))]) is None

    def test_uses_newest_season_per_tier(self, calculator, competitions):
        seasons = [
            make_season("v23", "2023", champion_nation="Borland"),
            make_season("v24", "2024", champion_nation="Avalon"),
            make_season("c22", "2022", competition_id="ccc", champion_nation="Cedra"),
        ]
        run = calculator.calculate(competitions, seasons, [])
        assert run.previous_vcc_champion_nation == "Avalon"
        assert run.previous_ccc_champion_nation == "Cedra"


class TestIdAttachment:
    """Canonical ids attach by normalized name only."""

    def test_ids_attached(self, calculator, competitions, two_finals):
        seasons, matches = two_finals
        run = calculator.calculate(
            competitions, seasons, matches,
            nations=[Nation(id=1, name="AVALON"), Nation(id=2, name="Borland")],
            clubs=[Club(id=10, name="club a")],
        )
        clubs = {c.name: c for c in run.club_coefficients}
        nations = {n.name: n for n in run.nation_coefficients}

        assert clubs["Club A"].club_id == 10
        assert clubs["Club A"].nation_id == 1
        assert clubs["Club B"].club_id is None
        assert clubs["Club B"].nation_id == 2
        assert nations["Avalon"].nation_id == 1

    def test_unknown_name_warns_once(self, calculator, competitions, two_finals, caplog):
        seasons, matches = two_finals
        with caplog.at_level(logging.WARNING, logger="continental.names"):
            run = calculator.calculate(
                competitions, seasons, matches,
                clubs=[Club(id=10, name="Club A"), Club(id=11, name="Club Bee")],
            )

        assert next(c for c in run.club_coefficients if c.name == "Club B").club_id is None
        warnings = [r for r in caplog.records if "Club B" in r.getMessage()]
        assert len(warnings) == 1

    def test_no_records_no_ids(self, calculator, competitions, two_finals):
        seasons, matches = two_finals
        run = calculator.calculate(competitions, seasons, matches)
        assert all(c.club_id is None for c in run.club_coefficients)
        assert all(n.nation_id is None for n in run.nation_coefficients)


class TestPreviousRanks:

    def test_movement_annotated(self, calculator, competitions, two_finals):
        seasons, matches = two_finals
        run = calculator.calculate(
            competitions, seasons, matches,
            previous_ranks=[PreviousRank("Borland", "VCC", 1), PreviousRank("Avalon", "VCC", 2)],
        )
        avalon, borland = run.nations_for("VCC")
        assert avalon.movement == "up"
        assert borland.movement == "down"


class TestCalculateCoefficients:
    """The dict entry point and output shape."""

    def test_from_dicts(self):
        run = calculate_coefficients(
            competitions=[{"id": 1, "name": "Continental Champions Cup", "short_name": None}],
            seasons=[{"id": 7, "competition_id": 1, "year": 2024, "champion_nation": None}],
            matches=[{
                "season_id": 7,
                "round": "Final",
                "home_club_name": "Club A",
                "home_club_nation": "Avalon",
                "away_club_name": "Club B",
                "away_club_nation": "Borland",
                "home_score_leg1": "2",
                "away_score_leg1": 0,
                "home_score_leg2": None,
                "away_score_leg2": None,
                "is_single_leg": True,
            }],
            nations=[{"id": "n1", "name": "Avalon"}],
            existing_country_coefficients=[{"nation_name": "Avalon", "membership": "VCC", "rank": 3}],
            tie_break="insertion",
        )

        assert run.years == ["2024"]
        data = run.to_dict()
        assert set(data) == {
            "clubCoefficients",
            "nationCoefficients",
            "years",
            "previousVccChampionNation",
            "previousCccChampionNation",
        }
        assert data["previousVccChampionNation"] == "Avalon"

        avalon = data["nationCoefficients"][0]
        assert avalon["nation_name"] == "Avalon"
        assert avalon["nation_id"] == "n1"
        assert avalon["year_1_points"] == pytest.approx(1.2)
        assert avalon["year_2_points"] == 0.0
        assert avalon["total_points"] == pytest.approx(1.2)
        assert avalon["rank"] == 1
        assert avalon["previous_rank"] == 3
        assert avalon["vcc_spots"] == 1
        assert avalon["champion_qualifier"] is True
        assert "ccc_spots" not in avalon

        club_a = data["clubCoefficients"][0]
        assert club_a["club_name"] == "Club A"
        assert club_a["coefficient_year"] == "2024"

    def test_invalid_window(self):
        with pytest.raises(ValueError):
            CoefficientCalculator(window_years=0)

    def test_unparseable_previous_rank_is_ignored(self):
        run = calculate_coefficients(
            competitions=[{"id": 1, "name": "Vastland Champions Cup", "short_name": "VCC"}],
            seasons=[{"id": 7, "competition_id": 1, "year": "2024"}],
            matches=[{
                "season_id": 7,
                "round": "Final",
                "home_club_name": "Club A",
                "home_club_nation": "Avalon",
                "away_club_name": "Club B",
                "away_club_nation": "Borland",
                "home_score_leg1": 1,
                "away_score_leg1": 0,
                "is_single_leg": True,
            }],
            existing_country_coefficients=[{"nation_name": "Avalon", "membership": "VCC", "rank": "n/a"}],
        )
        avalon = run.nations_for("VCC")[0]
        assert avalon.name == "Avalon"
        assert avalon.previous_rank is None
        assert avalon.movement == "new"


class TestBands:
    """Band sizes passed in are merged over the configured ones."""

    def test_partial_bands_fall_back_to_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "premier_top_band", 4)
        monkeypatch.setattr(settings, "challenger_top_band", 3)

        calculator = CoefficientCalculator(bands={"VCC": 2})
        assert calculator.bands == {"VCC": 2, "CCC": 3}

    def test_no_bands_uses_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "premier_top_band", 4)
        assert CoefficientCalculator().bands["VCC"] == 4

    def test_challenger_spots_follow_configured_band(self, monkeypatch, competitions):
        monkeypatch.setattr(settings, "challenger_top_band", 1)
        seasons = [make_season("c1", "2024", competition_id="ccc")]
        matches = [make_match("c1", "Round of 16", leg1=(1, 0), single=True)]

        run = CoefficientCalculator(bands={"VCC": 5}).calculate(competitions, seasons, matches)
        assert [n.spots for n in run.nations_for("CCC")] == [2, 1]
