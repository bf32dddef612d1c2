"""
Coefficient calculator: one full run from raw records to rankings.

Stages, in order:
1. Classify competitions into the premier (VCC) and challenger (CCC) tiers
2. Choose the shared window: the newest distinct years of those tiers' seasons
3. Fold every match of every in-window season into the club/nation ledgers
4. Read each ledger entry over the window into year_1..year_N points
5. Attach canonical ids by normalized name (missing records only log)
6. Rank each tier, allocate nation spots, annotate previous ranks

A run is a pure function of its inputs: no I/O, no state kept between
calls, and the same records always give the same output.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence

from continental.coefficients.constants import FINAL, canonical_round
from continental.coefficients.ledger import Ledger
from continental.coefficients.ranking import attach_previous_ranks, rank_nations, rank_results
from continental.coefficients.results import tie_winner_nation
from continental.coefficients.standings import ClubCoefficient, NationCoefficient
from continental.coefficients.window import (
    aggregate_clubs,
    aggregate_nations,
    coefficient_year_label,
    select_window_years,
    year_sort_key,
)
from continental.config import settings
from continental.memberships import CHALLENGER, MEMBERSHIPS, PREMIER
from continental.names import NameIndex
from continental.records import (
    Club,
    Competition,
    ContinentalMatch,
    ContinentalSeason,
    Nation,
    PreviousRank,
    tier_competitions,
)

logger = logging.getLogger(__name__)


@dataclass
class CoefficientRun:
    """
    Output of one coefficient run.

    club_coefficients and nation_coefficients are each ordered premier
    tier first, then challenger, by rank within each tier.
    """
    club_coefficients: list[ClubCoefficient]
    nation_coefficients: list[NationCoefficient]
    years: list[str]
    previous_vcc_champion_nation: Optional[str] = None
    previous_ccc_champion_nation: Optional[str] = None
    seasons_processed: int = 0
    matches_processed: int = 0

    @property
    def coefficient_year(self) -> str:
        return coefficient_year_label(self.years)

    def clubs_for(self, membership: str) -> list[ClubCoefficient]:
        return [c for c in self.club_coefficients if c.membership == membership]

    def nations_for(self, membership: str) -> list[NationCoefficient]:
        return [n for n in self.nation_coefficients if n.membership == membership]

    def summary(self) -> str:
        return (
            f"Coefficients {self.coefficient_year}: "
            f"years={self.years}, seasons={self.seasons_processed}, "
            f"matches={self.matches_processed}, clubs={len(self.club_coefficients)}, "
            f"nations={len(self.nation_coefficients)}"
        )

    def to_dict(self) -> dict[str, Any]:
        """Render the run in the record shapes the storage layer expects."""
        return {
            "clubCoefficients": [c.to_dict() for c in self.club_coefficients],
            "nationCoefficients": [n.to_dict() for n in self.nation_coefficients],
            "years": list(self.years),
            "previousVccChampionNation": self.previous_vcc_champion_nation,
            "previousCccChampionNation": self.previous_ccc_champion_nation,
        }


def season_champion_nation(
    season: ContinentalSeason,
    matches: Iterable[ContinentalMatch],
) -> Optional[str]:
    """
    The champion nation of a season: as recorded, else from its Final.

    The Final's winner is decided on aggregate over both legs. An
    unplayed or level Final gives None.
    """
    if season.champion_nation:
        return season.champion_nation
    for match in matches:
        if canonical_round(match.round) == FINAL:
            return tie_winner_nation(match)
    return None


@dataclass
class CoefficientCalculator:
    """
    Computes club and nation coefficients from continental results.

    Usage:
        calculator = CoefficientCalculator()
        run = calculator.calculate(
            competitions=competitions,
            seasons=seasons,
            matches=matches,
            nations=nations,
            clubs=clubs,
        )
        for nation in run.nations_for("VCC"):
            print(nation.rank, nation.name, nation.total_points, nation.spots)

    Parameters left as None fall back to the values in continental.config.
    """
    window_years: Optional[int] = None
    bands: Optional[dict[str, int]] = None
    tie_break: Optional[str] = None
    suggestion_threshold: Optional[float] = None

    def __post_init__(self) -> None:
        if self.window_years is None:
            self.window_years = settings.coefficient_window_years
        configured_bands = {
            PREMIER: settings.premier_top_band,
            CHALLENGER: settings.challenger_top_band,
        }
        self.bands = {**configured_bands, **(self.bands or {})}
        if self.tie_break is None:
            self.tie_break = settings.tie_break
        if self.suggestion_threshold is None:
            self.suggestion_threshold = settings.name_suggestion_threshold
        if self.window_years < 1:
            raise ValueError("window_years must be at least 1")

    def calculate(
        self,
        competitions: Sequence[Competition],
        seasons: Sequence[ContinentalSeason],
        matches: Sequence[ContinentalMatch],
        nations: Sequence[Nation] = (),
        clubs: Sequence[Club] = (),
        previous_ranks: Sequence[PreviousRank] = (),
    ) -> CoefficientRun:
        """
        Run the full coefficient computation.

        Args:
            competitions: All continental competitions
            seasons: Seasons of any competition; only tiered ones count
            matches: Matches of any season; grouped by season_id
            nations: Canonical nations, for id attachment
            clubs: Canonical clubs, for id attachment
            previous_ranks: Nation ranks from the last stored run

        Returns:
            CoefficientRun with both ranked lists and the window years
        """
        tier_ids = tier_competitions(competitions)
        membership_by_competition = {comp_id: tier for tier, comp_id in tier_ids.items()}

        tiered_seasons = [
            (season, membership_by_competition[season.competition_id])
            for season in seasons
            if season.competition_id in membership_by_competition
        ]
        if not tier_ids:
            logger.info("No premier or challenger competition found; nothing to rank")

        matches_by_season: dict[Any, list[ContinentalMatch]] = {}
        for match in matches:
            matches_by_season.setdefault(match.season_id, []).append(match)

        champions = self._defending_champions(tiered_seasons, matches_by_season)

        window = select_window_years(
            (season.year for season, _ in tiered_seasons), self.window_years,
        )

        ledger = Ledger()
        seasons_processed = 0
        matches_processed = 0
        for season, membership in tiered_seasons:
            if season.year not in window:
                logger.debug("Skipping %s season %s outside window", membership, season.year)
                continue
            matches_processed += ledger.record_season(
                season, membership, matches_by_season.get(season.id, ()),
            )
            seasons_processed += 1

        club_rows = aggregate_clubs(ledger, window, self.window_years)
        nation_rows = aggregate_nations(ledger, window, self.window_years)

        self._attach_ids(club_rows, nation_rows, nations, clubs)
        attach_previous_ranks(nation_rows, previous_ranks)

        run = CoefficientRun(
            club_coefficients=rank_results(club_rows, self.tie_break),
            nation_coefficients=rank_nations(nation_rows, champions, self.bands, self.tie_break),
            years=window,
            previous_vcc_champion_nation=champions.get(PREMIER),
            previous_ccc_champion_nation=champions.get(CHALLENGER),
            seasons_processed=seasons_processed,
            matches_processed=matches_processed,
        )
        logger.info(run.summary())
        return run

    def _defending_champions(
        self,
        tiered_seasons: Sequence[tuple[ContinentalSeason, str]],
        matches_by_season: Mapping[Any, list[ContinentalMatch]],
    ) -> dict[str, Optional[str]]:
        """Champion nation of the newest season in each tier."""
        champions: dict[str, Optional[str]] = {}
        for membership in MEMBERSHIPS:
            tier = [season for season, m in tiered_seasons if m == membership]
            if not tier:
                champions[membership] = None
                continue
            latest = max(tier, key=lambda s: year_sort_key(s.year))
            champions[membership] = season_champion_nation(
                latest, matches_by_season.get(latest.id, ()),
            )
        return champions

    def _attach_ids(
        self,
        club_rows: Sequence[ClubCoefficient],
        nation_rows: Sequence[NationCoefficient],
        nations: Sequence[Nation],
        clubs: Sequence[Club],
    ) -> None:
        """Best-effort id enrichment; rows without a record keep a None id."""
        nation_index = NameIndex(((n.name, n.id) for n in nations), kind="nation")
        club_index = NameIndex(((c.name, c.id) for c in clubs), kind="club")
        threshold = self.suggestion_threshold

        for row in club_rows:
            if row.club_id is None and len(club_index):
                row.club_id = club_index.resolve_or_warn(row.name, threshold)
            row.nation_id = nation_index.resolve(row.nation_name)
        for row in nation_rows:
            if len(nation_index):
                row.nation_id = nation_index.resolve_or_warn(row.name, threshold)


def calculate_coefficients(
    competitions: Iterable[dict],
    seasons: Iterable[dict],
    matches: Iterable[dict],
    nations: Iterable[dict] = (),
    clubs: Iterable[dict] = (),
    existing_country_coefficients: Iterable[dict] = (),
    **calculator_options: Any,
) -> CoefficientRun:
    """
    Convenience wrapper taking plain record dicts.

    For when records come straight from a JSON export or API response.
    Keyword options are passed to CoefficientCalculator.
    """
    calculator = CoefficientCalculator(**calculator_options)
    return calculator.calculate(
        competitions=[Competition.from_dict(c) for c in competitions],
        seasons=[ContinentalSeason.from_dict(s) for s in seasons],
        matches=[ContinentalMatch.from_dict(m) for m in matches],
        nations=[Nation.from_dict(n) for n in nations],
        clubs=[Club.from_dict(c) for c in clubs],
        previous_ranks=[PreviousRank.from_dict(p) for p in existing_country_coefficients],
    )
