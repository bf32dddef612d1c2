"""Persistence helpers for stored coefficient snapshots."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from continental.coefficients.calculator import CoefficientRun
from continental.coefficients.standings import ClubCoefficient, NationCoefficient
from continental.db.models import ClubCoefficientRecord, CountryCoefficientRecord
from continental.records import PreviousRank

logger = logging.getLogger(__name__)

STORED_YEARS = 4


def _stored_id(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _year_columns(row: ClubCoefficient | NationCoefficient) -> dict[str, Decimal]:
    columns = {f"year_{i}_points": row.year_point(i) for i in range(1, STORED_YEARS + 1)}
    columns["total_points"] = row.total_points
    return columns


def _club_record(row: ClubCoefficient) -> ClubCoefficientRecord:
    return ClubCoefficientRecord(
        club_name=row.name,
        club_id=_stored_id(row.club_id),
        nation_name=row.nation_name,
        nation_id=_stored_id(row.nation_id),
        membership=row.membership,
        coefficient_year=row.coefficient_year,
        rank=row.rank,
        **_year_columns(row),
    )


def _country_record(row: NationCoefficient) -> CountryCoefficientRecord:
    return CountryCoefficientRecord(
        nation_name=row.name,
        nation_id=_stored_id(row.nation_id),
        membership=row.membership,
        coefficient_year=row.coefficient_year,
        rank=row.rank,
        previous_rank=row.previous_rank,
        vcc_spots=row.vcc_spots,
        ccc_spots=row.ccc_spots,
        champion_qualifier=row.champion_qualifier,
        **_year_columns(row),
    )


def replace_snapshot(session: Session, run: CoefficientRun) -> tuple[int, int]:
    """
    Replace the stored coefficient tables with a new run.

    Existing rows are deleted and the run's rows inserted in the same
    transaction; the caller commits. Only four year columns are stored,
    so a run over a longer window is refused before anything is deleted.

    Returns:
        (club rows written, country rows written)

    Raises:
        ValueError: If the run covers more than four years
    """
    if len(run.years) > STORED_YEARS:
        raise ValueError(
            f"Run covers {len(run.years)} years but only {STORED_YEARS} can be stored; "
            f"recalculate with coefficient_window_years <= {STORED_YEARS} to save"
        )

    session.execute(delete(ClubCoefficientRecord))
    session.execute(delete(CountryCoefficientRecord))

    session.add_all(_club_record(row) for row in run.club_coefficients)
    session.add_all(_country_record(row) for row in run.nation_coefficients)
    session.flush()

    logger.info(
        "Stored %d club and %d country coefficients for %s",
        len(run.club_coefficients), len(run.nation_coefficients), run.coefficient_year,
    )
    return len(run.club_coefficients), len(run.nation_coefficients)


def load_previous_ranks(session: Session) -> list[PreviousRank]:
    """Stored nation ranks, for the next run's rank-movement annotation."""
    rows = session.scalars(
        select(CountryCoefficientRecord).order_by(
            CountryCoefficientRecord.membership, CountryCoefficientRecord.rank,
        )
    )
    return [
        PreviousRank(nation_name=row.nation_name, membership=row.membership, rank=row.rank)
        for row in rows
    ]
