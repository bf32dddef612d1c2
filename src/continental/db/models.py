"""
SQLAlchemy ORM models for stored coefficient tables.

Only the computed output is stored here: one row per club and per nation
per membership tier, replaced wholesale on every saved run. Source
records (competitions, seasons, matches) live in the external store and
are never written by this package.

Tables:
- club_coefficients: Ranked club coefficient rows
- country_coefficients: Ranked nation rows with qualification spots
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, DateTime, Index, Integer, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


# Points are sums of values with at most three decimals
POINTS = Numeric(10, 3)


class ClubCoefficientRecord(Base):
    """
    A club's stored coefficient for one membership tier.

    club_id / nation_id are the canonical ids attached at calculation
    time and may be null when the match data named a club or nation
    with no canonical record.
    """
    __tablename__ = "club_coefficients"

    id: Mapped[int] = mapped_column(primary_key=True)

    club_name: Mapped[str] = mapped_column(String(255), nullable=False)
    club_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    nation_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    nation_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    membership: Mapped[str] = mapped_column(String(10), nullable=False)

    year_1_points: Mapped[Decimal] = mapped_column(POINTS, nullable=False, default=Decimal("0"))
    year_2_points: Mapped[Decimal] = mapped_column(POINTS, nullable=False, default=Decimal("0"))
    year_3_points: Mapped[Decimal] = mapped_column(POINTS, nullable=False, default=Decimal("0"))
    year_4_points: Mapped[Decimal] = mapped_column(POINTS, nullable=False, default=Decimal("0"))
    total_points: Mapped[Decimal] = mapped_column(POINTS, nullable=False, default=Decimal("0"))

    coefficient_year: Mapped[str] = mapped_column(String(20), nullable=False)
    rank: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    previous_rank: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("idx_club_coefficients_membership_rank", "membership", "rank"),
    )

    def __repr__(self) -> str:
        return f"<ClubCoefficientRecord({self.membership} #{self.rank} '{self.club_name}')>"


class CountryCoefficientRecord(Base):
    """
    A nation's stored coefficient and qualification spots for one tier.

    Exactly one of vcc_spots / ccc_spots is set, matching membership.
    """
    __tablename__ = "country_coefficients"

    id: Mapped[int] = mapped_column(primary_key=True)

    nation_name: Mapped[str] = mapped_column(String(255), nullable=False)
    nation_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    membership: Mapped[str] = mapped_column(String(10), nullable=False)

    year_1_points: Mapped[Decimal] = mapped_column(POINTS, nullable=False, default=Decimal("0"))
    year_2_points: Mapped[Decimal] = mapped_column(POINTS, nullable=False, default=Decimal("0"))
    year_3_points: Mapped[Decimal] = mapped_column(POINTS, nullable=False, default=Decimal("0"))
    year_4_points: Mapped[Decimal] = mapped_column(POINTS, nullable=False, default=Decimal("0"))
    total_points: Mapped[Decimal] = mapped_column(POINTS, nullable=False, default=Decimal("0"))

    coefficient_year: Mapped[str] = mapped_column(String(20), nullable=False)
    rank: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    previous_rank: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    vcc_spots: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    ccc_spots: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    champion_qualifier: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("idx_country_coefficients_membership_rank", "membership", "rank"),
    )

    def __repr__(self) -> str:
        return f"<CountryCoefficientRecord({self.membership} #{self.rank} '{self.nation_name}')>"
