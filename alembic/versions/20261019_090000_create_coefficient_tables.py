"""Create club_coefficients and country_coefficients tables

Revision ID: 5a1c0e9f3b27
Revises:
Create Date: 2026-10-19 09:00:00.000000+00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# Revision identifiers, used by Alembic.
revision: str = "5a1c0e9f3b27"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _points_columns() -> list[sa.Column]:
    return [
        sa.Column(name, sa.Numeric(10, 3), nullable=False)
        for name in (
            "year_1_points",
            "year_2_points",
            "year_3_points",
            "year_4_points",
            "total_points",
        )
    ]


def upgrade() -> None:
    op.create_table(
        "club_coefficients",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("club_name", sa.String(length=255), nullable=False),
        sa.Column("club_id", sa.String(length=64), nullable=True),
        sa.Column("nation_name", sa.String(length=255), nullable=True),
        sa.Column("nation_id", sa.String(length=64), nullable=True),
        sa.Column("membership", sa.String(length=10), nullable=False),
        *_points_columns(),
        sa.Column("coefficient_year", sa.String(length=20), nullable=False),
        sa.Column("rank", sa.Integer(), nullable=True),
        sa.Column("previous_rank", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_club_coefficients_membership_rank",
        "club_coefficients",
        ["membership", "rank"],
        unique=False,
    )

    op.create_table(
        "country_coefficients",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("nation_name", sa.String(length=255), nullable=False),
        sa.Column("nation_id", sa.String(length=64), nullable=True),
        sa.Column("membership", sa.String(length=10), nullable=False),
        *_points_columns(),
        sa.Column("coefficient_year", sa.String(length=20), nullable=False),
        sa.Column("rank", sa.Integer(), nullable=True),
        sa.Column("previous_rank", sa.Integer(), nullable=True),
        sa.Column("vcc_spots", sa.Integer(), nullable=True),
        sa.Column("ccc_spots", sa.Integer(), nullable=True),
        sa.Column("champion_qualifier", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_country_coefficients_membership_rank",
        "country_coefficients",
        ["membership", "rank"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("idx_country_coefficients_membership_rank", table_name="country_coefficients")
    op.drop_table("country_coefficients")
    op.drop_index("idx_club_coefficients_membership_rank", table_name="club_coefficients")
    op.drop_table("club_coefficients")
