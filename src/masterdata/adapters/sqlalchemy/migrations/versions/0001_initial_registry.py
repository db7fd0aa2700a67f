"""Create site and wind_turbine tables.

Revision ID: 0001
Revises:
Create Date: 2026-02-01 08:30:54
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from masterdata.adapters.sqlalchemy.mappings import UTCDateTime

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "site",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=500), nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.Column("updated_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_site")),
        sa.UniqueConstraint("name", name=op.f("uq_site_site_name")),
    )
    op.create_table(
        "wind_turbine",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("gsrn", sa.String(length=100), nullable=False),
        sa.Column("original_connection_date", sa.Date(), nullable=True),
        sa.Column("decommissioning_date", sa.Date(), nullable=True),
        sa.Column("capacity_kw", sa.Integer(), nullable=True),
        sa.Column("rotor_diameter_m", sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column("hub_height_m", sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column("manufacturer", sa.String(length=200), nullable=True),
        sa.Column("type_designation", sa.String(length=200), nullable=True),
        sa.Column("local_authority", sa.String(length=200), nullable=True),
        sa.Column("location_type", sa.String(length=100), nullable=True),
        sa.Column("cadastral_district", sa.String(length=200), nullable=True),
        sa.Column("cadastral_no", sa.String(length=100), nullable=True),
        sa.Column("coordinate_x", sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column("coordinate_y", sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column("coordinate_origin", sa.String(length=200), nullable=True),
        sa.Column("property_id", sa.String(length=100), nullable=True),
        sa.Column("site_id", sa.Integer(), nullable=True),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["site_id"],
            ["site.id"],
            name=op.f("fk_wind_turbine_site_id_site"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_wind_turbine")),
        sa.UniqueConstraint("gsrn", name=op.f("uq_wind_turbine_wind_turbine_gsrn")),
    )
    with op.batch_alter_table("wind_turbine", schema=None) as batch_op:
        batch_op.create_index(
            batch_op.f("ix_wind_turbine_site_id"), ["site_id"], unique=False
        )


def downgrade() -> None:
    with op.batch_alter_table("wind_turbine", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_wind_turbine_site_id"))
    op.drop_table("wind_turbine")
    op.drop_table("site")
