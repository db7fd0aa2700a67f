"""SQLAlchemy mapping metadata for the registry domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Dialect,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    orm,
)
from sqlalchemy.orm import configure_mappers, relationship

from masterdata.domain.model import Site, WindTurbine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

site_table = Table(
    "site",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(500), nullable=False),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
    UniqueConstraint("name"),
)

wind_turbine_table = Table(
    "wind_turbine",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("gsrn", String(100), nullable=False),
    Column("original_connection_date", Date, nullable=True),
    Column("decommissioning_date", Date, nullable=True),
    Column("capacity_kw", Integer, nullable=True),
    Column("rotor_diameter_m", Numeric(10, 2), nullable=True),
    Column("hub_height_m", Numeric(10, 2), nullable=True),
    Column("manufacturer", String(200), nullable=True),
    Column("type_designation", String(200), nullable=True),
    Column("local_authority", String(200), nullable=True),
    Column("location_type", String(100), nullable=True),
    Column("cadastral_district", String(200), nullable=True),
    Column("cadastral_no", String(100), nullable=True),
    Column("coordinate_x", Numeric(12, 2), nullable=True),
    Column("coordinate_y", Numeric(12, 2), nullable=True),
    Column("coordinate_origin", String(200), nullable=True),
    Column("property_id", String(100), nullable=True),
    Column(
        "site_id",
        Integer,
        ForeignKey("site.id", ondelete="SET NULL"),
        key="_site_id",
        nullable=True,
        index=True,
    ),
    Column("created_at", UTCDateTime(), nullable=False),
    UniqueConstraint("gsrn"),
)


@cache
def start_mappers() -> orm.registry:
    """Map domain classes onto the registry tables once per process."""

    mapper_registry.map_imperatively(Site, site_table)
    mapper_registry.map_imperatively(
        WindTurbine,
        wind_turbine_table,
        properties={
            "site": relationship(Site, lazy="joined"),
        },
    )
    configure_mappers()
    log.debug("SQLAlchemy mappers configured")
    return mapper_registry

