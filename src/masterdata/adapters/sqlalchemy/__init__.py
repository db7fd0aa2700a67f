"""SQLAlchemy adapter package for the turbine registry."""

from __future__ import annotations

from .mappings import mapper_registry, site_table, start_mappers, wind_turbine_table
from .repositories import SqlAlchemySiteRepository, SqlAlchemyWindTurbineRepository

__all__ = [
    "SqlAlchemySiteRepository",
    "SqlAlchemyWindTurbineRepository",
    "mapper_registry",
    "site_table",
    "start_mappers",
    "wind_turbine_table",
]
