"""Domain port definitions for adapters."""

from __future__ import annotations

from .lookups import OwnerLookup, PropertyLookup
from .persistence import (
    Repository,
    SiteRepository,
    SiteStatistics,
    TurbineStatistics,
    WindTurbineRepository,
)
from .unit_of_work import (
    RegistryRepositories,
    RegistryUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "OwnerLookup",
    "PropertyLookup",
    "RegistryRepositories",
    "RegistryUnitOfWork",
    "Repository",
    "RepositoryCollection",
    "SiteRepository",
    "SiteStatistics",
    "TurbineStatistics",
    "UnitOfWork",
    "WindTurbineRepository",
]
