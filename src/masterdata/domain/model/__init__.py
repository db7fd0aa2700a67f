"""Public domain model surface."""

from __future__ import annotations

from masterdata.domain.model.site import Site, utcnow
from masterdata.domain.model.turbine import REGISTRY_FIELDS, RegistryFields, WindTurbine

__all__ = [
    "REGISTRY_FIELDS",
    "RegistryFields",
    "Site",
    "WindTurbine",
    "utcnow",
]
