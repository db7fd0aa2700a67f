"""Ports for the external cadastral and ownership registers."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class PropertyLookup(Protocol):
    """Resolves a cadastral reference to the register's property id (BFE)."""

    async def find_property_id(self, cadastral_no: str, cadastral_district: str) -> str | None:
        """Return the property id, or ``None`` when the lookup fails or finds nothing."""
        ...


@runtime_checkable
class OwnerLookup(Protocol):
    """Resolves a property id to the name of its legal owner."""

    async def find_owner_name(self, property_id: str) -> str | None:
        """Return the first owner's name, or ``None`` when unavailable."""
        ...
