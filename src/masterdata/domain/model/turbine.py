"""Canonical wind-turbine registry record."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Final

from masterdata.domain.model.site import Site, utcnow

if TYPE_CHECKING:
    from datetime import date, datetime
    from decimal import Decimal


@dataclass(frozen=True, slots=True, kw_only=True)
class RegistryFields:
    """Typed values for every registry column an import may supply.

    ``None`` means "absent"; an import overwrites all of them at once.
    """

    original_connection_date: date | None = None
    decommissioning_date: date | None = None
    capacity_kw: int | None = None
    rotor_diameter_m: Decimal | None = None
    hub_height_m: Decimal | None = None
    manufacturer: str | None = None
    type_designation: str | None = None
    local_authority: str | None = None
    location_type: str | None = None
    cadastral_district: str | None = None
    cadastral_no: str | None = None
    coordinate_x: Decimal | None = None
    coordinate_y: Decimal | None = None
    coordinate_origin: str | None = None


REGISTRY_FIELDS: Final[tuple[str, ...]] = tuple(f.name for f in fields(RegistryFields))


@dataclass(eq=False, kw_only=True)
class WindTurbine:
    """A turbine keyed by its GSRN.

    ``gsrn`` and ``created_at`` never change after the first save. ``site`` and
    ``property_id`` belong to enrichment and survive registry updates.
    """

    gsrn: str
    id: int | None = None

    original_connection_date: date | None = None
    decommissioning_date: date | None = None
    capacity_kw: int | None = None
    rotor_diameter_m: Decimal | None = None
    hub_height_m: Decimal | None = None
    manufacturer: str | None = None
    type_designation: str | None = None
    local_authority: str | None = None
    location_type: str | None = None
    cadastral_district: str | None = None
    cadastral_no: str | None = None
    coordinate_x: Decimal | None = None
    coordinate_y: Decimal | None = None
    coordinate_origin: str | None = None

    property_id: str | None = None
    site: Site | None = field(default=None, repr=False)
    created_at: datetime = field(default_factory=utcnow)

    @classmethod
    def from_registry(cls, gsrn: str, values: RegistryFields) -> WindTurbine:
        turbine = cls(gsrn=gsrn)
        turbine.overwrite(values)
        return turbine

    def overwrite(self, values: RegistryFields) -> None:
        """Replace every registry field, including with ``None``."""

        for name in REGISTRY_FIELDS:
            setattr(self, name, getattr(values, name))

    @property
    def site_id(self) -> int | None:
        return self.site.id if self.site is not None else None

    def assign_site(self, site: Site, *, property_id: str | None) -> None:
        self.site = site
        if property_id is not None:
            self.property_id = property_id

    def clear_site(self) -> None:
        self.site = None
