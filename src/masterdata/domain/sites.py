"""Derive a turbine's owning site from its cadastral reference.

Resolution chains two external lookups: the cadastral reference is turned into a
property id (BFE), and the property id into the name of the legal owner. Sites
are keyed by that owner name, so turbines on land held by the same owner end up
on the same site.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from masterdata.domain.model import Site, WindTurbine
    from masterdata.domain.ports import (
        OwnerLookup,
        PropertyLookup,
        RegistryUnitOfWork,
        SiteRepository,
    )

log = getLogger(__name__)


class ResolutionOutcome(StrEnum):
    MISSING_REFERENCE = "missing_reference"
    LOOKUP_FAILED = "lookup_failed"
    LINKED_EXISTING = "linked_existing"
    CREATED = "created"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class SiteResolution:
    outcome: ResolutionOutcome
    site: Site | None = None
    property_id: str | None = None

    @property
    def linked(self) -> bool:
        return self.site is not None


def placeholder_owner_name(property_id: str) -> str:
    return f"Unknown Owner (BFE: {property_id})"


class SiteResolver:
    """Resolve turbines to sites, creating sites lazily by owner name.

    Property ids are memoized per cadastral reference for the lifetime of the
    resolver. The resolver never raises: every failure comes back as an outcome.
    """

    def __init__(
        self,
        *,
        properties: PropertyLookup,
        owners: OwnerLookup,
        sites: SiteRepository,
    ) -> None:
        self._properties = properties
        self._owners = owners
        self._sites = sites
        self._property_ids: dict[tuple[str, str], str] = {}

    async def resolve(self, turbine: WindTurbine) -> SiteResolution:
        cadastral_no = (turbine.cadastral_no or "").strip()
        district = (turbine.cadastral_district or "").strip()
        if not cadastral_no or not district:
            log.debug("Turbine %s has no cadastral reference", turbine.gsrn)
            return SiteResolution(ResolutionOutcome.MISSING_REFERENCE)

        try:
            return await self._resolve(cadastral_no, district)
        except Exception:
            log.exception(
                "Site resolution failed for turbine %s (%s, %s)",
                turbine.gsrn,
                cadastral_no,
                district,
            )
            return SiteResolution(ResolutionOutcome.ERROR)

    async def _resolve(self, cadastral_no: str, district: str) -> SiteResolution:
        property_id = await self._property_id(cadastral_no, district)
        if property_id is None:
            log.warning("Could not resolve property id for %s, %s", cadastral_no, district)
            return SiteResolution(ResolutionOutcome.LOOKUP_FAILED)

        owner_name = await self._owners.find_owner_name(property_id)
        if not owner_name or not owner_name.strip():
            log.warning("Could not resolve owner for property %s", property_id)
            owner_name = placeholder_owner_name(property_id)

        existing = self._sites.get_by_name(owner_name)
        if existing is not None:
            return SiteResolution(ResolutionOutcome.LINKED_EXISTING, existing, property_id)

        site = self._sites.create(owner_name)
        log.info("Created site %r", site.name)
        return SiteResolution(ResolutionOutcome.CREATED, site, property_id)

    async def _property_id(self, cadastral_no: str, district: str) -> str | None:
        key = (cadastral_no, district)
        cached = self._property_ids.get(key)
        if cached is not None:
            return cached
        property_id = await self._properties.find_property_id(cadastral_no, district)
        if property_id:
            self._property_ids[key] = property_id
            return property_id
        return None


@dataclass(slots=True)
class EnrichmentSummary:
    """Per-outcome tally of an enrichment pass."""

    outcomes: Counter[ResolutionOutcome] = field(default_factory=Counter)

    @property
    def processed(self) -> int:
        return sum(self.outcomes.values())

    @property
    def linked(self) -> int:
        return (
            self.outcomes[ResolutionOutcome.CREATED]
            + self.outcomes[ResolutionOutcome.LINKED_EXISTING]
        )

    def as_dict(self) -> dict[str, int]:
        counts = {outcome.value: self.outcomes[outcome] for outcome in ResolutionOutcome}
        return {"processed": self.processed, "linked": self.linked, **counts}


async def enrich_turbines(
    turbines: Iterable[WindTurbine],
    *,
    resolver: SiteResolver,
    uow: RegistryUnitOfWork,
) -> EnrichmentSummary:
    """Resolve and link each turbine in order, committing after every linkage.

    Turbines whose resolution yields no site keep their current linkage. A linkage
    that cannot be committed is rolled back and counted as an error.
    """

    summary = EnrichmentSummary()
    for turbine in turbines:
        resolution = await resolver.resolve(turbine)
        if resolution.site is not None:
            turbine.assign_site(resolution.site, property_id=resolution.property_id)
            try:
                uow.commit()
            except Exception:
                log.exception("Could not link turbine %s to site", turbine.gsrn)
                uow.rollback()
                summary.outcomes[ResolutionOutcome.ERROR] += 1
                continue
        summary.outcomes[resolution.outcome] += 1
    log.info(
        "Enrichment finished: %d processed, %d linked",
        summary.processed,
        summary.linked,
    )
    return summary
