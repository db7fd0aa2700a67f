from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

import pytest

from masterdata.app import (
    UnsupportedInputError,
    enrich_sites,
    find_turbine,
    registry_statistics,
    turbine_as_dict,
    validate_input_file,
)
from masterdata.domain.model import Site, WindTurbine
from tests.helpers.registry import FakeOwnerLookup, FakePropertyLookup, FakeUnitOfWork

if TYPE_CHECKING:
    from pathlib import Path


def _turbine(gsrn: str, **values: object) -> WindTurbine:
    return WindTurbine(gsrn=gsrn, **values)  # type: ignore[arg-type]


def test_turbine_as_dict_is_json_ready() -> None:
    site = Site(name="Hee Vind I/S", id=7)
    turbine = _turbine(
        "570714700000000001",
        id=1,
        original_connection_date=date(2003, 2, 1),
        rotor_diameter_m=Decimal("80.5"),
        capacity_kw=2000,
    )
    turbine.assign_site(site, property_id="100")

    payload = turbine_as_dict(turbine)

    assert payload["gsrn"] == "570714700000000001"
    assert payload["originalConnectionDate"] == "2003-02-01"
    assert payload["rotorDiameterM"] == "80.5"
    assert payload["capacityKw"] == 2000
    assert payload["propertyId"] == "100"
    assert payload["siteId"] == 7
    assert payload["siteName"] == "Hee Vind I/S"
    assert "site" not in payload
    assert isinstance(payload["createdAt"], str)


def test_find_turbine_trims_and_misses() -> None:
    uow = FakeUnitOfWork()
    uow.turbines.add(_turbine("42", manufacturer="Siemens"))

    found = find_turbine(" 42 ", unit_of_work_factory=lambda: uow)
    missing = find_turbine("43", unit_of_work_factory=lambda: uow)

    assert found is not None
    assert found["manufacturer"] == "Siemens"
    assert found["siteId"] is None
    assert missing is None


def test_registry_statistics_as_dict() -> None:
    uow = FakeUnitOfWork()
    site = uow.sites.create("Hee Vind I/S")
    for gsrn, manufacturer in (("1", "Vestas"), ("2", "Vestas"), ("3", "Siemens")):
        uow.turbines.add(_turbine(gsrn, manufacturer=manufacturer, type_designation="V80"))
    uow.turbines.items["1"].assign_site(site, property_id=None)

    stats = registry_statistics(unit_of_work_factory=lambda: uow).as_dict()

    assert stats == {
        "totalTurbines": 3,
        "manufacturers": 2,
        "modelTypes": 1,
        "totalSites": 1,
        "totalTurbinesWithSite": 1,
        "totalTurbinesWithoutSite": 2,
        "averageTurbinesPerSite": 1.0,
    }


def test_enrich_sites_uses_given_lookups_and_limit() -> None:
    uow = FakeUnitOfWork()
    for gsrn in ("1", "2", "3"):
        uow.turbines.add(_turbine(gsrn, cadastral_no=f"{gsrn}a", cadastral_district="Hee By"))
    properties = FakePropertyLookup({("1a", "Hee By"): "100", ("2a", "Hee By"): "200"})
    owners = FakeOwnerLookup({"100": "Hee Vind I/S"})

    summary = enrich_sites(
        unit_of_work_factory=lambda: uow,
        properties=properties,
        owners=owners,
        limit=2,
    )

    assert summary.processed == 2
    assert uow.turbines.items["1"].site is not None
    assert uow.turbines.items["2"].site is not None
    assert uow.turbines.items["2"].site.name == "Unknown Owner (BFE: 200)"
    assert uow.turbines.items["3"].site is None
    assert uow.commits == 2


def test_validate_input_file_requires_existing_file(tmp_path: Path) -> None:
    with pytest.raises(UnsupportedInputError, match="No such file"):
        validate_input_file(tmp_path / "missing.xlsx")
