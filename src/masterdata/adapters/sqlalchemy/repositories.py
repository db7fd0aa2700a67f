"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, TypeVar

from sqlalchemy import distinct, func, select
from sqlalchemy.exc import IntegrityError

from masterdata.adapters.sqlalchemy.mappings import site_table, wind_turbine_table
from masterdata.domain.model import Site, WindTurbine
from masterdata.domain.ports import SiteStatistics, TurbineStatistics

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy import Select
    from sqlalchemy.orm import Session

log = getLogger(__name__)

_turbine = wind_turbine_table.c
_site = site_table.c


T = TypeVar("T", bound=tuple[object, ...])


def _paginate(stmt: Select[T], page: int, page_size: int) -> Select[T]:
    if page < 1 or page_size < 1:
        raise ValueError("page and page_size must be positive")
    return stmt.offset((page - 1) * page_size).limit(page_size)


class SqlAlchemyWindTurbineRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: WindTurbine) -> None:
        self.session.add(entity)

    def get_by_gsrn(self, gsrn: str) -> WindTurbine | None:
        stmt = select(WindTurbine).where(_turbine.gsrn == gsrn)
        return self.session.scalars(stmt).one_or_none()

    def list_by_gsrns(self, gsrns: Iterable[str]) -> list[WindTurbine]:
        wanted = list(dict.fromkeys(gsrns))
        if not wanted:
            return []
        stmt = select(WindTurbine).where(_turbine.gsrn.in_(wanted)).order_by(_turbine.id)
        return list(self.session.scalars(stmt))

    def page(self, *, page: int = 1, page_size: int = 100) -> list[WindTurbine]:
        stmt = select(WindTurbine).order_by(_turbine.id)
        return list(self.session.scalars(_paginate(stmt, page, page_size)))

    def search(
        self,
        *,
        manufacturer: str | None = None,
        type_designation: str | None = None,
        page: int = 1,
        page_size: int = 100,
    ) -> list[WindTurbine]:
        """Substring match (case-insensitive) on manufacturer and/or model type."""

        stmt = select(WindTurbine)
        if manufacturer:
            stmt = stmt.where(_turbine.manufacturer.icontains(manufacturer, autoescape=True))
        if type_designation:
            stmt = stmt.where(
                _turbine.type_designation.icontains(type_designation, autoescape=True)
            )
        stmt = stmt.order_by(_turbine.id)
        return list(self.session.scalars(_paginate(stmt, page, page_size)))

    def enrichment_candidates(
        self,
        *,
        only_unlinked: bool = True,
        gsrns: Iterable[str] | None = None,
        limit: int | None = None,
    ) -> list[WindTurbine]:
        stmt = (
            select(WindTurbine)
            .where(_turbine.cadastral_no.is_not(None))
            .where(_turbine.cadastral_district.is_not(None))
        )
        if only_unlinked:
            stmt = stmt.where(_turbine._site_id.is_(None))  # noqa: SLF001
        if gsrns is not None:
            stmt = stmt.where(_turbine.gsrn.in_(list(gsrns)))
        stmt = stmt.order_by(_turbine.id)
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.session.scalars(stmt))

    def statistics(self) -> TurbineStatistics:
        stmt = select(
            func.count(_turbine.id),
            func.count(distinct(_turbine.manufacturer)),
            func.count(distinct(_turbine.type_designation)),
        )
        total, manufacturers, model_types = self.session.execute(stmt).one()
        return TurbineStatistics(
            total_turbines=total,
            manufacturers=manufacturers,
            model_types=model_types,
        )


class SqlAlchemySiteRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Site) -> None:
        self.session.add(entity)

    def get(self, site_id: int) -> Site | None:
        return self.session.get(Site, site_id)

    def get_by_name(self, name: str) -> Site | None:
        stmt = select(Site).where(_site.name == name)
        return self.session.scalars(stmt).one_or_none()

    def create(self, name: str) -> Site:
        """Insert and commit a site; on a name conflict return the stored one."""

        site = Site(name=name)
        self.session.add(site)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            existing = self.get_by_name(name)
            if existing is None:
                raise
            log.debug("Site %r was created concurrently; reusing it", name)
            return existing
        return site

    def page(self, *, page: int = 1, page_size: int = 100) -> list[Site]:
        stmt = select(Site).order_by(_site.id)
        return list(self.session.scalars(_paginate(stmt, page, page_size)))

    def turbines_for(
        self, site: Site, *, page: int = 1, page_size: int = 100
    ) -> list[WindTurbine]:
        stmt = (
            select(WindTurbine)
            .where(_turbine._site_id == site.id)  # noqa: SLF001
            .order_by(_turbine.id)
        )
        return list(self.session.scalars(_paginate(stmt, page, page_size)))

    def remove(self, site: Site) -> None:
        stmt = select(WindTurbine).where(_turbine._site_id == site.id)  # noqa: SLF001
        for turbine in self.session.scalars(stmt):
            turbine.clear_site()
        self.session.delete(site)
        self.session.flush()

    def statistics(self) -> SiteStatistics:
        total_sites = self.session.scalar(select(func.count(_site.id))) or 0
        with_site = (
            self.session.scalar(
                select(func.count(_turbine.id)).where(_turbine._site_id.is_not(None))  # noqa: SLF001
            )
            or 0
        )
        without_site = (
            self.session.scalar(
                select(func.count(_turbine.id)).where(_turbine._site_id.is_(None))  # noqa: SLF001
            )
            or 0
        )
        average = with_site / total_sites if total_sites else 0.0
        return SiteStatistics(
            total_sites=total_sites,
            turbines_with_site=with_site,
            turbines_without_site=without_site,
            average_turbines_per_site=average,
        )
