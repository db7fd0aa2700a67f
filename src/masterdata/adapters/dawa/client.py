"""Client for the DAWA cadastral parcel autocomplete endpoint."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from masterdata.adapters.http_resilience import ResilientClient
from masterdata.config.cadastral import DAWA_PAGE_SIZE

from .schema import AutocompleteResponse

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from masterdata.config.http_resilience import ResilienceConfig

log = getLogger(__name__)

AUTOCOMPLETE_PATH = "jordstykker/autocomplete"


class DawaAPIError(RuntimeError):
    """Raised when DAWA answers with something other than a list of hits."""


class DawaClient:
    """Resolve ``(cadastral number, district)`` to a property id (BFE).

    Keeps a single :class:`ResilientClient` open between ``__aenter__`` and
    ``__aexit__`` so the configured cooldown paces every request on it.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        page_size: int = DAWA_PAGE_SIZE,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._page_size = page_size
        self._client = (client_factory or ResilientClient)(config)

    async def __aenter__(self) -> DawaClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def find_property_id(self, cadastral_no: str, cadastral_district: str) -> str | None:
        query = f"{cadastral_no}, {cadastral_district}"
        try:
            response = await self.autocomplete(query)
        except (httpx.HTTPError, DawaAPIError, ValidationError, ValueError) as exc:
            log.warning("DAWA lookup failed for %r: %s", query, exc)
            return None
        property_id = response.first_property_id()
        if property_id is None:
            log.warning("DAWA returned no property id for %r", query)
        else:
            log.debug("DAWA resolved %r to property %s", query, property_id)
        return property_id

    async def autocomplete(self, query: str) -> AutocompleteResponse:
        response = await self._client.get(
            AUTOCOMPLETE_PATH,
            params={"per_side": str(self._page_size), "q": query},
        )
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, list):
            raise DawaAPIError(f"Unexpected DAWA payload type: {type(payload).__name__}")
        return AutocompleteResponse.model_validate(payload)
