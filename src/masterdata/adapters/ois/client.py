"""Client for the OIS property ownership endpoint."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from masterdata.adapters.http_resilience import ResilientClient

from .schema import OwnerResponse

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from masterdata.config.http_resilience import ResilienceConfig

log = getLogger(__name__)

OWNER_PATH = "ejer/get"


class OisAPIError(RuntimeError):
    """Raised when OIS answers with something other than an owner document."""


class OisClient:
    """Resolve a property id (BFE) to the name of its first registered owner."""

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._client = (client_factory or ResilientClient)(config)

    async def __aenter__(self) -> OisClient:
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

    async def find_owner_name(self, property_id: str) -> str | None:
        try:
            response = await self.owners(property_id)
        except (httpx.HTTPError, OisAPIError, ValidationError, ValueError) as exc:
            log.warning("OIS lookup failed for property %s: %s", property_id, exc)
            return None
        name = response.first_owner_name()
        if name is None:
            log.warning("OIS returned no owner for property %s", property_id)
        else:
            log.debug("OIS resolved property %s to %r", property_id, name)
        return name

    async def owners(self, property_id: str) -> OwnerResponse:
        response = await self._client.get(OWNER_PATH, params={"bfe": property_id})
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise OisAPIError(f"Unexpected OIS payload type: {type(payload).__name__}")
        return OwnerResponse.model_validate(payload)
