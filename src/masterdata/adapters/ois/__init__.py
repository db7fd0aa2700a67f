"""OIS (public property information) ownership lookups."""

from __future__ import annotations

from .client import OisAPIError, OisClient
from .schema import Owner, OwnerResponse

__all__ = ["OisAPIError", "OisClient", "Owner", "OwnerResponse"]
