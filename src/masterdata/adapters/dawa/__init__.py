"""DAWA (Danish address web API) cadastral lookups."""

from __future__ import annotations

from .client import DawaAPIError, DawaClient
from .schema import AutocompleteHit, AutocompleteResponse, Jordstykke

__all__ = [
    "AutocompleteHit",
    "AutocompleteResponse",
    "DawaAPIError",
    "DawaClient",
    "Jordstykke",
]
