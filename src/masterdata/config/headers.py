"""Loader for the packaged header synonym table."""

from __future__ import annotations

import tomllib
from functools import cache
from importlib import resources
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from .errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

HEADER_SYNONYMS_RESOURCE: Final[str] = "header_synonyms.toml"


def parse_header_synonyms(document: str) -> Mapping[str, tuple[str, ...]]:
    """Parse a synonym TOML document into ``{field: (header, ...)}``."""

    try:
        loaded = tomllib.loads(document)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Invalid header synonym table: {exc}") from exc

    section = loaded.get("fields")
    if not isinstance(section, dict):
        raise ConfigurationError("Header synonym table needs a [fields] section")

    table: dict[str, tuple[str, ...]] = {}
    for field_name, headers in section.items():
        if not isinstance(headers, list) or not all(isinstance(h, str) for h in headers):
            raise ConfigurationError(f"Synonyms for {field_name!r} must be a list of strings")
        table[str(field_name)] = tuple(headers)
    return MappingProxyType(table)


@cache
def load_header_synonyms() -> Mapping[str, tuple[str, ...]]:
    """Return the packaged synonym table, read once per process."""

    document = resources.files(__package__).joinpath(HEADER_SYNONYMS_RESOURCE).read_text("utf-8")
    return parse_header_synonyms(document)
