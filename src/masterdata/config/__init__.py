"""Application configuration helpers."""

from __future__ import annotations

from .cadastral import CadastralConfig, get_cadastral_config
from .errors import ConfigurationError
from .headers import load_header_synonyms, parse_header_synonyms
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .importing import ImportConfig, get_import_config
from .logging import configure_logging
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_http_cache_path,
    get_storage_config,
)

__all__ = [
    "CacheConfig",
    "CadastralConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "ImportConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_cadastral_config",
    "get_database_config",
    "get_http_cache_path",
    "get_import_config",
    "get_storage_config",
    "load_header_synonyms",
    "parse_header_synonyms",
]
