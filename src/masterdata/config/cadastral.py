"""Cadastral lookup service configuration (DAWA + OIS)."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_float, optional_env_str
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_DAWA_BASE_URL = "https://dawa.aws.dk"
DEFAULT_OIS_BASE_URL = "https://ois.dk/api"
DEFAULT_DAWA_COOLDOWN_SECONDS = 1.0
DEFAULT_LOOKUP_TIMEOUT_SECONDS = 10.0
DAWA_PAGE_SIZE = 10


@dataclass(frozen=True, slots=True)
class CadastralConfig:
    dawa: ResilienceConfig
    ois: ResilienceConfig
    dawa_page_size: int = DAWA_PAGE_SIZE


def get_cadastral_config() -> CadastralConfig:
    timeout = optional_env_float("CADASTRAL_TIMEOUT_SECONDS", DEFAULT_LOOKUP_TIMEOUT_SECONDS)
    dawa = ResilienceConfig(
        name="dawa",
        base_url=optional_env_str("DAWA_BASE_URL", DEFAULT_DAWA_BASE_URL),
        timeout_seconds=timeout,
        cooldown_seconds=optional_env_float(
            "DAWA_COOLDOWN_SECONDS", DEFAULT_DAWA_COOLDOWN_SECONDS
        ),
        retry=RetryPolicy(total=2),
        cache=CacheConfig(enabled=True, backend="memory"),
    )
    ois = ResilienceConfig(
        name="ois",
        base_url=optional_env_str("OIS_BASE_URL", DEFAULT_OIS_BASE_URL),
        timeout_seconds=timeout,
        ratelimit=RateLimit(max_calls=4, per_seconds=1.0),
        retry=RetryPolicy(total=2),
        cache=CacheConfig(enabled=True, backend="memory"),
    )
    return CadastralConfig(dawa=dawa, ois=ois)
