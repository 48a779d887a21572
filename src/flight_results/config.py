"""
Configuration for the flight result pipeline.

Tunables are grouped by concern in frozen dataclasses with defaults set
in code. Provider credentials come from the environment (a local .env
file is loaded when present).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import timedelta

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()

AMADEUS_TEST_BASE_URL = "https://test.api.amadeus.com"
DUFFEL_API_URL = "https://api.duffel.com"


@dataclass(frozen=True)
class CacheConfig:
    """
    Search-scope cache sizing.

    Attributes:
        ttl_seconds: Lifetime of a cached raw result.
        max_entries: Entry count above which the whole cache is cleared.
    """

    ttl_seconds: int = 3600
    max_entries: int = 100

    @property
    def ttl(self) -> timedelta:
        return timedelta(seconds=self.ttl_seconds)


@dataclass(frozen=True)
class ProviderConfig:
    """
    HTTP behaviour of provider adapters.

    Attributes:
        request_timeout_ms: Per-request read timeout in milliseconds.
        connect_timeout_s: Connection timeout in seconds.
        max_retries: Max retry attempts on rate limit / timeout.
        backoff_multiplier: Exponential backoff multiplier for retries.
        initial_backoff_s: First retry delay in seconds.
        max_concurrent_requests: Semaphore limit for parallel calls.
        max_results: Max offers requested per search.
    """

    request_timeout_ms: int = 15000
    connect_timeout_s: float = 5.0
    max_retries: int = 3
    backoff_multiplier: float = 2.0
    initial_backoff_s: float = 1.0
    max_concurrent_requests: int = 3
    max_results: int = 50


@dataclass(frozen=True)
class PipelineConfig:
    """
    Orchestrator behaviour.

    Attributes:
        upstream_timeout_seconds: Bound on each upstream call group.
        default_page_size: Flights per page when no limit is given.
        scarcity_threshold: Absolute price above which the cheapest
            flight triggers a scarcity opportunity (currency-unaware).
    """

    upstream_timeout_seconds: float = 30.0
    default_page_size: int = 10
    scarcity_threshold: float = 1000.0


@dataclass(frozen=True)
class ProviderCredentials:
    """API credentials for the upstream providers."""

    amadeus_api_key: str = ""
    amadeus_api_secret: str = ""
    amadeus_base_url: str = AMADEUS_TEST_BASE_URL
    duffel_access_token: str = ""

    @classmethod
    def from_env(cls) -> "ProviderCredentials":
        """
        Read credentials from environment variables.

        Missing values are logged, not raised: adapters fail at call time
        and the orchestrator degrades to an empty result.
        """
        credentials = cls(
            amadeus_api_key=os.getenv("AMADEUS_API_KEY", ""),
            amadeus_api_secret=os.getenv("AMADEUS_API_SECRET", ""),
            amadeus_base_url=os.getenv("AMADEUS_BASE_URL", AMADEUS_TEST_BASE_URL),
            duffel_access_token=os.getenv("DUFFEL_ACCESS_TOKEN", ""),
        )
        if not credentials.has_amadeus and not credentials.has_duffel:
            logger.warning(
                "No provider credentials set (AMADEUS_API_KEY/AMADEUS_API_SECRET "
                "or DUFFEL_ACCESS_TOKEN) - searches will return no flights"
            )
        return credentials

    @property
    def has_amadeus(self) -> bool:
        return bool(self.amadeus_api_key and self.amadeus_api_secret)

    @property
    def has_duffel(self) -> bool:
        return bool(self.duffel_access_token)


class Settings:
    """Main configuration container providing access to all config sections."""

    cache = CacheConfig()
    provider = ProviderConfig()
    pipeline = PipelineConfig()
