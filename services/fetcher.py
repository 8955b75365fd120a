"""Ordered provider chain with a mock fallback."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import httpx

from models.snapshot import Snapshot
from providers import DOEProvider, IQAirProvider, OpenWeatherProvider, build_mock_snapshot
from providers.base import Provider
from providers.mock import MOCK_SOURCE
from services.errors import FetchError
from settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderSource:
    """A provider paired with the credential it is called with."""

    provider: Provider
    credential: Optional[str]


@dataclass(frozen=True)
class FetchResult:
    snapshot: Snapshot
    source: str


class FallbackFetcher:
    """Returns the first snapshot any provider yields, else mock data.

    Sources are tried strictly in the order given and the first success wins;
    there is no comparison of data quality between providers.
    """

    def __init__(self, sources: Sequence[ProviderSource], use_real_apis: bool) -> None:
        self.sources: Tuple[ProviderSource, ...] = tuple(sources)
        self.use_real_apis = use_real_apis

    def fetch_current(self) -> Snapshot:
        return self.fetch_with_source().snapshot

    def fetch_with_source(self) -> FetchResult:
        if not self.use_real_apis:
            logger.info("Real APIs disabled, using mock environmental data")
            return self._mock()

        failures: List[Tuple[str, FetchError]] = []
        for source in self.sources:
            provider = source.provider
            try:
                snapshot = provider.fetch(source.credential)
            except FetchError as exc:
                logger.debug(
                    "Provider skipped: %s", exc,
                    extra={"provider": provider.name},
                )
                failures.append((provider.name, exc))
                continue
            logger.info(
                "Fetched environmental data",
                extra={"source": provider.name, "sensor_id": snapshot.sensor_id},
            )
            return FetchResult(snapshot=snapshot, source=provider.name)

        reasons = "; ".join(str(error) for _, error in failures) or "no providers"
        logger.warning(
            "All providers failed, falling back to mock data",
            extra={"reason": reasons},
        )
        return self._mock()

    @staticmethod
    def _mock() -> FetchResult:
        snapshot = build_mock_snapshot()
        logger.info(
            "Using mock environmental data",
            extra={"source": MOCK_SOURCE, "sensor_id": snapshot.sensor_id},
        )
        return FetchResult(snapshot=snapshot, source=MOCK_SOURCE)


def build_provider_sources(settings: Settings, client: httpx.Client) -> List[ProviderSource]:
    """Providers in priority order: OpenWeather, IQAir, DOE."""
    return [
        ProviderSource(OpenWeatherProvider(client), settings.openweather_api_key),
        ProviderSource(IQAirProvider(client), settings.iqair_api_key),
        ProviderSource(DOEProvider(), settings.doe_api_key),
    ]


def log_provider_configuration(sources: Sequence[ProviderSource], use_real_apis: bool) -> None:
    """Startup summary of which providers can be attempted."""
    for source in sources:
        configured = source.credential is not None and bool(source.credential.strip())
        logger.info(
            "Provider %s", "available" if configured else "not configured",
            extra={"provider": source.provider.name},
        )
    if use_real_apis:
        logger.info("Real APIs enabled")
    else:
        logger.info("Real APIs disabled, every cycle uses mock data")


def build_fetcher(settings: Settings, client: httpx.Client) -> FallbackFetcher:
    sources = build_provider_sources(settings, client)
    log_provider_configuration(sources, settings.use_real_apis)
    return FallbackFetcher(sources=sources, use_real_apis=settings.use_real_apis)
