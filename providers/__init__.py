"""Provider adapters, listed in fetch priority order."""

from providers.doe import DOEProvider
from providers.iqair import IQAirProvider
from providers.mock import build_mock_snapshot
from providers.openweather import OpenWeatherProvider

__all__ = ["DOEProvider", "IQAirProvider", "OpenWeatherProvider", "build_mock_snapshot"]
