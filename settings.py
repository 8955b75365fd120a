from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


_OPENWEATHER_KEY_ENV = "OPENWEATHER_API_KEY"
_IQAIR_KEY_ENV = "IQAIR_API_KEY"
_DOE_KEY_ENV = "DOE_API_KEY"
_USE_REAL_APIS_ENV = "USE_REAL_APIS"
_CONTRACTS_PATH_ENV = "CONTRACTS_CONFIG_PATH"
_CYCLE_INTERVAL_ENV = "CYCLE_INTERVAL_SECONDS"
_REQUEST_TIMEOUT_ENV = "REQUEST_TIMEOUT_SECONDS"
_LOG_LEVEL_ENV = "LOG_LEVEL"
_ENV_FILE_ENV = "ENV_FILE"


@dataclass(frozen=True)
class Settings:
    openweather_api_key: Optional[str]
    iqair_api_key: Optional[str]
    doe_api_key: Optional[str]
    use_real_apis: bool
    contracts_config_path: str
    cycle_interval_seconds: float
    request_timeout_seconds: float
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return None
    candidate = value.strip()
    return candidate or None


def _read_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() == "true"


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    # Values already in the process environment take precedence over the file.
    load_dotenv(_read_str_env(_ENV_FILE_ENV, ".env"))
    return Settings(
        openweather_api_key=_read_optional_env(_OPENWEATHER_KEY_ENV),
        iqair_api_key=_read_optional_env(_IQAIR_KEY_ENV),
        doe_api_key=_read_optional_env(_DOE_KEY_ENV),
        use_real_apis=_read_flag(_USE_REAL_APIS_ENV, False),
        contracts_config_path=_read_str_env(_CONTRACTS_PATH_ENV, "config/contracts.json"),
        cycle_interval_seconds=_read_positive_float(_CYCLE_INTERVAL_ENV, 30.0),
        request_timeout_seconds=_read_positive_float(_REQUEST_TIMEOUT_ENV, 10.0),
        log_level=_read_log_level("INFO"),
    )
