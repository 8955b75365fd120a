"""Exception taxonomy for the acquisition pipeline."""

from __future__ import annotations

from typing import Any


class OracleError(Exception):
    """Base class for every error raised by the oracle."""


class ConfigurationError(OracleError):
    """Startup configuration could not be loaded or resolved."""


class FetchError(OracleError):
    """A provider could not produce a snapshot. Always recoverable by trying the next one."""

    reason = "fetch failed"

    def __init__(self, provider: str, detail: str | None = None) -> None:
        self.provider = provider
        self.detail = detail
        message = f"{provider}: {self.reason}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class NotConfigured(FetchError):
    reason = "API key not configured"


class RequestFailed(FetchError):
    reason = "request failed"


class Unimplemented(FetchError):
    reason = "provider not implemented"


class ValidationError(OracleError):
    """A snapshot was rejected; fatal to the current cycle only."""


class OutOfRange(ValidationError):
    def __init__(self, field: str, value: Any, lower: float, upper: float) -> None:
        self.field = field
        self.value = value
        self.lower = lower
        self.upper = upper
        super().__init__(f"{field}={value!r} outside [{lower}, {upper}]")


class SubmitFailed(OracleError):
    """The sink rejected or could not accept a snapshot."""
