"""Custom exception hierarchy for pywxalert."""

from __future__ import annotations


class WxAlertError(Exception):
    """Base exception for all pywxalert errors."""


class WxConfigError(WxAlertError):
    """Invalid or missing configuration."""


class ValidationError(WxAlertError):
    """Caller-supplied input is malformed (e.g. coordinates out of range)."""


class WxTransportError(WxAlertError):
    """HTTP-level failure (network, timeout, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class WeatherProviderError(WxAlertError):
    """The weather provider failed or returned unusable data.

    ``code`` is the provider's result code when one was returned
    (e.g. ``"03"``), or one of ``NO_DATA``, ``MISSING_DATA``,
    ``TRANSPORT_ERROR`` and ``INVALID_COORDINATE``.
    """

    def __init__(self, message: str, *, code: str = "") -> None:
        self.code = code
        self.message = message
        super().__init__(message)


class CacheError(WxAlertError):
    """Backing cache store failure."""

    def __init__(self, message: str, *, key: str = "") -> None:
        self.key = key
        super().__init__(message)


class CacheReadError(CacheError):
    """Cache store unreachable on read, or the stored payload is corrupt."""


class CacheWriteError(CacheError):
    """Cache store unreachable on write."""


class PushProviderError(WxAlertError):
    """Push provider rejected a message or could not be reached."""

    def __init__(self, message: str, *, code: str = "") -> None:
        self.code = code
        super().__init__(message)
