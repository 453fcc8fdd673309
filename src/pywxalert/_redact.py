"""Masking of credentials and device tokens in debug logs.

Request logs carry two kinds of secret. The KMA service key and the FCM
bearer token are never shown. Device push tokens are shown as a short prefix
so one device can be followed across log lines without exposing the token.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_CREDENTIAL_KEYS = frozenset({"servicekey", "authorization", "accesstoken"})
_DEVICE_TOKEN_KEYS = frozenset({"token", "fcmtoken"})

HIDDEN = "<redacted>"


def mask_token(token: str | None, *, visible: int = 6) -> str:
    """Return a short, non-reversible label for a push token."""
    if not token:
        return "<none>"
    if len(token) <= visible:
        return "…"
    return f"{token[:visible]}…"


def _mask_field(key: str, value: Any, max_string: int) -> Any:
    name = key.lower()
    if name in _CREDENTIAL_KEYS:
        return HIDDEN
    if name in _DEVICE_TOKEN_KEYS:
        return mask_token(value if isinstance(value, str) else None)
    return redact_for_log(value, max_string=max_string)


def redact_for_log(value: Any, *, max_string: int = 256) -> Any:
    """Copy a query or JSON request body with its secrets masked.

    Mappings, lists and tuples are walked. Strings longer than *max_string*
    are cut, and values that are not JSON-shaped show only their type name.
    """
    if isinstance(value, Mapping):
        return {str(key): _mask_field(str(key), item, max_string) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [redact_for_log(item, max_string=max_string) for item in value]
    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…({len(value)} chars)"
        return value
    if value is None or isinstance(value, (bool, int, float)):
        return value
    return f"<{type(value).__name__}>"
