"""User records as seen by the scheduler (read-only boundary)."""

from __future__ import annotations

from pydantic import field_validator

from pywxalert._normalize import safe_float
from pywxalert.models._base import WxBaseModel


class UserSettings(WxBaseModel):
    """Notification preferences of one user."""

    notification_enabled: bool = False
    notification_time: str = "08:00:00"
    """Local time as ``HH:MM:SS``; only ``HH:MM`` is compared."""

    fcm_token: str | None = None
    location_latitude: float | None = None
    location_longitude: float | None = None

    @field_validator("location_latitude", "location_longitude", mode="before")
    @classmethod
    def _coerce_coordinate(cls, value: object) -> float | None:
        # Relational stores hand decimals back as strings or Decimal.
        return safe_float(value)

    @property
    def notification_minute(self) -> str:
        """``HH:MM`` label of the configured time."""
        return self.notification_time[:5]

    @property
    def has_location(self) -> bool:
        return self.location_latitude is not None and self.location_longitude is not None


class UserRecord(WxBaseModel):
    """A user with optional settings."""

    id: str
    settings: UserSettings | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        if isinstance(value, int):
            return str(value)
        return value
