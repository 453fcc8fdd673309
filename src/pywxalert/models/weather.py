"""Weather snapshot model and KMA code tables."""

from __future__ import annotations

import enum
from datetime import date
from typing import Any

from pydantic import Field
from pydantic import ValidationError as PydanticValidationError

from pywxalert._normalize import safe_int
from pywxalert.exceptions import ValidationError
from pywxalert.models._base import WxBaseModel

# ------------------------------------------------------------------
# Code tables
# ------------------------------------------------------------------


class SkyCondition(str, enum.Enum):
    """Sky state (KMA ``SKY`` category)."""

    CLEAR = "clear"
    MOSTLY_CLOUDY = "mostly-cloudy"
    OVERCAST = "overcast"
    UNKNOWN = "unknown"

    @classmethod
    def from_code(cls, code: Any) -> SkyCondition:
        """Map a KMA sky code; anything unmapped is ``UNKNOWN``."""
        parsed = safe_int(code)
        if parsed == 1:
            return cls.CLEAR
        if parsed == 3:
            return cls.MOSTLY_CLOUDY
        if parsed == 4:
            return cls.OVERCAST
        return cls.UNKNOWN

    @property
    def label(self) -> str:
        return self.value.replace("-", " ")


class PrecipitationType(str, enum.Enum):
    """Precipitation form (KMA ``PTY`` category)."""

    NONE = "none"
    RAIN = "rain"
    RAIN_SNOW = "rain-snow"
    SNOW = "snow"
    SHOWER = "shower"

    @classmethod
    def from_code(cls, code: Any) -> PrecipitationType:
        """Map a KMA precipitation code; anything unmapped is ``NONE``.

        The ultra-short forecast also emits 5-7 (drizzle, sleet drizzle,
        snow flurries); those are not part of the table.
        """
        parsed = safe_int(code)
        if parsed == 1:
            return cls.RAIN
        if parsed == 2:
            return cls.RAIN_SNOW
        if parsed == 3:
            return cls.SNOW
        if parsed == 4:
            return cls.SHOWER
        return cls.NONE

    @property
    def label(self) -> str:
        return _PRECIPITATION_LABELS[self]


_PRECIPITATION_LABELS: dict[PrecipitationType, str] = {
    PrecipitationType.NONE: "no precipitation",
    PrecipitationType.RAIN: "rain",
    PrecipitationType.RAIN_SNOW: "rain and snow",
    PrecipitationType.SNOW: "snow",
    PrecipitationType.SHOWER: "showers",
}

# ------------------------------------------------------------------
# Models
# ------------------------------------------------------------------


class GeoCoordinate(WxBaseModel):
    """A WGS84 position."""

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)

    @classmethod
    def parse(cls, latitude: Any, longitude: Any) -> GeoCoordinate:
        """Validate raw caller input.

        Raises
        ------
        ValidationError
            Either value is missing, non-numeric or out of range.
        """
        try:
            return cls(latitude=latitude, longitude=longitude)
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid coordinate ({latitude!r}, {longitude!r}): {exc}") from exc


class WeatherSnapshot(WxBaseModel):
    """Weather at one forecast slot for one location.

    Serialized by alias (camelCase) when cached; a cached copy validates
    back into an equal snapshot.
    """

    temperature: float = 0.0
    """Air temperature (°C)."""

    humidity: int = 0
    """Relative humidity (%)."""

    precipitation: float = 0.0
    """Precipitation over the hour (mm)."""

    precipitation_probability: int = 0
    """Probability of precipitation (%). 0 when the product lacks it."""

    wind_speed: float = 0.0
    """Wind speed (m/s)."""

    sky_condition: SkyCondition = SkyCondition.UNKNOWN
    precipitation_type: PrecipitationType = PrecipitationType.NONE

    forecast_date: date
    """Date the forecast slot applies to."""

    forecast_time: str
    """Slot time as ``HHMM``."""
