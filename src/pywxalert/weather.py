"""Cache-aside weather acquisition."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import date, datetime, timedelta

from pywxalert._api.kma import fetch_ultra_short_forecast
from pywxalert._constants import (
    CATEGORY_HUMIDITY,
    CATEGORY_PRECIPITATION,
    CATEGORY_PRECIPITATION_PROBABILITY,
    CATEGORY_PRECIPITATION_TYPE,
    CATEGORY_SKY,
    CATEGORY_TEMPERATURE,
    CATEGORY_WIND_SPEED,
    KMA_PUBLICATION_MINUTE,
    REQUIRED_CATEGORIES,
    WEATHER_CACHE_PREFIX,
)
from pywxalert._normalize import leading_float, safe_float
from pywxalert._transport import Transport
from pywxalert.cache import CacheService
from pywxalert.config import WxAlertConfig
from pywxalert.exceptions import CacheWriteError, WeatherProviderError
from pywxalert.grid import to_grid
from pywxalert.models.kma import KmaForecastItem
from pywxalert.models.weather import PrecipitationType, SkyCondition, WeatherSnapshot

_logger = logging.getLogger(__name__)


def base_datetime(now: datetime) -> tuple[str, str]:
    """Return ``(base_date, base_time)`` of the latest published forecast.

    Forecasts for hour HH are published at HH:45, so before minute 45 the
    previous hour's issue is the latest one. Subtracting a ``timedelta``
    carries the rollback across day, month and year boundaries.
    """
    issue = now
    if now.minute < KMA_PUBLICATION_MINUTE:
        issue = now - timedelta(hours=1)
    return issue.strftime("%Y%m%d"), f"{issue.hour:02d}00"


def _parse_forecast_date(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y%m%d").date()
    except ValueError as exc:
        raise WeatherProviderError(f"Invalid forecast date: {value!r}", code="MISSING_DATA") from exc


def parse_snapshot(items: Sequence[KmaForecastItem]) -> WeatherSnapshot:
    """Assemble a snapshot from the earliest forecast slot in *items*.

    Optional numeric categories default to 0 when absent or unparseable;
    missing temperature or sky condition is a hard failure.
    """
    if not items:
        raise WeatherProviderError("Weather API returned no forecast data", code="NO_DATA")

    slot_date, slot_time = min((item.fcst_date, item.fcst_time) for item in items)
    values: dict[str, str | None] = {}
    for item in items:
        if (item.fcst_date, item.fcst_time) != (slot_date, slot_time):
            continue
        values.setdefault(item.category, item.fcst_value)

    missing = [category for category in REQUIRED_CATEGORIES if values.get(category) is None]
    if missing:
        raise WeatherProviderError(
            f"Required weather data is missing: {', '.join(missing)}",
            code="MISSING_DATA",
        )

    return WeatherSnapshot(
        temperature=safe_float(values.get(CATEGORY_TEMPERATURE)) or 0.0,
        humidity=int(leading_float(values.get(CATEGORY_HUMIDITY)) or 0),
        precipitation=leading_float(values.get(CATEGORY_PRECIPITATION)) or 0.0,
        precipitation_probability=int(leading_float(values.get(CATEGORY_PRECIPITATION_PROBABILITY)) or 0),
        wind_speed=safe_float(values.get(CATEGORY_WIND_SPEED)) or 0.0,
        sky_condition=SkyCondition.from_code(values.get(CATEGORY_SKY)),
        precipitation_type=PrecipitationType.from_code(values.get(CATEGORY_PRECIPITATION_TYPE)),
        forecast_date=_parse_forecast_date(slot_date),
        forecast_time=slot_time,
    )


class WeatherService:
    """Weather for a coordinate, served from cache when fresh.

    Usage::

        service = WeatherService(config, transport, CacheService(MemoryCacheStore()))
        snapshot = await service.get_weather(37.5665, 126.978)
    """

    def __init__(
        self,
        config: WxAlertConfig,
        transport: Transport,
        cache: CacheService,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._cache = cache
        self._tz = config.tzinfo
        self._clock = clock or (lambda: datetime.now(self._tz))
        if not config.weather_api_key:
            _logger.warning("Weather API key is not configured")

    def _now(self) -> datetime:
        now = self._clock()
        if now.tzinfo is not None:
            return now.astimezone(self._tz)
        return now

    async def get_weather(self, latitude: float, longitude: float) -> WeatherSnapshot:
        """Return the current forecast snapshot for a coordinate.

        The cache key is built from the raw coordinates, not the grid cell.
        A failed cache write is logged and the fresh snapshot is returned
        anyway; a failed cache read propagates.

        Raises
        ------
        WeatherProviderError
            The provider call failed or returned unusable data, or the
            coordinate does not project onto a grid cell (NaN input).
        CacheReadError
            The cache store could not be read.
        """
        cache_key = CacheService.generate_key(WEATHER_CACHE_PREFIX, {"lat": latitude, "lon": longitude})

        cached = await self._cache.get(cache_key, model=WeatherSnapshot)
        if cached is not None:
            _logger.info("Weather data retrieved from cache lat=%s lon=%s", latitude, longitude)
            return cached

        grid = to_grid(latitude, longitude)
        if not grid.is_valid:
            raise WeatherProviderError(
                f"Coordinate has no forecast grid cell: lat={latitude} lon={longitude}",
                code="INVALID_COORDINATE",
            )
        base_date, base_time = base_datetime(self._now())
        _logger.info(
            "Fetching weather data lat=%s lon=%s nx=%d ny=%d base=%s %s",
            latitude,
            longitude,
            grid.nx,
            grid.ny,
            base_date,
            base_time,
        )

        items = await fetch_ultra_short_forecast(self._config, self._transport, grid, base_date, base_time)
        snapshot = parse_snapshot(items)

        try:
            await self._cache.set(cache_key, snapshot, self._config.weather_cache_ttl)
        except CacheWriteError as exc:
            _logger.warning("Weather cache write failed key=%s: %s", cache_key, exc)
        else:
            _logger.debug("Weather data cached key=%s ttl=%d", cache_key, self._config.weather_cache_ttl)

        return snapshot
