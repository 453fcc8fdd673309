"""KMA short-term forecast endpoints.

Endpoints:
  - /getUltraSrtFcst  (ultra-short-term forecast, six hourly slots)
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import unquote

from pydantic import ValidationError as PydanticValidationError

from pywxalert._constants import KMA_PAGE_SIZE, KMA_SUCCESS_CODE, KMA_ULTRA_SHORT_FORECAST
from pywxalert._transport import Transport
from pywxalert.config import WxAlertConfig
from pywxalert.exceptions import WeatherProviderError, WxTransportError
from pywxalert.grid import GridCoordinate
from pywxalert.models.kma import KmaForecastItem, KmaForecastResponse, KmaHeader

_logger = logging.getLogger(__name__)


def _build_forecast_params(
    config: WxAlertConfig,
    grid: GridCoordinate,
    base_date: str,
    base_time: str,
) -> dict[str, Any]:
    """Build query parameters for the ultra-short forecast."""
    return {
        # data.go.kr hands out URL-encoded keys; the transport encodes again.
        "serviceKey": unquote(config.weather_api_key),
        "numOfRows": KMA_PAGE_SIZE,
        "pageNo": 1,
        "dataType": "JSON",
        "base_date": base_date,
        "base_time": base_time,
        "nx": grid.nx,
        "ny": grid.ny,
    }


def parse_forecast_response(body: dict[str, Any]) -> KmaForecastResponse:
    """Flatten the nested ``response.header`` / ``response.body.items.item`` envelope."""
    response = body.get("response")
    if not isinstance(response, dict):
        raise WeatherProviderError("Weather API response has no 'response' envelope", code="TRANSPORT_ERROR")

    header_raw = response.get("header")
    header = KmaHeader.model_validate(header_raw if isinstance(header_raw, dict) else {})

    items_raw: Any = None
    body_raw = response.get("body")
    if isinstance(body_raw, dict):
        # Empty result sets come back as ``"items": ""``.
        items_container = body_raw.get("items")
        if isinstance(items_container, dict):
            items_raw = items_container.get("item")

    if isinstance(items_raw, dict):
        items_raw = [items_raw]
    try:
        items = [KmaForecastItem.model_validate(item) for item in items_raw or [] if isinstance(item, dict)]
    except PydanticValidationError as exc:
        raise WeatherProviderError(f"Malformed forecast item: {exc}", code="TRANSPORT_ERROR") from exc
    return KmaForecastResponse(header=header, items=items)


async def fetch_ultra_short_forecast(
    config: WxAlertConfig,
    transport: Transport,
    grid: GridCoordinate,
    base_date: str,
    base_time: str,
) -> list[KmaForecastItem]:
    """Fetch the ultra-short-term forecast for one grid cell.

    Returns
    -------
    list[KmaForecastItem]
        Observations in provider order (grouped by category, then slot).

    Raises
    ------
    WeatherProviderError
        Transport failure, a non-success result code, or an empty item list.
    """
    url = f"{config.weather_api_url.rstrip('/')}{KMA_ULTRA_SHORT_FORECAST}"
    params = _build_forecast_params(config, grid, base_date, base_time)

    try:
        body = await transport.get_json(url, params=params, endpoint=KMA_ULTRA_SHORT_FORECAST)
    except WxTransportError as exc:
        raise WeatherProviderError(f"Weather API request failed: {exc}", code="TRANSPORT_ERROR") from exc

    parsed = parse_forecast_response(body)
    if parsed.header.result_code != KMA_SUCCESS_CODE:
        raise WeatherProviderError(
            f"Weather API error: {parsed.header.result_msg or 'unknown error'}",
            code=parsed.header.result_code,
        )
    if not parsed.items:
        raise WeatherProviderError("Weather API returned no forecast data", code="NO_DATA")

    _logger.debug(
        "Ultra-short forecast nx=%s ny=%s base=%s %s items=%d",
        grid.nx,
        grid.ny,
        base_date,
        base_time,
        len(parsed.items),
    )
    return parsed.items
