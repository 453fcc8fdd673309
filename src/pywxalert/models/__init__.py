"""Data models for pywxalert."""

from pywxalert.models._base import WxBaseModel
from pywxalert.models.kma import KmaForecastItem, KmaForecastResponse, KmaHeader
from pywxalert.models.notification import BatchDispatchResult, DispatchResult, PushMessage
from pywxalert.models.user import UserRecord, UserSettings
from pywxalert.models.weather import GeoCoordinate, PrecipitationType, SkyCondition, WeatherSnapshot

__all__ = [
    "BatchDispatchResult",
    "DispatchResult",
    "GeoCoordinate",
    "KmaForecastItem",
    "KmaForecastResponse",
    "KmaHeader",
    "PrecipitationType",
    "PushMessage",
    "SkyCondition",
    "UserRecord",
    "UserSettings",
    "WeatherSnapshot",
    "WxBaseModel",
]
