"""pywxalert - Async scheduled weather push notifications for the KMA forecast grid."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pywxalert")
except PackageNotFoundError:
    __version__ = "0+local"
from pywxalert.cache import CacheService, CacheStore, MemoryCacheStore, RedisCacheStore
from pywxalert.client import WxAlertClient
from pywxalert.config import WxAlertConfig
from pywxalert.exceptions import (
    CacheError,
    CacheReadError,
    CacheWriteError,
    PushProviderError,
    ValidationError,
    WeatherProviderError,
    WxAlertError,
    WxConfigError,
    WxTransportError,
)
from pywxalert.grid import GridCoordinate, to_grid
from pywxalert.models import (
    BatchDispatchResult,
    DispatchResult,
    GeoCoordinate,
    PrecipitationType,
    PushMessage,
    SkyCondition,
    UserRecord,
    UserSettings,
    WeatherSnapshot,
)
from pywxalert.notifications import NotificationService, PushProvider
from pywxalert.scheduler import NotificationScheduler, RunSummary, SkipReason
from pywxalert.users import InMemoryUserStore, JsonFileUserStore, UserStore
from pywxalert.weather import WeatherService

__all__ = [
    "__version__",
    "BatchDispatchResult",
    "CacheError",
    "CacheReadError",
    "CacheService",
    "CacheStore",
    "CacheWriteError",
    "DispatchResult",
    "GeoCoordinate",
    "GridCoordinate",
    "InMemoryUserStore",
    "JsonFileUserStore",
    "MemoryCacheStore",
    "NotificationScheduler",
    "NotificationService",
    "PrecipitationType",
    "PushMessage",
    "PushProvider",
    "PushProviderError",
    "RedisCacheStore",
    "RunSummary",
    "SkipReason",
    "SkyCondition",
    "UserRecord",
    "UserSettings",
    "UserStore",
    "ValidationError",
    "WeatherProviderError",
    "WeatherService",
    "WeatherSnapshot",
    "WxAlertClient",
    "WxAlertConfig",
    "WxAlertError",
    "WxConfigError",
    "WxTransportError",
    "to_grid",
]
