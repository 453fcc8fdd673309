"""High-level async client wiring the weather, cache, push and scheduler pieces."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from pywxalert._api.fcm import FcmPushProvider
from pywxalert._transport import HttpTransport
from pywxalert.cache import CacheService, CacheStore, MemoryCacheStore, RedisCacheStore
from pywxalert.config import WxAlertConfig
from pywxalert.exceptions import WxAlertError, WxConfigError
from pywxalert.models.notification import DispatchResult
from pywxalert.models.weather import WeatherSnapshot
from pywxalert.notifications import NotificationService, PushProvider
from pywxalert.scheduler import NotificationScheduler, RunSummary
from pywxalert.users import JsonFileUserStore, UserStore
from pywxalert.weather import WeatherService

_logger = logging.getLogger(__name__)


class WxAlertClient:
    """Async entry point for pywxalert.

    Resources are created on ``__aenter__`` and released on ``__aexit__``;
    anything passed in explicitly (HTTP session, cache store, push provider,
    user store) is used as-is and left open.

    Usage::

        async with WxAlertClient(WxAlertConfig.from_env(), user_store=users) as client:
            snapshot = await client.get_weather(37.5665, 126.978)
            client.start_scheduler()
    """

    def __init__(
        self,
        config: WxAlertConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        cache_store: CacheStore | None = None,
        push_provider: PushProvider | None = None,
        user_store: UserStore | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._cache_store = cache_store
        self._owned_redis: RedisCacheStore | None = None
        self._push_provider = push_provider
        self._user_store = user_store
        self._weather: WeatherService | None = None
        self._notifications: NotificationService | None = None
        self._scheduler: NotificationScheduler | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> WxAlertClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        transport = HttpTransport(self._config, self._http_session)

        store = self._cache_store
        if store is None:
            if self._config.redis_url:
                self._owned_redis = RedisCacheStore.from_url(self._config.redis_url)
                store = self._owned_redis
            else:
                _logger.info("No Redis URL configured; using in-process weather cache")
                store = MemoryCacheStore()
        self._weather = WeatherService(self._config, transport, CacheService(store))

        provider = self._push_provider
        if provider is None and self._config.fcm_project_id:
            provider = FcmPushProvider(self._config, transport)
        if provider is not None:
            self._notifications = NotificationService(provider)

        if self._user_store is None and self._config.users_file:
            self._user_store = JsonFileUserStore(self._config.users_file)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._scheduler is not None:
            if self._scheduler.is_running:
                self._scheduler.stop()
            await self._scheduler.drain()
            self._scheduler = None
        if self._owned_redis is not None:
            await self._owned_redis.aclose()
            self._owned_redis = None
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._weather = None
        self._notifications = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_weather(self) -> WeatherService:
        if self._weather is None:
            raise WxAlertError("Client not initialized. Use 'async with WxAlertClient(...) as client:'")
        return self._weather

    def _require_notifications(self) -> NotificationService:
        self._require_weather()
        if self._notifications is None:
            raise WxConfigError("No push provider configured (set fcm_project_id or pass push_provider)")
        return self._notifications

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def weather(self) -> WeatherService:
        return self._require_weather()

    @property
    def notifications(self) -> NotificationService:
        return self._require_notifications()

    async def get_weather(self, latitude: float, longitude: float) -> WeatherSnapshot:
        return await self._require_weather().get_weather(latitude, longitude)

    async def send_weather_notification(self, token: str, snapshot: WeatherSnapshot) -> DispatchResult:
        return await self._require_notifications().send_weather_notification(token, snapshot)

    @property
    def scheduler(self) -> NotificationScheduler:
        """The notification scheduler, built on first access."""
        if self._scheduler is None:
            notifications = self._require_notifications()
            if self._user_store is None:
                raise WxConfigError("No user store configured (set users_file or pass user_store)")
            self._scheduler = NotificationScheduler(
                self._user_store,
                self._require_weather(),
                notifications,
                time_zone=self._config.time_zone,
                interval=self._config.scheduler_interval,
            )
        return self._scheduler

    def start_scheduler(self) -> None:
        self.scheduler.start()

    def stop_scheduler(self) -> None:
        self.scheduler.stop()

    async def run_once(self) -> RunSummary:
        """Run a single scheduler tick immediately."""
        return await self.scheduler.run_once()
