"""Client configuration for pywxalert."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pywxalert._constants import (
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_TIME_ZONE,
    FCM_BASE_URL,
    KMA_BASE_URL,
    SCHEDULER_INTERVAL,
    WEATHER_CACHE_TTL,
)
from pywxalert.exceptions import WxConfigError


def _env_float(env: Mapping[str, str], key: str) -> float | None:
    value = env.get(key)
    if value is None or not value.strip():
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise WxConfigError(f"{key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class WxAlertConfig:
    """Client configuration.

    Parameters
    ----------
    weather_api_key : str
        data.go.kr service key for the KMA forecast API. The portal hands
        out URL-encoded keys; both encoded and decoded forms are accepted.
    weather_api_url : str
        KMA ``VilageFcstInfoService_2.0`` base URL.
    weather_cache_ttl : int
        Seconds a fetched weather snapshot stays cached.
    http_timeout : float
        Total timeout in seconds for every outbound provider call.
    time_zone : str
        IANA time zone used for forecast base times and for matching user
        notification times.
    redis_url : str or None
        Redis connection URL. When unset an in-process cache is used.
    fcm_project_id : str or None
        Firebase project that owns the device tokens.
    fcm_access_token : str or None
        OAuth2 bearer token for the FCM HTTP v1 API.
    fcm_base_url : str
        FCM API base URL.
    scheduler_interval : float
        Seconds between scheduler ticks.
    users_file : str or None
        Path to a JSON file of user records, used by the runner script.
    """

    weather_api_key: str = ""
    weather_api_url: str = KMA_BASE_URL
    weather_cache_ttl: int = WEATHER_CACHE_TTL
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    time_zone: str = DEFAULT_TIME_ZONE
    redis_url: str | None = None
    fcm_project_id: str | None = None
    fcm_access_token: str | None = None
    fcm_base_url: str = FCM_BASE_URL
    scheduler_interval: float = SCHEDULER_INTERVAL
    users_file: str | None = None

    def __post_init__(self) -> None:
        if self.weather_cache_ttl <= 0:
            raise WxConfigError(f"weather_cache_ttl must be positive, got {self.weather_cache_ttl}")
        if self.http_timeout <= 0:
            raise WxConfigError(f"http_timeout must be positive, got {self.http_timeout}")
        if self.scheduler_interval <= 0:
            raise WxConfigError(f"scheduler_interval must be positive, got {self.scheduler_interval}")
        try:
            ZoneInfo(self.time_zone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise WxConfigError(f"Unknown time zone: {self.time_zone!r}") from exc

    @property
    def tzinfo(self) -> ZoneInfo:
        """The configured time zone as a :class:`zoneinfo.ZoneInfo`."""
        return ZoneInfo(self.time_zone)

    @classmethod
    def from_env(cls, **overrides: Any) -> WxAlertConfig:
        """Create configuration from environment variables.

        Reads ``WXALERT_*`` variables. Explicit keyword arguments override
        environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        WxAlertConfig
            Populated configuration.

        Raises
        ------
        WxConfigError
            A numeric variable cannot be parsed or a value is out of range.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "WXALERT_WEATHER_API_KEY": "weather_api_key",
            "WXALERT_WEATHER_API_URL": "weather_api_url",
            "WXALERT_TIME_ZONE": "time_zone",
            "WXALERT_REDIS_URL": "redis_url",
            "WXALERT_FCM_PROJECT_ID": "fcm_project_id",
            "WXALERT_FCM_ACCESS_TOKEN": "fcm_access_token",
            "WXALERT_FCM_BASE_URL": "fcm_base_url",
            "WXALERT_USERS_FILE": "users_file",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = val

        ttl = _env_float(env, "WXALERT_WEATHER_CACHE_TTL")
        if ttl is not None and "weather_cache_ttl" not in overrides:
            config_kwargs["weather_cache_ttl"] = int(ttl)

        timeout = _env_float(env, "WXALERT_HTTP_TIMEOUT")
        if timeout is not None and "http_timeout" not in overrides:
            config_kwargs["http_timeout"] = timeout

        interval = _env_float(env, "WXALERT_SCHEDULER_INTERVAL")
        if interval is not None and "scheduler_interval" not in overrides:
            config_kwargs["scheduler_interval"] = interval

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
