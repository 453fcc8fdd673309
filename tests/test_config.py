from __future__ import annotations

import pytest

from pywxalert.config import WxAlertConfig
from pywxalert.exceptions import WxConfigError


def test_defaults() -> None:
    config = WxAlertConfig()

    assert config.weather_cache_ttl == 300
    assert config.time_zone == "Asia/Seoul"
    assert config.scheduler_interval == 60.0
    assert config.redis_url is None
    assert str(config.tzinfo) == "Asia/Seoul"


def test_from_env_reads_prefixed_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WXALERT_WEATHER_API_KEY", "key")
    monkeypatch.setenv("WXALERT_REDIS_URL", "redis://localhost:6379/0")
    monkeypatch.setenv("WXALERT_TIME_ZONE", "UTC")
    monkeypatch.setenv("WXALERT_WEATHER_CACHE_TTL", "120")
    monkeypatch.setenv("WXALERT_HTTP_TIMEOUT", "2.5")
    monkeypatch.setenv("WXALERT_SCHEDULER_INTERVAL", "30")

    config = WxAlertConfig.from_env()

    assert config.weather_api_key == "key"
    assert config.redis_url == "redis://localhost:6379/0"
    assert config.time_zone == "UTC"
    assert config.weather_cache_ttl == 120
    assert config.http_timeout == 2.5
    assert config.scheduler_interval == 30.0


def test_from_env_overrides_take_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WXALERT_WEATHER_API_KEY", "from-env")
    monkeypatch.setenv("WXALERT_WEATHER_CACHE_TTL", "120")

    config = WxAlertConfig.from_env(weather_api_key="explicit", weather_cache_ttl=60)

    assert config.weather_api_key == "explicit"
    assert config.weather_cache_ttl == 60


def test_from_env_rejects_non_numeric_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WXALERT_HTTP_TIMEOUT", "soon")

    with pytest.raises(WxConfigError):
        WxAlertConfig.from_env()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"weather_cache_ttl": 0},
        {"http_timeout": -1.0},
        {"scheduler_interval": 0.0},
        {"time_zone": "Mars/Olympus_Mons"},
    ],
)
def test_invalid_values_are_rejected(kwargs: dict[str, object]) -> None:
    with pytest.raises(WxConfigError):
        WxAlertConfig(**kwargs)  # type: ignore[arg-type]
