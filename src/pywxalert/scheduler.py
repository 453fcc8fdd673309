"""Minute-by-minute weather notification scheduler."""

from __future__ import annotations

import asyncio
import enum
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo

from pywxalert._constants import DEFAULT_TIME_ZONE, SCHEDULER_INTERVAL
from pywxalert._redact import mask_token
from pywxalert.models.user import UserRecord
from pywxalert.notifications import NotificationService
from pywxalert.users import UserStore
from pywxalert.weather import WeatherService

_logger = logging.getLogger(__name__)


class SkipReason(enum.Enum):
    """Why a user gets no notification this tick."""

    NO_SETTINGS = "no_settings"
    DISABLED = "disabled"
    TIME_MISMATCH = "time_mismatch"
    NO_TOKEN = "no_token"
    NO_LOCATION = "no_location"


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Counts for one tick."""

    succeeded: int = 0
    failed: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        return self.succeeded + self.failed


@dataclass(frozen=True, slots=True)
class NotificationTarget:
    """An eligible user resolved to what a dispatch needs."""

    user_id: str
    token: str
    latitude: float
    longitude: float


def check_eligibility(user: UserRecord, current_minute: str) -> NotificationTarget | SkipReason:
    """Resolve *user* at *current_minute* (``HH:MM``) to a target or a skip reason."""
    settings = user.settings
    if settings is None:
        return SkipReason.NO_SETTINGS
    if not settings.notification_enabled:
        return SkipReason.DISABLED
    if settings.notification_minute != current_minute:
        return SkipReason.TIME_MISMATCH
    if not settings.fcm_token:
        return SkipReason.NO_TOKEN
    if settings.location_latitude is None or settings.location_longitude is None:
        return SkipReason.NO_LOCATION
    return NotificationTarget(
        user_id=user.id,
        token=settings.fcm_token,
        latitude=settings.location_latitude,
        longitude=settings.location_longitude,
    )


class NotificationScheduler:
    """Periodic evaluator that sends each user's weather at their chosen minute.

    ``start()`` and ``stop()`` must be called from a running event loop.
    Ticks are aligned to multiples of *interval* on the wall clock, so with
    the default 60 s the tick fires at second 0 of every minute. A tick that
    fires while the previous one is still running is dropped.

    Usage::

        scheduler = NotificationScheduler(users, weather, notifications, time_zone="Asia/Seoul")
        scheduler.start()
        ...
        scheduler.stop()
        await scheduler.drain()
    """

    def __init__(
        self,
        user_store: UserStore,
        weather_service: WeatherService,
        notification_service: NotificationService,
        *,
        time_zone: str = DEFAULT_TIME_ZONE,
        interval: float = SCHEDULER_INTERVAL,
        clock: Callable[[], datetime] | None = None,
        wall_clock: Callable[[], float] = time.time,
    ) -> None:
        self._users = user_store
        self._weather = weather_service
        self._notifications = notification_service
        self._tz = ZoneInfo(time_zone)
        self._interval = interval
        self._clock = clock or (lambda: datetime.now(self._tz))
        self._wall_clock = wall_clock
        self._last_boundary: float | None = None
        self._timer: asyncio.Task[None] | None = None
        self._tick: asyncio.Task[RunSummary] | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._timer is not None

    def start(self) -> None:
        if self._timer is not None:
            _logger.warning("Scheduler is already running")
            return
        self._timer = asyncio.get_running_loop().create_task(self._run_timer(), name="pywxalert-scheduler")
        _logger.info("Notification scheduler started")

    def stop(self) -> None:
        """Cancel future ticks. An in-flight tick is left to finish."""
        if self._timer is None:
            _logger.warning("Scheduler is not running")
            return
        self._timer.cancel()
        self._timer = None
        _logger.info("Notification scheduler stopped")

    async def drain(self) -> None:
        """Wait for the in-flight tick, if any."""
        tick = self._tick
        if tick is not None and not tick.done():
            await asyncio.shield(tick)

    def _next_boundary(self, now: float) -> float:
        """Next interval boundary after *now* that has not fired yet.

        ``asyncio.sleep`` runs on the monotonic clock, so the wall clock may
        still read just before the boundary on wake-up. The boundary already
        fired is never returned again.
        """
        boundary = (now // self._interval + 1) * self._interval
        if self._last_boundary is not None and boundary <= self._last_boundary:
            boundary = self._last_boundary + self._interval
        return boundary

    def _minute_label(self, boundary: float) -> str:
        return datetime.fromtimestamp(boundary, tz=self._tz).strftime("%H:%M")

    async def _run_timer(self) -> None:
        while True:
            now = self._wall_clock()
            boundary = self._next_boundary(now)
            await asyncio.sleep(boundary - now)
            self._last_boundary = boundary
            self._fire(self._minute_label(boundary))

    def _fire(self, minute: str | None = None) -> None:
        if self._tick is not None and not self._tick.done():
            _logger.warning("Previous notification run still in progress; skipping this tick")
            return
        self._tick = asyncio.get_running_loop().create_task(self.run_once(minute), name="pywxalert-tick")

    # ------------------------------------------------------------------
    # Tick body
    # ------------------------------------------------------------------

    def current_minute(self) -> str:
        now = self._clock()
        if now.tzinfo is not None:
            now = now.astimezone(self._tz)
        return now.strftime("%H:%M")

    async def run_once(self, minute: str | None = None) -> RunSummary:
        """Evaluate every user once and send notifications that are due.

        *minute* is the ``HH:MM`` label to match; the timer passes the label
        of the boundary it slept until. Defaults to the current minute.

        Never raises: a failure loading users aborts the tick and a failure
        for one user is counted and logged before moving on.
        """
        try:
            users = await self._users.find_all()
        except Exception as exc:
            _logger.error("Failed to load users for notifications: %s", exc, exc_info=True)
            return RunSummary()

        current_minute = minute or self.current_minute()
        succeeded = 0
        failed = 0
        skipped = 0

        for user in users:
            target = check_eligibility(user, current_minute)
            if isinstance(target, SkipReason):
                skipped += 1
                if target in (SkipReason.NO_TOKEN, SkipReason.NO_LOCATION):
                    _logger.debug("Skipping user=%s reason=%s", user.id, target.value)
                continue

            _logger.debug(
                "Sending notification user=%s token=%s at %s",
                target.user_id,
                mask_token(target.token),
                current_minute,
            )
            try:
                snapshot = await self._weather.get_weather(target.latitude, target.longitude)
                result = await self._notifications.send_weather_notification(target.token, snapshot)
            except Exception as exc:
                failed += 1
                _logger.error("Failed to send notification to user=%s: %s", user.id, exc)
                continue

            if result.success:
                succeeded += 1
            else:
                failed += 1
                _logger.warning("Failed to send notification user=%s error=%s", user.id, result.error)

        summary = RunSummary(succeeded=succeeded, failed=failed, skipped=skipped)
        _logger.info(
            "Notification run finished total=%d success=%d failed=%d skipped=%d",
            summary.total,
            summary.succeeded,
            summary.failed,
            summary.skipped,
        )
        return summary
