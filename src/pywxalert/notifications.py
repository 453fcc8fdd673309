"""Push notification dispatch."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Protocol

from pywxalert._constants import UMBRELLA_THRESHOLD
from pywxalert._redact import mask_token
from pywxalert.exceptions import PushProviderError
from pywxalert.models.notification import BatchDispatchResult, DispatchResult, PushMessage
from pywxalert.models.weather import PrecipitationType, WeatherSnapshot

_logger = logging.getLogger(__name__)

WEATHER_TITLE = "Today's weather"

_MISSING_TOKEN = DispatchResult.failed("push token is required")


def _has_token(token: str | None) -> bool:
    return bool(token and token.strip() and token.strip() != "--")


class PushProvider(Protocol):
    """Per-recipient push delivery.

    ``send`` returns the provider's message id or raises. ``send_each``
    sends a batch in one call and returns outcomes aligned with the input.
    """

    async def send(self, message: PushMessage) -> str:
        ...

    async def send_each(self, messages: Sequence[PushMessage]) -> BatchDispatchResult:
        ...


def format_weather_message(snapshot: WeatherSnapshot) -> tuple[str, str]:
    """Return ``(title, body)`` for a weather notification."""
    body = f"Currently {snapshot.temperature:g}°C, {snapshot.sky_condition.label}."
    if snapshot.precipitation_type is not PrecipitationType.NONE:
        body += f" {snapshot.precipitation_type.label.capitalize()} expected."
    if snapshot.precipitation_probability >= UMBRELLA_THRESHOLD:
        body += " Don't forget your umbrella!"
    return WEATHER_TITLE, body


class NotificationService:
    """Formats and sends push notifications.

    Provider failures never escape as exceptions; they come back as
    ``DispatchResult(success=False, error=...)``.
    """

    def __init__(self, provider: PushProvider) -> None:
        self._provider = provider

    @staticmethod
    def _message(token: str, title: str, body: str, data: Mapping[str, str] | None) -> PushMessage:
        return PushMessage(token=token, title=title, body=body, data=dict(data) if data else None)

    async def send_to_one(
        self,
        token: str,
        title: str,
        body: str,
        data: Mapping[str, str] | None = None,
    ) -> DispatchResult:
        """Send one notification to one device."""
        if not _has_token(token):
            return _MISSING_TOKEN

        try:
            message_id = await self._provider.send(self._message(token, title, body, data))
        except Exception as exc:
            _logger.error("Failed to send notification token=%s: %s", mask_token(token), exc)
            return DispatchResult.failed(str(exc) or type(exc).__name__)

        _logger.info("Notification sent token=%s message_id=%s", mask_token(token), message_id)
        return DispatchResult.ok(message_id)

    async def send_to_many(
        self,
        tokens: Sequence[str],
        title: str,
        body: str,
        data: Mapping[str, str] | None = None,
    ) -> BatchDispatchResult:
        """Send the same notification to many devices in one provider call.

        ``responses`` are positionally aligned with *tokens*. Blank tokens
        fail in place and are not sent to the provider.
        """
        if not tokens:
            return BatchDispatchResult()

        responses: list[DispatchResult] = [_MISSING_TOKEN] * len(tokens)
        positions = [index for index, token in enumerate(tokens) if _has_token(token)]
        if positions:
            try:
                messages = [self._message(tokens[index], title, body, data) for index in positions]
                batch = await self._provider.send_each(messages)
                sent = list(batch.responses)
                if len(sent) != len(positions):
                    raise PushProviderError(f"Provider returned {len(sent)} results for {len(positions)} messages")
            except Exception as exc:
                error = str(exc) or type(exc).__name__
                _logger.error("Failed to send %d notifications: %s", len(positions), error)
                sent = [DispatchResult.failed(error) for _ in positions]
            for index, outcome in zip(positions, sent):
                responses[index] = outcome

        result = BatchDispatchResult(responses=responses)
        _logger.info(
            "Multiple notifications sent total=%d success=%d failure=%d",
            len(tokens),
            result.success_count,
            result.failure_count,
        )
        if result.failure_count:
            _logger.warning("Some notifications failed to send failure=%d", result.failure_count)
        return result

    async def send_weather_notification(self, token: str, snapshot: WeatherSnapshot) -> DispatchResult:
        title, body = format_weather_message(snapshot)
        return await self.send_to_one(
            token,
            title,
            body,
            data={
                "type": "weather",
                "temperature": f"{snapshot.temperature:g}",
                "skyCondition": snapshot.sky_condition.value,
            },
        )
