"""Firebase Cloud Messaging HTTP v1 push provider.

Endpoints:
  - /v1/projects/{project}/messages:send  (one message per request)

Obtaining the OAuth2 access token is left to the caller: pass a static token
through the config or an async ``access_token_provider``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence

from pywxalert._redact import mask_token
from pywxalert._transport import Transport
from pywxalert.config import WxAlertConfig
from pywxalert.exceptions import PushProviderError, WxConfigError, WxTransportError
from pywxalert.models.notification import BatchDispatchResult, DispatchResult, PushMessage

_logger = logging.getLogger(__name__)

_SEND_ENDPOINT = "/v1/projects/{project}/messages:send"


class FcmPushProvider:
    """`PushProvider` backed by the FCM HTTP v1 API."""

    def __init__(
        self,
        config: WxAlertConfig,
        transport: Transport,
        *,
        access_token_provider: Callable[[], Awaitable[str]] | None = None,
    ) -> None:
        if not config.fcm_project_id:
            raise WxConfigError("fcm_project_id is required for FCM delivery")
        if access_token_provider is None and not config.fcm_access_token:
            raise WxConfigError("fcm_access_token or an access_token_provider is required for FCM delivery")
        self._config = config
        self._transport = transport
        self._access_token_provider = access_token_provider
        self._endpoint = _SEND_ENDPOINT.format(project=config.fcm_project_id)

    async def _access_token(self) -> str:
        if self._access_token_provider is not None:
            return await self._access_token_provider()
        return self._config.fcm_access_token or ""

    async def send(self, message: PushMessage) -> str:
        """Send one message and return the FCM message name.

        Raises
        ------
        PushProviderError
            FCM rejected the message or could not be reached.
        """
        url = f"{self._config.fcm_base_url.rstrip('/')}{self._endpoint}"
        headers = {"authorization": f"Bearer {await self._access_token()}"}
        try:
            response = await self._transport.post_json(
                url,
                {"message": message.to_fcm()},
                headers=headers,
                endpoint=self._endpoint,
            )
        except WxTransportError as exc:
            code = str(exc.status_code) if exc.status_code is not None else ""
            raise PushProviderError(str(exc), code=code) from exc

        name = response.get("name")
        if not isinstance(name, str) or not name:
            raise PushProviderError(f"FCM response for {mask_token(message.token)} has no message name")
        return name

    async def _send_result(self, message: PushMessage) -> DispatchResult:
        try:
            return DispatchResult.ok(await self.send(message))
        except PushProviderError as exc:
            return DispatchResult.failed(str(exc))

    async def send_each(self, messages: Sequence[PushMessage]) -> BatchDispatchResult:
        """Send every message; results follow the input order."""
        results = await asyncio.gather(*(self._send_result(message) for message in messages))
        batch = BatchDispatchResult(responses=list(results))
        _logger.debug("FCM batch sent=%d failed=%d", batch.success_count, batch.failure_count)
        return batch
