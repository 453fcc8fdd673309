"""HTTP transport for the weather and push providers."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pywxalert._redact import redact_for_log
from pywxalert.config import WxAlertConfig
from pywxalert.exceptions import WxTransportError

_logger = logging.getLogger(__name__)

USER_AGENT = "pywxalert/0.1"


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(
        self,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        endpoint: str = "",
    ) -> dict[str, Any]:
        ...

    async def post_json(
        self,
        url: str,
        payload: Mapping[str, Any],
        *,
        headers: Mapping[str, str] | None = None,
        endpoint: str = "",
    ) -> dict[str, Any]:
        ...


class HttpTransport:
    """JSON-over-HTTP transport with a bounded per-request timeout."""

    def __init__(
        self,
        config: WxAlertConfig,
        http_session: aiohttp.ClientSession,
    ) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.http_timeout)

    async def get_json(
        self,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        endpoint: str = "",
    ) -> dict[str, Any]:
        """GET *url* and decode a JSON object body."""
        _logger.debug("GET %s params=%s", url, redact_for_log(dict(params or {})))
        return await self._request("GET", url, endpoint=endpoint or url, params=params)

    async def post_json(
        self,
        url: str,
        payload: Mapping[str, Any],
        *,
        headers: Mapping[str, str] | None = None,
        endpoint: str = "",
    ) -> dict[str, Any]:
        """POST *payload* as JSON to *url* and decode a JSON object body."""
        _logger.debug(
            "POST %s headers=%s body=%s",
            url,
            redact_for_log(dict(headers or {})),
            redact_for_log(payload),
        )
        return await self._request(
            "POST",
            url,
            endpoint=endpoint or url,
            data=json.dumps(payload, separators=(",", ":")),
            headers={"content-type": "application/json; charset=UTF-8", **dict(headers or {})},
        )

    async def _request(
        self,
        method: str,
        url: str,
        *,
        endpoint: str,
        params: Mapping[str, Any] | None = None,
        data: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        request_headers = {"accept": "application/json", "user-agent": USER_AGENT, **dict(headers or {})}
        query = {key: str(value) for key, value in (params or {}).items()}

        try:
            async with self._http.request(
                method,
                url,
                params=query or None,
                data=data,
                headers=request_headers,
                timeout=self._timeout,
            ) as resp:
                text = await resp.text()
                if resp.status >= 400:
                    raise WxTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except WxTransportError:
            raise
        except asyncio.TimeoutError as exc:
            raise WxTransportError(
                f"Request to {endpoint} timed out after {self._config.http_timeout:g}s",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientError as exc:
            raise WxTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            body: Any = json.loads(text)
        except json.JSONDecodeError as exc:
            raise WxTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                status_code=resp.status,
                endpoint=endpoint,
            ) from exc

        if not isinstance(body, dict):
            raise WxTransportError(
                f"Expected a JSON object from {endpoint}",
                status_code=resp.status,
                endpoint=endpoint,
            )
        return body
