from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import aiohttp
import pytest

from pywxalert._transport import HttpTransport
from pywxalert.config import WxAlertConfig
from pywxalert.exceptions import WxTransportError


class _FakeResponse:
    def __init__(self, status: int, text: str) -> None:
        self.status = status
        self._text = text

    async def text(self) -> str:
        return self._text

    async def __aenter__(self) -> _FakeResponse:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None


class _FakeSession:
    def __init__(self, response: _FakeResponse | None = None, *, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.requests: list[dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> _FakeResponse:
        self.requests.append({"method": method, "url": url, **kwargs})
        if self.error is not None:
            raise self.error
        assert self.response is not None
        return self.response


def _transport(session: _FakeSession) -> HttpTransport:
    return HttpTransport(WxAlertConfig(http_timeout=5.0), session)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_get_json_stringifies_params_and_decodes_body() -> None:
    session = _FakeSession(_FakeResponse(200, '{"ok": true}'))

    body = await _transport(session).get_json("https://example.test/x", params={"nx": 60, "dataType": "JSON"})

    assert body == {"ok": True}
    request = session.requests[0]
    assert request["method"] == "GET"
    assert request["params"] == {"nx": "60", "dataType": "JSON"}
    assert request["timeout"].total == 5.0


@pytest.mark.asyncio
async def test_post_json_sends_compact_json_with_headers() -> None:
    session = _FakeSession(_FakeResponse(200, '{"name": "m1"}'))

    body = await _transport(session).post_json(
        "https://example.test/send",
        {"message": {"token": "t"}},
        headers={"authorization": "Bearer x"},
    )

    assert body == {"name": "m1"}
    request = session.requests[0]
    assert json.loads(request["data"]) == {"message": {"token": "t"}}
    assert request["headers"]["authorization"] == "Bearer x"
    assert request["headers"]["content-type"].startswith("application/json")


@pytest.mark.asyncio
async def test_post_json_debug_log_masks_secrets(caplog: pytest.LogCaptureFixture) -> None:
    session = _FakeSession(_FakeResponse(200, '{"name": "m1"}'))

    with caplog.at_level(logging.DEBUG, logger="pywxalert._transport"):
        await _transport(session).post_json(
            "https://example.test/send",
            {"message": {"token": "device-token-123"}},
            headers={"Authorization": "Bearer ya29.secret"},
        )

    assert "ya29.secret" not in caplog.text
    assert "device-token-123" not in caplog.text
    assert "device…" in caplog.text


@pytest.mark.asyncio
async def test_http_error_status_raises_with_status_code() -> None:
    session = _FakeSession(_FakeResponse(503, "unavailable"))

    with pytest.raises(WxTransportError) as excinfo:
        await _transport(session).get_json("https://example.test/x", endpoint="/x")
    assert excinfo.value.status_code == 503
    assert excinfo.value.endpoint == "/x"


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["<html>", "[1, 2]"])
async def test_non_object_body_raises(text: str) -> None:
    session = _FakeSession(_FakeResponse(200, text))

    with pytest.raises(WxTransportError):
        await _transport(session).get_json("https://example.test/x")


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [asyncio.TimeoutError(), aiohttp.ClientConnectionError("refused")])
async def test_network_failures_raise_transport_error(error: Exception) -> None:
    session = _FakeSession(error=error)

    with pytest.raises(WxTransportError):
        await _transport(session).get_json("https://example.test/x")
