from __future__ import annotations

from typing import Any

import pytest

from pywxalert._api.fcm import FcmPushProvider
from pywxalert.config import WxAlertConfig
from pywxalert.exceptions import PushProviderError, WxConfigError, WxTransportError
from pywxalert.models.notification import PushMessage


class _FakeTransport:
    def __init__(self, *, fail_tokens: set[str] | None = None) -> None:
        self.fail_tokens = fail_tokens or set()
        self.posts: list[dict[str, Any]] = []

    async def get_json(self, url: str, *, params: Any = None, endpoint: str = "") -> dict[str, Any]:
        raise AssertionError("unexpected GET")

    async def post_json(
        self,
        url: str,
        payload: Any,
        *,
        headers: Any = None,
        endpoint: str = "",
    ) -> dict[str, Any]:
        self.posts.append({"url": url, "payload": payload, "headers": dict(headers or {}), "endpoint": endpoint})
        token = payload["message"]["token"]
        if token in self.fail_tokens:
            raise WxTransportError("HTTP 404 from FCM: UNREGISTERED", status_code=404, endpoint=endpoint)
        return {"name": f"projects/demo/messages/{token}"}


def _config(**overrides: Any) -> WxAlertConfig:
    values: dict[str, Any] = {"fcm_project_id": "demo", "fcm_access_token": "ya29.token"}
    values.update(overrides)
    return WxAlertConfig(**values)


def _message(token: str) -> PushMessage:
    return PushMessage(token=token, title="t", body="b", data={"type": "weather"})


def test_provider_requires_project_and_credentials() -> None:
    with pytest.raises(WxConfigError):
        FcmPushProvider(WxAlertConfig(), _FakeTransport())
    with pytest.raises(WxConfigError):
        FcmPushProvider(_config(fcm_access_token=None), _FakeTransport())


@pytest.mark.asyncio
async def test_send_posts_v1_message_with_bearer_token() -> None:
    transport = _FakeTransport()
    provider = FcmPushProvider(_config(), transport)

    name = await provider.send(_message("tok-1"))

    assert name == "projects/demo/messages/tok-1"
    post = transport.posts[0]
    assert post["url"] == "https://fcm.googleapis.com/v1/projects/demo/messages:send"
    assert post["headers"]["authorization"] == "Bearer ya29.token"
    message = post["payload"]["message"]
    assert message["token"] == "tok-1"
    assert message["notification"] == {"title": "t", "body": "b"}
    assert message["android"] == {"priority": "high"}
    assert message["apns"] == {"headers": {"apns-priority": "10"}}
    assert message["data"] == {"type": "weather"}


@pytest.mark.asyncio
async def test_send_uses_access_token_provider() -> None:
    transport = _FakeTransport()

    async def _token() -> str:
        return "minted"

    provider = FcmPushProvider(_config(fcm_access_token=None), transport, access_token_provider=_token)
    await provider.send(_message("tok-1"))

    assert transport.posts[0]["headers"]["authorization"] == "Bearer minted"


@pytest.mark.asyncio
async def test_send_maps_transport_error_to_provider_error() -> None:
    provider = FcmPushProvider(_config(), _FakeTransport(fail_tokens={"dead"}))

    with pytest.raises(PushProviderError) as excinfo:
        await provider.send(_message("dead"))
    assert excinfo.value.code == "404"


@pytest.mark.asyncio
async def test_send_each_keeps_input_order_and_isolates_failures() -> None:
    provider = FcmPushProvider(_config(), _FakeTransport(fail_tokens={"b"}))

    batch = await provider.send_each([_message("a"), _message("b"), _message("c")])

    assert [result.success for result in batch.responses] == [True, False, True]
    assert batch.responses[0].message_id == "projects/demo/messages/a"
    assert "UNREGISTERED" in (batch.responses[1].error or "")
    assert batch.success_count == 2
    assert batch.failure_count == 1
