"""Push message and dispatch result models."""

from __future__ import annotations

from typing import Any

from pydantic import Field, computed_field

from pywxalert.models._base import WxBaseModel


class PushMessage(WxBaseModel):
    """A notification addressed to one device token.

    Delivery hints ask both Android and APNs transports for high-priority
    delivery.
    """

    token: str
    title: str
    body: str
    data: dict[str, str] | None = None
    android_priority: str = "high"
    apns_priority: str = "10"

    def to_fcm(self) -> dict[str, Any]:
        """FCM HTTP v1 ``message`` object."""
        message: dict[str, Any] = {
            "token": self.token,
            "notification": {"title": self.title, "body": self.body},
            "android": {"priority": self.android_priority},
            "apns": {"headers": {"apns-priority": self.apns_priority}},
        }
        if self.data:
            message["data"] = dict(self.data)
        return message


class DispatchResult(WxBaseModel):
    """Outcome of a single send."""

    success: bool
    message_id: str | None = None
    error: str | None = None

    @classmethod
    def ok(cls, message_id: str) -> DispatchResult:
        return cls(success=True, message_id=message_id)

    @classmethod
    def failed(cls, error: str) -> DispatchResult:
        return cls(success=False, error=error)


class BatchDispatchResult(WxBaseModel):
    """Outcome of a batch send; ``responses`` follow the input token order."""

    responses: list[DispatchResult] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def success_count(self) -> int:
        return sum(1 for result in self.responses if result.success)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def failure_count(self) -> int:
        return len(self.responses) - self.success_count
