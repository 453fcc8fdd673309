from __future__ import annotations

from pywxalert._redact import HIDDEN, mask_token, redact_for_log


def test_kma_query_hides_service_key() -> None:
    params = {"serviceKey": "abc%2Bdef", "nx": 60, "ny": 127, "base_time": "0900"}

    redacted = redact_for_log(params)

    assert redacted == {"serviceKey": HIDDEN, "nx": 60, "ny": 127, "base_time": "0900"}


def test_fcm_body_shows_only_a_device_token_prefix() -> None:
    body = {
        "message": {
            "token": "device-token-123",
            "notification": {"title": "Today's weather"},
            "data": {"type": "weather", "fcmToken": "other-device-456"},
        }
    }

    redacted = redact_for_log(body)

    assert redacted["message"]["token"] == "device…"
    assert redacted["message"]["notification"] == {"title": "Today's weather"}
    assert redacted["message"]["data"] == {"type": "weather", "fcmToken": "other-…"}
    assert body["message"]["token"] == "device-token-123"


def test_bearer_header_is_hidden_regardless_of_case() -> None:
    assert redact_for_log({"Authorization": "Bearer ya29.secret"}) == {"Authorization": HIDDEN}
    assert redact_for_log({"accessToken": "ya29.secret"}) == {"accessToken": HIDDEN}


def test_long_strings_are_cut_and_unknown_values_show_their_type() -> None:
    redacted = redact_for_log({"value": "x" * 600, "items": [b"\x00", None, True]}, max_string=10)

    assert redacted["value"] == "x" * 10 + "…(600 chars)"
    assert redacted["items"] == ["<bytes>", None, True]


def test_non_string_device_token_is_not_echoed() -> None:
    assert redact_for_log({"token": 12345678}) == {"token": "<none>"}


def test_mask_token_keeps_only_a_prefix() -> None:
    assert mask_token("abcdefghijkl") == "abcdef…"
    assert mask_token("abc") == "…"
    assert mask_token(None) == "<none>"
    assert mask_token("") == "<none>"
