from __future__ import annotations

import pytest

from pywxalert._api.kma import parse_forecast_response
from pywxalert.exceptions import WeatherProviderError


def test_parse_forecast_response_flattens_envelope() -> None:
    parsed = parse_forecast_response(
        {
            "response": {
                "header": {"resultCode": "00", "resultMsg": "NORMAL_SERVICE"},
                "body": {
                    "items": {
                        "item": [
                            {"category": "T1H", "fcstDate": "20240115", "fcstTime": "1100", "fcstValue": "3"},
                            {"category": "SKY", "fcstDate": "20240115", "fcstTime": "1100", "fcstValue": 1},
                        ]
                    }
                },
            }
        }
    )

    assert parsed.header.result_code == "00"
    assert [item.category for item in parsed.items] == ["T1H", "SKY"]
    # Numeric values are kept as text.
    assert parsed.items[1].fcst_value == "1"


def test_parse_forecast_response_accepts_single_item_object() -> None:
    parsed = parse_forecast_response(
        {
            "response": {
                "header": {"resultCode": "00"},
                "body": {"items": {"item": {"category": "T1H", "fcstValue": "3"}}},
            }
        }
    )

    assert len(parsed.items) == 1


def test_parse_forecast_response_treats_blank_items_as_empty() -> None:
    parsed = parse_forecast_response(
        {"response": {"header": {"resultCode": 0, "resultMsg": "OK"}, "body": {"items": ""}}}
    )

    assert parsed.items == []
    assert parsed.header.result_code == "0"


def test_parse_forecast_response_without_envelope_is_transport_error() -> None:
    with pytest.raises(WeatherProviderError) as excinfo:
        parse_forecast_response({"OpenAPI_ServiceResponse": {}})
    assert excinfo.value.code == "TRANSPORT_ERROR"


def test_parse_forecast_response_rejects_item_without_category() -> None:
    with pytest.raises(WeatherProviderError) as excinfo:
        parse_forecast_response(
            {"response": {"header": {"resultCode": "00"}, "body": {"items": {"item": [{"fcstValue": "3"}]}}}}
        )
    assert excinfo.value.code == "TRANSPORT_ERROR"
