"""KMA forecast API response models."""

from __future__ import annotations

from pydantic import ConfigDict, Field

from pywxalert.models._base import WxBaseModel


class KmaHeader(WxBaseModel):
    """Response header of every KMA call."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    result_code: str = ""
    result_msg: str = ""


class KmaForecastItem(WxBaseModel):
    """One (category, value) observation of a forecast response.

    Values are kept as the raw provider text; parsing to numbers happens
    when the snapshot is assembled.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    base_date: str = ""
    """Issue date (``YYYYMMDD``)."""

    base_time: str = ""
    """Issue time (``HHMM``)."""

    category: str
    """Category code (``T1H``, ``RN1``, ``SKY``, ``REH``, ``PTY``, ``WSD``, ...)."""

    fcst_date: str = ""
    """Forecast slot date (``YYYYMMDD``)."""

    fcst_time: str = ""
    """Forecast slot time (``HHMM``)."""

    fcst_value: str | None = None
    """Raw value text."""

    nx: int | None = None
    ny: int | None = None


class KmaForecastResponse(WxBaseModel):
    """Flattened ``response.header`` and ``response.body.items.item``."""

    header: KmaHeader = Field(default_factory=KmaHeader)
    items: list[KmaForecastItem] = Field(default_factory=list)
