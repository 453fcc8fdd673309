"""Base model for pywxalert data.

Every model inherits from :class:`WxBaseModel` which provides:

* ``alias_generator=to_camel`` so camelCase provider and cache keys map
  automatically to snake_case fields, and serialization by alias writes
  camelCase back.
* A ``model_validator(mode="before")`` that strips placeholder values
  (``""``, ``"--"``, NaN) so the field default is used.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

# Placeholder strings providers use for "not available".
_SENTINELS = frozenset({"", "--", "NaN", "nan"})


class WxBaseModel(BaseModel):
    """Base for pywxalert models.

    Handles:
    * camelCase ↔ snake_case via ``alias_generator=to_camel``
    * placeholder values (``""``, ``"--"``, NaN) → dropped so the field
      default is used instead
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and value.strip() in _SENTINELS:
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_placeholders(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        return WxBaseModel._clean_dict(values)

    def to_payload(self) -> dict[str, Any]:
        """JSON-compatible dict keyed by camelCase aliases."""
        return self.model_dump(mode="json", by_alias=True)
