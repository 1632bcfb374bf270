"""Base model for modem API payloads.

Every response model inherits from :class:`ModemBaseModel` which
provides:

* A ``model_validator(mode="before")`` that strips sentinel values
  (``""``, ``"-"``, ``"--"``, NaN) so the field default is used.
* A ``raw`` dict that captures the original payload.
* :meth:`ModemBaseModel.to_patch` which dumps the normalized fields
  (without ``raw``) for the state store.

The backend already uses snake_case keys, so no alias generator is
needed.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Sentinel strings the modem backend uses for "not available".
_SENTINELS = frozenset({"", "-", "--", "NaN", "nan"})


class ModemBaseModel(BaseModel):
    """Base for modem API response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)
    """Original API response dict."""

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
    def _clean_values(cls, values: Any) -> Any:
        """Strip sentinel values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        original = dict(values)
        cleaned = ModemBaseModel._clean_dict(original)
        # Keep a caller-supplied raw (kwargs construction); otherwise stash the payload.
        if "raw" not in values:
            cleaned["raw"] = original
        return cleaned

    def to_patch(self) -> dict[str, Any]:
        """Dump normalized fields as a plain dict for :meth:`StateStore.apply_snapshot`."""
        return self.model_dump(mode="json")
