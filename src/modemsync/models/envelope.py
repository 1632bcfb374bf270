"""Response envelope shared by every endpoint."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ApiEnvelope(BaseModel):
    """``{"status": "ok" | <error>, "message": str, "data"?: T}``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    status: str
    message: str = ""
    data: Any = Field(default=None)

    @field_validator("status", "message", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @property
    def ok(self) -> bool:
        return self.status == "ok"
