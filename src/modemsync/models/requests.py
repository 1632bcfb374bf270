"""Pydantic request models for mutation endpoints.

These models provide a consistent "validate → normalize → execute" flow.
They are used internally by :class:`modemsync.client.ModemClient`; their
``model_dump(exclude_none=True)`` is the JSON body sent to the backend.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modemsync._constants import SIM_SLOTS
from modemsync.models.radio import RadioMode


class _Request(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )

    def to_body(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)


class AirplaneModeRequest(_Request):
    enabled: bool


class RoamingRequest(_Request):
    allowed: bool


class DataRequest(_Request):
    active: bool


class RadioModeRequest(_Request):
    mode: RadioMode


class BandLockRequest(_Request):
    """Band selection; all four lists empty means "unlock all bands"."""

    lte_fdd_bands: list[int] = Field(default_factory=list)
    lte_tdd_bands: list[int] = Field(default_factory=list)
    nr_fdd_bands: list[int] = Field(default_factory=list)
    nr_tdd_bands: list[int] = Field(default_factory=list)

    @field_validator("lte_fdd_bands", "lte_tdd_bands", "nr_fdd_bands", "nr_tdd_bands")
    @classmethod
    def _sorted_unique(cls, value: list[int]) -> list[int]:
        return sorted(set(value))


class CellLockRequest(_Request):
    rat: int
    enable: bool
    lock_type: int | None = None
    pci: int | None = Field(default=None, ge=0)
    arfcn: int | None = Field(default=None, ge=0)


class ManualRegisterRequest(_Request):
    mccmnc: str

    @field_validator("mccmnc")
    @classmethod
    def _mccmnc_digits(cls, value: str) -> str:
        if not value.isdigit() or len(value) not in (5, 6):
            raise ValueError("mccmnc must be 5 or 6 digits")
        return value


class SetApnRequest(_Request):
    """Update of one APN context; ``None`` fields are left unchanged."""

    context_path: str
    apn: str | None = None
    protocol: str | None = None
    username: str | None = None
    password: str | None = None
    auth_method: str | None = None

    @field_validator("context_path")
    @classmethod
    def _path_non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("context_path must be non-empty")
        return value


class OtaApplyRequest(_Request):
    restart_now: bool = False


class SimSlotRequest(_Request):
    slot: int

    @field_validator("slot")
    @classmethod
    def _known_slot(cls, value: int) -> int:
        if value not in SIM_SLOTS:
            raise ValueError("slot must be 1 or 2")
        return value
