"""Radio mode and band lock models."""

from __future__ import annotations

import enum

from pydantic import Field

from modemsync.models._base import ModemBaseModel


class RadioMode(enum.StrEnum):
    """Technology preference accepted by ``POST /radio-mode``."""

    AUTO = "auto"
    LTE = "lte"
    NR = "nr"


class RadioModeStatus(ModemBaseModel):
    mode: str = ""
    technology_preference: str = ""


class BandLockStatus(ModemBaseModel):
    """Current band lock configuration.

    An empty band list is meaningful (nothing selected in that group), so
    the lists always default to ``[]`` rather than being omitted.
    """

    locked: bool = False
    lte_fdd_bands: list[int] = Field(default_factory=list)
    lte_tdd_bands: list[int] = Field(default_factory=list)
    nr_fdd_bands: list[int] = Field(default_factory=list)
    nr_tdd_bands: list[int] = Field(default_factory=list)
    raw_response: str | None = None

    @property
    def all_bands(self) -> list[int]:
        return [*self.lte_fdd_bands, *self.lte_tdd_bands, *self.nr_fdd_bands, *self.nr_tdd_bands]
