"""Cell observation and cell-lock models.

Two shapes live here:

* Wire models (:class:`CellObservation`, :class:`LockEntry`) accept the
  backend's heterogeneous fields (``arfcn`` vs ``earfcn`` vs ``nrarfcn``,
  string-or-number signal values).
* Canonical models (:class:`ObservedCell`, :class:`LockIdentity`,
  :class:`MatchedCell`) are produced by
  :func:`modemsync.ingestion.matcher.normalize_cell` and never carry
  union-shaped values.
"""

from __future__ import annotations

import dataclasses

from pydantic import BaseModel, ConfigDict, Field

from modemsync.models._base import ModemBaseModel


@dataclasses.dataclass(frozen=True, slots=True)
class LockIdentity:
    """Normalized ``(rat, arfcn, pci)`` key of a lockable cell."""

    rat: int
    arfcn: int
    pci: int


# ------------------------------------------------------------------
# Wire models
# ------------------------------------------------------------------


class ServingCell(ModemBaseModel):
    tech: str = ""
    cell_id: int | None = None
    tac: int | None = None


class CellObservation(ModemBaseModel):
    """One entry of ``GET /cells``, as sent by the backend."""

    is_serving: bool = False
    type: str | None = None
    tech: str | None = None
    band: str | None = None
    pci: str | int | float | None = None
    arfcn: str | int | float | None = None
    earfcn: str | int | float | None = None
    nrarfcn: str | int | float | None = None
    rsrp: str | float | None = None
    rsrq: str | float | None = None
    rssi: str | float | None = None
    sinr: str | float | None = None
    ssb_rsrp: str | float | None = None
    ssb_rsrq: str | float | None = None
    ssb_sinr: str | float | None = None


class CellsInfo(ModemBaseModel):
    serving_cell: ServingCell | None = None
    cells: list[CellObservation] = Field(default_factory=list)


class LockEntry(ModemBaseModel):
    """Per-RAT cell-lock configuration (``rat_status`` item)."""

    rat: int
    rat_name: str = ""
    enabled: bool = False
    lock_type: int = 0
    pci: int | None = None
    arfcn: int | None = None

    @property
    def identity(self) -> LockIdentity | None:
        if self.pci is None or self.arfcn is None:
            return None
        return LockIdentity(rat=self.rat, arfcn=self.arfcn, pci=self.pci)


class CellLockStatus(ModemBaseModel):
    rat_status: list[LockEntry] = Field(default_factory=list)
    any_locked: bool = False


class CellLockResult(ModemBaseModel):
    locked: bool | None = None
    tech: str | None = None
    arfcn: int | None = None
    pci: int | None = None
    success: bool | None = None
    steps: list[str] = Field(default_factory=list)
    raw_response: str | None = None


# ------------------------------------------------------------------
# Canonical models
# ------------------------------------------------------------------


class ObservedCell(BaseModel):
    """A cell after boundary normalization.

    ``arfcn`` / ``pci`` are ``None`` when absent or non-numeric.
    Signal values are in dB/dBm (the wire value divided by 100).
    """

    model_config = ConfigDict(frozen=True)

    tech: str
    rat: int
    arfcn: int | None = None
    pci: int | None = None
    band: str | None = None
    is_serving: bool = False
    rsrp: float | None = None
    rsrq: float | None = None
    rssi: float | None = None
    sinr: float | None = None

    @property
    def identity(self) -> LockIdentity | None:
        if self.arfcn is None or self.pci is None:
            return None
        return LockIdentity(rat=self.rat, arfcn=self.arfcn, pci=self.pci)

    @property
    def key(self) -> str:
        """Stable per-cell key, also used as the dispatcher resource suffix."""
        return f"{self.tech}-{self.arfcn if self.arfcn is not None else ''}-{self.pci if self.pci is not None else ''}"


class MatchedCell(BaseModel):
    model_config = ConfigDict(frozen=True)

    cell: ObservedCell
    lockable: bool
    locked: bool
    entry: LockEntry | None = None

    @classmethod
    def from_parts(cls, cell: ObservedCell, *, entry: LockEntry | None) -> MatchedCell:
        return cls(cell=cell, lockable=cell.identity is not None, locked=entry is not None, entry=entry)
