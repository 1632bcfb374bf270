"""Identity matching between observed cells and cell-lock entries.

Everything in here is a pure function of its inputs. The wire shapes
(``arfcn``/``earfcn``/``nrarfcn``, string-or-number values) are folded
into :class:`~modemsync.models.cells.ObservedCell` by
:func:`normalize_cell` and never leave this module.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from modemsync._constants import CHANNEL_FIELDS, RAT_LTE, RAT_NR, TECH_LTE, TECH_NR
from modemsync.exceptions import LockConfigError
from modemsync.ingestion.normalize import first_present, is_present, read_field, scale_signal, strict_int
from modemsync.models.cells import CellObservation, LockEntry, LockIdentity, MatchedCell, ObservedCell

_TECH_TO_RAT: dict[str, int] = {TECH_LTE: RAT_LTE, TECH_NR: RAT_NR}

# NR cells may only report the SSB variants.
_SIGNAL_FIELDS: dict[str, tuple[str, ...]] = {
    "rsrp": ("rsrp", "ssb_rsrp"),
    "rsrq": ("rsrq", "ssb_rsrq"),
    "sinr": ("sinr", "ssb_sinr"),
    "rssi": ("rssi",),
}

CellInput = CellObservation | ObservedCell | Mapping[str, Any]
EntryInput = LockEntry | Mapping[str, Any]


def resolve_tech(raw: Any) -> str:
    """Explicit ``tech`` wins; otherwise legacy ``type == "NR"`` means NR."""
    tech = read_field(raw, "tech")
    if is_present(tech):
        normalized = str(tech).strip().lower()
        return TECH_NR if normalized == TECH_NR else TECH_LTE
    legacy = read_field(raw, "type")
    if is_present(legacy) and str(legacy).strip().upper() == "NR":
        return TECH_NR
    return TECH_LTE


def normalize_cell(raw: CellInput) -> ObservedCell:
    """Fold one wire cell observation into the canonical record."""
    if isinstance(raw, ObservedCell):
        return raw
    if isinstance(raw, Mapping):
        raw = dict(raw)
    tech = resolve_tech(raw)
    signals = {name: scale_signal(first_present(raw, fields)) for name, fields in _SIGNAL_FIELDS.items()}
    band = read_field(raw, "band")
    return ObservedCell(
        tech=tech,
        rat=_TECH_TO_RAT[tech],
        arfcn=strict_int(first_present(raw, CHANNEL_FIELDS)),
        pci=strict_int(read_field(raw, "pci")),
        band=str(band) if is_present(band) else None,
        is_serving=bool(read_field(raw, "is_serving")),
        **signals,
    )


def _as_entry(entry: EntryInput) -> LockEntry:
    return entry if isinstance(entry, LockEntry) else LockEntry.model_validate(dict(entry))


def find_lock_entry(identity: LockIdentity | None, entries: Iterable[LockEntry]) -> LockEntry | None:
    """First enabled entry whose RAT, channel and PCI equal *identity*."""
    if identity is None:
        return None
    for entry in entries:
        if entry.enabled and entry.identity == identity:
            return entry
    return None


def match_cells(observed_cells: Iterable[CellInput], lock_entries: Iterable[EntryInput]) -> list[MatchedCell]:
    """Annotate each observed cell with ``lockable`` / ``locked``.

    Cells keep their input order. A cell without a numeric channel and
    PCI is never lockable and therefore never locked.
    """
    entries = [_as_entry(entry) for entry in lock_entries]
    matched: list[MatchedCell] = []
    for raw in observed_cells:
        cell = normalize_cell(raw)
        matched.append(MatchedCell.from_parts(cell, entry=find_lock_entry(cell.identity, entries)))
    return matched


def validate_lock_entries(lock_entries: Iterable[EntryInput]) -> None:
    """Reject a lock configuration with more than one enabled entry per RAT.

    Raises
    ------
    LockConfigError
        If two or more entries are enabled for the same RAT code.
    """
    enabled: dict[int, int] = {}
    for entry in (_as_entry(item) for item in lock_entries):
        if not entry.enabled:
            continue
        enabled[entry.rat] = enabled.get(entry.rat, 0) + 1
    conflicting = sorted(rat for rat, count in enabled.items() if count > 1)
    if conflicting:
        raise LockConfigError(f"More than one cell lock enabled for RAT {', '.join(map(str, conflicting))}")
