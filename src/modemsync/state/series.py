"""Bounded per-channel telemetry history."""

from __future__ import annotations

import dataclasses
import math
from collections import deque
from typing import Any

from modemsync._constants import DEFAULT_SERIES_MAX_LENGTH


def rx_key(interface: str) -> str:
    return f"{interface}.rx"


def tx_key(interface: str) -> str:
    return f"{interface}.tx"


def _as_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


@dataclasses.dataclass(frozen=True, slots=True)
class InterfaceSpeedHistory:
    """Read-only view of one interface's rx/tx history."""

    interface: str
    rx: tuple[float, ...]
    tx: tuple[float, ...]
    total_rx: float | None
    total_tx: float | None


class SeriesStore:
    """Fixed-capacity FIFO series keyed by name.

    Keys are created on first ingest. Samples are kept in arrival order
    and never averaged or reordered; once a series holds ``max_length``
    samples each new one evicts the oldest.
    """

    def __init__(self, max_length: int = DEFAULT_SERIES_MAX_LENGTH) -> None:
        if max_length < 1:
            raise ValueError(f"max_length must be >= 1, got {max_length}")
        self._max_length = max_length
        self._series: dict[str, deque[float]] = {}
        self._totals: dict[str, float] = {}

    @property
    def max_length(self) -> int:
        return self._max_length

    def ingest(self, key: str, sample: Any, *, total: Any = None) -> bool:
        """Append *sample* to *key*; return whether a sample was stored.

        A missing or non-numeric sample stores nothing (the poll leaves a
        gap). *total*, when numeric, replaces the stored lifetime counter.
        """
        total_value = _as_number(total)
        if total_value is not None:
            self._totals[key] = total_value
        value = _as_number(sample)
        buffer = self._series.get(key)
        if buffer is None:
            buffer = deque(maxlen=self._max_length)
            self._series[key] = buffer
        if value is None:
            return False
        buffer.append(value)
        return True

    def get(self, key: str) -> tuple[float, ...]:
        buffer = self._series.get(key)
        return tuple(buffer) if buffer is not None else ()

    def get_total(self, key: str) -> float | None:
        return self._totals.get(key)

    def keys(self) -> list[str]:
        return list(self._series)

    def interface_history(self, interface: str) -> InterfaceSpeedHistory:
        return InterfaceSpeedHistory(
            interface=interface,
            rx=self.get(rx_key(interface)),
            tx=self.get(tx_key(interface)),
            total_rx=self.get_total(rx_key(interface)),
            total_tx=self.get_total(tx_key(interface)),
        )

    def interfaces(self) -> list[str]:
        """Interface names that have a series, in first-seen order."""
        names: list[str] = []
        for key in self._series:
            name, _, _ = key.rpartition(".")
            if name and name not in names:
                names.append(name)
        return names

    def clear(self) -> None:
        self._series.clear()
        self._totals.clear()
