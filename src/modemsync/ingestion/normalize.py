"""Scalar coercion for modem wire values.

The backend mixes strings, numbers and placeholders (``"-"``) for the
same field depending on firmware. These helpers turn one such value into
a number or ``None``; they never raise.
"""

from __future__ import annotations

import math
from typing import Any

from modemsync._constants import SIGNAL_SCALE

_PLACEHOLDERS = frozenset({"", "-", "--"})


def is_present(value: Any) -> bool:
    """True unless *value* is missing or a "not available" placeholder."""
    if value is None:
        return False
    if isinstance(value, str) and value.strip() in _PLACEHOLDERS:
        return False
    return True


def safe_float(value: Any) -> float | None:
    if not is_present(value) or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def strict_int(value: Any) -> int | None:
    """Coerce *value* to ``int`` only when it is exactly integral.

    ``"1300"``, ``1300`` and ``1300.0`` all give ``1300``; ``"13a"``,
    ``1300.5`` and booleans give ``None``.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    parsed = safe_float(value.strip() if isinstance(value, str) else value)
    if parsed is None or not parsed.is_integer():
        return None
    return int(parsed)


def scale_signal(value: Any) -> float | None:
    """Convert a ×100 wire signal value (e.g. ``"-9500"``) to dB/dBm."""
    parsed = safe_float(value)
    if parsed is None:
        return None
    return parsed / SIGNAL_SCALE


def first_present(source: Any, names: tuple[str, ...]) -> Any:
    """Return the first present field of *source* among *names*, else ``None``."""
    for name in names:
        value = read_field(source, name)
        if is_present(value):
            return value
    return None


def read_field(source: Any, name: str) -> Any:
    if isinstance(source, dict):
        return source.get(name)
    return getattr(source, name, None)
