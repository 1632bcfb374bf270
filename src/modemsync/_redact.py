"""Redaction for request-body tracing.

APN updates carry PPP credentials and OTA uploads carry whole firmware
archives. Neither belongs in a DEBUG log line, so bodies go through
:func:`redact_for_log` before ``api_trace_enabled`` prints them.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

# Matched as substrings of the lower-cased key ("ppp_password", "auth_token").
_SECRET_MARKERS: tuple[str, ...] = ("password", "passwd", "username", "token", "secret", "cookie", "authorization")

_MAX_DEPTH = 20
_REDACTED = "<redacted>"


def _is_secret(key: str) -> bool:
    lowered = key.lower()
    return any(marker in lowered for marker in _SECRET_MARKERS)


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Copy *value* with credentials masked, long strings cut and binary summarized."""
    if _depth > _MAX_DEPTH:
        return "<max-depth>"
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"
    if isinstance(value, (bytes, bytearray, memoryview)):
        return f"<bytes:{len(value)}b>"
    if isinstance(value, Mapping):
        return {
            str(key): _REDACTED if _is_secret(str(key)) else redact_for_log(item, max_string=max_string, _depth=_depth + 1)
            for key, item in value.items()
        }
    if isinstance(value, Sequence):
        return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]
    return repr(value)
