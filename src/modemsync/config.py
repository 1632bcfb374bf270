"""Client configuration for modemsync."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from modemsync._constants import (
    BASE_URL,
    DEFAULT_REFRESH_INTERVAL,
    DEFAULT_SERIES_MAX_LENGTH,
    SETTLE_APN,
    SETTLE_BAND_LOCK,
    SETTLE_CELL_LOCK,
    SETTLE_RADIO_MODE,
    SETTLE_REGISTRATION,
    SETTLE_SIM_SLOT,
    SETTLE_TOGGLE,
)
from modemsync.exceptions import ModemConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env: Mapping[str, str], key: str, cast: type) -> Any:
    raw = env.get(key)
    if raw is None:
        return None
    try:
        return cast(raw)
    except ValueError as exc:
        raise ModemConfigError(f"{key} must be a {cast.__name__}, got {raw!r}") from exc


@dataclasses.dataclass(frozen=True)
class SettleDelays:
    """Seconds to wait after a successful mutation before the confirmatory refresh.

    The modem needs time to converge (e.g. re-registration after a radio
    mode change) before a read can be treated as ground truth.
    """

    toggle: float = SETTLE_TOGGLE
    band_lock: float = SETTLE_BAND_LOCK
    apn: float = SETTLE_APN
    cell_lock: float = SETTLE_CELL_LOCK
    radio_mode: float = SETTLE_RADIO_MODE
    registration: float = SETTLE_REGISTRATION
    sim_slot: float = SETTLE_SIM_SLOT


@dataclasses.dataclass(frozen=True)
class SyncConfig:
    """Engine configuration.

    Parameters
    ----------
    base_url : str
        API root of the modem backend, including the ``/api`` prefix.
    request_timeout : float
        Total timeout in seconds for ordinary requests.
    scan_timeout : float
        Timeout for the (slow) operator scan endpoint.
    upload_timeout : float
        Timeout for OTA package uploads.
    transport_retries : int
        Extra attempts for read requests after a transport failure.
        Mutations are never retried.
    refresh_interval : float
        Cadence in seconds for auto-refreshing telemetry domains.
        ``0`` means manual refresh only.
    series_max_length : int
        Capacity of each telemetry series.
    api_trace_enabled : bool
        Log (redacted) request bodies at DEBUG level.
    settle : SettleDelays
        Per-action settle delays.
    """

    base_url: str = BASE_URL
    request_timeout: float = 10.0
    scan_timeout: float = 120.0
    upload_timeout: float = 300.0
    transport_retries: int = 1
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL
    series_max_length: int = DEFAULT_SERIES_MAX_LENGTH
    api_trace_enabled: bool = False
    settle: SettleDelays = dataclasses.field(default_factory=SettleDelays)

    def __post_init__(self) -> None:
        if self.refresh_interval < 0:
            raise ModemConfigError(f"refresh_interval must be >= 0, got {self.refresh_interval}")
        if self.series_max_length < 1:
            raise ModemConfigError(f"series_max_length must be >= 1, got {self.series_max_length}")
        if self.transport_retries < 0:
            raise ModemConfigError(f"transport_retries must be >= 0, got {self.transport_retries}")

    @classmethod
    def from_env(cls, **overrides: Any) -> SyncConfig:
        """Create configuration from environment variables.

        Reads ``MODEMSYNC_BASE_URL``, ``MODEMSYNC_REQUEST_TIMEOUT``,
        ``MODEMSYNC_SCAN_TIMEOUT``, ``MODEMSYNC_UPLOAD_TIMEOUT``,
        ``MODEMSYNC_TRANSPORT_RETRIES``, ``MODEMSYNC_REFRESH_INTERVAL``,
        ``MODEMSYNC_SERIES_MAX_LENGTH`` and ``MODEMSYNC_API_TRACE_ENABLED``.
        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        base_url = env.get("MODEMSYNC_BASE_URL")
        if base_url is not None:
            config_kwargs["base_url"] = base_url.rstrip("/")

        _ENV_NUMERIC = {
            "MODEMSYNC_REQUEST_TIMEOUT": ("request_timeout", float),
            "MODEMSYNC_SCAN_TIMEOUT": ("scan_timeout", float),
            "MODEMSYNC_UPLOAD_TIMEOUT": ("upload_timeout", float),
            "MODEMSYNC_TRANSPORT_RETRIES": ("transport_retries", int),
            "MODEMSYNC_REFRESH_INTERVAL": ("refresh_interval", float),
            "MODEMSYNC_SERIES_MAX_LENGTH": ("series_max_length", int),
        }
        for env_key, (field_name, cast) in _ENV_NUMERIC.items():
            if field_name in overrides:
                continue
            value = _env_number(env, env_key, cast)
            if value is not None:
                config_kwargs[field_name] = value

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("MODEMSYNC_API_TRACE_ENABLED"),
                False,
            )

        settle_overrides = overrides.pop("settle", None)
        if isinstance(settle_overrides, dict):
            config_kwargs["settle"] = SettleDelays(**settle_overrides)
        elif isinstance(settle_overrides, SettleDelays):
            config_kwargs["settle"] = settle_overrides

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
