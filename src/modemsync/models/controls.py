"""Toggle states and connectivity status models."""

from __future__ import annotations

from modemsync.models._base import ModemBaseModel


class DataStatus(ModemBaseModel):
    active: bool = False


class RoamingStatus(ModemBaseModel):
    roaming_allowed: bool = False
    is_roaming: bool = False


class AirplaneModeStatus(ModemBaseModel):
    """``enabled`` is airplane mode itself; ``powered``/``online`` are the radio state."""

    enabled: bool = False
    powered: bool = False
    online: bool = False


class ImsStatus(ModemBaseModel):
    registered: bool = False
    voice_capable: bool = False
    sms_capable: bool = False


class PingResult(ModemBaseModel):
    success: bool = False
    latency_ms: float | None = None
    target: str = ""
    error: str | None = None


class ConnectivityStatus(ModemBaseModel):
    ipv4: PingResult | None = None
    ipv6: PingResult | None = None
