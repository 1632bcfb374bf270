"""System statistics (``GET /stats``)."""

from __future__ import annotations

from pydantic import Field

from modemsync.models._base import ModemBaseModel


class InterfaceSpeed(ModemBaseModel):
    """Per-interface throughput sample.

    ``*_bytes_per_sec`` is the rate over the backend's sampling interval;
    ``total_*_bytes`` are lifetime counters reported by the device.
    """

    interface: str
    rx_bytes_per_sec: float | None = None
    tx_bytes_per_sec: float | None = None
    total_rx_bytes: int | None = None
    total_tx_bytes: int | None = None


class NetworkSpeed(ModemBaseModel):
    interfaces: list[InterfaceSpeed] = Field(default_factory=list)
    interval_seconds: float | None = None


class MemoryInfo(ModemBaseModel):
    total_bytes: int | None = None
    available_bytes: int | None = None
    used_bytes: int | None = None
    used_percent: float | None = None
    cached_bytes: int | None = None
    buffers_bytes: int | None = None


class CpuLoadInfo(ModemBaseModel):
    load_1min: float | None = None
    load_5min: float | None = None
    load_15min: float | None = None
    core_count: int | None = None
    load_percent: float | None = None


class UptimeInfo(ModemBaseModel):
    uptime_seconds: float | None = None
    idle_seconds: float | None = None
    uptime_formatted: str = ""


class ThermalZone(ModemBaseModel):
    zone: str = ""
    type: str = ""
    temperature: float | None = None


class SystemStats(ModemBaseModel):
    network_speed: NetworkSpeed | None = None
    memory: MemoryInfo | None = None
    cpu_load: CpuLoadInfo | None = None
    uptime: UptimeInfo | None = None
    temperature: list[ThermalZone] = Field(default_factory=list)
