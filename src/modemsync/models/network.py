"""Operator registration and network interface models."""

from __future__ import annotations

from pydantic import Field

from modemsync.models._base import ModemBaseModel


class OperatorInfo(ModemBaseModel):
    path: str = ""
    name: str = ""
    status: str = ""
    mcc: str = ""
    mnc: str = ""
    technologies: list[str] = Field(default_factory=list)

    @property
    def mccmnc(self) -> str:
        return f"{self.mcc}{self.mnc}"


class OperatorList(ModemBaseModel):
    operators: list[OperatorInfo] = Field(default_factory=list)


class IpAddress(ModemBaseModel):
    address: str = ""
    prefix_len: int = 0
    ip_type: str = ""
    scope: str = ""


class NetworkInterfaceInfo(ModemBaseModel):
    """One kernel network interface (``GET /network/interfaces``)."""

    name: str = ""
    status: str = ""
    mac_address: str | None = None
    mtu: int = 0
    ip_addresses: list[IpAddress] = Field(default_factory=list)
    rx_bytes: int = 0
    tx_bytes: int = 0
    rx_packets: int = 0
    tx_packets: int = 0
    rx_errors: int = 0
    tx_errors: int = 0


class NetworkInterfaces(ModemBaseModel):
    interfaces: list[NetworkInterfaceInfo] = Field(default_factory=list)
    total_count: int = 0
