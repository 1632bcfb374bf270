"""Data models for modem API responses."""

from modemsync.models._base import ModemBaseModel
from modemsync.models.apn import ApnContext, ApnList
from modemsync.models.cells import (
    CellLockResult,
    CellLockStatus,
    CellObservation,
    CellsInfo,
    LockEntry,
    LockIdentity,
    MatchedCell,
    ObservedCell,
    ServingCell,
)
from modemsync.models.controls import (
    AirplaneModeStatus,
    ConnectivityStatus,
    DataStatus,
    ImsStatus,
    PingResult,
    RoamingStatus,
)
from modemsync.models.device import (
    DeviceInfo,
    ImeisvInfo,
    NetworkInfo,
    QosInfo,
    SimInfo,
    SimSlotInfo,
    SimSlotSwitchResult,
)
from modemsync.models.envelope import ApiEnvelope
from modemsync.models.network import (
    IpAddress,
    NetworkInterfaceInfo,
    NetworkInterfaces,
    OperatorInfo,
    OperatorList,
)
from modemsync.models.ota import OtaApplyResult, OtaMeta, OtaStatus, OtaUploadResult, OtaValidation
from modemsync.models.radio import BandLockStatus, RadioMode, RadioModeStatus
from modemsync.models.stats import (
    CpuLoadInfo,
    InterfaceSpeed,
    MemoryInfo,
    NetworkSpeed,
    SystemStats,
    ThermalZone,
    UptimeInfo,
)

__all__ = [
    "AirplaneModeStatus",
    "ApiEnvelope",
    "ApnContext",
    "ApnList",
    "BandLockStatus",
    "CellLockResult",
    "CellLockStatus",
    "CellObservation",
    "CellsInfo",
    "ConnectivityStatus",
    "CpuLoadInfo",
    "DataStatus",
    "DeviceInfo",
    "ImeisvInfo",
    "ImsStatus",
    "InterfaceSpeed",
    "IpAddress",
    "LockEntry",
    "LockIdentity",
    "MatchedCell",
    "MemoryInfo",
    "ModemBaseModel",
    "NetworkInfo",
    "NetworkInterfaceInfo",
    "NetworkInterfaces",
    "NetworkSpeed",
    "ObservedCell",
    "OperatorInfo",
    "OperatorList",
    "OtaApplyResult",
    "OtaMeta",
    "OtaStatus",
    "OtaUploadResult",
    "OtaValidation",
    "PingResult",
    "QosInfo",
    "RadioMode",
    "RadioModeStatus",
    "RoamingStatus",
    "ServingCell",
    "SimInfo",
    "SimSlotInfo",
    "SimSlotSwitchResult",
    "SystemStats",
    "ThermalZone",
    "UptimeInfo",
]
