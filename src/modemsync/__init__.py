"""modemsync - state synchronization engine for a cellular modem dashboard."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("modemsync")
except PackageNotFoundError:
    __version__ = "0+local"
from modemsync.client import ModemClient
from modemsync.config import SettleDelays, SyncConfig
from modemsync.dispatcher import ActionDispatcher, ActionResult, ActionStatus, PendingAction
from modemsync.exceptions import (
    ActionInProgressError,
    LockConfigError,
    ModemApiError,
    ModemConfigError,
    ModemSyncError,
    ModemTransportError,
)
from modemsync.ingestion import match_cells, normalize_cell, validate_lock_entries
from modemsync.models import (
    LockEntry,
    LockIdentity,
    MatchedCell,
    ObservedCell,
    RadioMode,
)
from modemsync.pages import DashboardPage, DeviceInfoPage, NetworkPage, OtaPage, SyncContext, SyncPage
from modemsync.scheduler import LivenessToken, RefreshDomain, RefreshScheduler, RefreshSignal
from modemsync.state import DraftField, SeriesStore, StateDomain, StateStore

__all__ = [
    "__version__",
    "ActionDispatcher",
    "ActionInProgressError",
    "ActionResult",
    "ActionStatus",
    "DashboardPage",
    "DeviceInfoPage",
    "DraftField",
    "LivenessToken",
    "LockConfigError",
    "LockEntry",
    "LockIdentity",
    "MatchedCell",
    "ModemApiError",
    "ModemClient",
    "ModemConfigError",
    "ModemSyncError",
    "ModemTransportError",
    "NetworkPage",
    "ObservedCell",
    "OtaPage",
    "PendingAction",
    "RadioMode",
    "RefreshDomain",
    "RefreshScheduler",
    "RefreshSignal",
    "SeriesStore",
    "SettleDelays",
    "StateDomain",
    "StateStore",
    "SyncConfig",
    "SyncContext",
    "SyncPage",
    "match_cells",
    "normalize_cell",
    "validate_lock_entries",
]
