"""Page bindings: refresh domains and user actions for each dashboard page."""

from modemsync.pages._base import SyncContext, SyncPage
from modemsync.pages.dashboard import DashboardPage
from modemsync.pages.device_info import DeviceInfoPage
from modemsync.pages.network import NetworkPage
from modemsync.pages.ota import OtaPage

__all__ = [
    "DashboardPage",
    "DeviceInfoPage",
    "NetworkPage",
    "OtaPage",
    "SyncContext",
    "SyncPage",
]
