"""High-level async client for the modem REST API."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from modemsync._api import apn as apn_api
from modemsync._api import cell_lock as cell_lock_api
from modemsync._api import controls as controls_api
from modemsync._api import device as device_api
from modemsync._api import network as network_api
from modemsync._api import ota as ota_api
from modemsync._api import radio as radio_api
from modemsync._api import status as status_api
from modemsync._transport import HttpTransport, Transport
from modemsync.config import SyncConfig
from modemsync.exceptions import ModemSyncError
from modemsync.models.apn import ApnList
from modemsync.models.cells import CellLockResult, CellLockStatus, CellsInfo
from modemsync.models.controls import AirplaneModeStatus, ConnectivityStatus, DataStatus, ImsStatus, RoamingStatus
from modemsync.models.device import DeviceInfo, ImeisvInfo, NetworkInfo, QosInfo, SimInfo, SimSlotInfo, SimSlotSwitchResult
from modemsync.models.network import NetworkInterfaces, OperatorList
from modemsync.models.ota import OtaApplyResult, OtaStatus, OtaUploadResult
from modemsync.models.radio import BandLockStatus, RadioMode, RadioModeStatus
from modemsync.models.requests import BandLockRequest, CellLockRequest, SetApnRequest
from modemsync.models.stats import SystemStats

_logger = logging.getLogger(__name__)


class ModemClient:
    """Async client for the modem backend.

    Usage::

        async with ModemClient(SyncConfig.from_env()) as client:
            cells = await client.get_cells()

    A pre-built ``transport`` (any object implementing
    :class:`~modemsync._transport.Transport`) skips the aiohttp session
    entirely; tests use this to run against an in-memory backend.
    """

    def __init__(
        self,
        config: SyncConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config or SyncConfig()
        self._external_session = session is not None
        self._http_session = session
        self._injected_transport = transport
        self._transport: Transport | None = transport

    @property
    def config(self) -> SyncConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> ModemClient:
        if self._injected_transport is not None:
            return self
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        _logger.debug("Client opened for %s", self._config.base_url)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self._injected_transport is not None:
            return
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise ModemSyncError("Client not initialized. Use 'async with ModemClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Dashboard reads
    # ------------------------------------------------------------------

    async def get_device_info(self) -> DeviceInfo:
        return await device_api.fetch_device_info(self._require_transport())

    async def get_sim_info(self) -> SimInfo:
        return await device_api.fetch_sim_info(self._require_transport())

    async def get_network_info(self) -> NetworkInfo:
        return await device_api.fetch_network_info(self._require_transport())

    async def get_cells(self) -> CellsInfo:
        return await device_api.fetch_cells(self._require_transport())

    async def get_qos(self) -> QosInfo:
        return await device_api.fetch_qos(self._require_transport())

    # ------------------------------------------------------------------
    # Device identity and SIM slot
    # ------------------------------------------------------------------

    async def get_imeisv(self) -> ImeisvInfo:
        return await device_api.fetch_imeisv(self._require_transport())

    async def get_sim_slot(self) -> SimSlotInfo:
        return await device_api.fetch_sim_slot(self._require_transport())

    async def switch_sim_slot(self, slot: int) -> SimSlotSwitchResult:
        return await device_api.switch_sim_slot(self._require_transport(), slot)

    # ------------------------------------------------------------------
    # Toggles
    # ------------------------------------------------------------------

    async def get_data_status(self) -> DataStatus:
        return await controls_api.fetch_data_status(self._require_transport())

    async def set_data_status(self, active: bool) -> DataStatus:
        return await controls_api.set_data_status(self._require_transport(), active)

    async def get_roaming(self) -> RoamingStatus:
        return await controls_api.fetch_roaming_status(self._require_transport())

    async def set_roaming_allowed(self, allowed: bool) -> RoamingStatus:
        return await controls_api.set_roaming_allowed(self._require_transport(), allowed)

    async def get_airplane_mode(self) -> AirplaneModeStatus:
        return await controls_api.fetch_airplane_mode(self._require_transport())

    async def set_airplane_mode(self, enabled: bool) -> AirplaneModeStatus:
        return await controls_api.set_airplane_mode(self._require_transport(), enabled)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    async def get_stats(self) -> SystemStats:
        return await status_api.fetch_system_stats(self._require_transport())

    async def get_connectivity(self) -> ConnectivityStatus:
        return await status_api.fetch_connectivity(self._require_transport())

    async def get_ims_status(self) -> ImsStatus:
        return await status_api.fetch_ims_status(self._require_transport())

    # ------------------------------------------------------------------
    # Radio configuration
    # ------------------------------------------------------------------

    async def get_radio_mode(self) -> RadioModeStatus:
        return await radio_api.fetch_radio_mode(self._require_transport())

    async def set_radio_mode(self, mode: RadioMode | str) -> None:
        await radio_api.set_radio_mode(self._require_transport(), mode)

    async def get_band_lock(self) -> BandLockStatus:
        return await radio_api.fetch_band_lock(self._require_transport())

    async def set_band_lock(self, request: BandLockRequest) -> None:
        await radio_api.set_band_lock(self._require_transport(), request)

    # ------------------------------------------------------------------
    # Cell lock
    # ------------------------------------------------------------------

    async def get_cell_lock(self) -> CellLockStatus:
        return await cell_lock_api.fetch_cell_lock_status(self._require_transport())

    async def set_cell_lock(self, request: CellLockRequest) -> CellLockResult:
        return await cell_lock_api.set_cell_lock(self._require_transport(), request)

    async def unlock_all_cells(self) -> CellLockResult:
        return await cell_lock_api.unlock_all_cells(self._require_transport())

    # ------------------------------------------------------------------
    # Operators and interfaces
    # ------------------------------------------------------------------

    async def get_operators(self) -> OperatorList:
        return await network_api.fetch_operators(self._require_transport())

    async def scan_operators(self) -> OperatorList:
        return await network_api.scan_operators(self._require_transport(), timeout=self._config.scan_timeout)

    async def register_manual(self, mccmnc: str) -> None:
        await network_api.register_manual(self._require_transport(), mccmnc)

    async def register_auto(self) -> None:
        await network_api.register_auto(self._require_transport())

    async def get_network_interfaces(self) -> NetworkInterfaces:
        return await network_api.fetch_network_interfaces(self._require_transport())

    # ------------------------------------------------------------------
    # APN
    # ------------------------------------------------------------------

    async def get_apn_list(self) -> ApnList:
        return await apn_api.fetch_apn_list(self._require_transport())

    async def set_apn(self, request: SetApnRequest) -> None:
        await apn_api.set_apn(self._require_transport(), request)

    # ------------------------------------------------------------------
    # OTA
    # ------------------------------------------------------------------

    async def get_ota_status(self) -> OtaStatus:
        return await ota_api.fetch_ota_status(self._require_transport())

    async def upload_ota_package(self, payload: bytes) -> OtaUploadResult:
        return await ota_api.upload_package(self._require_transport(), payload, timeout=self._config.upload_timeout)

    async def apply_ota_update(self, *, restart_now: bool = False) -> OtaApplyResult:
        return await ota_api.apply_update(self._require_transport(), restart_now=restart_now)

    async def cancel_ota_update(self) -> None:
        await ota_api.cancel_update(self._require_transport())
