"""Device, SIM and dashboard read endpoints.

Endpoints:
  - GET /device
  - GET /sim
  - GET /sim/slot
  - POST /sim/slot/switch
  - GET /device/imeisv
  - GET /network
  - GET /cells
  - GET /qos
"""

from __future__ import annotations

import logging

from modemsync._api._common import as_dict, get_data, post_data
from modemsync._transport import Transport
from modemsync.models.cells import CellsInfo
from modemsync.models.device import DeviceInfo, ImeisvInfo, NetworkInfo, QosInfo, SimInfo, SimSlotInfo, SimSlotSwitchResult
from modemsync.models.requests import SimSlotRequest

_logger = logging.getLogger(__name__)


async def fetch_device_info(transport: Transport) -> DeviceInfo:
    return DeviceInfo.model_validate(as_dict(await get_data(transport, "/device")))


async def fetch_sim_info(transport: Transport) -> SimInfo:
    return SimInfo.model_validate(as_dict(await get_data(transport, "/sim")))


async def fetch_network_info(transport: Transport) -> NetworkInfo:
    return NetworkInfo.model_validate(as_dict(await get_data(transport, "/network")))


async def fetch_cells(transport: Transport) -> CellsInfo:
    """Fetch serving and neighbour cells.

    Signal values are left as sent; :func:`modemsync.ingestion.matcher.normalize_cell`
    does the scaling.
    """
    return CellsInfo.model_validate(as_dict(await get_data(transport, "/cells")))


async def fetch_qos(transport: Transport) -> QosInfo:
    return QosInfo.model_validate(as_dict(await get_data(transport, "/qos")))


async def fetch_imeisv(transport: Transport) -> ImeisvInfo:
    return ImeisvInfo.model_validate(as_dict(await get_data(transport, "/device/imeisv")))


async def fetch_sim_slot(transport: Transport) -> SimSlotInfo:
    return SimSlotInfo.model_validate(as_dict(await get_data(transport, "/sim/slot")))


async def switch_sim_slot(transport: Transport, slot: int) -> SimSlotSwitchResult:
    """Select the active SIM slot (1 or 2).

    The modem re-registers afterwards; the reply only carries the raw AT
    response.
    """
    req = SimSlotRequest(slot=slot)
    data = as_dict(await post_data(transport, "/sim/slot/switch", req.to_body()))
    _logger.debug("SIM slot switch to %d requested", slot)
    return SimSlotSwitchResult.model_validate(data)
