"""Quick-control toggle endpoints.

Endpoints:
  - GET/POST /data
  - GET/POST /roaming
  - GET/POST /airplane-mode
"""

from __future__ import annotations

import logging

from modemsync._api._common import as_dict, get_data, post_data
from modemsync._transport import Transport
from modemsync.models.controls import AirplaneModeStatus, DataStatus, RoamingStatus
from modemsync.models.requests import AirplaneModeRequest, DataRequest, RoamingRequest

_logger = logging.getLogger(__name__)


async def fetch_data_status(transport: Transport) -> DataStatus:
    return DataStatus.model_validate(as_dict(await get_data(transport, "/data")))


async def set_data_status(transport: Transport, active: bool) -> DataStatus:
    """Switch the mobile data connection.

    The backend echoes the new state; when it does not, the requested
    state is reported with an empty ``raw``.
    """
    req = DataRequest(active=active)
    data = as_dict(await post_data(transport, "/data", req.to_body()))
    _logger.debug("Data connection set active=%s", active)
    return DataStatus.model_validate(data or {**req.to_body(), "raw": {}})


async def fetch_roaming_status(transport: Transport) -> RoamingStatus:
    return RoamingStatus.model_validate(as_dict(await get_data(transport, "/roaming")))


async def set_roaming_allowed(transport: Transport, allowed: bool) -> RoamingStatus:
    req = RoamingRequest(allowed=allowed)
    data = as_dict(await post_data(transport, "/roaming", req.to_body()))
    _logger.debug("Roaming set allowed=%s", allowed)
    return RoamingStatus.model_validate(data or {"roaming_allowed": allowed, "raw": {}})


async def fetch_airplane_mode(transport: Transport) -> AirplaneModeStatus:
    return AirplaneModeStatus.model_validate(as_dict(await get_data(transport, "/airplane-mode")))


async def set_airplane_mode(transport: Transport, enabled: bool) -> AirplaneModeStatus:
    req = AirplaneModeRequest(enabled=enabled)
    data = as_dict(await post_data(transport, "/airplane-mode", req.to_body()))
    _logger.debug("Airplane mode set enabled=%s", enabled)
    return AirplaneModeStatus.model_validate(data or {**req.to_body(), "raw": {}})
