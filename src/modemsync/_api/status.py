"""System status endpoints.

Endpoints:
  - GET /stats
  - GET /connectivity
  - GET /ims/status
"""

from __future__ import annotations

from modemsync._api._common import as_dict, get_data
from modemsync._transport import Transport
from modemsync.models.controls import ConnectivityStatus, ImsStatus
from modemsync.models.stats import SystemStats


async def fetch_system_stats(transport: Transport) -> SystemStats:
    return SystemStats.model_validate(as_dict(await get_data(transport, "/stats")))


async def fetch_connectivity(transport: Transport) -> ConnectivityStatus:
    """Run the backend's IPv4/IPv6 reachability probe."""
    return ConnectivityStatus.model_validate(as_dict(await get_data(transport, "/connectivity")))


async def fetch_ims_status(transport: Transport) -> ImsStatus:
    return ImsStatus.model_validate(as_dict(await get_data(transport, "/ims/status")))
