"""Operator registration and interface endpoints.

Endpoints:
  - GET /network/operators
  - GET /network/operators/scan
  - POST /network/register-manual
  - POST /network/register-auto
  - GET /network/interfaces
"""

from __future__ import annotations

import logging

from modemsync._api._common import as_dict, get_data, post_data
from modemsync._transport import Transport
from modemsync.models.network import NetworkInterfaces, OperatorList
from modemsync.models.requests import ManualRegisterRequest

_logger = logging.getLogger(__name__)


async def fetch_operators(transport: Transport) -> OperatorList:
    return OperatorList.model_validate(as_dict(await get_data(transport, "/network/operators")))


async def scan_operators(transport: Transport, *, timeout: float | None = None) -> OperatorList:
    """Trigger a full operator scan. This can take minutes on the modem."""
    _logger.debug("Operator scan started")
    data = await get_data(transport, "/network/operators/scan", timeout=timeout)
    return OperatorList.model_validate(as_dict(data))


async def register_manual(transport: Transport, mccmnc: str) -> None:
    req = ManualRegisterRequest(mccmnc=mccmnc)
    await post_data(transport, "/network/register-manual", req.to_body())
    _logger.debug("Manual registration submitted: %s", req.mccmnc)


async def register_auto(transport: Transport) -> None:
    await post_data(transport, "/network/register-auto")
    _logger.debug("Automatic registration submitted")


async def fetch_network_interfaces(transport: Transport) -> NetworkInterfaces:
    return NetworkInterfaces.model_validate(as_dict(await get_data(transport, "/network/interfaces")))
