"""Radio configuration endpoints.

Endpoints:
  - GET/POST /radio-mode
  - GET/POST /band-lock
"""

from __future__ import annotations

import logging

from modemsync._api._common import as_dict, get_data, post_data
from modemsync._transport import Transport
from modemsync.models.radio import BandLockStatus, RadioMode, RadioModeStatus
from modemsync.models.requests import BandLockRequest, RadioModeRequest

_logger = logging.getLogger(__name__)


async def fetch_radio_mode(transport: Transport) -> RadioModeStatus:
    return RadioModeStatus.model_validate(as_dict(await get_data(transport, "/radio-mode")))


async def set_radio_mode(transport: Transport, mode: RadioMode | str) -> None:
    """Change the technology preference.

    The modem re-registers after this call; the new mode is only
    observable after the settle delay.
    """
    req = RadioModeRequest(mode=RadioMode(mode))
    await post_data(transport, "/radio-mode", req.to_body())
    _logger.debug("Radio mode change submitted: %s", req.mode)


async def fetch_band_lock(transport: Transport) -> BandLockStatus:
    return BandLockStatus.model_validate(as_dict(await get_data(transport, "/band-lock")))


async def set_band_lock(transport: Transport, request: BandLockRequest) -> None:
    await post_data(transport, "/band-lock", request.to_body())
    _logger.debug("Band lock submitted: %s", request.to_body())
