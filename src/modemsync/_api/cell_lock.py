"""Cell lock endpoints.

Endpoints:
  - GET/POST /cell-lock
  - POST /cell-lock/unlock-all
"""

from __future__ import annotations

import logging

from modemsync._api._common import as_dict, get_data, post_data
from modemsync._transport import Transport
from modemsync.models.cells import CellLockResult, CellLockStatus
from modemsync.models.requests import CellLockRequest

_logger = logging.getLogger(__name__)


async def fetch_cell_lock_status(transport: Transport) -> CellLockStatus:
    return CellLockStatus.model_validate(as_dict(await get_data(transport, "/cell-lock")))


async def set_cell_lock(transport: Transport, request: CellLockRequest) -> CellLockResult:
    data = as_dict(await post_data(transport, "/cell-lock", request.to_body()))
    _logger.debug("Cell lock submitted: %s", request.to_body())
    return CellLockResult.model_validate(data)


async def unlock_all_cells(transport: Transport) -> CellLockResult:
    data = as_dict(await post_data(transport, "/cell-lock/unlock-all"))
    _logger.debug("Unlock-all cells submitted")
    return CellLockResult.model_validate(data)
