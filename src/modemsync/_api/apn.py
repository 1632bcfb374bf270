"""APN endpoints.

Endpoints:
  - GET/POST /apn
"""

from __future__ import annotations

import logging

from modemsync._api._common import as_dict, get_data, post_data
from modemsync._transport import Transport
from modemsync.models.apn import ApnList
from modemsync.models.requests import SetApnRequest

_logger = logging.getLogger(__name__)


async def fetch_apn_list(transport: Transport) -> ApnList:
    return ApnList.model_validate(as_dict(await get_data(transport, "/apn")))


async def set_apn(transport: Transport, request: SetApnRequest) -> None:
    await post_data(transport, "/apn", request.to_body())
    _logger.debug("APN update submitted for %s", request.context_path)
