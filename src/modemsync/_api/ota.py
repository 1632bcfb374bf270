"""OTA update endpoints.

Endpoints:
  - GET /ota/status
  - POST /ota/upload (raw package bytes)
  - POST /ota/apply
  - POST /ota/cancel
"""

from __future__ import annotations

import logging

from modemsync._api._common import as_dict, get_data, post_data
from modemsync._transport import Transport
from modemsync.models.ota import OtaApplyResult, OtaStatus, OtaUploadResult
from modemsync.models.requests import OtaApplyRequest

_logger = logging.getLogger(__name__)


async def fetch_ota_status(transport: Transport) -> OtaStatus:
    return OtaStatus.model_validate(as_dict(await get_data(transport, "/ota/status")))


async def upload_package(transport: Transport, payload: bytes, *, timeout: float | None = None) -> OtaUploadResult:
    """Upload a package; the backend unpacks and validates it."""
    _logger.debug("Uploading OTA package (%d bytes)", len(payload))
    data = await post_data(transport, "/ota/upload", content=payload, timeout=timeout)
    return OtaUploadResult.model_validate(as_dict(data))


async def apply_update(transport: Transport, *, restart_now: bool = False) -> OtaApplyResult:
    req = OtaApplyRequest(restart_now=restart_now)
    data = as_dict(await post_data(transport, "/ota/apply", req.to_body()))
    return OtaApplyResult.model_validate(data)


async def cancel_update(transport: Transport) -> None:
    await post_data(transport, "/ota/cancel")
