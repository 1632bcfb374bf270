"""Shared helpers for modem API endpoint modules.

This module centralizes the most repeated patterns:
- sending a request through the transport
- unwrapping the ``{status, message, data}`` envelope
- mapping a non-``ok`` status to :class:`ModemApiError`

It is internal to modemsync and may change at any time.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from modemsync._transport import Transport
from modemsync.exceptions import ModemApiError
from modemsync.models.envelope import ApiEnvelope


def unwrap_envelope(*, endpoint: str, response: dict[str, Any]) -> Any:
    """Return ``data`` from an envelope, raising on an application error.

    The server ``message`` becomes the exception text verbatim.
    """
    try:
        envelope = ApiEnvelope.model_validate(response)
    except ValidationError as exc:
        raise ModemApiError(
            f"{endpoint} returned a malformed envelope",
            status="invalid_envelope",
            endpoint=endpoint,
        ) from exc
    if not envelope.ok:
        raise ModemApiError(
            envelope.message or f"{endpoint} failed with status {envelope.status!r}",
            status=envelope.status,
            endpoint=endpoint,
        )
    return envelope.data


def as_dict(data: Any) -> dict[str, Any]:
    return data if isinstance(data, dict) else {}


async def get_data(
    transport: Transport,
    endpoint: str,
    *,
    timeout: float | None = None,
) -> Any:
    """``GET`` *endpoint* and return the unwrapped ``data``."""
    response = await transport.request("GET", endpoint, timeout=timeout)
    return unwrap_envelope(endpoint=endpoint, response=response)


async def post_data(
    transport: Transport,
    endpoint: str,
    body: Mapping[str, Any] | None = None,
    *,
    content: bytes | None = None,
    timeout: float | None = None,
) -> Any:
    """``POST`` *endpoint* and return the unwrapped ``data``.

    A JSON body defaults to ``{}`` so the backend's JSON extractor is
    satisfied for argument-less commands.
    """
    if content is None and body is None:
        body = {}
    response = await transport.request("POST", endpoint, json_body=body, content=content, timeout=timeout)
    return unwrap_envelope(endpoint=endpoint, response=response)
