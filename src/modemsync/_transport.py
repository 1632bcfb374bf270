"""HTTP transport for the modem REST API."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from modemsync._constants import USER_AGENT
from modemsync._redact import redact_for_log
from modemsync.config import SyncConfig
from modemsync.exceptions import ModemTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    Implementations return the decoded JSON envelope and raise
    :class:`ModemTransportError` for anything below the envelope.
    """

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        json_body: Mapping[str, Any] | None = None,
        content: bytes | None = None,
        timeout: float | None = None,
    ) -> dict[str, Any]: ...


class HttpTransport:
    """aiohttp transport with a single retry for idempotent reads."""

    def __init__(self, config: SyncConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        json_body: Mapping[str, Any] | None = None,
        content: bytes | None = None,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        """Send a request and return the decoded JSON envelope.

        ``GET`` requests are retried ``config.transport_retries`` times on
        transport failure. Mutations are sent exactly once: a retried POST
        could apply a radio change twice.
        """
        method = method.upper()
        attempts = 1 + (self._config.transport_retries if method == "GET" else 0)
        last_exc: ModemTransportError | None = None
        for attempt in range(1, attempts + 1):
            try:
                return await self._send(method, endpoint, json_body=json_body, content=content, timeout=timeout)
            except ModemTransportError as exc:
                last_exc = exc
                if attempt < attempts:
                    _logger.debug("%s %s failed (attempt %d/%d); retrying", method, endpoint, attempt, attempts)
        assert last_exc is not None  # noqa: S101
        raise last_exc

    async def _send(
        self,
        method: str,
        endpoint: str,
        *,
        json_body: Mapping[str, Any] | None,
        content: bytes | None,
        timeout: float | None,
    ) -> dict[str, Any]:
        url = f"{self._config.base_url}{endpoint}"
        headers: dict[str, str] = {"user-agent": USER_AGENT}
        data: bytes | str | None = None
        if content is not None:
            headers["content-type"] = "application/octet-stream"
            data = content
        elif json_body is not None:
            headers["content-type"] = "application/json"
            data = json.dumps(json_body, separators=(",", ":"))

        if self._config.api_trace_enabled:
            _logger.debug("%s %s body=%s", method, url, redact_for_log(json_body if content is None else content))
        else:
            _logger.debug("%s %s", method, url)

        client_timeout = aiohttp.ClientTimeout(total=timeout if timeout is not None else self._config.request_timeout)
        try:
            async with self._http.request(method, url, data=data, headers=headers, timeout=client_timeout) as resp:
                text = await resp.text()
                if not 200 <= resp.status < 300:
                    raise ModemTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except ModemTransportError:
            raise
        except asyncio.TimeoutError as exc:
            raise ModemTransportError(f"Request to {endpoint} timed out", endpoint=endpoint) from exc
        except aiohttp.ClientError as exc:
            raise ModemTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            body_json = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ModemTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

        if not isinstance(body_json, dict):
            raise ModemTransportError(
                f"Unexpected response shape from {endpoint}: {type(body_json).__name__}",
                endpoint=endpoint,
            )
        return body_json
