from __future__ import annotations

from collections.abc import AsyncIterator

import aiohttp
import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from modemsync._transport import HttpTransport
from modemsync.client import ModemClient
from modemsync.config import SyncConfig
from modemsync.exceptions import ModemApiError, ModemTransportError


class _Modem:
    """Tiny aiohttp app standing in for the modem backend."""

    def __init__(self) -> None:
        self.hits: dict[str, int] = {}
        self.failures: dict[str, int] = {}
        self.bodies: list[dict] = []
        self.app = web.Application()
        self.app.router.add_get("/api/data", self._get_data)
        self.app.router.add_post("/api/data", self._post_data)
        self.app.router.add_get("/api/broken", self._broken)
        self.app.router.add_get("/api/cells", self._error_envelope)

    def _fail(self, key: str) -> bool:
        self.hits[key] = self.hits.get(key, 0) + 1
        remaining = self.failures.get(key, 0)
        if remaining:
            self.failures[key] = remaining - 1
            return True
        return False

    async def _get_data(self, request: web.Request) -> web.Response:
        if self._fail("GET /data"):
            return web.Response(status=503, text="busy")
        return web.json_response({"status": "ok", "message": "", "data": {"active": True}})

    async def _post_data(self, request: web.Request) -> web.Response:
        self.bodies.append(await request.json())
        if self._fail("POST /data"):
            return web.Response(status=503, text="busy")
        return web.json_response({"status": "ok", "message": "", "data": {"active": False}})

    async def _broken(self, request: web.Request) -> web.Response:
        return web.Response(text="<html>not json</html>", content_type="text/html")

    async def _error_envelope(self, request: web.Request) -> web.Response:
        return web.json_response({"status": "error", "message": "Modem not ready"})


@pytest_asyncio.fixture
async def modem() -> AsyncIterator[tuple[_Modem, SyncConfig]]:
    backend = _Modem()
    server = TestServer(backend.app)
    await server.start_server()
    config = SyncConfig(base_url=str(server.make_url("/api")), request_timeout=5.0, transport_retries=1)
    try:
        yield backend, config
    finally:
        await server.close()


@pytest.mark.asyncio
async def test_get_returns_envelope(modem: tuple[_Modem, SyncConfig]) -> None:
    _backend, config = modem
    async with aiohttp.ClientSession() as session:
        transport = HttpTransport(config, session)
        envelope = await transport.request("GET", "/data")

    assert envelope == {"status": "ok", "message": "", "data": {"active": True}}


@pytest.mark.asyncio
async def test_get_is_retried_once(modem: tuple[_Modem, SyncConfig]) -> None:
    backend, config = modem
    backend.failures["GET /data"] = 1
    async with aiohttp.ClientSession() as session:
        envelope = await HttpTransport(config, session).request("GET", "/data")

    assert envelope["data"] == {"active": True}
    assert backend.hits["GET /data"] == 2


@pytest.mark.asyncio
async def test_non_2xx_raises_after_retries(modem: tuple[_Modem, SyncConfig]) -> None:
    backend, config = modem
    backend.failures["GET /data"] = 5
    async with aiohttp.ClientSession() as session:
        with pytest.raises(ModemTransportError) as excinfo:
            await HttpTransport(config, session).request("GET", "/data")

    assert excinfo.value.status_code == 503
    assert excinfo.value.endpoint == "/data"
    assert backend.hits["GET /data"] == 2


@pytest.mark.asyncio
async def test_post_is_never_retried(modem: tuple[_Modem, SyncConfig]) -> None:
    backend, config = modem
    backend.failures["POST /data"] = 1
    async with aiohttp.ClientSession() as session:
        with pytest.raises(ModemTransportError):
            await HttpTransport(config, session).request("POST", "/data", json_body={"active": False})

    assert backend.hits["POST /data"] == 1
    assert backend.bodies == [{"active": False}]


@pytest.mark.asyncio
async def test_invalid_json_is_a_transport_error(modem: tuple[_Modem, SyncConfig]) -> None:
    _backend, config = modem
    async with aiohttp.ClientSession() as session:
        with pytest.raises(ModemTransportError, match="Invalid JSON"):
            await HttpTransport(config, session).request("GET", "/broken")


@pytest.mark.asyncio
async def test_connection_refused_is_a_transport_error() -> None:
    config = SyncConfig(base_url="http://127.0.0.1:9/api", request_timeout=2.0, transport_retries=0)
    async with aiohttp.ClientSession() as session:
        with pytest.raises(ModemTransportError):
            await HttpTransport(config, session).request("GET", "/data")


@pytest.mark.asyncio
async def test_client_over_http(modem: tuple[_Modem, SyncConfig]) -> None:
    backend, config = modem
    async with ModemClient(config) as client:
        status = await client.set_data_status(False)
        with pytest.raises(ModemApiError, match="Modem not ready"):
            await client.get_cells()

    assert status.active is False
    assert backend.bodies == [{"active": False}]
