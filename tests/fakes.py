"""In-memory modem backend used by the engine tests.

``FakeBackend`` implements the transport protocol. Routes return the
``data`` part of the envelope; the backend wraps it. A route can be
delayed, gated on an event, or made to fail.
"""

from __future__ import annotations

import asyncio
import copy
import dataclasses
from collections.abc import Callable
from typing import Any

from modemsync.client import ModemClient
from modemsync.config import SettleDelays, SyncConfig
from modemsync.exceptions import ModemTransportError
from modemsync.pages import SyncContext


_SLOT_VALUES = {1: "66051", 2: "66306"}

@dataclasses.dataclass
class Route:
    response: Any = None
    delay: float = 0.0
    gate: asyncio.Event | None = None
    error: Exception | None = None
    status: str = "ok"
    message: str = ""


class FakeBackend:
    """Stateful stand-in for the modem REST API."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Route] = {}
        self.calls: list[tuple[str, str, Any]] = []
        self.data_active = True
        self.airplane_mode = False
        self.roaming_allowed = False
        self.radio_mode = "auto"
        self.bands: dict[str, list[int]] = {
            "lte_fdd_bands": [1, 3],
            "lte_tdd_bands": [],
            "nr_fdd_bands": [],
            "nr_tdd_bands": [78],
        }
        self.lock_entries: list[dict[str, Any]] = [
            {"rat": 12, "rat_name": "LTE", "enabled": False, "lock_type": 0, "pci": None, "arfcn": None},
            {"rat": 16, "rat_name": "NR", "enabled": False, "lock_type": 0, "pci": None, "arfcn": None},
        ]
        self.apn_contexts: list[dict[str, Any]] = [
            {
                "path": "/ril_0/context1",
                "name": "Internet",
                "active": True,
                "apn": "cmnet",
                "protocol": "dual",
                "username": "",
                "password": "",
                "auth_method": "none",
                "context_type": "internet",
            },
            {
                "path": "/ril_0/context2",
                "name": "MMS",
                "active": False,
                "apn": "",
                "protocol": "ip",
                "username": "",
                "password": "",
                "auth_method": "none",
                "context_type": "mms",
            },
        ]
        self.rx_rate = 1000.0
        self.sim_slot = 1
        self._install_defaults()

    # ------------------------------------------------------------------
    # Route control
    # ------------------------------------------------------------------

    def on(
        self,
        method: str,
        endpoint: str,
        response: Any = None,
        *,
        delay: float = 0.0,
        gate: asyncio.Event | None = None,
        error: Exception | None = None,
        status: str = "ok",
        message: str = "",
    ) -> Route:
        route = Route(response=response, delay=delay, gate=gate, error=error, status=status, message=message)
        self.routes[(method.upper(), endpoint)] = route
        return route

    def route(self, method: str, endpoint: str) -> Route:
        return self.routes[(method.upper(), endpoint)]

    def count(self, method: str, endpoint: str) -> int:
        return sum(1 for m, e, _ in self.calls if m == method.upper() and e == endpoint)

    def bodies(self, method: str, endpoint: str) -> list[Any]:
        return [body for m, e, body in self.calls if m == method.upper() and e == endpoint]

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        json_body: Any = None,
        content: bytes | None = None,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        method = method.upper()
        body = content if content is not None else json_body
        self.calls.append((method, endpoint, body))
        route = self.routes.get((method, endpoint))
        if route is None:
            raise ModemTransportError(f"HTTP 404 from {endpoint}", status_code=404, endpoint=endpoint)
        if route.delay:
            await asyncio.sleep(route.delay)
        if route.gate is not None:
            await route.gate.wait()
        if route.error is not None:
            raise route.error
        response = route.response
        data = response(body) if callable(response) else copy.deepcopy(response)
        envelope: dict[str, Any] = {"status": route.status, "message": route.message}
        if data is not None:
            envelope["data"] = data
        return envelope

    # ------------------------------------------------------------------
    # Default modem
    # ------------------------------------------------------------------

    def _install_defaults(self) -> None:
        self.on("GET", "/device", {"imei": "860000000000001", "manufacturer": "UNISOC", "model": "UDX710", "online": True, "powered": True})
        self.on("GET", "/sim", {"present": True, "iccid": "8986", "imsi": "46000", "mcc": "460", "mnc": "00"})
        self.on("GET", "/sim/slot", lambda _: {"active_slot": self.sim_slot, "raw_value": _SLOT_VALUES[self.sim_slot]})
        self.on("POST", "/sim/slot/switch", self._switch_sim_slot)
        self.on("GET", "/device/imeisv", {"software_version_number": "01"})
        self.on("GET", "/network", {"operator_name": "CMCC", "registration_status": "registered", "technology_preference": "auto", "signal_strength": 4})
        self.on("GET", "/qos", {"qci": 9, "dl_speed": 100000, "ul_speed": 50000})
        self.on("GET", "/cells", lambda _: self.cells_payload())
        self.on("GET", "/stats", lambda _: self.stats_payload())
        self.on("GET", "/data", lambda _: {"active": self.data_active})
        self.on("POST", "/data", self._set_data)
        self.on("GET", "/airplane-mode", lambda _: {"enabled": self.airplane_mode, "powered": True, "online": not self.airplane_mode})
        self.on("POST", "/airplane-mode", self._set_airplane)
        self.on("GET", "/roaming", lambda _: {"roaming_allowed": self.roaming_allowed, "is_roaming": False})
        self.on("POST", "/roaming", self._set_roaming)
        self.on("GET", "/ims/status", {"registered": True, "voice_capable": True, "sms_capable": True})
        self.on("GET", "/connectivity", {"ipv4": {"success": True, "latency_ms": 35.0, "target": "8.8.8.8"}, "ipv6": {"success": False, "target": "2001:4860:4860::8888", "error": "unreachable"}})
        self.on("GET", "/radio-mode", lambda _: {"mode": self.radio_mode, "technology_preference": self.radio_mode})
        self.on("POST", "/radio-mode", lambda body: None)
        self.on("GET", "/band-lock", lambda _: {"locked": any(self.bands.values()), **copy.deepcopy(self.bands)})
        self.on("POST", "/band-lock", self._set_bands)
        self.on("GET", "/cell-lock", lambda _: self.cell_lock_payload())
        self.on("POST", "/cell-lock", self._set_cell_lock)
        self.on("POST", "/cell-lock/unlock-all", self._unlock_all)
        self.on("GET", "/network/operators", {"operators": [{"path": "/op/46000", "name": "CMCC", "status": "current", "mcc": "460", "mnc": "00", "technologies": ["lte", "nr"]}]})
        self.on(
            "GET",
            "/network/operators/scan",
            {
                "operators": [
                    {"path": "/op/46000", "name": "CMCC", "status": "current", "mcc": "460", "mnc": "00", "technologies": ["lte", "nr"]},
                    {"path": "/op/46001", "name": "CUCC", "status": "available", "mcc": "460", "mnc": "01", "technologies": ["lte"]},
                ]
            },
        )
        self.on("POST", "/network/register-manual", lambda body: None)
        self.on("POST", "/network/register-auto", lambda body: None)
        self.on("GET", "/network/interfaces", {"interfaces": [{"name": "sipa_eth0", "status": "up", "mtu": 1500, "rx_bytes": 10, "tx_bytes": 20}], "total_count": 1})
        self.on("GET", "/apn", lambda _: {"contexts": copy.deepcopy(self.apn_contexts)})
        self.on("POST", "/apn", self._set_apn)
        self.on("GET", "/ota/status", {"current_version": "1.2.0", "current_commit": "abc123", "pending_update": False})

    def cells_payload(self) -> dict[str, Any]:
        return {
            "serving_cell": {"tech": "lte", "cell_id": 12345, "tac": 6789},
            "cells": [
                {"is_serving": True, "tech": "lte", "band": "B3", "arfcn": "1300", "pci": "200", "rsrp": "-9500", "rsrq": "-1050", "sinr": "1500"},
                {"is_serving": False, "type": "NR", "nrarfcn": 627264, "pci": 55, "ssb_rsrp": -10200},
                {"is_serving": False, "tech": "lte", "earfcn": "100", "pci": ""},
            ],
        }

    def stats_payload(self) -> dict[str, Any]:
        return {
            "network_speed": {
                "interfaces": [
                    {"interface": "sipa_eth0", "rx_bytes_per_sec": self.rx_rate, "tx_bytes_per_sec": 500.0, "total_rx_bytes": 123456, "total_tx_bytes": 65432},
                ],
                "interval_seconds": 1.0,
            },
            "memory": {"total_bytes": 1000, "available_bytes": 400, "used_bytes": 600, "used_percent": 60.0},
            "uptime": {"uptime_seconds": 3600.5, "idle_seconds": 3000.0, "uptime_formatted": "1h"},
        }

    def cell_lock_payload(self) -> dict[str, Any]:
        entries = copy.deepcopy(self.lock_entries)
        return {"rat_status": entries, "any_locked": any(e["enabled"] for e in entries)}

    def _set_data(self, body: dict[str, Any]) -> dict[str, Any]:
        self.data_active = bool(body["active"])
        return {"active": self.data_active}

    def _set_airplane(self, body: dict[str, Any]) -> dict[str, Any]:
        self.airplane_mode = bool(body["enabled"])
        return {"enabled": self.airplane_mode, "powered": True, "online": not self.airplane_mode}

    def _set_roaming(self, body: dict[str, Any]) -> dict[str, Any]:
        self.roaming_allowed = bool(body["allowed"])
        return {"roaming_allowed": self.roaming_allowed, "is_roaming": False}

    def _set_bands(self, body: dict[str, Any]) -> None:
        self.bands = {group: list(body.get(group, [])) for group in self.bands}

    def _set_cell_lock(self, body: dict[str, Any]) -> dict[str, Any]:
        for entry in self.lock_entries:
            if entry["rat"] == body["rat"]:
                entry.update(enabled=body["enable"], pci=body.get("pci"), arfcn=body.get("arfcn"))
        return {"locked": body["enable"], "arfcn": body.get("arfcn"), "pci": body.get("pci"), "success": True, "steps": ["AT+SPCELLLOCK"]}

    def _unlock_all(self, _body: Any) -> dict[str, Any]:
        for entry in self.lock_entries:
            entry.update(enabled=False, pci=None, arfcn=None)
        return {"locked": False, "success": True, "steps": []}

    def _switch_sim_slot(self, body: dict[str, Any]) -> dict[str, Any]:
        self.sim_slot = int(body["slot"])
        return {"response": "OK"}

    def _set_apn(self, body: dict[str, Any]) -> None:
        for context in self.apn_contexts:
            if context["path"] == body["context_path"]:
                context.update({k: v for k, v in body.items() if k != "context_path"})


async def wait_for(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
    """Poll *predicate* until it holds; fail the test after *timeout* seconds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.002)


def make_context(
    backend: FakeBackend | None = None,
    *,
    refresh_interval: float = 0.0,
    settle: float = 0.01,
) -> tuple[SyncContext, FakeBackend]:
    """Engine wired to a fake backend with short settle delays."""
    backend = backend or FakeBackend()
    delays = SettleDelays(
        toggle=settle,
        band_lock=settle,
        apn=settle,
        cell_lock=settle,
        radio_mode=settle,
        registration=settle,
        sim_slot=settle,
    )
    config = SyncConfig(refresh_interval=refresh_interval, settle=delays)
    return SyncContext.create(ModemClient(config, transport=backend), config=config), backend
