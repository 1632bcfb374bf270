"""Dashboard page: device status, traffic history and quick toggles."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from modemsync.dispatcher import ActionResult
from modemsync.ingestion.telemetry import ingest_network_speed
from modemsync.models._base import ModemBaseModel
from modemsync.models.controls import AirplaneModeStatus, DataStatus, RoamingStatus
from modemsync.models.stats import SystemStats
from modemsync.pages._base import SyncPage
from modemsync.scheduler import FetchFn, LivenessToken, RefreshDomain
from modemsync.state.events import StateDomain
from modemsync.state.series import InterfaceSpeedHistory

PRIMARY_DOMAINS: tuple[StateDomain, ...] = (
    StateDomain.DEVICE,
    StateDomain.SIM,
    StateDomain.STATS,
    StateDomain.NETWORK,
    StateDomain.DATA,
    StateDomain.CELLS,
    StateDomain.QOS,
    StateDomain.AIRPLANE_MODE,
)
EXTENDED_DOMAINS: tuple[StateDomain, ...] = (
    StateDomain.IMS,
    StateDomain.CONNECTIVITY,
    StateDomain.ROAMING,
)


class DashboardPage(SyncPage):
    """Polls the dashboard domains and feeds interface speeds into the series store.

    The extended batch (IMS, connectivity, roaming) is fetched alongside
    the primary one but its failure never blocks the primary merge.
    """

    REFRESH_DOMAIN = "dashboard"

    def _refresh_domains(self) -> list[tuple[RefreshDomain, FetchFn]]:
        domain = RefreshDomain(self.REFRESH_DOMAIN, cadence=self._ctx.scheduler.refresh_interval)
        return [(domain, self._fetch)]

    async def _fetch(self, token: LivenessToken) -> None:
        await asyncio.gather(self._fetch_primary(token), self._fetch_extended(token))

    def _fetchers(self) -> dict[StateDomain, Callable[[], Awaitable[ModemBaseModel]]]:
        client = self._ctx.client
        return {
            StateDomain.DEVICE: client.get_device_info,
            StateDomain.SIM: client.get_sim_info,
            StateDomain.STATS: client.get_stats,
            StateDomain.NETWORK: client.get_network_info,
            StateDomain.DATA: client.get_data_status,
            StateDomain.CELLS: client.get_cells,
            StateDomain.QOS: client.get_qos,
            StateDomain.AIRPLANE_MODE: client.get_airplane_mode,
            StateDomain.IMS: client.get_ims_status,
            StateDomain.CONNECTIVITY: client.get_connectivity,
            StateDomain.ROAMING: client.get_roaming,
        }

    async def _fetch_primary(self, token: LivenessToken) -> None:
        fetchers = self._fetchers()
        merged = await self._fetch_batch(token, {domain: fetchers[domain] for domain in PRIMARY_DOMAINS})
        if merged is None:
            return
        stats = merged[StateDomain.STATS]
        if isinstance(stats, SystemStats):
            ingest_network_speed(self._ctx.series, stats)

    async def _fetch_extended(self, token: LivenessToken) -> None:
        fetchers = self._fetchers()
        await self._fetch_batch(token, {domain: fetchers[domain] for domain in EXTENDED_DOMAINS}, critical=False)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def speed_history(self, interface: str) -> InterfaceSpeedHistory:
        return self._ctx.series.interface_history(interface)

    def interfaces(self) -> list[str]:
        return self._ctx.series.interfaces()

    # ------------------------------------------------------------------
    # Quick toggles
    # ------------------------------------------------------------------

    def _current_flag(self, domain: StateDomain, field: str) -> bool:
        return bool(self.snapshot(domain).get(field, False))

    def _apply_echo(self, domain: StateDomain, status: ModemBaseModel) -> None:
        # A setter that got no echo reports the requested state with an empty raw.
        if status.raw:
            self._ctx.store.apply_snapshot(domain, status.to_patch())

    async def toggle_data(self, active: bool | None = None) -> ActionResult[DataStatus]:
        target = not self._current_flag(StateDomain.DATA, "active") if active is None else active
        result = await self._run_action(
            "data",
            lambda: self._ctx.client.set_data_status(target),
            domain=StateDomain.DATA,
            optimistic={"active": target},
            settle=self._ctx.config.settle.toggle,
            refresh_domains=[self.REFRESH_DOMAIN],
            notice="Data connection enabled" if target else "Data connection disabled",
        )
        self._apply_echo(StateDomain.DATA, result.value)
        return result

    async def toggle_airplane_mode(self, enabled: bool | None = None) -> ActionResult[AirplaneModeStatus]:
        target = not self._current_flag(StateDomain.AIRPLANE_MODE, "enabled") if enabled is None else enabled
        result = await self._run_action(
            "airplane_mode",
            lambda: self._ctx.client.set_airplane_mode(target),
            domain=StateDomain.AIRPLANE_MODE,
            optimistic={"enabled": target},
            settle=self._ctx.config.settle.toggle,
            refresh_domains=[self.REFRESH_DOMAIN],
            notice="Airplane mode on" if target else "Airplane mode off",
        )
        self._apply_echo(StateDomain.AIRPLANE_MODE, result.value)
        return result

    async def toggle_roaming(self, allowed: bool | None = None) -> ActionResult[RoamingStatus]:
        target = not self._current_flag(StateDomain.ROAMING, "roaming_allowed") if allowed is None else allowed
        result = await self._run_action(
            "roaming",
            lambda: self._ctx.client.set_roaming_allowed(target),
            domain=StateDomain.ROAMING,
            optimistic={"roaming_allowed": target},
            settle=self._ctx.config.settle.toggle,
            refresh_domains=[self.REFRESH_DOMAIN],
            notice="Roaming allowed" if target else "Roaming disallowed",
        )
        self._apply_echo(StateDomain.ROAMING, result.value)
        return result
