"""Device info page: identity, SIM details and SIM slot selection."""

from __future__ import annotations

from modemsync._constants import SIM_SLOTS
from modemsync.dispatcher import ActionResult
from modemsync.models.device import SimSlotSwitchResult
from modemsync.models.requests import SimSlotRequest
from modemsync.pages._base import SyncPage
from modemsync.scheduler import FetchFn, LivenessToken, RefreshDomain
from modemsync.state.events import StateDomain

INFO_DOMAIN = "device_info"


class DeviceInfoPage(SyncPage):
    """Manual-refresh page for device and SIM details.

    Device and SIM info are the critical batch. IMEISV and the SIM slot
    are fetched alongside them, but their failure only leaves those
    fields empty.
    """

    def _refresh_domains(self) -> list[tuple[RefreshDomain, FetchFn]]:
        return [(RefreshDomain(INFO_DOMAIN, auto_refresh=False), self._fetch)]

    async def _fetch(self, token: LivenessToken) -> None:
        client = self._ctx.client
        merged = await self._fetch_batch(
            token,
            {StateDomain.DEVICE: client.get_device_info, StateDomain.SIM: client.get_sim_info},
        )
        if merged is None:
            return
        await self._fetch_batch(
            token,
            {StateDomain.IMEISV: client.get_imeisv, StateDomain.SIM_SLOT: client.get_sim_slot},
            critical=False,
        )

    def active_slot(self) -> int | None:
        slot = self.snapshot(StateDomain.SIM_SLOT).get("active_slot")
        return slot if slot in SIM_SLOTS else None

    async def switch_sim_slot(self, slot: int | None = None) -> ActionResult[SimSlotSwitchResult]:
        """Switch to *slot*, or to the other slot when not given.

        The new slot is shown right away and confirmed by the refresh
        after the settle delay, once the modem has re-registered.
        """
        if slot is None:
            current = self.active_slot()
            if current is None:
                self.error = "SIM slot unknown, refresh and try again"
                raise ValueError("Active SIM slot is unknown")
            slot = 2 if current == 1 else 1
        target = slot
        return await self._run_action(
            "sim_slot",
            lambda: self._ctx.client.switch_sim_slot(target),
            domain=StateDomain.SIM_SLOT,
            optimistic={"active_slot": target},
            settle=self._ctx.config.settle.sim_slot,
            confirm_domains=[StateDomain.SIM_SLOT],
            refresh_domains=[INFO_DOMAIN],
            validate=lambda: SimSlotRequest(slot=target),
            notice=f"Switching to SIM slot {target}...",
        )
