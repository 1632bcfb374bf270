"""Network page: cells and cell lock, operators, radio mode, band lock and APN.

Two refresh domains keep editable configuration away from the telemetry
cadence:

* ``network.telemetry`` (global refresh interval): cells, operators,
  cell-lock status, interfaces and APN contexts.
* ``network.config`` (manual only): radio mode and band lock. It is
  fetched on mount, on the page refresh signal, and after a settled
  radio/band action, so checkbox edits are never replaced by a tick.

Band selections and APN form edits are store drafts; they survive every
refresh until the corresponding save is confirmed or the user discards
them.
"""

from __future__ import annotations

import logging
from typing import Any

from modemsync._constants import BAND_GROUPS
from modemsync.dispatcher import ActionResult
from modemsync.exceptions import LockConfigError
from modemsync.ingestion.matcher import match_cells, validate_lock_entries
from modemsync.models.apn import ApnContext
from modemsync.models.cells import CellLockResult, MatchedCell, ObservedCell
from modemsync.models.network import OperatorList
from modemsync.models.radio import RadioMode
from modemsync.models.requests import BandLockRequest, CellLockRequest, SetApnRequest
from modemsync.pages._base import SyncContext, SyncPage
from modemsync.scheduler import FetchFn, LivenessToken, RefreshDomain
from modemsync.state.events import StateDomain
from modemsync.state.store import get_path

_logger = logging.getLogger(__name__)

TELEMETRY_DOMAIN = "network.telemetry"
CONFIG_DOMAIN = "network.config"

APN_FORM_FIELDS: tuple[str, ...] = ("apn", "protocol", "username", "password", "auth_method")
_APN_FORM_PREFIX = "form"


class NetworkPage(SyncPage):
    """Bindings for the network page."""

    def __init__(self, ctx: SyncContext) -> None:
        super().__init__(ctx)
        self._apn_context_path: str | None = None

    def _refresh_domains(self) -> list[tuple[RefreshDomain, FetchFn]]:
        return [
            (RefreshDomain(TELEMETRY_DOMAIN, cadence=self._ctx.scheduler.refresh_interval), self._fetch_telemetry),
            (RefreshDomain(CONFIG_DOMAIN, auto_refresh=False), self._fetch_config),
        ]

    async def _fetch_telemetry(self, token: LivenessToken) -> None:
        client = self._ctx.client
        await self._fetch_batch(
            token,
            {
                StateDomain.CELLS: client.get_cells,
                StateDomain.OPERATORS: client.get_operators,
                StateDomain.CELL_LOCK: client.get_cell_lock,
                StateDomain.INTERFACES: client.get_network_interfaces,
                StateDomain.APN: client.get_apn_list,
            },
        )

    async def _fetch_config(self, token: LivenessToken) -> None:
        client = self._ctx.client
        await self._fetch_batch(
            token,
            {
                StateDomain.RADIO_MODE: client.get_radio_mode,
                StateDomain.BAND_LOCK: client.get_band_lock,
            },
        )

    # ------------------------------------------------------------------
    # Cells and cell lock
    # ------------------------------------------------------------------

    def matched_cells(self) -> list[MatchedCell]:
        """Observed cells annotated with their lock state."""
        cells = self.snapshot(StateDomain.CELLS).get("cells") or []
        entries = self.snapshot(StateDomain.CELL_LOCK).get("rat_status") or []
        return match_cells(cells, entries)

    async def lock_cell(self, cell: ObservedCell | MatchedCell) -> ActionResult[CellLockResult]:
        """Lock the modem to *cell*.

        Refused with :class:`LockConfigError` when the cell has no numeric
        channel/PCI, or when the current lock configuration already has
        more than one enabled entry for a RAT.
        """
        observed = cell.cell if isinstance(cell, MatchedCell) else cell
        identity = observed.identity
        if identity is None:
            self.error = "Invalid channel or PCI value"
            raise LockConfigError(f"Cell {observed.key} has no numeric channel/PCI")
        entries = self.snapshot(StateDomain.CELL_LOCK).get("rat_status") or []
        request = CellLockRequest(rat=identity.rat, enable=True, arfcn=identity.arfcn, pci=identity.pci)
        return await self._run_action(
            "cell_lock",
            lambda: self._ctx.client.set_cell_lock(request),
            domain=StateDomain.CELL_LOCK,
            optimistic={"any_locked": True},
            validate=lambda: validate_lock_entries(entries),
            settle=self._ctx.config.settle.cell_lock,
            refresh_domains=[TELEMETRY_DOMAIN],
            notice=f"Locked to {observed.tech.upper()} cell (ARFCN={identity.arfcn}, PCI={identity.pci})",
        )

    async def unlock_all_cells(self) -> ActionResult[CellLockResult]:
        return await self._run_action(
            "cell_lock",
            self._ctx.client.unlock_all_cells,
            domain=StateDomain.CELL_LOCK,
            optimistic={"any_locked": False},
            settle=self._ctx.config.settle.cell_lock,
            refresh_domains=[TELEMETRY_DOMAIN],
            notice="All cell locks removed",
        )

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    async def scan_operators(self) -> ActionResult[OperatorList]:
        """Run a full operator scan and merge the result as fresh operator data."""
        generation = self.generation
        issued = self._ctx.store.begin_fetch(StateDomain.OPERATORS)
        result = await self._run_action("operators", self._ctx.client.scan_operators)
        if self.is_current(generation):
            self._ctx.store.apply_snapshot(StateDomain.OPERATORS, result.value.to_patch(), issued_seq=issued)
        else:
            _logger.debug("Operator scan outlived its mount; result dropped")
        self.notice = f"Scan complete, found {len(result.value.operators)} operators"
        return result

    async def register_manual(self, mccmnc: str) -> ActionResult[None]:
        return await self._run_action(
            "registration",
            lambda: self._ctx.client.register_manual(mccmnc),
            settle=self._ctx.config.settle.registration,
            refresh_domains=[TELEMETRY_DOMAIN],
            notice=f"Registering to operator {mccmnc}...",
        )

    async def register_auto(self) -> ActionResult[None]:
        return await self._run_action(
            "registration",
            self._ctx.client.register_auto,
            settle=self._ctx.config.settle.registration,
            refresh_domains=[TELEMETRY_DOMAIN],
            notice="Automatic registration started",
        )

    # ------------------------------------------------------------------
    # Radio mode
    # ------------------------------------------------------------------

    def radio_mode(self) -> str:
        return str(self.snapshot(StateDomain.RADIO_MODE).get("mode", ""))

    async def set_radio_mode(self, mode: RadioMode | str) -> ActionResult[None]:
        """Change the radio mode.

        The new mode is shown immediately and confirmed by the config
        refresh after the settle delay; band lock is re-read by the same
        refresh but its open drafts are left alone.
        """
        target = RadioMode(mode)
        return await self._run_action(
            "radio_mode",
            lambda: self._ctx.client.set_radio_mode(target),
            domain=StateDomain.RADIO_MODE,
            optimistic={"mode": target.value},
            settle=self._ctx.config.settle.radio_mode,
            confirm_domains=[StateDomain.RADIO_MODE],
            refresh_domains=[CONFIG_DOMAIN],
            notice=f"Radio mode set to {target.value}",
        )

    # ------------------------------------------------------------------
    # Band lock
    # ------------------------------------------------------------------

    def selected_bands(self) -> dict[str, list[int]]:
        """Current checkbox state per band group (server value or open draft)."""
        view = self.snapshot(StateDomain.BAND_LOCK)
        return {group: sorted(view.get(group) or []) for group in BAND_GROUPS}

    def toggle_band(self, group: str, band: int) -> list[int]:
        """Flip *band* in *group* as a draft and return the new selection."""
        if group not in BAND_GROUPS:
            raise ValueError(f"Unknown band group {group!r}")
        current = self.selected_bands()[group]
        selection = [b for b in current if b != band] if band in current else sorted([*current, band])
        self._ctx.store.open_draft(StateDomain.BAND_LOCK, group, selection)
        return selection

    async def apply_band_lock(self) -> ActionResult[None]:
        request = BandLockRequest(**self.selected_bands())
        return await self._run_action(
            "band_lock",
            lambda: self._ctx.client.set_band_lock(request),
            settle=self._ctx.config.settle.band_lock,
            confirm_domains=[StateDomain.BAND_LOCK],
            refresh_domains=[CONFIG_DOMAIN],
            notice="Band lock applied",
        )

    async def unlock_all_bands(self) -> ActionResult[None]:
        cleared: dict[str, Any] = {group: [] for group in BAND_GROUPS}
        request = BandLockRequest(**cleared)
        return await self._run_action(
            "band_lock",
            lambda: self._ctx.client.set_band_lock(request),
            domain=StateDomain.BAND_LOCK,
            optimistic={**cleared, "locked": False},
            settle=self._ctx.config.settle.band_lock,
            confirm_domains=[StateDomain.BAND_LOCK],
            refresh_domains=[CONFIG_DOMAIN],
            notice="Band restrictions removed, all bands available",
        )

    async def refresh_band_config(self, *, discard_drafts: bool = True) -> bool:
        """Re-read radio mode and band lock now.

        By default unsaved band selections are dropped first so the
        checkboxes show the server state.
        """
        if discard_drafts:
            for group in BAND_GROUPS:
                self._ctx.store.discard_draft(StateDomain.BAND_LOCK, group)
        return await self._ctx.scheduler.refresh(CONFIG_DOMAIN)

    # ------------------------------------------------------------------
    # APN
    # ------------------------------------------------------------------

    def apn_contexts(self) -> list[ApnContext]:
        contexts = self._ctx.store.get_confirmed(StateDomain.APN).get("contexts") or []
        return [ApnContext.model_validate(item) for item in contexts]

    def selected_apn_context(self) -> ApnContext | None:
        """Explicit selection, else the first context with an APN, else the first one."""
        contexts = self.apn_contexts()
        if self._apn_context_path is not None:
            for context in contexts:
                if context.path == self._apn_context_path:
                    return context
        return next((c for c in contexts if c.apn), contexts[0] if contexts else None)

    def select_apn_context(self, path: str) -> None:
        """Switch the form to another context, dropping unsaved edits."""
        self._apn_context_path = path
        self._discard_apn_form()

    def apn_form(self) -> dict[str, str]:
        """Form values: the selected context with the user's draft edits on top."""
        context = self.selected_apn_context()
        form = {field: getattr(context, field) if context is not None else "" for field in APN_FORM_FIELDS}
        view = self.snapshot(StateDomain.APN)
        for field in APN_FORM_FIELDS:
            value = get_path(view, f"{_APN_FORM_PREFIX}.{field}")
            if value is not None:
                form[field] = value
        return form

    def edit_apn(self, field: str, value: str) -> None:
        if field not in APN_FORM_FIELDS:
            raise ValueError(f"Unknown APN field {field!r}")
        self._ctx.store.open_draft(StateDomain.APN, f"{_APN_FORM_PREFIX}.{field}", value)

    async def save_apn(self) -> ActionResult[None]:
        context = self.selected_apn_context()
        if context is None:
            self.error = "Select an APN context first"
            raise ValueError("No APN context selected")
        form = self.apn_form()
        request = SetApnRequest(context_path=context.path, **{k: v or None for k, v in form.items()})
        return await self._run_action(
            "apn",
            lambda: self._ctx.client.set_apn(request),
            settle=self._ctx.config.settle.apn,
            confirm_domains=[StateDomain.APN],
            refresh_domains=[TELEMETRY_DOMAIN],
            notice="APN settings saved",
        )

    def _discard_apn_form(self) -> None:
        for field in APN_FORM_FIELDS:
            self._ctx.store.discard_draft(StateDomain.APN, f"{_APN_FORM_PREFIX}.{field}")
