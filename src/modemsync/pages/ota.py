"""OTA update page."""

from __future__ import annotations

from modemsync._constants import OTA_PACKAGE_EXTENSIONS
from modemsync.dispatcher import ActionResult
from modemsync.models.ota import OtaApplyResult, OtaUploadResult
from modemsync.pages._base import SyncContext, SyncPage
from modemsync.scheduler import FetchFn, LivenessToken, RefreshDomain
from modemsync.state.events import StateDomain

STATUS_DOMAIN = "ota.status"


def is_ota_package(filename: str) -> bool:
    return filename.lower().endswith(OTA_PACKAGE_EXTENSIONS)


class OtaPage(SyncPage):
    """Upload, validate and apply update packages.

    The status domain is manual only; every action re-reads it right away.
    """

    def __init__(self, ctx: SyncContext) -> None:
        super().__init__(ctx)
        self.upload_result: OtaUploadResult | None = None

    def _refresh_domains(self) -> list[tuple[RefreshDomain, FetchFn]]:
        return [(RefreshDomain(STATUS_DOMAIN, auto_refresh=False), self._fetch_status)]

    async def _fetch_status(self, token: LivenessToken) -> None:
        await self._fetch_batch(token, {StateDomain.OTA: self._ctx.client.get_ota_status})

    def status(self) -> dict:
        return self.snapshot(StateDomain.OTA)

    async def upload(self, filename: str, payload: bytes) -> ActionResult[OtaUploadResult]:
        """Upload a ``.tar.gz``, ``.tgz`` or ``.zip`` package for validation."""
        if not is_ota_package(filename):
            self.error = "Select a .tar.gz or .zip update package"
            raise ValueError(f"Unsupported OTA package {filename!r}")
        result = await self._run_action(
            "ota",
            lambda: self._ctx.client.upload_ota_package(payload),
            refresh_domains=[STATUS_DOMAIN],
        )
        self.upload_result = result.value
        validation = result.value.validation
        if validation is not None and not validation.valid:
            self.error = validation.error or "Package validation failed"
        else:
            self.notice = "Package uploaded and validated"
        return result

    async def apply(self, *, restart_now: bool = False) -> ActionResult[OtaApplyResult]:
        return await self._run_action(
            "ota",
            lambda: self._ctx.client.apply_ota_update(restart_now=restart_now),
            refresh_domains=[STATUS_DOMAIN],
            notice="Update applied, restarting" if restart_now else "Update applied, takes effect after restart",
        )

    async def cancel(self) -> ActionResult[None]:
        result = await self._run_action(
            "ota",
            self._ctx.client.cancel_ota_update,
            refresh_domains=[STATUS_DOMAIN],
            notice="Pending update cancelled",
        )
        self.upload_result = None
        return result
