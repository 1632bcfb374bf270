from __future__ import annotations

import pytest

from fakes import make_context, wait_for
from modemsync.exceptions import ModemApiError, ModemTransportError
from modemsync.pages import DeviceInfoPage
from modemsync.pages.device_info import INFO_DOMAIN
from modemsync.state.events import StateDomain


@pytest.mark.asyncio
async def test_mount_loads_identity_and_sim_slot() -> None:
    ctx, backend = make_context()
    page = DeviceInfoPage(ctx)
    page.mount()
    await wait_for(lambda: page.store.has_snapshot(StateDomain.SIM_SLOT))

    assert ctx.scheduler.get_domain(INFO_DOMAIN).cadence == 0
    assert page.snapshot(StateDomain.DEVICE)["imei"] == "860000000000001"
    assert page.snapshot(StateDomain.SIM)["iccid"] == "8986"
    assert page.snapshot(StateDomain.IMEISV)["software_version_number"] == "01"
    assert page.snapshot(StateDomain.SIM_SLOT) == {"active_slot": 1, "raw_value": "66051"}
    assert page.active_slot() == 1
    assert page.error is None
    page.unmount()
    await ctx.aclose()


@pytest.mark.asyncio
async def test_extended_failure_keeps_device_info() -> None:
    ctx, backend = make_context()
    backend.route("GET", "/device/imeisv").error = ModemTransportError("HTTP 500 from /device/imeisv", status_code=500)
    page = DeviceInfoPage(ctx)
    page.mount()

    assert await ctx.scheduler.refresh(INFO_DOMAIN) is True

    assert page.store.has_snapshot(StateDomain.DEVICE)
    assert not page.store.has_snapshot(StateDomain.SIM_SLOT)
    assert page.active_slot() is None
    assert page.error is None
    page.unmount()
    await ctx.aclose()


@pytest.mark.asyncio
async def test_primary_failure_sets_banner_and_skips_extended() -> None:
    ctx, backend = make_context()
    backend.on("GET", "/sim", status="error", message="SIM not ready")
    page = DeviceInfoPage(ctx)
    page.mount()

    await ctx.scheduler.refresh(INFO_DOMAIN)

    assert page.error == "SIM not ready"
    assert not page.store.has_snapshot(StateDomain.DEVICE)
    assert backend.count("GET", "/sim/slot") == 0
    page.unmount()
    await ctx.aclose()


@pytest.mark.asyncio
async def test_switch_sim_slot_is_optimistic_then_confirmed() -> None:
    ctx, backend = make_context()
    page = DeviceInfoPage(ctx)
    page.mount()
    await wait_for(lambda: page.store.has_snapshot(StateDomain.SIM_SLOT))

    result = await page.switch_sim_slot()

    assert page.active_slot() == 2
    assert backend.bodies("POST", "/sim/slot/switch") == [{"slot": 2}]
    assert result.value.response == "OK"
    assert page.notice == "Switching to SIM slot 2..."

    await result.confirmation

    assert page.snapshot(StateDomain.SIM_SLOT) == {"active_slot": 2, "raw_value": "66306"}
    assert page.store.drafts(StateDomain.SIM_SLOT) == []
    assert backend.count("GET", "/sim/slot") == 2
    page.unmount()
    await ctx.aclose()


@pytest.mark.asyncio
async def test_failed_switch_rolls_back_slot() -> None:
    ctx, backend = make_context()
    backend.on("POST", "/sim/slot/switch", status="error", message="Invalid slot number, must be 1 or 2")
    page = DeviceInfoPage(ctx)
    page.mount()
    await wait_for(lambda: page.store.has_snapshot(StateDomain.SIM_SLOT))

    with pytest.raises(ModemApiError):
        await page.switch_sim_slot(2)

    assert page.active_slot() == 1
    assert page.error == "Invalid slot number, must be 1 or 2"
    assert page.notice is None
    page.unmount()
    await ctx.aclose()


@pytest.mark.asyncio
async def test_switch_refused_without_known_slot_or_with_bad_slot() -> None:
    ctx, backend = make_context()
    page = DeviceInfoPage(ctx)

    with pytest.raises(ValueError):
        await page.switch_sim_slot()
    assert page.error == "SIM slot unknown, refresh and try again"

    with pytest.raises(ValueError):
        await page.switch_sim_slot(3)

    assert backend.count("POST", "/sim/slot/switch") == 0
    assert page.store.drafts(StateDomain.SIM_SLOT) == []
    await ctx.aclose()
