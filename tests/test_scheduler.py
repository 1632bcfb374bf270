from __future__ import annotations

import asyncio

import pytest

from fakes import wait_for
from modemsync.scheduler import LivenessToken, RefreshDomain, RefreshScheduler, RefreshSignal


class _Recorder:
    def __init__(self) -> None:
        self.tokens: list[LivenessToken] = []

    async def __call__(self, token: LivenessToken) -> None:
        self.tokens.append(token)

    @property
    def count(self) -> int:
        return len(self.tokens)


def test_refresh_domain_validation() -> None:
    with pytest.raises(ValueError):
        RefreshDomain("bad", cadence=-1)
    assert RefreshDomain("config", cadence=5, auto_refresh=False).cadence == 0


@pytest.mark.asyncio
async def test_schedule_fetches_immediately_and_manual_domain_does_not_tick() -> None:
    scheduler = RefreshScheduler(refresh_interval=0)
    fetch = _Recorder()
    scheduler.schedule(RefreshDomain("config", auto_refresh=False), fetch)

    await wait_for(lambda: fetch.count == 1)
    await asyncio.sleep(0.05)

    assert fetch.count == 1
    assert scheduler.get_domain("config").last_fetched_at is not None
    await scheduler.aclose()


@pytest.mark.asyncio
async def test_cadence_ticks_until_cancelled() -> None:
    scheduler = RefreshScheduler()
    fetch = _Recorder()
    cancel = scheduler.schedule(RefreshDomain("cells", cadence=0.01), fetch)

    await wait_for(lambda: fetch.count >= 3)
    cancel()
    await asyncio.sleep(0.01)
    seen = fetch.count
    await asyncio.sleep(0.05)

    assert fetch.count == seen
    assert scheduler.is_scheduled("cells") is False
    await scheduler.aclose()


@pytest.mark.asyncio
async def test_duplicate_schedule_rejected() -> None:
    scheduler = RefreshScheduler()
    scheduler.schedule(RefreshDomain("cells"), _Recorder())

    with pytest.raises(ValueError):
        scheduler.schedule(RefreshDomain("cells"), _Recorder())
    await scheduler.aclose()


@pytest.mark.asyncio
async def test_cancel_is_idempotent_and_allows_rescheduling() -> None:
    scheduler = RefreshScheduler()
    first = _Recorder()
    cancel = scheduler.schedule(RefreshDomain("cells"), first)
    await wait_for(lambda: first.count == 1)

    cancel()
    cancel()

    second = _Recorder()
    scheduler.schedule(RefreshDomain("cells"), second)
    await wait_for(lambda: second.count == 1)

    assert first.tokens[0].alive is False
    assert second.tokens[0].alive is True
    await scheduler.aclose()


@pytest.mark.asyncio
async def test_response_after_cancel_is_dropped() -> None:
    scheduler = RefreshScheduler()
    gate = asyncio.Event()
    written: list[str] = []
    started = asyncio.Event()

    async def _fetch(token: LivenessToken) -> None:
        started.set()
        await gate.wait()
        if token.alive:
            written.append("late")

    cancel = scheduler.schedule(RefreshDomain("cells"), _fetch)
    await started.wait()
    cancel()
    gate.set()
    await asyncio.sleep(0.01)

    assert written == []
    await scheduler.aclose()


@pytest.mark.asyncio
async def test_slow_fetch_does_not_delay_cadence() -> None:
    scheduler = RefreshScheduler()
    gate = asyncio.Event()
    started: list[int] = []

    async def _fetch(_token: LivenessToken) -> None:
        started.append(1)
        await gate.wait()

    scheduler.schedule(RefreshDomain("stats", cadence=0.01), _fetch)
    await wait_for(lambda: len(started) >= 3)

    gate.set()
    await scheduler.aclose()


@pytest.mark.asyncio
async def test_failing_tick_keeps_cadence() -> None:
    scheduler = RefreshScheduler()
    calls: list[int] = []

    async def _fetch(_token: LivenessToken) -> None:
        calls.append(1)
        raise RuntimeError("modem unreachable")

    scheduler.schedule(RefreshDomain("stats", cadence=0.01), _fetch)
    await wait_for(lambda: len(calls) >= 3)
    await scheduler.aclose()


@pytest.mark.asyncio
async def test_set_refresh_interval_skips_config_domains_and_keeps_tokens() -> None:
    scheduler = RefreshScheduler(refresh_interval=0)
    telemetry = _Recorder()
    config = _Recorder()
    scheduler.schedule(RefreshDomain("telemetry", cadence=0), telemetry)
    scheduler.schedule(RefreshDomain("config", auto_refresh=False), config)
    await wait_for(lambda: telemetry.count == 1 and config.count == 1)

    scheduler.set_refresh_interval(0.01)
    await wait_for(lambda: telemetry.count >= 3)

    assert scheduler.get_domain("telemetry").cadence == 0.01
    assert scheduler.get_domain("config").cadence == 0
    assert config.count == 1
    assert all(token is telemetry.tokens[0] and token.alive for token in telemetry.tokens)

    scheduler.set_refresh_interval(0)
    await asyncio.sleep(0.02)
    seen = telemetry.count
    await asyncio.sleep(0.05)
    assert telemetry.count == seen
    await scheduler.aclose()


@pytest.mark.asyncio
async def test_refresh_waits_and_propagates_errors() -> None:
    scheduler = RefreshScheduler()
    fetch = _Recorder()

    assert await scheduler.refresh("config") is False

    scheduler.schedule(RefreshDomain("config", auto_refresh=False), fetch)
    assert await scheduler.refresh("config") is True
    assert fetch.count == 2

    async def _broken(_token: LivenessToken) -> None:
        raise RuntimeError("boom")

    scheduler.schedule(RefreshDomain("broken", auto_refresh=False), _broken)
    with pytest.raises(RuntimeError):
        await scheduler.refresh("broken")
    await scheduler.aclose()


@pytest.mark.asyncio
async def test_refresh_signal_triggers_bound_domains() -> None:
    scheduler = RefreshScheduler()
    cells = _Recorder()
    config = _Recorder()
    scheduler.schedule(RefreshDomain("cells"), cells)
    scheduler.schedule(RefreshDomain("config", auto_refresh=False), config)
    await wait_for(lambda: cells.count == 1 and config.count == 1)

    signal = RefreshSignal(scheduler)
    signal.bind("cells")
    unbind = signal.bind("config")
    signal.bind("unknown")

    tasks = signal.trigger()
    await asyncio.gather(*tasks)

    assert len(tasks) == 2
    assert signal.refresh_key == 1
    assert (cells.count, config.count) == (2, 2)

    unbind()
    await asyncio.gather(*signal.trigger())

    assert signal.bound == ("cells", "unknown")
    assert (cells.count, config.count) == (3, 2)
    await scheduler.aclose()


@pytest.mark.asyncio
async def test_set_cadence_for_one_domain() -> None:
    scheduler = RefreshScheduler(refresh_interval=0)
    cells = _Recorder()
    config = _Recorder()
    scheduler.schedule(RefreshDomain("cells"), cells)
    scheduler.schedule(RefreshDomain("config", auto_refresh=False), config)

    scheduler.set_cadence("cells", 0.01)
    scheduler.set_cadence("config", 0.01)
    await wait_for(lambda: cells.count >= 3)

    assert scheduler.get_domain("config").cadence == 0
    assert config.count == 1
    assert [d.name for d in scheduler.domains()] == ["cells", "config"]
    with pytest.raises(KeyError):
        scheduler.set_cadence("unknown", 1.0)
    await scheduler.aclose()
