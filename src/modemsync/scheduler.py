"""Refresh domain scheduler.

Each :class:`RefreshDomain` owns a fetch function that runs once when the
domain is scheduled and then every ``cadence`` seconds. A cadence of ``0``
disables the periodic tick; such a domain is only fetched on mount, on a
:class:`RefreshSignal` trigger, or on an explicit :meth:`RefreshScheduler.refresh`.

Every fetch receives the domain's :class:`LivenessToken`. Fetch functions
must check ``token.alive`` before writing to any store, so a response
that arrives after the domain was cancelled is dropped.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

from modemsync._constants import DEFAULT_REFRESH_INTERVAL

_logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclasses.dataclass(slots=True)
class RefreshDomain:
    """A named polling loop.

    ``auto_refresh=False`` marks an editable configuration domain: its
    cadence is pinned to ``0`` and the global refresh interval never
    changes it.
    """

    name: str
    cadence: float = 0.0
    auto_refresh: bool = True
    last_fetched_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.cadence < 0:
            raise ValueError(f"cadence must be >= 0, got {self.cadence}")
        if not self.auto_refresh:
            self.cadence = 0.0


class LivenessToken:
    """Revocable guard handed to every fetch of one scheduled domain."""

    __slots__ = ("_alive", "name")

    def __init__(self, name: str) -> None:
        self.name = name
        self._alive = True

    @property
    def alive(self) -> bool:
        return self._alive

    def revoke(self) -> None:
        self._alive = False

    def __repr__(self) -> str:
        return f"LivenessToken({self.name!r}, alive={self._alive})"


FetchFn = Callable[[LivenessToken], Awaitable[None]]


@dataclasses.dataclass(slots=True)
class _Entry:
    domain: RefreshDomain
    fetch_fn: FetchFn
    token: LivenessToken
    timer: asyncio.Task[None] | None = None


class RefreshScheduler:
    """Runs independently cadenced refresh domains on the current event loop.

    Usage::

        scheduler = RefreshScheduler()
        cancel = scheduler.schedule(RefreshDomain("cells", cadence=1.0), fetch_cells)
        ...
        cancel()
    """

    def __init__(
        self,
        *,
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
        sleep: Sleep = asyncio.sleep,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if refresh_interval < 0:
            raise ValueError(f"refresh_interval must be >= 0, got {refresh_interval}")
        self._refresh_interval = refresh_interval
        self._sleep = sleep
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._inflight: set[asyncio.Task[None]] = set()

    @property
    def refresh_interval(self) -> float:
        return self._refresh_interval

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def schedule(self, domain: RefreshDomain, fetch_fn: FetchFn) -> Callable[[], None]:
        """Start *domain*: fetch now, then every ``domain.cadence`` seconds.

        Returns an idempotent ``cancel()`` that revokes the domain's
        liveness token and stops its timer.
        """
        if domain.name in self._entries:
            raise ValueError(f"Refresh domain {domain.name!r} is already scheduled")
        entry = _Entry(domain=domain, fetch_fn=fetch_fn, token=LivenessToken(domain.name))
        self._entries[domain.name] = entry
        _logger.debug("Scheduled %s (cadence=%ss)", domain.name, domain.cadence)
        self._spawn(entry)
        self._start_timer(entry)

        def cancel() -> None:
            self._cancel(entry)

        return cancel

    def _cancel(self, entry: _Entry) -> None:
        if not entry.token.alive:
            return
        entry.token.revoke()
        self._stop_timer(entry)
        if self._entries.get(entry.domain.name) is entry:
            del self._entries[entry.domain.name]
        _logger.debug("Cancelled %s", entry.domain.name)

    async def aclose(self) -> None:
        """Cancel every domain and wait for in-flight fetches to unwind."""
        for entry in list(self._entries.values()):
            self._cancel(entry)
        tasks = list(self._inflight)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_scheduled(self, name: str) -> bool:
        return name in self._entries

    def get_domain(self, name: str) -> RefreshDomain | None:
        entry = self._entries.get(name)
        return entry.domain if entry is not None else None

    def domains(self) -> list[RefreshDomain]:
        return [entry.domain for entry in self._entries.values()]

    # ------------------------------------------------------------------
    # Cadence control
    # ------------------------------------------------------------------

    def set_refresh_interval(self, seconds: float) -> None:
        """Apply the global refresh interval to every auto-refresh domain.

        ``0`` switches them to manual refresh. Configuration domains keep
        cadence ``0``. Timers restart; liveness tokens are untouched.
        """
        if seconds < 0:
            raise ValueError(f"refresh interval must be >= 0, got {seconds}")
        self._refresh_interval = seconds
        for entry in self._entries.values():
            if entry.domain.auto_refresh:
                self._set_cadence(entry, seconds)

    def set_cadence(self, name: str, seconds: float) -> None:
        entry = self._entries.get(name)
        if entry is None:
            raise KeyError(name)
        if not entry.domain.auto_refresh:
            return
        if seconds < 0:
            raise ValueError(f"cadence must be >= 0, got {seconds}")
        self._set_cadence(entry, seconds)

    def _set_cadence(self, entry: _Entry, seconds: float) -> None:
        if entry.domain.cadence == seconds:
            return
        entry.domain.cadence = seconds
        self._stop_timer(entry)
        self._start_timer(entry)
        _logger.debug("Cadence of %s set to %ss", entry.domain.name, seconds)

    # ------------------------------------------------------------------
    # Out-of-band fetches
    # ------------------------------------------------------------------

    def trigger(self, name: str) -> asyncio.Task[None] | None:
        """Start one out-of-band fetch of *name* without waiting for it."""
        entry = self._entries.get(name)
        if entry is None:
            _logger.debug("Trigger for unscheduled domain %s ignored", name)
            return None
        return self._spawn(entry)

    async def refresh(self, name: str) -> bool:
        """Run one out-of-band fetch of *name* and wait for it.

        Returns ``False`` when the domain is not scheduled (e.g. the page
        was unmounted). Errors raised by the fetch propagate.
        """
        entry = self._entries.get(name)
        if entry is None:
            _logger.debug("Refresh for unscheduled domain %s ignored", name)
            return False
        await self._spawn(entry, propagate=True)
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _spawn(self, entry: _Entry, *, propagate: bool = False) -> asyncio.Task[None]:
        task = asyncio.get_running_loop().create_task(
            self._run_fetch(entry, propagate=propagate),
            name=f"modemsync-refresh-{entry.domain.name}",
        )
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    async def _run_fetch(self, entry: _Entry, *, propagate: bool) -> None:
        token = entry.token
        try:
            await entry.fetch_fn(token)
        except Exception:
            if propagate:
                raise
            _logger.debug("Refresh of %s failed", entry.domain.name, exc_info=True)
            return
        if token.alive:
            entry.domain.last_fetched_at = self._clock()

    def _start_timer(self, entry: _Entry) -> None:
        if entry.domain.cadence <= 0 or not entry.token.alive:
            return
        entry.timer = asyncio.get_running_loop().create_task(
            self._tick_loop(entry, entry.domain.cadence),
            name=f"modemsync-timer-{entry.domain.name}",
        )

    def _stop_timer(self, entry: _Entry) -> None:
        timer = entry.timer
        entry.timer = None
        if timer is not None and not timer.done():
            timer.cancel()

    async def _tick_loop(self, entry: _Entry, cadence: float) -> None:
        while True:
            await self._sleep(cadence)
            if not entry.token.alive:
                return
            # Independent task per tick: a slow fetch never delays the cadence.
            self._spawn(entry)


class RefreshSignal:
    """Shared manual-refresh signal for the domains of one page.

    ``trigger()`` increments :attr:`refresh_key` and starts an
    out-of-band fetch of every bound domain. Periodic cadences are not
    affected.
    """

    def __init__(self, scheduler: RefreshScheduler) -> None:
        self._scheduler = scheduler
        self._bound: list[str] = []
        self.refresh_key = 0

    def bind(self, name: str) -> Callable[[], None]:
        if name not in self._bound:
            self._bound.append(name)

        def unbind() -> None:
            if name in self._bound:
                self._bound.remove(name)

        return unbind

    @property
    def bound(self) -> tuple[str, ...]:
        return tuple(self._bound)

    def trigger(self) -> list[asyncio.Task[None]]:
        self.refresh_key += 1
        tasks: list[asyncio.Task[None]] = []
        for name in self._bound:
            task = self._scheduler.trigger(name)
            if task is not None:
                tasks.append(task)
        _logger.debug("Manual refresh %d started %d fetch(es)", self.refresh_key, len(tasks))
        return tasks
