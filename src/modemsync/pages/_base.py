"""Shared wiring for page bindings.

A page owns a handful of refresh domains, each fetching a *batch* of state
domains concurrently. A batch is all-or-nothing: if any request fails the
error is reported and none of the batch is merged.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeVar

from modemsync.client import ModemClient
from modemsync.config import SyncConfig
from modemsync.dispatcher import ActionDispatcher, ActionResult
from modemsync.exceptions import ActionInProgressError, ModemApiError, ModemSyncError, ModemTransportError
from modemsync.models._base import ModemBaseModel
from modemsync.scheduler import FetchFn, LivenessToken, RefreshDomain, RefreshScheduler, RefreshSignal, Sleep
from modemsync.state.events import StateDomain
from modemsync.state.series import SeriesStore
from modemsync.state.store import StateStore

_logger = logging.getLogger(__name__)

T = TypeVar("T")

BatchFetchers = Mapping[StateDomain, Callable[[], Awaitable[ModemBaseModel]]]

# Failures a page turns into its error banner (pydantic ValidationError is a ValueError).
PAGE_ERRORS: tuple[type[Exception], ...] = (ModemSyncError, ValueError)


def describe_error(exc: BaseException) -> str:
    """Banner text for a failed request or action."""
    if isinstance(exc, ModemApiError):
        return str(exc)
    if isinstance(exc, ModemTransportError):
        return f"Unable to reach the modem: {exc}"
    return str(exc) or type(exc).__name__


@dataclasses.dataclass(slots=True)
class SyncContext:
    """Everything a page needs, passed by reference."""

    client: ModemClient
    store: StateStore
    series: SeriesStore
    scheduler: RefreshScheduler
    dispatcher: ActionDispatcher
    config: SyncConfig

    @classmethod
    def create(
        cls,
        client: ModemClient,
        *,
        config: SyncConfig | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> SyncContext:
        config = config or client.config
        store = StateStore()
        scheduler = RefreshScheduler(refresh_interval=config.refresh_interval, sleep=sleep)
        return cls(
            client=client,
            store=store,
            series=SeriesStore(config.series_max_length),
            scheduler=scheduler,
            dispatcher=ActionDispatcher(store, scheduler, sleep=sleep),
            config=config,
        )

    def set_refresh_interval(self, seconds: float) -> None:
        self.scheduler.set_refresh_interval(seconds)

    async def aclose(self) -> None:
        await self.dispatcher.aclose()
        await self.scheduler.aclose()


class SyncPage:
    """Base class for a mounted page.

    Subclasses implement :meth:`_refresh_domains`. ``error`` holds the
    current banner text and ``notice`` the last success message.
    """

    def __init__(self, ctx: SyncContext) -> None:
        self._ctx = ctx
        self.signal = RefreshSignal(ctx.scheduler)
        self.error: str | None = None
        self.notice: str | None = None
        self._cancels: list[Callable[[], None]] = []
        self._generation = 0

    @property
    def store(self) -> StateStore:
        return self._ctx.store

    @property
    def mounted(self) -> bool:
        return bool(self._cancels)

    @property
    def generation(self) -> int:
        """Incremented on every mount; work started under another generation is stale."""
        return self._generation

    def is_current(self, generation: int) -> bool:
        return self.mounted and generation == self._generation

    def _refresh_domains(self) -> list[tuple[RefreshDomain, FetchFn]]:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def mount(self) -> None:
        """Schedule the page's refresh domains; each fetches once right away."""
        if self.mounted:
            return
        self._generation += 1
        for domain, fetch_fn in self._refresh_domains():
            cancel = self._ctx.scheduler.schedule(domain, fetch_fn)
            unbind = self.signal.bind(domain.name)
            self._cancels.extend([unbind, cancel])
        _logger.debug("%s mounted", type(self).__name__)

    def unmount(self) -> None:
        cancels, self._cancels = self._cancels, []
        for cancel in cancels:
            cancel()
        _logger.debug("%s unmounted", type(self).__name__)

    async def __aenter__(self) -> SyncPage:
        self.mount()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.unmount()

    def refresh_all(self) -> list[asyncio.Task[None]]:
        """Manual refresh of every bound domain (the page's refresh button)."""
        return self.signal.trigger()

    def snapshot(self, domain: StateDomain) -> dict[str, Any]:
        return self._ctx.store.get_snapshot(domain)

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    async def _fetch_batch(
        self,
        token: LivenessToken,
        fetchers: BatchFetchers,
        *,
        critical: bool = True,
    ) -> dict[StateDomain, ModemBaseModel] | None:
        """Fetch *fetchers* concurrently and merge them, or nothing.

        Non-critical batches only log their failure. Whatever arrives
        after *token* was revoked is dropped.
        """
        store = self._ctx.store
        issued = {domain: store.begin_fetch(domain) for domain in fetchers}
        try:
            results = await asyncio.gather(*(fetch() for fetch in fetchers.values()))
        except PAGE_ERRORS as exc:
            if not token.alive:
                _logger.debug("Dropping stale %s failure: %s", token.name, exc)
                return None
            if critical:
                self.error = describe_error(exc)
                _logger.debug("Batch %s failed: %s", token.name, exc)
            else:
                _logger.debug("Non-critical batch %s failed", token.name, exc_info=True)
            return None

        if not token.alive:
            _logger.debug("Dropping stale %s response", token.name)
            return None

        merged = dict(zip(fetchers, results, strict=True))
        for domain, model in merged.items():
            store.apply_snapshot(domain, model.to_patch(), issued_seq=issued[domain])
        if critical:
            self.error = None
        return merged

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def _run_action(
        self,
        resource_key: str,
        mutation_fn: Callable[[], Awaitable[T]],
        *,
        notice: str | None = None,
        **dispatch_kwargs: Any,
    ) -> ActionResult[T]:
        """Dispatch a mutation and mirror its outcome into ``error``/``notice``.

        Errors are re-raised after the banner is set. A rejected concurrent
        action leaves the banner alone.
        """
        try:
            result = await self._ctx.dispatcher.dispatch(resource_key, mutation_fn, **dispatch_kwargs)
        except ActionInProgressError:
            raise
        except PAGE_ERRORS as exc:
            self.error = describe_error(exc)
            self.notice = None
            raise
        self.error = None
        if notice is not None:
            self.notice = notice
        return result
