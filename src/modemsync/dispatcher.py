"""Action dispatcher.

Submits user mutations with per-resource mutual exclusion, optional
optimistic values, and a delayed confirmatory refresh.

Flow for one ``dispatch``::

    validate() -> optimistic drafts -> mutation_fn()
        ok:     status=ok, schedule [settle] -> mark confirm_domains -> refresh
        failed: status=failed, roll back optimistic drafts, re-raise
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import uuid
from collections.abc import Awaitable, Callable, Iterable, Mapping
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, Generic, TypeVar

from modemsync.exceptions import ActionInProgressError
from modemsync.scheduler import RefreshScheduler, Sleep
from modemsync.state.events import StateDomain
from modemsync.state.store import StateStore

_logger = logging.getLogger(__name__)

T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ActionStatus(StrEnum):
    PENDING = "pending"
    OK = "ok"
    FAILED = "failed"


@dataclasses.dataclass(slots=True)
class PendingAction:
    """One submitted mutation. At most one is pending per ``resource_key``."""

    id: str
    resource_key: str
    submitted_at: datetime
    status: ActionStatus = ActionStatus.PENDING
    completed_at: datetime | None = None
    error: BaseException | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class ActionResult(Generic[T]):
    """Outcome of a successful dispatch.

    ``confirmation`` is the scheduled settle-then-refresh task, or ``None``
    when there was nothing to confirm.
    """

    action: PendingAction
    value: T
    confirmation: asyncio.Task[None] | None = None


class ActionDispatcher:
    """Per-resource exclusive mutation runner bound to one store and scheduler."""

    def __init__(
        self,
        store: StateStore,
        scheduler: RefreshScheduler,
        *,
        sleep: Sleep = asyncio.sleep,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._scheduler = scheduler
        self._sleep = sleep
        self._clock = clock
        self._active: dict[str, PendingAction] = {}
        self._last: dict[str, PendingAction] = {}
        self._confirmations: set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_pending(self, resource_key: str) -> bool:
        return resource_key in self._active

    def pending(self) -> list[PendingAction]:
        return list(self._active.values())

    def get_pending(self, resource_key: str) -> PendingAction | None:
        return self._active.get(resource_key)

    def last_action(self, resource_key: str) -> PendingAction | None:
        """Most recently completed action for *resource_key*."""
        return self._last.get(resource_key)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def dispatch(
        self,
        resource_key: str,
        mutation_fn: Callable[[], Awaitable[T]],
        *,
        domain: StateDomain | None = None,
        optimistic: Mapping[str, Any] | None = None,
        settle: float = 0.0,
        confirm_domains: Iterable[StateDomain] = (),
        refresh_domains: Iterable[str] = (),
        validate: Callable[[], None] | None = None,
    ) -> ActionResult[T]:
        """Run *mutation_fn* as the only pending action for *resource_key*.

        Parameters
        ----------
        resource_key : str
            Physical resource being changed (e.g. ``"cell_lock"``).
        mutation_fn : callable
            Coroutine function performing the request.
        domain, optimistic
            Store domain and ``{path: value}`` patch shown immediately as
            optimistic drafts. They are rolled back on failure and
            confirmed by the refresh on success.
        settle : float
            Seconds to wait after success before the confirmatory refresh.
        confirm_domains : iterable of StateDomain
            Domains whose open drafts the post-settle refresh closes.
        refresh_domains : iterable of str
            Scheduler refresh domains to fetch after the settle delay.
        validate : callable, optional
            Precondition; anything it raises aborts the dispatch before
            any state is touched.

        Raises
        ------
        ActionInProgressError
            If an action for *resource_key* is still pending.
        """
        if resource_key in self._active:
            raise ActionInProgressError(resource_key)
        if validate is not None:
            validate()

        action = PendingAction(id=uuid.uuid4().hex, resource_key=resource_key, submitted_at=self._clock())
        self._active[resource_key] = action
        _logger.debug("Action %s submitted for %s", action.id, resource_key)

        optimistic_paths: list[str] = []
        if domain is not None and optimistic:
            optimistic_paths = self._store.apply_optimistic(domain, optimistic)

        try:
            value = await mutation_fn()
        except BaseException as exc:
            action.status = ActionStatus.FAILED
            action.error = exc
            if optimistic_paths:
                assert domain is not None  # noqa: S101
                self._store.rollback_optimistic(domain, optimistic_paths)
            _logger.debug("Action %s for %s failed: %s", action.id, resource_key, exc)
            raise
        else:
            action.status = ActionStatus.OK
        finally:
            action.completed_at = self._clock()
            self._active.pop(resource_key, None)
            self._last[resource_key] = action

        to_confirm = list(dict.fromkeys(confirm_domains))
        if optimistic_paths and domain is not None and domain not in to_confirm:
            to_confirm.append(domain)
        to_refresh = list(dict.fromkeys(refresh_domains))

        confirmation: asyncio.Task[None] | None = None
        if to_confirm or to_refresh:
            confirmation = asyncio.get_running_loop().create_task(
                self._confirm(action, settle, to_confirm, to_refresh),
                name=f"modemsync-confirm-{resource_key}",
            )
            self._confirmations.add(confirmation)
            confirmation.add_done_callback(self._confirmations.discard)
        return ActionResult(action=action, value=value, confirmation=confirmation)

    async def _confirm(
        self,
        action: PendingAction,
        settle: float,
        confirm_domains: list[StateDomain],
        refresh_domains: list[str],
    ) -> None:
        if settle > 0:
            await self._sleep(settle)
        for domain in confirm_domains:
            self._store.mark_awaiting_confirmation(domain)
        results = await asyncio.gather(
            *(self._scheduler.refresh(name) for name in refresh_domains),
            return_exceptions=True,
        )
        for name, result in zip(refresh_domains, results, strict=True):
            if isinstance(result, BaseException):
                _logger.debug("Confirmatory refresh of %s after %s failed", name, action.id, exc_info=result)
        _logger.debug("Action %s for %s settled", action.id, action.resource_key)

    async def aclose(self) -> None:
        """Cancel outstanding confirmatory refreshes."""
        tasks = list(self._confirmations)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
