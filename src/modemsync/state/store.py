"""Reconciliation state store.

This is the only component allowed to merge server snapshots and local
drafts. Each domain keeps two dicts:

* ``confirmed``: the last values received from the server.
* ``view``: ``confirmed`` with the open drafts overlaid. This is what
  :meth:`StateStore.get_snapshot` returns.

Every transition builds a fresh view off to the side and swaps it in with
a single assignment, so a reader never sees half of a snapshot.
"""

from __future__ import annotations

import copy
import dataclasses
import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from modemsync.state.events import IngestionSource, StateDomain
from modemsync.state.policy import DraftDecision, resolve_field

_logger = logging.getLogger(__name__)

StoreListener = Callable[[StateDomain], None]


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _merge_patch(target: dict[str, Any], patch: Mapping[str, Any]) -> None:
    """Apply a normalized patch: keys in the patch overwrite."""
    if not patch:
        return
    target.update(copy.deepcopy(dict(patch)))


def get_path(data: Mapping[str, Any], path: str, default: Any = None) -> Any:
    """Read a dotted *path* (``"form.apn"``) from nested dicts."""
    node: Any = data
    for part in path.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return default
        node = node[part]
    return node


def _set_path(data: dict[str, Any], path: str, value: Any) -> None:
    parts = path.split(".")
    node = data
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    node[parts[-1]] = copy.deepcopy(value)


@dataclasses.dataclass(slots=True)
class DraftField:
    """A local value that shadows the server value at ``path``.

    ``confirm_after`` is set by :meth:`StateStore.mark_awaiting_confirmation`;
    the first snapshot issued after that sequence number closes the draft.
    """

    domain: StateDomain
    path: str
    value: Any
    opened_at: datetime
    source: IngestionSource = IngestionSource.USER
    committed: bool = False
    confirm_after: int | None = None
    shadowed: DraftField | None = None

    @property
    def optimistic(self) -> bool:
        return self.source == IngestionSource.OPTIMISTIC


@dataclasses.dataclass(slots=True)
class _DomainState:
    confirmed: dict[str, Any] = dataclasses.field(default_factory=dict)
    view: dict[str, Any] = dataclasses.field(default_factory=dict)
    drafts: dict[str, DraftField] = dataclasses.field(default_factory=dict)
    version: int = 0
    updated_at: datetime | None = None


class StateStore:
    """In-memory store for per-domain snapshots and drafts.

    Snapshots from overlapping fetches are applied in completion order:
    the last one to arrive wins. Open drafts are never overwritten by a
    snapshot unless the domain was marked as awaiting confirmation before
    that snapshot's fetch was issued.
    """

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._domains: dict[StateDomain, _DomainState] = {}
        self._listeners: list[StoreListener] = []
        self._seq = 0

    def _domain(self, domain: StateDomain) -> _DomainState:
        state = self._domains.get(domain)
        if state is None:
            state = _DomainState()
            self._domains[domain] = state
        return state

    def _next_seq(self) -> int:
        self._seq += 1
        return self._seq

    # ------------------------------------------------------------------
    # Server snapshots
    # ------------------------------------------------------------------

    def begin_fetch(self, domain: StateDomain) -> int:
        """Return the sequence number to pass as ``issued_seq`` for a fetch starting now."""
        seq = self._next_seq()
        _logger.debug("Fetch issued for %s (seq=%d)", domain, seq)
        return seq

    def apply_snapshot(
        self,
        domain: StateDomain,
        fresh_data: Mapping[str, Any],
        *,
        issued_seq: int | None = None,
    ) -> None:
        """Merge *fresh_data* into *domain* in one step.

        Drafted paths keep their draft value unless the policy commits
        them; every other path takes the server value.
        """
        state = self._domain(domain)
        seq = issued_seq if issued_seq is not None else self._next_seq()

        confirmed = copy.deepcopy(state.confirmed)
        _merge_patch(confirmed, fresh_data)

        drafts = dict(state.drafts)
        for path, draft in state.drafts.items():
            if resolve_field(draft, issued_seq=seq) is DraftDecision.COMMIT:
                draft.committed = True
                del drafts[path]
                _logger.debug("Draft %s.%s confirmed by snapshot seq=%d", domain, path, seq)

        state.updated_at = self._clock()
        self._swap(domain, state, confirmed=confirmed, drafts=drafts)

    def get_snapshot(self, domain: StateDomain) -> dict[str, Any]:
        """Merged view of *domain* (server values with drafts overlaid)."""
        state = self._domains.get(domain)
        return copy.deepcopy(state.view) if state is not None else {}

    def get_confirmed(self, domain: StateDomain) -> dict[str, Any]:
        """Server-only values of *domain*, ignoring drafts."""
        state = self._domains.get(domain)
        return copy.deepcopy(state.confirmed) if state is not None else {}

    def has_snapshot(self, domain: StateDomain) -> bool:
        state = self._domains.get(domain)
        return state is not None and state.updated_at is not None

    def version(self, domain: StateDomain) -> int:
        state = self._domains.get(domain)
        return state.version if state is not None else 0

    # ------------------------------------------------------------------
    # Drafts
    # ------------------------------------------------------------------

    def open_draft(
        self,
        domain: StateDomain,
        path: str,
        value: Any,
        *,
        optimistic: bool = False,
    ) -> DraftField:
        """Open (or replace) the draft at *path*.

        Replacing a draft restarts it: an earlier confirmation mark no
        longer applies to the new value. An optimistic value written over a
        user draft keeps that draft in ``shadowed`` so a rollback restores it.
        """
        state = self._domain(domain)
        existing = state.drafts.get(path)
        source = IngestionSource.OPTIMISTIC if optimistic else IngestionSource.USER
        shadowed: DraftField | None = None
        if optimistic and existing is not None:
            shadowed = existing.shadowed if existing.optimistic else existing
        draft = DraftField(
            domain=domain,
            path=path,
            value=copy.deepcopy(value),
            opened_at=self._clock(),
            source=source,
            shadowed=shadowed,
        )
        drafts = dict(state.drafts)
        drafts[path] = draft
        self._swap(domain, state, confirmed=state.confirmed, drafts=drafts)
        return draft

    def discard_draft(self, domain: StateDomain, path: str) -> bool:
        """Cancel the draft at *path*; the view reverts to the confirmed value."""
        return self._discard(domain, [path]) > 0

    def drafts(self, domain: StateDomain) -> list[DraftField]:
        state = self._domains.get(domain)
        return list(state.drafts.values()) if state is not None else []

    def get_draft(self, domain: StateDomain, path: str) -> DraftField | None:
        state = self._domains.get(domain)
        return state.drafts.get(path) if state is not None else None

    def apply_optimistic(self, domain: StateDomain, patch: Mapping[str, Any]) -> list[str]:
        """Open optimistic drafts for every ``{path: value}`` in *patch*."""
        paths = list(patch)
        for path in paths:
            self.open_draft(domain, path, patch[path], optimistic=True)
        return paths

    def rollback_optimistic(self, domain: StateDomain, paths: list[str] | None = None) -> int:
        """Undo optimistic drafts on *paths* (all of them by default).

        A path that had a user draft before the optimistic write gets that
        draft back; any other path shows the last confirmed value again.
        Returns the number of paths rolled back.
        """
        state = self._domains.get(domain)
        if state is None:
            return 0
        candidates = list(state.drafts) if paths is None else paths
        rolled_back = [p for p in candidates if p in state.drafts and state.drafts[p].optimistic]
        if not rolled_back:
            return 0
        drafts = dict(state.drafts)
        for path in rolled_back:
            shadowed = drafts[path].shadowed
            if shadowed is None:
                del drafts[path]
            else:
                drafts[path] = shadowed
        self._swap(domain, state, confirmed=state.confirmed, drafts=drafts)
        _logger.debug("Rolled back %d optimistic value(s) in %s", len(rolled_back), domain)
        return len(rolled_back)

    def mark_awaiting_confirmation(self, domain: StateDomain, paths: list[str] | None = None) -> int:
        """Flag the open drafts of *domain* for closing by the next fetch issued from now on.

        Returns the mark's sequence number.
        """
        seq = self._next_seq()
        state = self._domains.get(domain)
        if state is None:
            return seq
        for path, draft in state.drafts.items():
            if paths is None or path in paths:
                draft.confirm_after = seq
        _logger.debug("%s awaiting confirmation after seq=%d", domain, seq)
        return seq

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: StoreListener) -> Callable[[], None]:
        """Call *listener(domain)* after every transition; return a remover."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _discard(self, domain: StateDomain, paths: list[str]) -> int:
        state = self._domains.get(domain)
        if state is None:
            return 0
        drafts = {path: draft for path, draft in state.drafts.items() if path not in paths}
        removed = len(state.drafts) - len(drafts)
        if removed:
            self._swap(domain, state, confirmed=state.confirmed, drafts=drafts)
        return removed

    def _swap(
        self,
        domain: StateDomain,
        state: _DomainState,
        *,
        confirmed: dict[str, Any],
        drafts: dict[str, DraftField],
    ) -> None:
        view = copy.deepcopy(confirmed)
        for path, draft in drafts.items():
            _set_path(view, path, draft.value)
        state.confirmed = confirmed
        state.drafts = drafts
        state.view = view
        state.version += 1
        self._notify(domain)

    def _notify(self, domain: StateDomain) -> None:
        for listener in list(self._listeners):
            try:
                listener(domain)
            except Exception:
                _logger.warning("State listener failed for %s", domain, exc_info=True)
