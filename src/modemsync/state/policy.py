"""Deterministic draft reconciliation policy.

This module intentionally contains *no* payload parsing. It only decides,
per drafted path, what an incoming server snapshot does to the draft.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from modemsync.state.store import DraftField


class DraftDecision(StrEnum):
    NONE = "none"
    """No draft on the path: the server value is shown."""
    KEEP = "keep"
    """The draft stays open and keeps shadowing the server value."""
    COMMIT = "commit"
    """The snapshot is authoritative: close the draft, show the server value."""


def resolve_field(draft: DraftField | None, *, issued_seq: int) -> DraftDecision:
    """Decide what a snapshot issued at *issued_seq* does to *draft*.

    Policy:
    - No draft: take the server value.
    - Draft not awaiting confirmation: keep it, whatever the server says.
    - Draft awaiting confirmation: commit only if the fetch was issued
      after the mark. A fetch already in flight when the settle delay
      elapsed may carry pre-convergence hardware state.
    """
    if draft is None:
        return DraftDecision.NONE
    if draft.confirm_after is None:
        return DraftDecision.KEEP
    if issued_seq > draft.confirm_after:
        return DraftDecision.COMMIT
    return DraftDecision.KEEP
