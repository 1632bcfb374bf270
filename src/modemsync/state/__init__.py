"""State layer: domains, reconciliation store, draft policy and series."""

from modemsync.state.events import IngestionSource, StateDomain
from modemsync.state.policy import DraftDecision, resolve_field
from modemsync.state.series import InterfaceSpeedHistory, SeriesStore
from modemsync.state.store import DraftField, StateStore, get_path

__all__ = [
    "DraftDecision",
    "DraftField",
    "IngestionSource",
    "InterfaceSpeedHistory",
    "SeriesStore",
    "StateDomain",
    "StateStore",
    "get_path",
    "resolve_field",
]
