"""Ingestion boundary: wire payloads in, canonical records and samples out."""

from modemsync.ingestion.matcher import match_cells, normalize_cell, validate_lock_entries
from modemsync.ingestion.telemetry import ingest_network_speed

__all__ = [
    "ingest_network_speed",
    "match_cells",
    "normalize_cell",
    "validate_lock_entries",
]
