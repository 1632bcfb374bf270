"""Feed ``/stats`` network speeds into the series store."""

from __future__ import annotations

import logging

from modemsync.models.stats import NetworkSpeed, SystemStats
from modemsync.state.series import SeriesStore, rx_key, tx_key

_logger = logging.getLogger(__name__)


def ingest_network_speed(series: SeriesStore, stats: SystemStats | NetworkSpeed | None) -> int:
    """Append one rx/tx sample per interface; return the number of interfaces seen.

    Lifetime byte counters replace the stored totals. Interfaces with a
    missing rate simply get no sample for this poll.
    """
    speed = stats.network_speed if isinstance(stats, SystemStats) else stats
    if speed is None:
        return 0
    for item in speed.interfaces:
        series.ingest(rx_key(item.interface), item.rx_bytes_per_sec, total=item.total_rx_bytes)
        series.ingest(tx_key(item.interface), item.tx_bytes_per_sec, total=item.total_tx_bytes)
    _logger.debug("Ingested network speed for %d interfaces", len(speed.interfaces))
    return len(speed.interfaces)
