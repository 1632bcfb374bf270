"""State domains and value origins.

The set of domains is fixed; every page fetch and every draft is keyed
by one of these.
"""

from __future__ import annotations

from enum import StrEnum


class IngestionSource(StrEnum):
    HTTP = "http"
    USER = "user"
    OPTIMISTIC = "optimistic"


class StateDomain(StrEnum):
    # Dashboard
    DEVICE = "device"
    SIM = "sim"
    STATS = "stats"
    NETWORK = "network"
    DATA = "data"
    CELLS = "cells"
    QOS = "qos"
    AIRPLANE_MODE = "airplane_mode"
    IMS = "ims"
    CONNECTIVITY = "connectivity"
    ROAMING = "roaming"
    # Network page
    OPERATORS = "operators"
    CELL_LOCK = "cell_lock"
    INTERFACES = "interfaces"
    APN = "apn"
    RADIO_MODE = "radio_mode"
    BAND_LOCK = "band_lock"
    # Device info page
    IMEISV = "imeisv"
    SIM_SLOT = "sim_slot"
    # OTA page
    OTA = "ota"
