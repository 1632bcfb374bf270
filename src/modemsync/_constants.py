"""Internal constants shared across the library."""

BASE_URL = "http://127.0.0.1:3000/api"
USER_AGENT = "modemsync"

# ------------------------------------------------------------------
# Radio access technology codes used by the cell-lock API
# ------------------------------------------------------------------

RAT_LTE = 12
RAT_NR = 16

TECH_LTE = "lte"
TECH_NR = "nr"

# Channel fields in priority order (newer backends send ``arfcn``).
CHANNEL_FIELDS: tuple[str, ...] = ("arfcn", "earfcn", "nrarfcn")

# Signal values arrive as the raw modem value multiplied by 100.
SIGNAL_SCALE = 100.0

# ------------------------------------------------------------------
# Refresh cadences (seconds; 0 means manual only)
# ------------------------------------------------------------------

DEFAULT_REFRESH_INTERVAL = 1.0

DEFAULT_SERIES_MAX_LENGTH = 30

# ------------------------------------------------------------------
# Settle delays before a confirmatory refresh (seconds)
# ------------------------------------------------------------------

SETTLE_TOGGLE = 1.0
SETTLE_BAND_LOCK = 1.0
SETTLE_APN = 1.0
SETTLE_CELL_LOCK = 2.0
SETTLE_RADIO_MODE = 3.0
SETTLE_REGISTRATION = 3.0
SETTLE_SIM_SLOT = 2.0

SIM_SLOTS: tuple[int, ...] = (1, 2)

# ------------------------------------------------------------------
# Bands offered by the UDX710 module
# ------------------------------------------------------------------

LTE_FDD_BANDS: tuple[int, ...] = (1, 3, 5, 8)
LTE_TDD_BANDS: tuple[int, ...] = (39, 41)
NR_FDD_BANDS: tuple[int, ...] = (1, 3, 28)
NR_TDD_BANDS: tuple[int, ...] = (41, 77, 78, 79)

BAND_GROUPS: dict[str, tuple[int, ...]] = {
    "lte_fdd_bands": LTE_FDD_BANDS,
    "lte_tdd_bands": LTE_TDD_BANDS,
    "nr_fdd_bands": NR_FDD_BANDS,
    "nr_tdd_bands": NR_TDD_BANDS,
}

OTA_PACKAGE_EXTENSIONS: tuple[str, ...] = (".tar.gz", ".tgz", ".zip")
