"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(
    os.environ.get("SCHEDULE_DB_PATH", str(PROJECT_ROOT / "data" / "db" / "schedule.db"))
)
OUTPUT_DIR = PROJECT_ROOT / "output"

# =============================================================================
# API CONFIGURATION
# =============================================================================

API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_VERSION = "1.0.0"

# Empty list means "reflect any origin" (development behaviour)
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("ALLOWED_ORIGINS", "").split(",")
    if origin.strip()
]

# =============================================================================
# IDENTITY
# =============================================================================


def parse_api_tokens(raw: str) -> dict[str, str]:
    """
    Parse 'token:caller,token2:caller2' into a token -> caller id map.

    Entries without a caller part use the token itself as the caller id.
    """
    tokens = {}
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        token, _, caller = entry.partition(":")
        tokens[token.strip()] = caller.strip() or token.strip()
    return tokens


API_TOKENS = parse_api_tokens(os.environ.get("SCHEDULE_API_TOKENS", ""))

# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# =============================================================================
# REPORT CONFIGURATION
# =============================================================================

HEATMAP_INTERVAL_CAP = int(os.environ.get("HEATMAP_INTERVAL_CAP", "3"))

# Five severity steps, lightest (idle) to darkest (busiest)
HEAT_PALETTE = ["#f6ffed", "#d9f7be", "#ffe58f", "#ffa940", "#ff4d4f"]

CONTRAST_THRESHOLD = 0.5

WORKLOAD_HEADERS = [
    "Resource",
    "Role",
    "Events",
    "Total Minutes",
    "Total Hours",
    "Avg Hours / Event",
    "Share",
]
DETAIL_HEADERS = ["Resource", "Title", "Date", "Start", "End", "Minutes"]
