"""
Centralized configuration for the Rune intake service.
Every value can be overridden from the environment or a local .env file.
"""

import logging
import os
from dotenv import load_dotenv

load_dotenv()

# --- Assistant ---
ASSISTANT_NAME = os.getenv("RUNE_ASSISTANT_NAME", "Rune")

# --- Extraction ---
# Numeric dates are read day-first ("15/06/1990") unless set to "MDY".
DATE_ORDER = os.getenv("RUNE_DATE_ORDER", "DMY").strip().upper()
if DATE_ORDER not in ("DMY", "MDY"):
    logging.getLogger("rune-server").warning(
        "RUNE_DATE_ORDER=%r is not DMY or MDY, using DMY", DATE_ORDER
    )
    DATE_ORDER = "DMY"

# Comma-separated override for the built-in known-city list used by the
# address extractor.  Empty means "use the defaults".
KNOWN_CITIES = [
    c.strip().lower()
    for c in os.getenv("RUNE_KNOWN_CITIES", "").split(",")
    if c.strip()
]

# --- Sessions ---
# Cosmetic "thinking" pause before the assistant replies, in seconds.
PROCESSING_DELAY_SECONDS = float(os.getenv("RUNE_PROCESSING_DELAY", "0"))

# --- Logging ---
LOG_LEVEL = os.getenv("RUNE_LOG_LEVEL", "INFO").upper()

# --- Server ---
PORT = int(os.getenv("PORT", "8080"))
