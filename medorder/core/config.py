import logging
import os

# ---------------------------------------------------------------------------
# Runtime settings (environment-driven, read once at import time)
# ---------------------------------------------------------------------------
LOG_LEVEL = os.getenv("MEDORDER_LOG_LEVEL", "INFO")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("MEDORDER_CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

# How a fractional days supply is turned into a whole number of days when a
# refill / end date is computed: "floor", "ceil" or "round".
REFILL_ROUNDING = os.getenv("MEDORDER_REFILL_ROUNDING", "floor").strip().lower()

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Install a basic stderr handler for the CLI and the HTTP app."""
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format=_LOG_FORMAT,
    )
