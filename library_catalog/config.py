"""Configuration for the catalog engine, read from the environment."""

import logging
import os

from dotenv import load_dotenv

from .schemas import KNOWN_STATUSES, SORT_KEYS, SORT_TITLE_ASC, STATUS_ALL

load_dotenv()


def _choice(name: str, allowed, default: str) -> str:
    value = os.getenv(name, default).strip()
    return value if value in allowed else default


# Initial selection of a freshly opened catalog screen.
DEFAULT_SORT_KEY = _choice("CATALOG_DEFAULT_SORT", SORT_KEYS, SORT_TITLE_ASC)
DEFAULT_STATUS_FILTER = _choice(
    "CATALOG_DEFAULT_STATUS", (STATUS_ALL,) + KNOWN_STATUSES, STATUS_ALL
)

LOG_LEVEL = os.getenv("CATALOG_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level=None) -> None:
    """Set up root logging for scripts and tests embedding the engine."""
    resolved = level or LOG_LEVEL
    if isinstance(resolved, str):
        resolved = getattr(logging, resolved.upper(), logging.INFO)
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
