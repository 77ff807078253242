"""
config.py
- Defines global configuration values derived from environment variables.
- Used by the client, runner and CLI for shared behavior control.
"""

import os
import sys

from loguru import logger

from parcelwalk.core.constants import DEFAULT_RETRIES, DEFAULT_TIMEOUT

# --- Runtime Behavior Flags ---
DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# --- Server Connection ---
BINDLE_URL = os.getenv("BINDLE_URL", "http://localhost:8080/v1/")
BINDLE_INSECURE = os.getenv("BINDLE_INSECURE", "false").lower() == "true"
BINDLE_USERNAME = os.getenv("BINDLE_USERNAME")
BINDLE_PASSWORD = os.getenv("BINDLE_PASSWORD")
BINDLE_TIMEOUT = int(os.getenv("BINDLE_TIMEOUT", str(DEFAULT_TIMEOUT)))
BINDLE_RETRIES = int(os.getenv("BINDLE_RETRIES", str(DEFAULT_RETRIES)))

# --- Logging ---
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "false").lower() == "true"
LOG_FILE = os.getenv("LOG_FILE", "/var/log/parcelwalk.log")
LOG_LEVEL = "DEBUG" if DEBUG else os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# --- Error Reporting ---
SENTRY_DSN = os.getenv("SENTRY_DSN")


def configure_logging(level=None):
    """
    Replace loguru's default sink with the project format.

    Args:
        level (str, optional): Overrides LOG_LEVEL (e.g. "DEBUG").
    """
    level = level or LOG_LEVEL
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT, colorize=True)
    if LOG_TO_FILE:
        logger.add(LOG_FILE, level=level, format=LOG_FORMAT, rotation="10 MB")
    logger.debug(f"[config] Logging configured at {level}")
