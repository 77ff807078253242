"""
constants.py
- Project-wide constants shared across the client, loader and runner code.
- Includes retry timing, API paths and media types.
"""

# --- Retry Timing Defaults ---
DEFAULT_RETRIES = 3
RETRY_WAIT_MIN = 1  # seconds
RETRY_WAIT_MAX = 10  # seconds

# --- HTTP ---
DEFAULT_TIMEOUT = 30  # seconds
INVOICE_PATH = "_i"
JSON_MEDIA_TYPE = "application/json"
OCTET_STREAM_MEDIA_TYPE = "application/octet-stream"

# --- Invoice Files ---
INVOICE_FILE_SUFFIXES = (".yml", ".yaml", ".json")
