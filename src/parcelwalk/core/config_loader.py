"""
config_loader.py
- Loads and previews YAML files (invoice files, local overrides).
- JSON documents load through the same path since YAML is a superset.
"""

import os

import yaml
from loguru import logger


def load_yaml(path):
    """
    Load a YAML (or JSON) file and return the parsed document.

    Raises:
        OSError: If the file cannot be read.
        yaml.YAMLError: If the contents do not parse.
    """
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def preview_yaml(path, name=None):
    """
    Log a human-readable preview of a YAML file for debugging.
    """
    if not os.path.exists(path):
        logger.warning(f"[config] File not found: {path}")
        return

    try:
        with open(path, "r", encoding="utf-8") as f:
            contents = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"[config] Could not preview {path}: {e}")
        return
    logger.debug(
        f"\n📄 Loaded {name or path}:\n"
        + "\n".join(f"│ {line}" for line in contents.strip().splitlines())
    )
