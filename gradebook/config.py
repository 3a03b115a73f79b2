"""
Gradebook settings read from the environment.

Values are loaded once at import, after a local ``.env`` file has been merged
into the process environment. Invalid values fail fast with RuntimeError.
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()


def _env_float(name, default, low, high):
    raw = os.environ.get(name, '').strip()
    if not raw:
        return float(default)
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise RuntimeError(f"{name} must be a number, got {raw!r}.")
    if value != value or not (low <= value <= high):
        raise RuntimeError(f"{name} must be between {low} and {high}, got {raw!r}.")
    return value


UNCATEGORIZED_WEIGHT = _env_float('GRADEBOOK_UNCATEGORIZED_WEIGHT', 0, 0, 100)
SCALE_GAP_TOLERANCE = _env_float('GRADEBOOK_SCALE_GAP_TOLERANCE', 1.0, 0, 5)

DEFAULT_SCALE_NAME = os.environ.get('GRADEBOOK_DEFAULT_SCALE', 'standard').strip().lower() or 'standard'
if DEFAULT_SCALE_NAME not in ('standard', 'vietnamese'):
    raise RuntimeError(
        f"GRADEBOOK_DEFAULT_SCALE must be 'standard' or 'vietnamese', got {DEFAULT_SCALE_NAME!r}."
    )

LOG_LEVEL = os.environ.get('GRADEBOOK_LOG_LEVEL', 'WARNING').strip().upper() or 'WARNING'
if not isinstance(logging.getLevelName(LOG_LEVEL), int):
    raise RuntimeError(f"GRADEBOOK_LOG_LEVEL is not a valid logging level: {LOG_LEVEL!r}.")

logging.getLogger('gradebook').setLevel(LOG_LEVEL)
