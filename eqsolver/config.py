"""
Solver settings: defaults, an optional JSON settings file and environment
overrides.

Numeric limits of the solver live next to the code that enforces them
(``eqsolver.fraction`` and ``eqsolver.engine``); this module only covers the
behaviour a host may want to switch.
"""

import json
import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)

# ── Default settings ────────────────────────────────────────────────────
DEFAULT_SETTINGS = {
    "strict_bounds": False,   # raise on out-of-range coordinates
    "log_level": "WARNING",
}

_ENV_PREFIX = "EQSOLVER_"
_TRUE_WORDS = {"1", "true", "yes", "on"}
_FALSE_WORDS = {"0", "false", "no", "off"}


def _parse_bool(raw: str, name: str) -> bool:
    word = raw.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ValueError(f"{name} must be a boolean (true/false), got '{raw}'.")


def _load_file(path: str) -> dict:
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring settings file %s: top level is not an object", path)
        return {}
    return data


def load_settings(path: Optional[str] = None) -> dict:
    """Return the effective settings dict.

    Starts from :data:`DEFAULT_SETTINGS`, merges the JSON object stored at
    *path* (unknown keys are dropped) and finally applies the
    ``EQSOLVER_STRICT_BOUNDS`` / ``EQSOLVER_LOG_LEVEL`` environment variables.
    """
    merged = dict(DEFAULT_SETTINGS)
    if path:
        for key, value in _load_file(path).items():
            if key in DEFAULT_SETTINGS:
                merged[key] = value

    strict = os.environ.get(_ENV_PREFIX + "STRICT_BOUNDS")
    if strict is not None:
        merged["strict_bounds"] = _parse_bool(strict, _ENV_PREFIX + "STRICT_BOUNDS")
    level = os.environ.get(_ENV_PREFIX + "LOG_LEVEL")
    if level:
        merged["log_level"] = level.strip().upper()

    merged["strict_bounds"] = bool(merged["strict_bounds"])
    merged["log_level"] = str(merged["log_level"]).upper()
    return merged
