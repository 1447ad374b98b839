# levcalc/utils.py
"""Utility helpers for the calculator.

Small helpers shared by the runner and the library modules:

* configuration merging
* filesystem and JSON helpers
* logging setup
* parsing of raw user inputs

The logger returned by :func:`get_logger` writes to the output directory and
to stdout, so a CLI run leaves a log next to the artefacts it produced.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Tuple

import numpy as np


def ensure_dir(path: str) -> None:
    """Create ``path`` if it does not already exist."""

    os.makedirs(path, exist_ok=True)


def merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into ``base`` and return the result."""

    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = merge_dicts(result[k], v)
        else:
            result[k] = v
    return result


def save_json(obj: Dict[str, Any], path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2)


def get_logger(name: str, log_path: str | None = None) -> logging.Logger:
    """Return a logger writing to stdout and, when given, to ``log_path``.

    A file handler pointing elsewhere is replaced, so repeated runs in one
    process each log into their own output directory.
    """

    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    fmt = logging.Formatter("%(asctime)s %(levelname)s %(message)s")
    target = os.path.abspath(log_path) if log_path else None
    for h in list(logger.handlers):
        if isinstance(h, logging.FileHandler) and h.baseFilename != target:
            logger.removeHandler(h)
            h.close()
    if target and not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        fh = logging.FileHandler(target)
        fh.setFormatter(fmt)
        logger.addHandler(fh)
    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        sh = logging.StreamHandler()
        sh.setFormatter(fmt)
        logger.addHandler(sh)
    return logger


def parse_inputs(target_raw: Any, days_raw: Any) -> Tuple[float, int]:
    """Parse user-entered target price and timeframe.

    Raises ``ValueError`` with a user-facing message for non-numeric values or a
    non-positive timeframe; the selector itself never validates these.
    """

    try:
        target = float(target_raw)
        days_f = float(days_raw)
    except (TypeError, ValueError):
        raise ValueError("Please enter valid numbers for target price and timeframe.") from None
    if not (np.isfinite(target) and np.isfinite(days_f)):
        raise ValueError("Please enter valid numbers for target price and timeframe.")
    # fractional days are truncated
    days = int(days_f)
    if days <= 0:
        raise ValueError("Timeframe must be a positive number of days.")
    return target, days
