# levcalc/feed.py
from __future__ import annotations

import logging
from typing import Optional

import numpy as np

log = logging.getLogger(__name__)


def fetch_entry_price(base_price: float, jitter_pct: float = 0.0, seed: Optional[int] = None) -> float:
    """Simulated price fetch: ``base_price`` nudged by up to ``jitter_pct`` either way."""
    price = float(base_price)
    if jitter_pct > 0:
        rng = np.random.default_rng(seed)
        price = round(price * (1.0 + rng.uniform(-jitter_pct, jitter_pct)), 4)
    if price <= 0:
        raise ValueError(f"Fetched entry price must be > 0, got {price}")
    log.info("Fetched entry price %.4f (base=%.4f jitter=%.2f%%)", price, base_price, jitter_pct * 100)
    return price
