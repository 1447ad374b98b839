# levcalc/curve.py
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd
from tqdm import tqdm

from .config import FeeSchedule, MarketContext, RiskProfile
from .pricing import leverage_pnl_percent, liquidation_price, spot_pnl_percent
from .selector import RISK_LEVELS, suggest_trade

# PnL once the margin is gone
MARGIN_LOST_PCT = -100.0


def price_grid(market: MarketContext, low_mult: float = 0.5, high_mult: float = 2.0,
               points: int = 61) -> np.ndarray:
    return np.linspace(market.entry_price * low_mult, market.entry_price * high_mult, int(points))


def pnl_curve(prices: Sequence[float], leverage: int, timeframe_days: int,
              market: MarketContext, fees: FeeSchedule) -> pd.DataFrame:
    """Spot and leveraged PnL percent sampled at each price in ``prices``.

    At or below the liquidation price the leveraged column is floored at -100.
    """
    p = np.asarray(prices, dtype=float)
    spot = spot_pnl_percent(p, market, fees)
    lev = leverage_pnl_percent(p, leverage, timeframe_days, market, fees)
    liq = liquidation_price(leverage, market)
    lev = np.where(p <= liq, MARGIN_LOST_PCT, np.maximum(lev, MARGIN_LOST_PCT))
    return pd.DataFrame({
        "price": p,
        "spot_pnl_pct": spot,
        "leverage_pnl_pct": lev,
    })


def scenario_grid(targets: Iterable[float], timeframe_days: int, market: MarketContext,
                  fees: FeeSchedule, risk_levels: Sequence[str] = RISK_LEVELS,
                  risk_profiles: Optional[Dict[str, RiskProfile]] = None,
                  progress: bool = False) -> pd.DataFrame:
    """Run :func:`suggest_trade` for every (target, risk level) pair."""
    targets = [float(t) for t in targets]
    rows: List[Dict] = []
    it = [(t, r) for t in targets for r in risk_levels]
    for target, risk in tqdm(it, desc="scenarios", ncols=100, disable=not progress):
        s = suggest_trade(target, timeframe_days, risk, market, fees, risk_profiles)
        row = s.to_dict()
        row.pop("message")
        row["target_price"] = target
        rows.append(row)
    cols = [
        "target_price", "risk_level", "timeframe_days", "optimal_leverage",
        "potential_pnl_percent", "liquidation_price_at_optimal_leverage",
        "breakeven_price_at_optimal_leverage", "estimated_borrow_fees",
    ]
    return pd.DataFrame(rows, columns=cols)
