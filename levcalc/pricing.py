# levcalc/pricing.py
"""Fee-aware pricing for a long position.

Every function takes the market context and fee schedule explicitly so the
results depend only on the arguments. ``leverage`` must be > 0; the selector
only ever passes leverage >= 1.

``target_price`` may be a float or a numpy array of prices; arrays are
evaluated element-wise.
"""
from __future__ import annotations

import numpy as np

from .config import FeeSchedule, MarketContext


def breakeven_price(leverage: float, market: MarketContext, fees: FeeSchedule) -> float:
    # roundtrip fees are paid on the unlevered size, so the move needed shrinks with leverage
    return market.entry_price * (1 + fees.roundtrip_fee_rate / leverage)


def liquidation_price(leverage: float, market: MarketContext) -> float:
    return market.entry_price * (1 - 1 / leverage)


def borrow_fees(order_size: float, asset_price: float, leverage: float,
                timeframe_days: float, daily_rate: float) -> float:
    """Financing cost of the borrowed part of a position held ``timeframe_days``."""
    if leverage <= 1:
        return 0.0
    position_value = order_size * asset_price
    margin = position_value / leverage
    return (position_value - margin) * daily_rate * timeframe_days


def spot_pnl_percent(target_price: float, market: MarketContext, fees: FeeSchedule) -> float:
    """Spot PnL in percent of initial cost, never below 0."""
    gross = (target_price - market.entry_price) * market.order_size
    net = gross * (1 - fees.spot_roundtrip_fee_rate)
    pct = net / market.initial_capital * 100.0
    return np.maximum(0.0, pct)


def leverage_pnl_percent(target_price: float, leverage: float, timeframe_days: float,
                         market: MarketContext, fees: FeeSchedule) -> float:
    """Signed leveraged PnL in percent of initial capital.

    Gross PnL on the notional, minus the flat roundtrip trading fee, minus borrow
    fees over ``timeframe_days``. Not clamped: a target below breakeven gives a
    negative value and viability is left to the caller.
    """
    e = market.entry_price
    size = market.order_size
    gross = (target_price - e) * size * leverage
    trading_fee = e * size * fees.roundtrip_fee_rate
    borrow = borrow_fees(size, e, leverage, timeframe_days, fees.daily_borrow_rate)
    return (gross - trading_fee - borrow) / market.initial_capital * 100.0
