# levcalc/selector.py
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Dict, Optional

from .config import DEFAULT_RISK_PROFILES, FeeSchedule, MarketContext, RiskProfile
from .pricing import (
    borrow_fees,
    breakeven_price,
    leverage_pnl_percent,
    liquidation_price,
)

log = logging.getLogger(__name__)

RISK_LEVELS = ("low", "medium", "high")
DEFAULT_RISK_LEVEL = "medium"


@dataclass
class TradeSuggestion:
    optimal_leverage: int
    potential_pnl_percent: float
    liquidation_price_at_optimal_leverage: float
    breakeven_price_at_optimal_leverage: float
    estimated_borrow_fees: float
    message: str
    risk_level: str = DEFAULT_RISK_LEVEL
    timeframe_days: int = 0

    @property
    def found(self) -> bool:
        return self.optimal_leverage > 0

    def to_dict(self) -> Dict:
        return asdict(self)


def resolve_risk_profile(risk_level: str,
                         risk_profiles: Optional[Dict[str, RiskProfile]] = None) -> RiskProfile:
    table = risk_profiles if risk_profiles is not None else DEFAULT_RISK_PROFILES
    try:
        return table[risk_level]
    except KeyError:
        raise ValueError(f"Unknown risk level '{risk_level}'. Expected one of {sorted(table)}") from None


def _empty(message: str, risk_level: str, timeframe_days: int) -> TradeSuggestion:
    return TradeSuggestion(
        optimal_leverage=0,
        potential_pnl_percent=0.0,
        liquidation_price_at_optimal_leverage=0.0,
        breakeven_price_at_optimal_leverage=0.0,
        estimated_borrow_fees=0.0,
        message=message,
        risk_level=risk_level,
        timeframe_days=timeframe_days,
    )


def _no_leverage_message(target_price: float, profile: RiskProfile,
                         market: MarketContext, fees: FeeSchedule) -> str:
    liq_ceiling = market.entry_price * (1 - profile.min_liquidation_distance)
    # 1x never liquidates above 0, so at least one leverage passes the distance check
    allowed = [lev for lev in range(1, profile.max_leverage + 1)
               if liquidation_price(lev, market) < liq_ceiling]
    top = max(allowed) if allowed else 1
    be_top = breakeven_price(top, market, fees)
    be_1x = breakeven_price(1, market, fees)
    return (
        f"Could not find a suitable leverage up to {profile.max_leverage}x with a minimum "
        f"liquidation distance of {profile.min_liquidation_distance * 100:g}% below entry "
        f"(${market.entry_price:g}). Target price ${target_price:g} is too close to or below "
        f"the breakeven price (approx. ${be_top:.2f} at {top}x, ${be_1x:.2f} at 1x)."
    )


def suggest_trade(target_price: float, timeframe_days: int, risk_level: str = DEFAULT_RISK_LEVEL,
                  market: Optional[MarketContext] = None, fees: Optional[FeeSchedule] = None,
                  risk_profiles: Optional[Dict[str, RiskProfile]] = None) -> TradeSuggestion:
    """Pick the leverage in ``1..max_leverage`` maximizing PnL percent for a long trade.

    A leverage is viable when its liquidation price sits below
    ``entry * (1 - min_liquidation_distance)`` and the target clears its
    breakeven price. Among viable leverages the highest PnL (after trading and
    borrow fees) wins; ties keep the lower leverage. ``optimal_leverage == 0``
    means nothing was viable or the target is not above entry.
    """
    market = market or MarketContext()
    fees = fees or FeeSchedule()
    entry = market.entry_price
    profile = resolve_risk_profile(risk_level, risk_profiles)

    if target_price <= entry:
        return _empty(
            f"Target price must be above current entry price (${entry:g}) for a long trade.",
            risk_level, timeframe_days,
        )

    liq_ceiling = entry * (1 - profile.min_liquidation_distance)

    best_leverage = 0
    best_pnl = 0.0
    best_liq = 0.0
    best_be = 0.0
    for leverage in range(1, profile.max_leverage + 1):
        liq = liquidation_price(leverage, market)
        be = breakeven_price(leverage, market, fees)
        if not (liq < liq_ceiling and target_price > be):
            continue
        pnl = leverage_pnl_percent(target_price, leverage, timeframe_days, market, fees)
        log.debug("leverage=%dx liq=%.4f be=%.4f pnl=%.4f%%", leverage, liq, be, pnl)
        if best_leverage == 0 or pnl > best_pnl:
            best_leverage, best_pnl, best_liq, best_be = leverage, pnl, liq, be

    if best_leverage == 0:
        return _empty(_no_leverage_message(target_price, profile, market, fees), risk_level, timeframe_days)

    borrow = borrow_fees(market.order_size, entry, best_leverage, timeframe_days, fees.daily_borrow_rate)
    return TradeSuggestion(
        optimal_leverage=best_leverage,
        potential_pnl_percent=round(best_pnl, 2),
        liquidation_price_at_optimal_leverage=round(best_liq, 2),
        breakeven_price_at_optimal_leverage=round(best_be, 2),
        estimated_borrow_fees=round(borrow, 2),
        message=(
            f"Suggested trade for reaching ${target_price:g} (Timeframe: {timeframe_days} days, "
            f"risk: {risk_level}). Current entry price: ${entry:g}."
        ),
        risk_level=risk_level,
        timeframe_days=timeframe_days,
    )
