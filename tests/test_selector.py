import pytest

from levcalc import selector
from levcalc.config import DEFAULT_RISK_PROFILES, FeeSchedule, MarketContext, RiskProfile
from levcalc.pricing import breakeven_price, leverage_pnl_percent, liquidation_price
from levcalc.selector import suggest_trade


@pytest.mark.parametrize("target", [4.0, 3.99, 1.0, 0.0, -5.0])
@pytest.mark.parametrize("risk", ["low", "medium", "high"])
def test_target_not_above_entry(market, fees, target, risk):
    s = suggest_trade(target, 7, risk, market, fees)
    assert s.optimal_leverage == 0
    assert not s.found
    assert "must be above current entry price" in s.message
    assert s.potential_pnl_percent == 0.0
    assert s.liquidation_price_at_optimal_leverage == 0.0
    assert s.breakeven_price_at_optimal_leverage == 0.0
    assert s.estimated_borrow_fees == 0.0


def test_medium_reference_case(market, fees):
    s = suggest_trade(5.0, 7, "medium", market, fees)
    assert s.optimal_leverage == 12
    assert s.liquidation_price_at_optimal_leverage <= 4.0 * 0.92
    assert s.breakeven_price_at_optimal_leverage < 5.0
    assert s.potential_pnl_percent == pytest.approx(283.80, abs=0.01)
    assert s.liquidation_price_at_optimal_leverage == pytest.approx(3.67)
    assert s.breakeven_price_at_optimal_leverage == pytest.approx(4.05)
    assert s.estimated_borrow_fees == pytest.approx(0.01)
    assert "Timeframe: 7 days" in s.message

    # brute force over all viable leverages
    viable = [
        lev for lev in range(1, 13)
        if liquidation_price(lev, market) < 4.0 * 0.92 and 5.0 > breakeven_price(lev, market, fees)
    ]
    best = max(round(leverage_pnl_percent(5.0, lev, 7, market, fees), 2) for lev in viable)
    assert s.potential_pnl_percent == best


def test_risk_tier_limits(market, fees):
    low = suggest_trade(5.0, 7, "low", market, fees)
    high = suggest_trade(5.0, 7, "high", market, fees)
    assert low.optimal_leverage == 5
    assert high.optimal_leverage == 20
    assert low.risk_level == "low"


def test_default_risk_is_medium(market, fees):
    assert suggest_trade(5.0, 7, market=market, fees=fees).optimal_leverage == 12


@pytest.mark.parametrize("target", [4.3, 4.7, 5.0, 6.0, 8.0])
def test_stricter_tiers_never_raise_leverage(market, fees, target):
    levs = [suggest_trade(target, 7, r, market, fees).optimal_leverage for r in ("low", "medium", "high")]
    assert levs[0] <= levs[1] <= levs[2]


def test_liquidation_distance_monotonic(market, fees):
    out = []
    for dist in (0.01, 0.05, 0.1, 0.2, 0.5):
        table = {"custom": RiskProfile("custom", 20, dist)}
        out.append(suggest_trade(5.0, 7, "custom", market, fees, table).optimal_leverage)
    assert out == [20, 19, 9, 4, 1]


def test_no_viable_leverage(market, fees):
    # breakeven at 12x is ~4.053
    s = suggest_trade(4.02, 7, "medium", market, fees)
    assert s.optimal_leverage == 0
    assert s.potential_pnl_percent == 0.0
    assert "Could not find a suitable leverage" in s.message
    assert "12x" in s.message
    assert "8%" in s.message


def test_idempotent(market, fees):
    a = suggest_trade(5.5, 14, "high", market, fees)
    b = suggest_trade(5.5, 14, "high", market, fees)
    assert a == b
    assert a.to_dict() == b.to_dict()


def test_ties_keep_lowest_leverage(market, fees, monkeypatch):
    monkeypatch.setattr(selector, "leverage_pnl_percent", lambda *a, **k: 10.0)
    s = suggest_trade(5.0, 7, "medium", market, fees)
    assert s.optimal_leverage == 1


def test_entry_price_is_a_parameter(fees):
    s = suggest_trade(5.0, 7, "medium", MarketContext(entry_price=6.0), fees)
    assert s.optimal_leverage == 0
    assert "$6" in s.message


def test_unknown_risk_level(market, fees):
    with pytest.raises(ValueError):
        suggest_trade(5.0, 7, "yolo", market, fees)


def test_default_profiles_table():
    assert DEFAULT_RISK_PROFILES["medium"].max_leverage == 12
    assert DEFAULT_RISK_PROFILES["medium"].min_liquidation_distance == pytest.approx(0.08)


def test_borrow_fees_make_every_viable_leverage_lose(market):
    pricey = FeeSchedule(daily_borrow_rate=0.01)
    viable = [
        lev for lev in range(1, 13)
        if liquidation_price(lev, market) < 4.0 * 0.92 and 4.3 > breakeven_price(lev, market, pricey)
    ]
    pnls = {lev: leverage_pnl_percent(4.3, lev, 100, market, pricey) for lev in viable}
    assert viable
    assert all(p < 0 for p in pnls.values())

    s = suggest_trade(4.3, 100, "medium", market, pricey)
    assert s.found
    assert s.optimal_leverage == max(pnls, key=pnls.get) == 12
    assert s.potential_pnl_percent == pytest.approx(-17.55, abs=0.01)
    assert s.estimated_borrow_fees == pytest.approx(3.67)


def test_unknown_risk_level_below_entry(market, fees):
    with pytest.raises(ValueError):
        suggest_trade(3.0, 7, "yolo", market, fees)
