# run_calculator.py
from __future__ import annotations

import argparse
import json
import os
import sys
from typing import List, Optional

import numpy as np

from levcalc.config import build_config, load_config
from levcalc.curve import pnl_curve, price_grid, scenario_grid
from levcalc.feed import fetch_entry_price
from levcalc.selector import (
    DEFAULT_RISK_LEVEL,
    RISK_LEVELS,
    TradeSuggestion,
    resolve_risk_profile,
    suggest_trade,
)
from levcalc.utils import ensure_dir, get_logger, parse_inputs, save_json


def parse_args(argv: Optional[List[str]] = None):
    ap = argparse.ArgumentParser(description="Leveraged Trade Calculator")
    ap.add_argument("--config", default=None, help="Path to YAML config (defaults are used when omitted)")
    ap.add_argument("--target", required=True, help="Target asset price")
    ap.add_argument("--days", required=True, help="Timeframe in days")
    ap.add_argument("--risk", default=DEFAULT_RISK_LEVEL, help=f"Risk tier, one of {'|'.join(RISK_LEVELS)} unless the config defines others")
    ap.add_argument("--outdir", default=None, help="Output directory (overrides paths.outputs_dir)")
    ap.add_argument("--no-charts", action="store_true")
    ap.add_argument("--grid", action="store_true", help="Also evaluate a grid of targets for every risk tier")
    ap.add_argument("--grid-points", type=int, default=25)
    return ap.parse_args(argv)


def format_suggestion(s: TradeSuggestion, target: float) -> str:
    if not s.found:
        return s.message
    return "\n".join([
        s.message,
        f"Optimal Leverage: {s.optimal_leverage}x",
        f"Potential PnL (@ ${target:g}): {s.potential_pnl_percent}%",
        f"Liquidation Price: ${s.liquidation_price_at_optimal_leverage:.2f}",
        f"Breakeven Price (after fees): ${s.breakeven_price_at_optimal_leverage:.2f}",
        f"Estimated Borrow Fees: ${s.estimated_borrow_fees:.2f}",
    ])


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    cfg = load_config(args.config) if args.config else build_config()
    outdir = args.outdir or cfg.outputs_dir
    ensure_dir(outdir)
    logger = get_logger("levcalc", os.path.join(outdir, "calculator.log"))

    try:
        target, days = parse_inputs(args.target, args.days)
        resolve_risk_profile(args.risk, cfg.risk_profiles)
    except ValueError as e:
        logger.error(str(e))
        return 2

    entry = fetch_entry_price(cfg.market.entry_price, cfg.jitter_pct, seed=cfg.seed)
    cfg = cfg.with_entry_price(entry)
    market, fees = cfg.market, cfg.fees

    suggestion = suggest_trade(target, days, args.risk, market, fees, cfg.risk_profiles)
    logger.info("risk=%s target=%.4f days=%d -> leverage=%dx pnl=%.2f%%",
                args.risk, target, days, suggestion.optimal_leverage, suggestion.potential_pnl_percent)
    print(format_suggestion(suggestion, target))

    result = {"entry_price": entry, "target_price": target, **suggestion.to_dict()}
    save_json(result, os.path.join(outdir, "suggestion.json"))

    # chart at the suggested leverage, or 1x when nothing was viable
    lev = suggestion.optimal_leverage or 1
    prices = price_grid(market, cfg.chart.low_mult, cfg.chart.high_mult, cfg.chart.points)
    curve = pnl_curve(prices, lev, days, market, fees)
    curve.to_csv(os.path.join(outdir, "pnl_curve.csv"), index=False)

    grid = None
    if args.grid:
        targets = np.linspace(entry * 1.01, entry * cfg.chart.high_mult, max(2, args.grid_points))
        grid = scenario_grid(targets, days, market, fees, risk_levels=list(cfg.risk_profiles),
                             risk_profiles=cfg.risk_profiles, progress=True)
        grid.to_csv(os.path.join(outdir, "scenarios.csv"), index=False)
        logger.info("Scenario grid: %d rows", len(grid))

    if not args.no_charts:
        from levcalc.plots import plot_pnl_curve, plot_scenarios
        path = plot_pnl_curve(curve, outdir, entry, suggestion)
        logger.info("Saved chart %s", path)
        if grid is not None:
            path = plot_scenarios(grid, outdir)
            logger.info("Saved chart %s", path)

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
