# levcalc/plots.py
from __future__ import annotations
import os
from typing import Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd

from .selector import TradeSuggestion


def plot_pnl_curve(curve_df: pd.DataFrame, outdir: str, entry_price: float,
                   suggestion: Optional[TradeSuggestion] = None) -> str:
    os.makedirs(os.path.join(outdir, "charts"), exist_ok=True)
    path = os.path.join(outdir, "charts", "pnl_curve.png")
    lev_label = f"Leveraged ({suggestion.optimal_leverage}x)" if suggestion and suggestion.found else "Leveraged"
    plt.figure()
    plt.plot(curve_df["price"], curve_df["spot_pnl_pct"], label="Spot")
    plt.plot(curve_df["price"], curve_df["leverage_pnl_pct"], label=lev_label)
    plt.axhline(0.0, color="grey", linewidth=0.8)
    plt.axvline(entry_price, color="black", linestyle=":", label="Entry")
    if suggestion and suggestion.found:
        plt.axvline(suggestion.breakeven_price_at_optimal_leverage, color="green", linestyle="--", label="Breakeven")
        plt.axvline(suggestion.liquidation_price_at_optimal_leverage, color="red", linestyle="--", label="Liquidation")
    plt.xlabel("Price")
    plt.ylabel("PnL (%)")
    plt.title("Projected PnL")
    plt.legend()
    plt.tight_layout()
    plt.savefig(path)
    plt.close()
    return path


def plot_scenarios(grid_df: pd.DataFrame, outdir: str) -> str:
    os.makedirs(os.path.join(outdir, "charts"), exist_ok=True)
    path = os.path.join(outdir, "charts", "scenarios.png")
    plt.figure()
    for risk, grp in grid_df.groupby("risk_level", sort=False):
        plt.step(grp["target_price"], grp["optimal_leverage"], where="post", label=str(risk))
    plt.xlabel("Target price")
    plt.ylabel("Optimal leverage (x)")
    plt.title("Optimal Leverage by Risk Tier")
    plt.legend()
    plt.tight_layout()
    plt.savefig(path)
    plt.close()
    return path
