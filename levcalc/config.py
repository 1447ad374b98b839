# levcalc/config.py
from __future__ import annotations

import os
from copy import deepcopy
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

import yaml

from .utils import merge_dicts


DEFAULTS: Dict[str, Any] = {
    "seed": 42,
    "market": {
        "base_price": 4.0,
        "order_size": 1.0,
    },
    "feed": {
        "jitter_pct": 0.0,
    },
    "fees": {
        "one_way_fee_rate": 0.0794,       # 7.94% per side on leveraged trades
        "spot_roundtrip_fee_rate": 0.005,
        "daily_borrow_rate": 0.0005,      # placeholder until a real funding feed exists
    },
    "risk_profiles": {
        "low": {"max_leverage": 5, "min_liquidation_distance": 0.15},
        "medium": {"max_leverage": 12, "min_liquidation_distance": 0.08},
        "high": {"max_leverage": 20, "min_liquidation_distance": 0.03},
    },
    "chart": {
        "low_mult": 0.5,
        "high_mult": 2.0,
        "points": 61,
    },
    "paths": {
        "outputs_dir": "outputs",
    },
}


@dataclass(frozen=True)
class MarketContext:
    entry_price: float = 4.0
    order_size: float = 1.0

    @property
    def initial_capital(self) -> float:
        return self.entry_price * self.order_size


@dataclass(frozen=True)
class FeeSchedule:
    one_way_fee_rate: float = 0.0794
    spot_roundtrip_fee_rate: float = 0.005
    daily_borrow_rate: float = 0.0005

    @property
    def roundtrip_fee_rate(self) -> float:
        # entry + exit
        return self.one_way_fee_rate * 2


@dataclass(frozen=True)
class RiskProfile:
    name: str
    max_leverage: int
    min_liquidation_distance: float  # fraction of entry price


DEFAULT_RISK_PROFILES: Dict[str, RiskProfile] = {
    name: RiskProfile(name, int(p["max_leverage"]), float(p["min_liquidation_distance"]))
    for name, p in DEFAULTS["risk_profiles"].items()
}


@dataclass
class ChartConfig:
    low_mult: float = 0.5
    high_mult: float = 2.0
    points: int = 61


@dataclass
class CalculatorConfig:
    market: MarketContext
    fees: FeeSchedule
    risk_profiles: Dict[str, RiskProfile]
    chart: ChartConfig = field(default_factory=ChartConfig)
    jitter_pct: float = 0.0
    seed: int = 42
    outputs_dir: str = "outputs"

    def with_entry_price(self, entry_price: float) -> "CalculatorConfig":
        """Return a copy whose market context carries ``entry_price``."""
        return replace(self, market=replace(self.market, entry_price=float(entry_price)))


def parse_risk_profiles(raw: Dict[str, Any]) -> Dict[str, RiskProfile]:
    if not isinstance(raw, dict) or not raw:
        raise ValueError("risk_profiles must be a non-empty mapping of tier -> limits")
    out: Dict[str, RiskProfile] = {}
    for name, p in raw.items():
        if not isinstance(p, dict):
            raise ValueError(f"Risk profile '{name}' must be a mapping, got {p!r}")
        try:
            max_lev = int(p["max_leverage"])
            min_dist = float(p["min_liquidation_distance"])
        except KeyError as e:
            raise ValueError(f"Risk profile '{name}' missing key {e}") from e
        if max_lev < 1:
            raise ValueError(f"Risk profile '{name}': max_leverage must be >= 1, got {max_lev}")
        if not 0.0 <= min_dist < 1.0:
            raise ValueError(f"Risk profile '{name}': min_liquidation_distance must be in [0, 1), got {min_dist}")
        out[str(name)] = RiskProfile(str(name), max_lev, min_dist)
    return out


def build_config(cfg: Optional[Dict[str, Any]] = None) -> CalculatorConfig:
    """Merge ``cfg`` over :data:`DEFAULTS` and validate into a :class:`CalculatorConfig`."""

    merged = merge_dicts(deepcopy(DEFAULTS), cfg or {})
    # a user-supplied tier table replaces the defaults instead of merging into them
    if cfg and "risk_profiles" in cfg:
        merged["risk_profiles"] = cfg["risk_profiles"]

    m = merged["market"]
    entry = float(m["base_price"])
    size = float(m["order_size"])
    if entry <= 0:
        raise ValueError(f"market.base_price must be > 0, got {entry}")
    if size <= 0:
        raise ValueError(f"market.order_size must be > 0, got {size}")

    f = merged["fees"]
    fees = FeeSchedule(
        one_way_fee_rate=float(f["one_way_fee_rate"]),
        spot_roundtrip_fee_rate=float(f["spot_roundtrip_fee_rate"]),
        daily_borrow_rate=float(f["daily_borrow_rate"]),
    )
    for k in ("one_way_fee_rate", "spot_roundtrip_fee_rate", "daily_borrow_rate"):
        if getattr(fees, k) < 0:
            raise ValueError(f"fees.{k} must be >= 0, got {getattr(fees, k)}")

    c = merged["chart"]
    chart = ChartConfig(
        low_mult=float(c["low_mult"]),
        high_mult=float(c["high_mult"]),
        points=int(c["points"]),
    )
    if not 0 < chart.low_mult < chart.high_mult:
        raise ValueError(f"chart range must satisfy 0 < low_mult < high_mult, got {chart.low_mult}..{chart.high_mult}")
    if chart.points < 2:
        raise ValueError(f"chart.points must be >= 2, got {chart.points}")

    jitter = float(merged["feed"]["jitter_pct"])
    if not 0.0 <= jitter < 1.0:
        raise ValueError(f"feed.jitter_pct must be in [0, 1), got {jitter}")

    return CalculatorConfig(
        market=MarketContext(entry_price=entry, order_size=size),
        fees=fees,
        risk_profiles=parse_risk_profiles(merged["risk_profiles"]),
        chart=chart,
        jitter_pct=jitter,
        seed=int(merged["seed"]),
        outputs_dir=str(merged["paths"]["outputs_dir"]),
    )


def load_config(path: str) -> CalculatorConfig:
    """Load a YAML configuration file and build the typed config from it."""

    if not os.path.exists(path):
        raise FileNotFoundError(f"Config not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"Config {path} must contain a mapping at the top level")
    return build_config(cfg)
