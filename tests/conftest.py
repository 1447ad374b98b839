import os
import sys
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from levcalc.config import FeeSchedule, MarketContext  # noqa: E402


@pytest.fixture
def market():
    return MarketContext(entry_price=4.0, order_size=1.0)


@pytest.fixture
def fees():
    return FeeSchedule(one_way_fee_rate=0.0794, spot_roundtrip_fee_rate=0.005, daily_borrow_rate=0.0005)


@pytest.fixture
def sample_cfg():
    return {
        "market": {"base_price": 10.0, "order_size": 2.0},
        "fees": {"daily_borrow_rate": 0.001},
        "chart": {"points": 11},
        "paths": {"outputs_dir": "out"},
    }
