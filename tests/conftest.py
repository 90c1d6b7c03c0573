import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import patch

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ospm.market import MarketState, Side  # noqa: E402
from ospm.oracle.models import TradeRecord  # noqa: E402


@pytest.fixture
def fresh_state():
    return MarketState(q_yes=0.0, q_no=0.0, b=10.0)


@pytest.fixture
def now():
    return datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def trades(now):
    """Two trades, newest first."""
    return [
        TradeRecord(
            id="t2",
            side=Side.NO,
            amount_spent=5.0,
            shares_got=8.5,
            price_before=0.731,
            price_after=0.6,
            created_at=now.replace(hour=11, minute=30),
            visitor_id="v2",
        ),
        TradeRecord(
            id="t1",
            side=Side.YES,
            amount_spent=6.2,
            shares_got=10.0,
            price_before=0.5,
            price_after=0.731,
            created_at=now.replace(hour=9, minute=5),
            visitor_id="v1",
        ),
    ]


@pytest.fixture(autouse=True)
def clean_env():
    """Keep config.env values loaded by one test from leaking into the next."""
    with patch.dict(os.environ):
        for key in list(os.environ):
            if key.startswith(("ORACLE_", "LMSR_", "DISPLAY_", "DEFAULT_SPEND", "ENABLE_LOGGING",
                               "SAVE_LOGS_", "LOG_DIR", "LOG_LEVEL")):
                del os.environ[key]
        yield
