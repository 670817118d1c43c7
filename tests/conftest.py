import pandas as pd
import pytest

from b3_signal_engine.models import IndicatorSnapshot, PriceSeries


def _make_series(closes, spread=0.2, volume=2_000_000.0):
    dates = pd.date_range("2024-01-01", periods=len(closes), freq="D").strftime("%Y-%m-%d")
    return PriceSeries(
        closes=tuple(float(c) for c in closes),
        highs=tuple(float(c) + spread for c in closes),
        lows=tuple(float(c) - spread for c in closes),
        volumes=tuple(float(volume) for _ in closes),
        timestamps=tuple(dates),
    )


@pytest.fixture
def series_factory():
    return _make_series


@pytest.fixture
def bullish_snapshot():
    return IndicatorSnapshot(
        price=18.00,
        change_pct=1.2,
        volume=2_000_000,
        rsi=65,
        macd=0.25,
        adx=45,
        ma20=17.50,
        ma50=17.00,
        bollinger_upper=19.50,
        bollinger_lower=16.50,
        support=17.20,
        resistance=19.00,
        liquidity_rank=1,
    )


@pytest.fixture
def bearish_snapshot():
    return IndicatorSnapshot(
        price=10.0,
        change_pct=-2.0,
        volume=2_000_000,
        rsi=50,
        macd=-0.5,
        adx=10,
        ma20=11.0,
        ma50=12.0,
        bollinger_upper=12.0,
        bollinger_lower=8.0,
        support=8.0,
        resistance=10.5,
        liquidity_rank=5,
    )
