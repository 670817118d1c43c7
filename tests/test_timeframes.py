import pytest

from b3_signal_engine.timeframes import (
    TIMEFRAME_CONFIGS,
    Timeframe,
    get_timeframe_config,
    parse_timeframe,
)

ORDER = [Timeframe.DAILY, Timeframe.WEEKLY, Timeframe.MONTHLY, Timeframe.YEARLY]


def test_every_timeframe_configured():
    assert set(TIMEFRAME_CONFIGS) == set(Timeframe)


@pytest.mark.parametrize(
    "field, increasing",
    [
        ("distance_multiplier", True),
        ("max_target", True),
        ("conservative_target", True),
        ("realistic_target", True),
        ("sr_proximity_pct", True),
        ("rsi_oversold", True),
        ("stop_distance", False),
        ("rsi_overbought", False),
        ("adx_min", False),
        ("adx_strong", False),
        ("macd_strong", False),
        ("min_volume", False),
    ],
)
def test_thresholds_scale_with_horizon(field, increasing):
    values = [getattr(TIMEFRAME_CONFIGS[tf], field) for tf in ORDER]
    expected = sorted(values) if increasing else sorted(values, reverse=True)
    assert values == expected
    assert len(set(values)) == len(values)


def test_conservative_below_realistic_below_max():
    for cfg in TIMEFRAME_CONFIGS.values():
        assert cfg.conservative_target < cfg.realistic_target < cfg.max_target


@pytest.mark.parametrize("raw", ["daily", "DAILY", " Daily ", Timeframe.DAILY])
def test_parse(raw):
    assert parse_timeframe(raw) is Timeframe.DAILY


def test_parse_unknown():
    with pytest.raises(ValueError, match="unknown timeframe"):
        parse_timeframe("intraday")


def test_daily_values():
    cfg = get_timeframe_config("daily")
    assert cfg.stop_distance == 0.97
    assert cfg.max_target == 0.025
    assert cfg.min_volume == 1_000_000
