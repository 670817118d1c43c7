"""Timeframe parameter tables.

Selecting a timeframe swaps the whole threshold record; there are no partial
overrides. Every distance/threshold used by the signal classifier and the
entry/exit planner comes from here.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union


class Timeframe(Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


@dataclass(frozen=True)
class TimeframeConfig:
    distance_multiplier: float
    stop_distance: float       # stop-loss = support * stop_distance
    rsi_oversold: float
    rsi_overbought: float
    adx_min: float
    adx_strong: float
    macd_strong: float
    max_target: float          # fractions of current price
    conservative_target: float
    realistic_target: float
    sr_proximity_pct: float    # percent, not fraction
    min_volume: float


TIMEFRAME_CONFIGS: Dict[Timeframe, TimeframeConfig] = {
    Timeframe.DAILY: TimeframeConfig(
        distance_multiplier=1.0,
        stop_distance=0.97,
        rsi_oversold=30.0,
        rsi_overbought=75.0,
        adx_min=20.0,
        adx_strong=35.0,
        macd_strong=0.15,
        max_target=0.025,
        conservative_target=0.008,
        realistic_target=0.022,
        sr_proximity_pct=1.5,
        min_volume=1_000_000,
    ),
    Timeframe.WEEKLY: TimeframeConfig(
        distance_multiplier=1.5,
        stop_distance=0.95,
        rsi_oversold=32.0,
        rsi_overbought=73.0,
        adx_min=18.0,
        adx_strong=30.0,
        macd_strong=0.12,
        max_target=0.06,
        conservative_target=0.02,
        realistic_target=0.045,
        sr_proximity_pct=2.5,
        min_volume=800_000,
    ),
    Timeframe.MONTHLY: TimeframeConfig(
        distance_multiplier=2.5,
        stop_distance=0.92,
        rsi_oversold=35.0,
        rsi_overbought=70.0,
        adx_min=16.0,
        adx_strong=28.0,
        macd_strong=0.10,
        max_target=0.12,
        conservative_target=0.04,
        realistic_target=0.09,
        sr_proximity_pct=4.0,
        min_volume=500_000,
    ),
    Timeframe.YEARLY: TimeframeConfig(
        distance_multiplier=4.0,
        stop_distance=0.88,
        rsi_oversold=38.0,
        rsi_overbought=68.0,
        adx_min=15.0,
        adx_strong=25.0,
        macd_strong=0.08,
        max_target=0.25,
        conservative_target=0.06,
        realistic_target=0.15,
        sr_proximity_pct=6.0,
        min_volume=300_000,
    ),
}

_missing = [tf.value for tf in Timeframe if tf not in TIMEFRAME_CONFIGS]
if _missing:
    raise RuntimeError(f"timeframe table incomplete: {_missing}")


def parse_timeframe(value: Union[str, Timeframe]) -> Timeframe:
    if isinstance(value, Timeframe):
        return value
    try:
        return Timeframe(str(value).strip().lower())
    except ValueError:
        choices = ", ".join(tf.value for tf in Timeframe)
        raise ValueError(f"unknown timeframe {value!r} (expected one of: {choices})") from None


def get_timeframe_config(timeframe: Union[str, Timeframe]) -> TimeframeConfig:
    return TIMEFRAME_CONFIGS[parse_timeframe(timeframe)]
