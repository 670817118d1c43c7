from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from .models import IndicatorSnapshot, PriceSeries
from .universe import UNRANKED

RSI_NEUTRAL = 50.0
ADX_NEUTRAL = 25.0

def rsi(values: Sequence[float], period: int = 14) -> float:
    """RSI from the simple average of gains/losses over the last `period` deltas.

    Note:
      - Returns 50 when there are fewer than period+1 closes.
      - Returns 100 whenever the average loss is exactly 0 (including a flat series).
    """
    c = np.asarray(values, dtype=float)
    n = len(c)
    if period <= 0 or n < period + 1:
        return RSI_NEUTRAL

    d = np.diff(c[-(period + 1):])
    avg_gain = float(d[d > 0].sum()) / period
    avg_loss = float(-d[d < 0].sum()) / period
    if avg_loss == 0.0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100.0 - (100.0 / (1.0 + rs))

def ema(values: Sequence[float], period: int) -> float:
    """EMA seeded with the SMA of the first `period` values, multiplier 2/(period+1).

    Falls back to the last value when the series is shorter than `period`.
    """
    arr = np.asarray(values, dtype=float)
    n = len(arr)
    if n == 0:
        return 0.0
    if period <= 0 or n < period:
        return float(arr[-1])

    k = 2.0 / (period + 1)
    out = float(arr[:period].mean())
    for x in arr[period:]:
        out = (float(x) - out) * k + out
    return out

def macd(values: Sequence[float], fast: int = 12, slow: int = 26) -> float:
    """MACD line only (EMA fast - EMA slow); no signal-line smoothing."""
    return ema(values, fast) - ema(values, slow)

def sma(values: Sequence[float], period: int) -> float:
    """Mean of the last `period` values, clamped to the series length."""
    arr = np.asarray(values, dtype=float)
    n = len(arr)
    if n == 0:
        return 0.0
    p = n if period <= 0 else min(period, n)
    return float(arr[-p:].mean())

def adx(highs: Sequence[float], lows: Sequence[float], closes: Sequence[float], period: int = 14) -> float:
    """Single-window directional index over the last `period` bars.

    Sums +DM, -DM and True Range across the window (no Wilder smoothing) and
    returns DX = |DI+ - DI-| / (DI+ + DI-) * 100.

    Note:
      - Returns 25 with fewer than period+1 bars, a zero true range, DI+ + DI- == 0,
        or a DX of exactly 0.
    """
    h = np.asarray(highs, dtype=float)
    l = np.asarray(lows, dtype=float)
    c = np.asarray(closes, dtype=float)
    n = min(len(h), len(l), len(c))
    if period <= 0 or n < period + 1:
        return ADX_NEUTRAL

    dm_plus = 0.0
    dm_minus = 0.0
    tr = 0.0
    for i in range(max(1, n - period), n):
        high_diff = float(h[i] - h[i - 1])
        low_diff = float(l[i - 1] - l[i])
        if high_diff > low_diff and high_diff > 0:
            dm_plus += high_diff
        if low_diff > high_diff and low_diff > 0:
            dm_minus += low_diff
        tr += max(float(h[i] - l[i]), abs(float(h[i] - c[i - 1])), abs(float(l[i] - c[i - 1])))

    if tr <= 0.0:
        return ADX_NEUTRAL
    di_plus = dm_plus / tr * 100.0
    di_minus = dm_minus / tr * 100.0
    di_sum = di_plus + di_minus
    if di_sum == 0.0:
        return ADX_NEUTRAL
    dx = abs(di_plus - di_minus) / di_sum * 100.0
    return dx if dx > 0.0 else ADX_NEUTRAL

def bollinger_bands(values: Sequence[float], period: int = 20, k: float = 2.0) -> Tuple[float, float, float]:
    """(upper, middle, lower) using the population stddev of the last `period` closes."""
    arr = np.asarray(values, dtype=float)
    n = len(arr)
    if n == 0:
        return 0.0, 0.0, 0.0
    p = n if period <= 0 else min(period, n)
    window = arr[-p:]
    middle = float(window.mean())
    std = float(window.std())
    return middle + k * std, middle, middle - k * std

def support_resistance(highs: Sequence[float], lows: Sequence[float], lookback: int = 20) -> Tuple[float, float]:
    """Rolling extremum: (min of last `lookback` lows, max of last `lookback` highs)."""
    h = np.asarray(highs, dtype=float)
    l = np.asarray(lows, dtype=float)
    support = float(l[-lookback:].min()) if len(l) else 0.0
    resistance = float(h[-lookback:].max()) if len(h) else 0.0
    return support, resistance

def compute_snapshot(series: PriceSeries, liquidity_rank: int = UNRANKED) -> IndicatorSnapshot:
    """Latest indicator snapshot for one ticker.

    Periods are clamped to the available history; rounding happens here only
    (2 dp for price-like values, 3 dp for MACD).
    """
    c = list(series.closes)
    h = list(series.highs)
    l = list(series.lows)
    n = len(c)
    if n == 0:
        return IndicatorSnapshot(price=0.0, liquidity_rank=liquidity_rank)

    price = c[-1]
    prev = c[-2] if n >= 2 else price
    change = (price - prev) / prev * 100.0 if prev else 0.0
    volume = float(series.volumes[-1]) if series.volumes else 0.0

    p14 = min(14, n)
    upper, _mid, lower = bollinger_bands(c, min(20, n), 2.0)
    support, resistance = support_resistance(h, l, 20)

    return IndicatorSnapshot(
        price=round(price, 2),
        change_pct=round(change, 2),
        volume=volume,
        rsi=round(rsi(c, p14), 2),
        macd=round(macd(c), 3),
        adx=round(adx(h, l, c, p14), 2),
        ma20=round(sma(c, min(20, n)), 2),
        ma50=round(sma(c, min(50, n)), 2),
        bollinger_upper=round(upper, 2),
        bollinger_lower=round(lower, 2),
        support=round(support, 2),
        resistance=round(resistance, 2),
        liquidity_rank=int(liquidity_rank),
    )
