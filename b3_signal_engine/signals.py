"""Threshold-based signal classification.

Each indicator family is evaluated on its own and every family that matches
contributes a message; tiers inside one family are exclusive. All thresholds
come from the active TimeframeConfig, so one snapshot yields different signal
sets under different timeframes.
"""

from __future__ import annotations

from typing import List, Union

from .models import IndicatorSnapshot, SignalReport
from .scorer import bollinger_position, score
from .timeframes import Timeframe, TimeframeConfig, get_timeframe_config


def _rsi_signals(s: IndicatorSnapshot, cfg: TimeframeConfig, entry: List[str], exit_: List[str], warnings: List[str]) -> None:
    if s.rsi > cfg.rsi_overbought + 10:
        exit_.append(f"RSI extremely overbought ({s.rsi:.1f})")
    elif s.rsi > cfg.rsi_overbought:
        warnings.append(f"RSI overbought ({s.rsi:.1f}) - wait for a pullback")
    elif s.rsi >= 50:
        entry.append(f"RSI in favourable buying zone ({s.rsi:.1f})")
    elif s.rsi < cfg.rsi_oversold:
        entry.append(f"RSI oversold ({s.rsi:.1f}) - buying opportunity")


def _macd_signals(s: IndicatorSnapshot, cfg: TimeframeConfig, entry: List[str], exit_: List[str]) -> None:
    if s.macd > cfg.macd_strong:
        entry.append(f"Strong positive MACD ({s.macd:.3f}) - bullish momentum")
    elif s.macd > 0:
        entry.append(f"Positive MACD ({s.macd:.3f}) - bullish momentum")
    elif s.macd < -cfg.macd_strong:
        exit_.append(f"Negative MACD ({s.macd:.3f}) - bearish momentum")


def _adx_signals(s: IndicatorSnapshot, cfg: TimeframeConfig, entry: List[str], exit_: List[str], warnings: List[str]) -> None:
    if s.adx > cfg.adx_strong:
        entry.append(f"Strong trend established (ADX {s.adx:.1f})")
    elif s.adx > cfg.adx_min:
        entry.append(f"Moderate trend (ADX {s.adx:.1f})")
    elif s.adx < cfg.adx_min:
        warnings.append(f"Weak trend - sideways market (ADX {s.adx:.1f})")

    if s.adx > cfg.adx_strong and s.macd < 0:
        exit_.append(f"Strong bearish trend (ADX {s.adx:.1f}, MACD {s.macd:.3f})")


def _moving_average_signals(s: IndicatorSnapshot, entry: List[str], exit_: List[str], warnings: List[str]) -> None:
    price = float(s.price)
    if price > s.ma20 and price > s.ma50:
        entry.append(f"Price above MA20 ({s.ma20:.2f}) and MA50 ({s.ma50:.2f}) - uptrend")
    elif price < s.ma20 and price < s.ma50:
        exit_.append(f"Price below MA20 ({s.ma20:.2f}) and MA50 ({s.ma50:.2f}) - downtrend")
    elif price < s.ma20:
        warnings.append(f"Price below MA20 ({s.ma20:.2f})")


def _bollinger_signals(s: IndicatorSnapshot, entry: List[str], warnings: List[str]) -> None:
    bb = bollinger_position(s)
    if bb is None:
        return
    if bb >= 0.9:
        warnings.append(f"Price at upper Bollinger band ({bb:.2f}) - possible reversal")
    elif bb <= 0.1:
        entry.append(f"Price at lower Bollinger band ({bb:.2f}) - buying opportunity")


def _support_resistance_signals(s: IndicatorSnapshot, cfg: TimeframeConfig, entry: List[str], exit_: List[str], warnings: List[str]) -> None:
    price = float(s.price)
    if s.support > 0:
        if price < s.support:
            exit_.append(f"Price broke support ({s.support:.2f})")
        else:
            dist_support = (price - s.support) / s.support * 100.0
            if dist_support < cfg.sr_proximity_pct:
                entry.append(f"Price near support ({s.support:.2f})")
    if s.resistance > 0:
        dist_resistance = (s.resistance - price) / price * 100.0
        if 0 <= dist_resistance < cfg.sr_proximity_pct:
            warnings.append(f"Price near resistance ({s.resistance:.2f})")


def classify(snapshot: IndicatorSnapshot, timeframe: Union[str, Timeframe, TimeframeConfig] = Timeframe.DAILY) -> SignalReport:
    cfg = timeframe if isinstance(timeframe, TimeframeConfig) else get_timeframe_config(timeframe)
    entry: List[str] = []
    exit_: List[str] = []
    warnings: List[str] = []
    sc = score(snapshot)

    if not snapshot.has_price:
        return SignalReport(entry, exit_, warnings, sc)

    _rsi_signals(snapshot, cfg, entry, exit_, warnings)
    _macd_signals(snapshot, cfg, entry, exit_)
    _adx_signals(snapshot, cfg, entry, exit_, warnings)
    _moving_average_signals(snapshot, entry, exit_, warnings)
    _bollinger_signals(snapshot, entry, warnings)
    _support_resistance_signals(snapshot, cfg, entry, exit_, warnings)

    if snapshot.volume < cfg.min_volume:
        warnings.append(f"Low volume ({snapshot.volume:,.0f})")

    return SignalReport(entry=entry, exit=exit_, warnings=warnings, score=sc)
