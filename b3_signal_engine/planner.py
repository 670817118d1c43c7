"""Entry/exit price planning per timeframe.

Entries are buy-the-dip levels strictly below the current price, exits are
profit targets strictly above it. Each candidate is scored by a hand-tuned
probability heuristic and dropped below ACCEPT_PROBABILITY; surviving lists
are sorted by probability (stable on ties) and cut to MAX_POINTS. When a list
ends up empty a single fallback point is synthesized, so neither list is
ever returned empty.

The stop-loss is support * stop_distance; it is not probability-scored.
"""

from __future__ import annotations

from typing import List, Optional, Union

from .models import IndicatorSnapshot, PricePoint, TradePlan
from .timeframes import Timeframe, TimeframeConfig, get_timeframe_config

ACCEPT_PROBABILITY = 65
PROBABILITY_FLOOR = 10
PROBABILITY_CEIL = 92
MAX_POINTS = 3

FALLBACK_ENTRY_PROBABILITY = 60
FALLBACK_EXIT_MIN_PROBABILITY = 70
BOLLINGER_ENTRY_MAX_DISTANCE_PCT = 8.0

AWAITING_DATA = "awaiting data"


def distance_pct(target_price: float, price: float) -> float:
    return (target_price - price) / price * 100.0


def _distance_adjustment(distance: float) -> int:
    if distance <= 1:
        return 25
    if distance <= 2:
        return 20
    if distance <= 3:
        return 15
    if distance <= 5:
        return 10
    if distance <= 8:
        return 5
    return -10


def calc_probability(snapshot: IndicatorSnapshot, cfg: TimeframeConfig, target_price: float, is_entry: bool) -> int:
    """Heuristic confidence (10..92) that `target_price` is a sound entry/exit.

    Closer targets score higher; the distance is normalised by the timeframe's
    distance multiplier so longer horizons tolerate wider targets.
    """
    price = float(snapshot.price)
    prob = 40
    prob += _distance_adjustment(abs(distance_pct(target_price, price)) / cfg.distance_multiplier)

    rsi = snapshot.rsi
    if is_entry:
        if rsi < cfg.rsi_oversold:
            prob += 10
        elif rsi < cfg.rsi_oversold + 10:
            prob += 5
        elif rsi > cfg.rsi_overbought:
            prob -= 10
    else:
        if rsi > cfg.rsi_overbought:
            prob -= 5
        elif rsi >= 50:
            prob += 5
        elif rsi < cfg.rsi_oversold:
            prob -= 10

    if snapshot.macd > cfg.macd_strong:
        prob += 10
    elif snapshot.macd > 0:
        prob += 5
    else:
        prob -= 5

    if snapshot.adx > cfg.adx_strong:
        prob += 8
    elif snapshot.adx > cfg.adx_min:
        prob += 4

    if price > snapshot.ma20 and price > snapshot.ma50:
        prob += 8
    elif price < snapshot.ma20 and price < snapshot.ma50:
        prob -= 8

    if is_entry and snapshot.support > 0:
        if abs(target_price - snapshot.support) / snapshot.support * 100.0 <= cfg.sr_proximity_pct:
            prob += 7

    return int(max(PROBABILITY_FLOOR, min(PROBABILITY_CEIL, prob)))


def stop_loss(snapshot: IndicatorSnapshot, cfg: TimeframeConfig) -> float:
    return float(snapshot.support) * cfg.stop_distance


def _point(snapshot: IndicatorSnapshot, cfg: TimeframeConfig, target_price: float, reason: str, is_entry: bool) -> PricePoint:
    return PricePoint(
        price=target_price,
        reason=reason,
        distance=distance_pct(target_price, float(snapshot.price)),
        probability=calc_probability(snapshot, cfg, target_price, is_entry),
    )


def entry_candidates(snapshot: IndicatorSnapshot, cfg: TimeframeConfig) -> List[PricePoint]:
    """All entry levels that pass the direction and probability filters, in rule order."""
    s = snapshot
    price = float(s.price)
    raw: List[PricePoint] = []

    if s.rsi < cfg.rsi_oversold + 15 and s.support > 0:
        raw.append(_point(s, cfg, min(s.support * 1.003, price * 0.99), "support", True))

    if s.macd > 0 and s.ma20 < price and price > s.ma50 and s.adx > cfg.adx_min:
        raw.append(_point(s, cfg, s.ma20 * 0.997, "ma20-pullback", True))

    if 0 < s.bollinger_lower < price:
        p = _point(s, cfg, s.bollinger_lower * 1.008, "bollinger-lower", True)
        if abs(p.distance) < BOLLINGER_ENTRY_MAX_DISTANCE_PCT:
            raw.append(p)

    return [p for p in raw if p.distance < 0 and p.probability >= ACCEPT_PROBABILITY]


def exit_candidates(snapshot: IndicatorSnapshot, cfg: TimeframeConfig, stop: Optional[float] = None) -> List[PricePoint]:
    """All exit targets that pass the direction, max-distance and probability filters."""
    s = snapshot
    price = float(s.price)
    stop = stop_loss(s, cfg) if stop is None else stop
    raw: List[PricePoint] = []

    raw.append(_point(s, cfg, price * (1 + cfg.conservative_target), "conservative-target", False))

    if s.macd > 0:
        raw.append(_point(s, cfg, price * (1 + cfg.realistic_target), "realistic-target", False))

    if s.resistance > price:
        raw.append(_point(s, cfg, float(s.resistance), "technical-resistance", False))

    if s.adx > 40 and s.macd > 0.15 and 55 < s.rsi < 75:
        raw.append(_point(s, cfg, price * (1 + cfg.realistic_target * 1.15), "strong-trend", False))

    if stop > 0:
        raw.append(_point(s, cfg, price + 1.5 * (price - stop), "risk-reward", False))

    max_distance = cfg.max_target * 100.0
    return [
        p for p in raw
        if 0 < p.distance <= max_distance and p.probability >= ACCEPT_PROBABILITY
    ]


def _rank(points: List[PricePoint]) -> List[PricePoint]:
    return sorted(points, key=lambda p: p.probability, reverse=True)[:MAX_POINTS]


def plan(snapshot: Optional[IndicatorSnapshot], timeframe: Union[str, Timeframe, TimeframeConfig] = Timeframe.DAILY) -> TradePlan:
    cfg = timeframe if isinstance(timeframe, TimeframeConfig) else get_timeframe_config(timeframe)
    if snapshot is None or not snapshot.has_price:
        placeholder = PricePoint(price=0.0, reason=AWAITING_DATA, distance=0.0, probability=0)
        return TradePlan(entry=[placeholder], exit=[placeholder], stop_loss=0.0)

    price = float(snapshot.price)
    stop = stop_loss(snapshot, cfg)

    entries = _rank(entry_candidates(snapshot, cfg))
    if not entries:
        target = price * 0.99
        entries = [PricePoint(target, "price-proximate", distance_pct(target, price), FALLBACK_ENTRY_PROBABILITY)]

    exits = _rank(exit_candidates(snapshot, cfg, stop))
    if not exits:
        target = price * (1 + cfg.conservative_target * 0.7)
        prob = max(calc_probability(snapshot, cfg, target, False), FALLBACK_EXIT_MIN_PROBABILITY)
        exits = [PricePoint(target, "micro-target", distance_pct(target, price), prob)]

    return TradePlan(entry=entries, exit=exits, stop_loss=stop)
