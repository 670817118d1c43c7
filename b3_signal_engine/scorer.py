from __future__ import annotations

import math
from typing import Optional

from .models import IndicatorSnapshot

def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))

def bollinger_position(snapshot: IndicatorSnapshot) -> Optional[float]:
    """(price - lower) / (upper - lower); None when the band has no width."""
    width = float(snapshot.bollinger_upper) - float(snapshot.bollinger_lower)
    if not snapshot.has_price or not math.isfinite(width) or width <= 0:
        return None
    pos = (float(snapshot.price) - float(snapshot.bollinger_lower)) / width
    return pos if math.isfinite(pos) else None

def score(snapshot: IndicatorSnapshot) -> int:
    """Additive 0-100 opportunity score. Stateless; constants are product behaviour."""
    s = 0
    rsi = float(snapshot.rsi)
    if 50 <= rsi <= 70:
        s += 30
    elif rsi < 30:
        s += 25
    elif 70 < rsi < 85:
        s += 15

    if snapshot.macd > 0.2:
        s += 20
    elif snapshot.macd > 0:
        s += 10

    if snapshot.adx > 40:
        s += 15
    elif snapshot.adx > 25:
        s += 10

    price = float(snapshot.price) if snapshot.has_price else 0.0
    if price > snapshot.ma20 and price > snapshot.ma50:
        s += 25
    elif price > snapshot.ma20:
        s += 15

    bb = bollinger_position(snapshot)
    if bb is not None:
        if bb < 0.3:
            s += 10
        elif bb > 0.7:
            s -= 10

    return int(clamp(s, 0, 100))
