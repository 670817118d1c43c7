from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from .universe import UNRANKED

def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return math.isnan(float(value))
    except (TypeError, ValueError):
        return True

@dataclass(frozen=True)
class PriceSeries:
    """Chronological OHLCV bars (oldest first) with null bars already removed."""

    closes: Tuple[float, ...] = ()
    highs: Tuple[float, ...] = ()
    lows: Tuple[float, ...] = ()
    volumes: Tuple[float, ...] = ()
    timestamps: Tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.closes)

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, Any]]) -> "PriceSeries":
        """Build from dict rows with close/high/low/volume (and optional timestamp/date).

        Bars missing close, high or low are dropped; a missing volume counts as 0.
        """
        ts: List[str] = []
        c: List[float] = []
        h: List[float] = []
        l: List[float] = []
        v: List[float] = []
        for row in rows:
            if any(_is_missing(row.get(k)) for k in ("close", "high", "low")):
                continue
            vol = row.get("volume")
            c.append(float(row["close"]))
            h.append(float(row["high"]))
            l.append(float(row["low"]))
            v.append(0.0 if _is_missing(vol) else float(vol))
            stamp = row.get("timestamp", row.get("date"))
            ts.append("" if stamp is None else str(stamp))
        return cls(tuple(c), tuple(h), tuple(l), tuple(v), tuple(ts))

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "PriceSeries":
        if df is None or df.empty:
            return cls()
        df = df.dropna(subset=["close", "high", "low"])
        if "volume" in df.columns:
            df = df.assign(volume=df["volume"].fillna(0.0))
        else:
            df = df.assign(volume=0.0)
        stamp_col = "timestamp" if "timestamp" in df.columns else ("date" if "date" in df.columns else None)
        stamps = tuple(str(x) for x in df[stamp_col]) if stamp_col else tuple("" for _ in range(len(df)))
        return cls(
            closes=tuple(float(x) for x in df["close"]),
            highs=tuple(float(x) for x in df["high"]),
            lows=tuple(float(x) for x in df["low"]),
            volumes=tuple(float(x) for x in df["volume"]),
            timestamps=stamps,
        )

@dataclass(frozen=True)
class IndicatorSnapshot:
    price: Optional[float] = None
    change_pct: float = 0.0
    volume: float = 0.0
    rsi: float = 50.0
    macd: float = 0.0
    adx: float = 25.0
    ma20: float = 0.0
    ma50: float = 0.0
    bollinger_upper: float = 0.0
    bollinger_lower: float = 0.0
    support: float = 0.0
    resistance: float = 0.0
    liquidity_rank: int = UNRANKED

    @property
    def has_price(self) -> bool:
        return not _is_missing(self.price) and float(self.price) > 0

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IndicatorSnapshot":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

@dataclass(frozen=True)
class PricePoint:
    price: float
    reason: str
    distance: float      # signed percent vs current price
    probability: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "price": round(self.price, 2),
            "reason": self.reason,
            "distance": round(self.distance, 2),
            "probability": self.probability,
        }

@dataclass(frozen=True)
class SignalReport:
    entry: List[str] = field(default_factory=list)
    exit: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    score: int = 0

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

@dataclass(frozen=True)
class TradePlan:
    entry: List[PricePoint]
    exit: List[PricePoint]
    stop_loss: float

    def as_dict(self) -> Dict[str, Any]:
        return {
            "entry": [p.as_dict() for p in self.entry],
            "exit": [p.as_dict() for p in self.exit],
            "stop_loss": round(self.stop_loss, 2),
        }

@dataclass(frozen=True)
class OpportunityRecord:
    ticker: str
    snapshot: IndicatorSnapshot
    score: int
    composite: float

    def as_dict(self) -> Dict[str, Any]:
        return {"ticker": self.ticker, "score": self.score, "composite": round(self.composite, 2), **self.snapshot.as_dict()}

def tickers_of(records: Sequence[OpportunityRecord]) -> List[str]:
    return [r.ticker for r in records]
