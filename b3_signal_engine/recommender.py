from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from .indicators import compute_snapshot
from .models import IndicatorSnapshot, OpportunityRecord, PriceSeries, SignalReport, TradePlan
from .planner import plan
from .ranking import rank
from .signals import classify
from .timeframes import Timeframe, parse_timeframe
from .universe import LIQUIDITY_UNIVERSE, liquidity_rank, normalize_ticker

logger = logging.getLogger(__name__)

SeriesLoader = Callable[[str], PriceSeries]

@dataclass(frozen=True)
class TickerAnalysis:
    ticker: str
    timeframe: Timeframe
    snapshot: IndicatorSnapshot
    signals: SignalReport
    plan: TradePlan

    @property
    def score(self) -> int:
        return self.signals.score

    def as_dict(self) -> Dict[str, Any]:
        return {
            "ticker": self.ticker,
            "timeframe": self.timeframe.value,
            "score": self.score,
            "snapshot": self.snapshot.as_dict(),
            "signals": self.signals.as_dict(),
            "plan": self.plan.as_dict(),
        }

@dataclass
class ScanResult:
    timeframe: Timeframe
    top: List[OpportunityRecord] = field(default_factory=list)
    analyses: Dict[str, TickerAnalysis] = field(default_factory=dict)
    skipped: List[str] = field(default_factory=list)

    def as_dict(self, include_all: bool = False) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "timeframe": self.timeframe.value,
            "top": [
                {**r.as_dict(), "plan": self.analyses[r.ticker].plan.as_dict()}
                for r in self.top
            ],
            "skipped": list(self.skipped),
        }
        if include_all:
            out["analyses"] = {t: a.as_dict() for t, a in self.analyses.items()}
        return out

def analyze_snapshot(ticker: str, snapshot: IndicatorSnapshot, timeframe: Union[str, Timeframe] = Timeframe.DAILY) -> TickerAnalysis:
    tf = parse_timeframe(timeframe)
    return TickerAnalysis(
        ticker=normalize_ticker(ticker),
        timeframe=tf,
        snapshot=snapshot,
        signals=classify(snapshot, tf),
        plan=plan(snapshot, tf),
    )

def analyze_series(
    ticker: str,
    series: PriceSeries,
    timeframe: Union[str, Timeframe] = Timeframe.DAILY,
    liq_rank: Optional[int] = None,
) -> TickerAnalysis:
    t = normalize_ticker(ticker)
    snap = compute_snapshot(series, liquidity_rank(t) if liq_rank is None else liq_rank)
    return analyze_snapshot(t, snap, timeframe)

def recommend(ticker: str, loader: SeriesLoader, timeframe: Union[str, Timeframe] = Timeframe.DAILY) -> Dict[str, Any]:
    t = normalize_ticker(ticker)
    try:
        series = loader(t)
    except Exception as e:
        logger.warning("load failed for %s: %s", t, e)
        return {"ok": False, "ticker": t, "error": f"load_failed: {e}"}
    if len(series) == 0:
        return {"ok": False, "ticker": t, "error": "no_price_data"}
    return {"ok": True, **analyze_series(t, series, timeframe).as_dict()}

def scan_universe(
    loader: SeriesLoader,
    tickers: Iterable[str] = LIQUIDITY_UNIVERSE,
    timeframe: Union[str, Timeframe] = Timeframe.DAILY,
    *,
    top_n: int = 5,
    min_score: int = 70,
) -> ScanResult:
    """Analyze every ticker independently, then rank the universe into a fresh top-N list."""
    tf = parse_timeframe(timeframe)
    result = ScanResult(timeframe=tf)
    for ticker in tickers:
        t = normalize_ticker(ticker)
        try:
            series = loader(t)
        except Exception as e:
            logger.warning("skipping %s: %s", t, e)
            result.skipped.append(t)
            continue
        if len(series) == 0:
            logger.warning("skipping %s: no price data", t)
            result.skipped.append(t)
            continue
        result.analyses[t] = analyze_series(t, series, tf)

    universe = {t: a.snapshot for t, a in result.analyses.items()}
    result.top = rank(universe, top_n=top_n, min_score=min_score)
    logger.info(
        "scan %s: %d analyzed, %d skipped, top=%s",
        tf.value, len(result.analyses), len(result.skipped), [r.ticker for r in result.top],
    )
    return result
