from __future__ import annotations

from typing import Iterable, List, Mapping, Sequence

from .models import IndicatorSnapshot, OpportunityRecord, tickers_of
from .scorer import score
from .universe import UNRANKED, is_valid_ticker, normalize_ticker

SCORE_WEIGHT = 0.7
LIQUIDITY_WEIGHT = 0.3

def composite_key(score_value: float, liquidity_rank: int) -> float:
    """Blend of score and liquidity; rank 1 (most liquid) earns the largest bonus."""
    return score_value * SCORE_WEIGHT + (UNRANKED - liquidity_rank) * LIQUIDITY_WEIGHT

def score_universe(universe: Mapping[str, IndicatorSnapshot]) -> List[OpportunityRecord]:
    """Every ticker scored, ordered by composite key (descending, stable on ties)."""
    records = []
    for ticker, snap in universe.items():
        sc = score(snap)
        records.append(OpportunityRecord(ticker=ticker, snapshot=snap, score=sc, composite=composite_key(sc, snap.liquidity_rank)))
    records.sort(key=lambda r: r.composite, reverse=True)
    return records

def rank(universe: Mapping[str, IndicatorSnapshot], top_n: int = 5, min_score: int = 70) -> List[OpportunityRecord]:
    """Top-N opportunities: qualifying scores first, then backfill by composite key.

    The result is rebuilt from scratch on every call.
    """
    ordered = score_universe(universe)
    top = [r for r in ordered if r.score >= min_score][:top_n]
    if len(top) < top_n:
        picked = set(tickers_of(top))
        for r in ordered:
            if len(top) >= top_n:
                break
            if r.ticker not in picked:
                top.append(r)
                picked.add(r.ticker)
    return top

def merge_watchlist(top: Sequence[OpportunityRecord], user: Iterable[str] = ()) -> List[str]:
    """Ordered, de-duplicated union: top opportunities first, then user tickers."""
    out: List[str] = []
    for ticker in list(tickers_of(top)) + [normalize_ticker(t) for t in user]:
        if ticker and ticker not in out:
            out.append(ticker)
    return out

def add_to_watchlist(watchlist: Sequence[str], ticker: str) -> List[str]:
    t = normalize_ticker(ticker)
    if not is_valid_ticker(t):
        raise ValueError(f"invalid ticker {ticker!r} (expected 4 letters + 1-2 digits, e.g. PETR4)")
    out = list(watchlist)
    if t not in out:
        out.append(t)
    return out

def remove_from_watchlist(watchlist: Sequence[str], ticker: str) -> List[str]:
    t = normalize_ticker(ticker)
    return [x for x in watchlist if x != t]
