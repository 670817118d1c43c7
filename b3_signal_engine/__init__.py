"""Technical-analysis signal engine for liquid B3 equities (advisory only).

Pipeline per ticker (pure, no shared state):
- PriceSeries -> indicators.compute_snapshot -> IndicatorSnapshot
- snapshot -> scorer.score (0..100)
- snapshot + timeframe -> signals.classify (entry / exit / warning messages)
- snapshot + timeframe -> planner.plan (<=3 entries below price, <=3 exits above, stop-loss)
Universe:
- all snapshots -> ranking.rank -> top-5 by 0.7*score + 0.3*(31 - liquidity rank)
"""

__all__ = [
    "alerts",
    "cache",
    "config",
    "db",
    "indicators",
    "models",
    "planner",
    "quotes",
    "ranking",
    "recommender",
    "scorer",
    "signals",
    "timeframes",
    "universe",
]
