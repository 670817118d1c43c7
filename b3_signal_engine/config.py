from __future__ import annotations

import logging
import os
from dataclasses import dataclass

def _env_float(key: str, default: float) -> float:
    v = os.getenv(key)
    if v is None or v == "":
        return default
    try:
        return float(v)
    except ValueError:
        return default

def _env_int(key: str, default: int) -> int:
    v = os.getenv(key)
    if v is None or v == "":
        return default
    try:
        return int(v)
    except ValueError:
        return default

def _env_str(key: str, default: str) -> str:
    v = os.getenv(key)
    return v if v not in (None, "") else default

@dataclass(frozen=True)
class EngineConfig:
    # Local price store
    db_path: str = _env_str("B3_DB_PATH", "market_data.db")
    table: str = _env_str("B3_DB_TABLE", "daily_price")
    history_bars: int = _env_int("B3_HISTORY_BARS", 120)

    # Quote provider (Yahoo chart endpoint, B3 tickers carry a ".SA" suffix)
    quote_base_url: str = _env_str("B3_QUOTE_BASE_URL", "https://query1.finance.yahoo.com/v8/finance/chart/")
    quote_range: str = _env_str("B3_QUOTE_RANGE", "3mo")
    quote_interval: str = _env_str("B3_QUOTE_INTERVAL", "1d")
    quote_suffix: str = _env_str("B3_QUOTE_SUFFIX", ".SA")
    request_timeout_sec: float = _env_float("B3_REQUEST_TIMEOUT_SEC", 10.0)

    # Fetch cache / pacing (rate-limited upstream)
    cache_ttl_sec: float = _env_float("B3_CACHE_TTL_SEC", 60.0)
    fetch_pace_sec: float = _env_float("B3_FETCH_PACE_SEC", 0.5)

    # Ranking
    top_n: int = _env_int("B3_TOP_N", 5)
    min_top_score: int = _env_int("B3_MIN_TOP_SCORE", 70)

    log_level: str = _env_str("B3_LOG_LEVEL", "INFO")

def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
