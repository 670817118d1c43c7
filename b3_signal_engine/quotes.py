"""Yahoo Finance chart client for B3 daily bars.

- Tickers are sent with the ".SA" suffix (configurable).
- Results are cached per ticker for `cache_ttl_sec`.
- Network calls from one client are spaced by `fetch_pace_sec` (upstream rate limit);
  cache hits are not paced.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

import pandas as pd
import requests

from .cache import TTLCache
from .config import EngineConfig
from .models import PriceSeries
from .universe import normalize_ticker

logger = logging.getLogger(__name__)

_QUOTE_FIELDS = ("close", "high", "low", "volume")


class QuoteFetchError(RuntimeError):
    pass


def parse_chart(payload: Mapping[str, Any]) -> PriceSeries:
    try:
        result = payload["chart"]["result"][0]
        quote = result["indicators"]["quote"][0]
    except (KeyError, IndexError, TypeError) as e:
        raise QuoteFetchError(f"invalid chart payload: {e!r}") from e

    n = len(quote.get("close") or [])
    cols = {
        k: pd.to_numeric(pd.Series(quote.get(k) or [None] * n, dtype=object), errors="coerce")
        for k in _QUOTE_FIELDS
    }
    df = pd.DataFrame(cols)
    ts = result.get("timestamp") or []
    if len(ts) == len(df):
        df["timestamp"] = pd.to_datetime(pd.Series(ts), unit="s", utc=True).dt.strftime("%Y-%m-%d")
    return PriceSeries.from_frame(df)


class YahooChartClient:
    def __init__(
        self,
        cfg: Optional[EngineConfig] = None,
        session: Optional[requests.Session] = None,
        cache: Optional[TTLCache] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.cfg = cfg or EngineConfig()
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": "Mozilla/5.0 (b3-signal-engine)"})
        self.cache = cache if cache is not None else TTLCache(self.cfg.cache_ttl_sec)
        self._sleep = sleep
        self._requested = False

    def _url(self, ticker: str) -> str:
        return f"{self.cfg.quote_base_url}{ticker}{self.cfg.quote_suffix}"

    def fetch_series(self, ticker: str) -> PriceSeries:
        key = normalize_ticker(ticker)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("cache hit: %s", key)
            return cached

        params = {"interval": self.cfg.quote_interval, "range": self.cfg.quote_range}
        self._pace()
        try:
            resp = self.session.get(self._url(key), params=params, timeout=self.cfg.request_timeout_sec)
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as e:
            raise QuoteFetchError(f"{key}: request failed: {e}") from e
        except ValueError as e:
            raise QuoteFetchError(f"{key}: invalid JSON: {e}") from e

        series = parse_chart(payload)
        if len(series) == 0:
            raise QuoteFetchError(f"{key}: no price data available")

        self.cache.set(key, series)
        logger.info("fetched %s: %d bars, last close %.2f", key, len(series), series.closes[-1])
        return series

    __call__ = fetch_series

    def _pace(self) -> None:
        # sleep between network calls only; cache hits are not paced
        if self._requested and self.cfg.fetch_pace_sec > 0:
            self._sleep(self.cfg.fetch_pace_sec)
        self._requested = True

    def fetch_many(self, tickers: Iterable[str]) -> Dict[str, PriceSeries]:
        out: Dict[str, PriceSeries] = {}
        for ticker in tickers:
            try:
                out[normalize_ticker(ticker)] = self.fetch_series(ticker)
            except QuoteFetchError as e:
                logger.warning("quote fetch failed, skipping: %s", e)
        return out
