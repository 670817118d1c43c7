from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict, replace
from functools import partial
from typing import Any, List, Optional

from .alerts import AlertBook
from .config import EngineConfig, setup_logging
from .db import fetch_series, list_codes, upsert_series
from .models import PriceSeries
from .quotes import YahooChartClient
from .ranking import merge_watchlist
from .recommender import SeriesLoader, recommend, scan_universe
from .timeframes import TIMEFRAME_CONFIGS, Timeframe
from .universe import LIQUIDITY_UNIVERSE, normalize_ticker

logger = logging.getLogger(__name__)

def _p(obj: Any) -> None:
    print(json.dumps(obj, ensure_ascii=False, indent=2, default=str))

def _config(args: argparse.Namespace) -> EngineConfig:
    cfg = EngineConfig()
    overrides = {}
    if args.db:
        overrides["db_path"] = args.db
    if args.table:
        overrides["table"] = args.table
    if args.log_level:
        overrides["log_level"] = args.log_level
    return replace(cfg, **overrides) if overrides else cfg

def _loader(args: argparse.Namespace, cfg: EngineConfig) -> SeriesLoader:
    if args.source == "db":
        return partial(_db_loader, cfg)
    return YahooChartClient(cfg)

def _db_loader(cfg: EngineConfig, ticker: str) -> PriceSeries:
    return fetch_series(cfg.db_path, ticker, table=cfg.table, limit=cfg.history_bars)

def cmd_analyze(args: argparse.Namespace) -> None:
    cfg = _config(args)
    setup_logging(cfg.log_level)
    _p(recommend(args.ticker, _loader(args, cfg), args.timeframe))

def cmd_scan(args: argparse.Namespace) -> None:
    cfg = _config(args)
    setup_logging(cfg.log_level)
    tickers: List[str] = args.tickers or list(LIQUIDITY_UNIVERSE)
    limit = args.limit if args.limit is not None else cfg.top_n
    result = scan_universe(_loader(args, cfg), tickers, args.timeframe, top_n=limit, min_score=cfg.min_top_score)

    book = AlertBook()
    alerts = []
    for rec in result.top:
        alerts.extend(book.evaluate(rec.ticker, result.analyses[rec.ticker].signals))

    out = result.as_dict(include_all=args.all)
    out["watchlist"] = merge_watchlist(result.top, args.watch or [])
    out["alerts"] = [a.as_dict() for a in alerts]
    _p(out)

def cmd_import(args: argparse.Namespace) -> None:
    cfg = _config(args)
    setup_logging(cfg.log_level)
    tickers: List[str] = args.tickers or list(LIQUIDITY_UNIVERSE)
    fetched = YahooChartClient(cfg).fetch_many(tickers)
    imported = {t: upsert_series(cfg.db_path, t, series, table=cfg.table) for t, series in fetched.items()}
    logger.info("import done: %d/%d tickers into %s", len(imported), len(tickers), cfg.db_path)
    _p({
        "imported": imported,
        "failed": [t for t in (normalize_ticker(x) for x in tickers) if t not in imported],
        "codes": [{"code": c, "rows": n} for c, n in list_codes(cfg.db_path, cfg.table)],
    })

def cmd_timeframes(args: argparse.Namespace) -> None:
    _p({tf.value: asdict(TIMEFRAME_CONFIGS[tf]) for tf in Timeframe})

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="b3-signal-engine", description="Technical indicators, scores and entry/exit levels for liquid B3 equities.")
    p.add_argument("--db", default=None, help="SQLite DB path (default: B3_DB_PATH or market_data.db)")
    p.add_argument("--table", default=None, help="Price table (default: daily_price)")
    p.add_argument("--source", choices=("yahoo", "db"), default="yahoo", help="Price source (default: yahoo)")
    p.add_argument("--log-level", default=None, help="Logging level (default: B3_LOG_LEVEL or INFO)")
    timeframes = [tf.value for tf in Timeframe]

    sub = p.add_subparsers(dest="cmd", required=True)

    p_an = sub.add_parser("analyze", help="Indicators, score, signals and entry/exit plan for one ticker")
    p_an.add_argument("--ticker", required=True)
    p_an.add_argument("--timeframe", choices=timeframes, default="daily")
    p_an.set_defaults(func=cmd_analyze)

    p_scan = sub.add_parser("scan", help="Rank the universe into the top opportunity list")
    p_scan.add_argument("--timeframe", choices=timeframes, default="daily")
    p_scan.add_argument("--tickers", nargs="*", default=None, help="Tickers to scan (default: 30-symbol liquidity universe)")
    p_scan.add_argument("--limit", type=int, default=None, help="Top-N size (default: B3_TOP_N or 5)")
    p_scan.add_argument("--watch", nargs="*", default=None, help="User watchlist tickers merged after the top list")
    p_scan.add_argument("--all", action="store_true", help="Include every per-ticker analysis in the output")
    p_scan.set_defaults(func=cmd_scan)

    p_imp = sub.add_parser("import", help="Fetch Yahoo bars and upsert them into the SQLite store")
    p_imp.add_argument("--tickers", nargs="*", default=None, help="Tickers to import (default: 30-symbol liquidity universe)")
    p_imp.set_defaults(func=cmd_import)

    p_tf = sub.add_parser("timeframes", help="Print the timeframe threshold table")
    p_tf.set_defaults(func=cmd_timeframes)

    return p

def main(argv: Optional[List[str]] = None) -> None:
    p = build_parser()
    args = p.parse_args(argv)
    args.func(args)

if __name__ == "__main__":
    main()
