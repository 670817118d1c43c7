from __future__ import annotations

import sqlite3
from typing import List, Optional, Tuple

from .models import PriceSeries

SCHEMA = """
CREATE TABLE IF NOT EXISTS {table} (
    code TEXT NOT NULL,
    date TEXT NOT NULL,
    high REAL,
    low REAL,
    close REAL,
    volume REAL,
    PRIMARY KEY (code, date)
)
"""

def connect(db_path: str) -> sqlite3.Connection:
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn

def ensure_table(db_path: str, table: str = "daily_price") -> None:
    conn = connect(db_path)
    try:
        conn.execute(SCHEMA.format(table=table))
        conn.commit()
    finally:
        conn.close()

def list_codes(db_path: str, table: str = "daily_price", min_rows: int = 1) -> List[Tuple[str, int]]:
    """Return [(code, n_rows), ...]"""
    conn = connect(db_path)
    try:
        cur = conn.execute(
            f"SELECT code, COUNT(*) as n FROM {table} GROUP BY code HAVING n >= ? ORDER BY code",
            (int(min_rows),),
        )
        return [(str(r[0]), int(r[1])) for r in cur.fetchall()]
    finally:
        conn.close()

def fetch_series(
    db_path: str,
    code: str,
    table: str = "daily_price",
    limit: Optional[int] = None,
) -> PriceSeries:
    """Latest `limit` bars for a code, returned oldest-first.

    Note:
      - Fetches in DESC order (so LIMIT keeps the newest rows), then reverses.
      - Rows with NULL close/high/low are dropped by PriceSeries.from_rows.
    """
    conn = connect(db_path)
    try:
        lim_sql = f" LIMIT {int(limit)}" if limit is not None else ""
        cur = conn.execute(
            f"SELECT date, high, low, close, volume FROM {table} WHERE code=? ORDER BY date DESC{lim_sql}",
            (code,),
        )
        rows = list(reversed(cur.fetchall()))
        return PriceSeries.from_rows(dict(r) for r in rows)
    finally:
        conn.close()

def upsert_series(db_path: str, code: str, series: PriceSeries, table: str = "daily_price") -> int:
    """INSERT OR REPLACE every bar of `series`; bars need a timestamp/date. Returns rows written."""
    if any(not ts for ts in series.timestamps) or len(series.timestamps) != len(series):
        raise ValueError(f"{code}: every bar needs a date to be stored")
    ensure_table(db_path, table)
    rows = [
        (code, series.timestamps[i], series.highs[i], series.lows[i], series.closes[i], series.volumes[i])
        for i in range(len(series))
    ]
    conn = connect(db_path)
    try:
        conn.executemany(
            f"INSERT OR REPLACE INTO {table} (code, date, high, low, close, volume) VALUES (?,?,?,?,?,?)",
            rows,
        )
        conn.commit()
    finally:
        conn.close()
    return len(rows)
