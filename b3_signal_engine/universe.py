from __future__ import annotations

import re
from typing import Tuple

# Ordered by liquidity, most liquid first.
LIQUIDITY_UNIVERSE: Tuple[str, ...] = (
    "PETR4", "VALE3", "ITUB4", "BBDC4", "ABEV3", "BBAS3", "B3SA3", "WEGE3", "RENT3", "MGLU3",
    "ITSA4", "HAPV3", "ELET3", "SUZB3", "RADL3", "RAIL3", "JBSS3", "EMBR3", "PRIO3", "UGPA3",
    "CSAN3", "GGBR4", "VIVT3", "GOAU4", "CSNA3", "ENBR3", "ENEV3", "CPLE6", "SBSP3", "LREN3",
)

UNRANKED = len(LIQUIDITY_UNIVERSE) + 1

TICKER_PATTERN = re.compile(r"^[A-Z]{4}\d{1,2}$")

def liquidity_rank(ticker: str) -> int:
    """1-based position in the liquidity universe, 31 when the ticker is not listed."""
    try:
        return LIQUIDITY_UNIVERSE.index(str(ticker).strip().upper()) + 1
    except ValueError:
        return UNRANKED

def normalize_ticker(value: str) -> str:
    return str(value or "").strip().upper()

def is_valid_ticker(value: str) -> bool:
    return bool(TICKER_PATTERN.match(normalize_ticker(value)))
