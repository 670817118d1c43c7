from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Generic, Optional, TypeVar

V = TypeVar("V")


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    value: V
    inserted_at: float


def is_fresh(entry: Optional[CacheEntry], now: float, ttl: float) -> bool:
    return entry is not None and (now - entry.inserted_at) < ttl


class TTLCache(Generic[V]):
    """Key/value store of (value, inserted_at) pairs; stale entries read as misses."""

    def __init__(self, ttl_sec: float = 60.0, clock: Callable[[], float] = time.time):
        self.ttl_sec = float(ttl_sec)
        self.clock = clock
        self._data: Dict[str, CacheEntry[V]] = {}

    def get(self, key: str) -> Optional[V]:
        entry = self._data.get(key)
        if is_fresh(entry, self.clock(), self.ttl_sec):
            return entry.value
        self._data.pop(key, None)
        return None

    def set(self, key: str, value: V) -> None:
        self._data[key] = CacheEntry(value=value, inserted_at=self.clock())

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)
