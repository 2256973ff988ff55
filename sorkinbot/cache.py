"""A thread-safe in-memory cache whose entries are dropped after their time to live."""

from __future__ import annotations

import datetime as _dt
import threading
import time
from dataclasses import dataclass
from typing import Any, Generic, Hashable, Optional, TypeVar, Union

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

Duration = Union[float, int, _dt.timedelta]


def _seconds(duration: Duration) -> float:
    if isinstance(duration, _dt.timedelta):
        return duration.total_seconds()
    return float(duration)


@dataclass
class _Entry(Generic[V]):
    value: V
    ttl: float
    created_at: float

    def expired(self, now: float) -> bool:
        return now > self.created_at + self.ttl


class TTLCache(Generic[K, V]):
    """Key-value store; a background thread purges expired entries every ``clean_period``.

    Reads do not check expiry: an entry stays readable until the next purge.
    """

    def __init__(self, clean_period: Duration = 10.0) -> None:
        self._entries: dict[K, _Entry[V]] = {}
        self._lock = threading.Lock()
        self._clean_period = _seconds(clean_period)
        if self._clean_period <= 0:
            raise ValueError(f"clean period must be positive: {clean_period}")
        self._stop = threading.Event()
        self._cleaner = threading.Thread(target=self._clean_loop, daemon=True)
        self._cleaner.start()

    def _clean_loop(self) -> None:
        while not self._stop.wait(self._clean_period):
            self.purge_expired()

    def set(self, key: K, value: V, ttl: Duration) -> None:
        """Store ``value`` under ``key`` for ``ttl`` seconds (or a timedelta)."""
        entry = _Entry(value=value, ttl=_seconds(ttl), created_at=time.time())
        with self._lock:
            self._entries[key] = entry

    def get(self, key: K, default: Any = None) -> Any:
        """Return the value stored under ``key``, or ``default`` when there is none."""
        with self._lock:
            entry = self._entries.get(key)
        return default if entry is None else entry.value

    def delete(self, key: K) -> None:
        """Remove ``key`` if present."""
        with self._lock:
            self._entries.pop(key, None)

    def purge_expired(self, now: Optional[float] = None) -> list[K]:
        """Drop entries whose lifetime ended before ``now`` (epoch seconds); return their keys."""
        moment = time.time() if now is None else now
        with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.expired(moment)]
            for key in expired:
                del self._entries[key]
        return expired

    def close(self) -> None:
        """Stop the background cleaner."""
        self._stop.set()
        if self._cleaner.is_alive() and self._cleaner is not threading.current_thread():
            self._cleaner.join(timeout=self._clean_period + 1.0)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __enter__(self) -> "TTLCache[K, V]":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()