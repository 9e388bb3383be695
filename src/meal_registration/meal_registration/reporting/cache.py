from __future__ import annotations

import threading
import time
from datetime import date
from typing import Callable, Optional

from ..core.constants import DEFAULT_SUMMARY_CACHE_TTL_SECONDS
from .model import DailySummary


class SummaryCache:
    """Daily summaries per (tenant, date).

    An entry is dropped when the tenant reports a change in this process, and in any
    case once it is older than `ttl_seconds`: writes made by other processes and roster
    edits outside the core are never signalled here. `ttl_seconds <= 0` disables caching.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_SUMMARY_CACHE_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._items: dict[tuple[str, date], tuple[float, DailySummary]] = {}

    @property
    def enabled(self) -> bool:
        return self._ttl > 0

    def get(self, tenant_id: str, day: date) -> Optional[DailySummary]:
        key = (tenant_id, day)
        with self._lock:
            item = self._items.get(key)
            if item is None:
                return None
            stored_at, summary = item
            if self._clock() - stored_at >= self._ttl:
                del self._items[key]
                return None
            return summary

    def put(self, tenant_id: str, summary: DailySummary) -> None:
        if not self.enabled:
            return
        with self._lock:
            self._items[(tenant_id, summary.date)] = (self._clock(), summary)

    def invalidate(self, tenant_id: str) -> None:
        with self._lock:
            for key in [k for k in self._items if k[0] == tenant_id]:
                del self._items[key]

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
