"""Hive telemetry: query rate, response time and health."""

from __future__ import annotations

import collections
import logging
import threading
import time
from collections.abc import Callable
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)

RATE_WINDOW_S = 60.0
EMA_KEEP = 0.8
ELEVATED_QPM = 10
CRITICAL_QPM = 30


class HiveHealth(StrEnum):
    """Load classification from queries per minute."""

    HIBERNATING = "hibernating"
    NOMINAL = "nominal"
    ELEVATED = "elevated"
    CRITICAL = "critical"


def health_for_rate(queries_per_minute: float) -> HiveHealth:
    if queries_per_minute > CRITICAL_QPM:
        return HiveHealth.CRITICAL
    if queries_per_minute > ELEVATED_QPM:
        return HiveHealth.ELEVATED
    if queries_per_minute > 0:
        return HiveHealth.NOMINAL
    return HiveHealth.HIBERNATING


class HiveTelemetry:
    """Thread-safe live metrics about hive activity.

    Example:
        >>> telemetry = HiveTelemetry()
        >>> telemetry.record_query(candidate_count=12, response_time_ms=4.2)
        >>> telemetry.health
        <HiveHealth.NOMINAL: 'nominal'>
    """

    def __init__(
        self,
        max_history: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._timestamps: collections.deque[float] = collections.deque()
        self._latencies: collections.deque[float] = collections.deque(maxlen=max_history)
        self.total_queries = 0
        self.last_candidate_count = 0
        self.peak_concurrency = 0
        self.average_response_ms = 0.0

    def _trim(self, now: float) -> None:
        while self._timestamps and now - self._timestamps[0] >= RATE_WINDOW_S:
            self._timestamps.popleft()

    def record_query(self, candidate_count: int, response_time_ms: float) -> None:
        """Record one completed query."""
        now = self._clock()
        with self._lock:
            self._timestamps.append(now)
            self._trim(now)
            self._latencies.append(response_time_ms)
            self.total_queries += 1
            self.last_candidate_count = candidate_count
            self.peak_concurrency = max(self.peak_concurrency, candidate_count)
            self.average_response_ms = (
                self.average_response_ms * EMA_KEEP + response_time_ms * (1 - EMA_KEEP)
            )

    @property
    def queries_per_minute(self) -> float:
        with self._lock:
            self._trim(self._clock())
            return float(len(self._timestamps))

    @property
    def health(self) -> HiveHealth:
        return health_for_rate(self.queries_per_minute)

    def get_stats(self) -> dict[str, Any]:
        """Current telemetry as a plain dictionary."""
        qpm = self.queries_per_minute
        with self._lock:
            ordered = sorted(self._latencies)
            n = len(ordered)

            def percentile(p: float) -> float:
                if n == 0:
                    return 0.0
                return ordered[min(int(n * p / 100), n - 1)]

            return {
                "total_queries": self.total_queries,
                "queries_per_minute": qpm,
                "average_response_ms": round(self.average_response_ms, 3),
                "p50_response_ms": round(percentile(50), 3),
                "p95_response_ms": round(percentile(95), 3),
                "last_candidate_count": self.last_candidate_count,
                "peak_concurrency": self.peak_concurrency,
                "health": health_for_rate(qpm).value,
            }

    def reset(self) -> None:
        with self._lock:
            self._timestamps.clear()
            self._latencies.clear()
            self.total_queries = 0
            self.last_candidate_count = 0
            self.peak_concurrency = 0
            self.average_response_ms = 0.0
