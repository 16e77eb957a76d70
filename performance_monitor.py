"""
Performance Monitor - processing time and cache hit statistics

© 2025 Sven Kalinowski with small help of Lino Casu
Licensed under the Anti-Capitalist Software License v1.4
"""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass

logger = logging.getLogger("rtl_fix.performance")


@dataclass
class PerformanceReport:
    session_seconds: float = 0.0
    total_processed: int = 0
    total_ms: float = 0.0
    cache_hits: int = 0
    cache_misses: int = 0

    @property
    def average_ms(self) -> float:
        return self.total_ms / self.total_processed if self.total_processed else 0.0

    @property
    def hit_rate(self) -> float:
        total = self.cache_hits + self.cache_misses
        return self.cache_hits / total * 100 if total else 0.0


class PerformanceMonitor:
    """Thread-safe counters fed by the processor."""

    def __init__(self):
        self._lock = threading.Lock()
        self.reset()

    def reset(self):
        with self._lock:
            self._started = time.perf_counter()
            self._processed = 0
            self._total_ms = 0.0
            self._hits = 0
            self._misses = 0

    def record(self, elapsed_ms: float, was_cached: bool):
        with self._lock:
            self._processed += 1
            self._total_ms += elapsed_ms
            if was_cached:
                self._hits += 1
            else:
                self._misses += 1

    def snapshot(self) -> PerformanceReport:
        with self._lock:
            return PerformanceReport(
                session_seconds=time.perf_counter() - self._started,
                total_processed=self._processed,
                total_ms=self._total_ms,
                cache_hits=self._hits,
                cache_misses=self._misses,
            )

    def log_report(self) -> PerformanceReport:
        report = self.snapshot()
        logger.info("=== RTL Performance Report ===")
        logger.info(f"Session Duration: {report.session_seconds:.1f}s")
        logger.info(f"Total Processed: {report.total_processed}")
        logger.info(f"Average Processing Time: {report.average_ms:.3f}ms")
        logger.info(
            f"Cache Hit Rate: {report.hit_rate:.1f}% "
            f"({report.cache_hits}/{report.cache_hits + report.cache_misses})"
        )
        return report
