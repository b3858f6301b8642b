"""In-memory telemetry backend for testing and development."""

from __future__ import annotations

import threading
from collections import Counter, defaultdict
from dataclasses import dataclass, field

from loguru import logger

from middlechain.config.schema import ChainSettings


@dataclass
class InMemoryTelemetry:
    """In-memory telemetry backend.

    Stores all metrics in memory for inspection during tests.  Safe to share
    between threads running the same compiled handler.
    """

    counters: Counter[str] = field(default_factory=Counter)
    gauges: dict[str, float] = field(default_factory=dict)
    histograms: dict[str, list[float]] = field(default_factory=lambda: defaultdict(list))
    timings: dict[str, list[float]] = field(default_factory=lambda: defaultdict(list))
    settings: ChainSettings | None = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def bind(self, settings: ChainSettings) -> None:
        """Remember the settings; keys are not prefixed."""
        self.settings = settings

    def incr(self, name: str, value: int = 1, labels: tuple[tuple[str, str], ...] = ()) -> None:
        """Increase a named counter."""
        key = self._make_key(name, labels)
        with self._lock:
            self.counters[key] += int(value)
        logger.trace("telemetry {} += {}", key, value)

    def gauge(self, name: str, value: float, labels: tuple[tuple[str, str], ...] = ()) -> None:
        """Set a gauge value."""
        key = self._make_key(name, labels)
        with self._lock:
            self.gauges[key] = value

    def histogram(
        self, name: str, value: float, labels: tuple[tuple[str, str], ...] = ()
    ) -> None:
        """Observe a histogram value."""
        key = self._make_key(name, labels)
        with self._lock:
            self.histograms[key].append(value)

    def timing(
        self, name: str, value: float, labels: tuple[tuple[str, str], ...] = ()
    ) -> None:
        """Record timing in seconds."""
        key = self._make_key(name, labels)
        with self._lock:
            self.timings[key].append(value)

    def _make_key(self, name: str, labels: tuple[tuple[str, str], ...] | None) -> str:
        """Create a unique key for a metric with labels."""
        if not labels:
            return name
        label_str = ",".join(f"{k}={v}" for k, v in labels)
        return f"{name}{{{label_str}}}"

    # ── Test helpers ─────────────────────────────────────────────────────

    def get_counter(self, name: str, labels: tuple[tuple[str, str], ...] = ()) -> int:
        """Get counter value for testing."""
        return int(self.counters[self._make_key(name, labels)])

    def get_gauge(self, name: str, labels: tuple[tuple[str, str], ...] = ()) -> float | None:
        return self.gauges.get(self._make_key(name, labels))

    def get_timing_values(self, name: str, labels: tuple[tuple[str, str], ...] = ()) -> list[float]:
        """Get timing values for testing."""
        return list(self.timings[self._make_key(name, labels)])

    def reset(self) -> None:
        """Clear all metrics."""
        with self._lock:
            self.counters.clear()
            self.gauges.clear()
            self.histograms.clear()
            self.timings.clear()
