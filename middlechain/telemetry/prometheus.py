"""Prometheus metrics backend for chain observability.

Collectors live in a private ``CollectorRegistry`` so several chains (or test
cases) can each own one.  Serving ``/metrics`` is left to the host
application, which can return :meth:`PrometheusTelemetry.render` from its own
route.

Usage:
    settings = load_settings()  # metricPrefix / MIDDLECHAIN_METRIC_PREFIX
    telemetry = PrometheusTelemetry()
    chain = middlechain.new(settings=settings, telemetry=telemetry)
    ...
    body = telemetry.render()
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

from loguru import logger
from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest

from middlechain.config.schema import ChainSettings


@dataclass
class PrometheusConfig:
    """Configuration for Prometheus telemetry backend."""

    enabled: bool = True
    prefix: str | None = None  # None: take ChainSettings.metric_prefix


class PrometheusTelemetry:
    """Prometheus-backed telemetry.

    This adapter:
    - Registers the standard chain metrics on first use, named with the
      prefix from the chain settings it is bound to (or the config)
    - Creates ad-hoc collectors for any other metric name on first use
    - Supports counters, gauges, histograms, and timings
    """

    def __init__(
        self,
        config: PrometheusConfig | None = None,
        registry: CollectorRegistry | None = None,
    ) -> None:
        self._config = config or PrometheusConfig()
        self.registry = registry or CollectorRegistry()
        self._metrics: dict[str, Counter | Gauge | Histogram] = {}
        self._lock = threading.Lock()
        self._prefix = self._config.prefix
        self._registered = False

        if not self._config.enabled:
            logger.info("Prometheus telemetry disabled")

    def bind(self, settings: ChainSettings) -> None:
        """Take the metric prefix from *settings* unless the config pins one."""
        if self._config.prefix is not None:
            return
        with self._lock:
            if self._registered:
                if self._prefix != settings.metric_prefix:
                    logger.warning(
                        "Prometheus metrics already registered as {}_*; ignoring prefix {}",
                        self._prefix,
                        settings.metric_prefix,
                    )
                return
            self._prefix = settings.metric_prefix

    def _ensure_registered(self) -> None:
        # Caller holds self._lock.
        if self._registered:
            return
        if self._prefix is None:
            self._prefix = ChainSettings().metric_prefix
        self._register_standard_metrics()
        self._registered = True

    def _name(self, name: str) -> str:
        return f"{self._prefix}_{name}"

    def _register_standard_metrics(self) -> None:
        """Register standard chain metrics."""
        self._metrics["chain_invocations_total"] = Counter(
            self._name("chain_invocations_total"),
            "Total compiled handler invocations",
            labelnames=["handler"],
            registry=self.registry,
        )
        self._metrics["chain_completed_total"] = Counter(
            self._name("chain_completed_total"),
            "Invocations that reached the wrapper or terminal handler",
            labelnames=["handler"],
            registry=self.registry,
        )
        self._metrics["chain_aborts_total"] = Counter(
            self._name("chain_aborts_total"),
            "Invocations stopped by a step",
            labelnames=["handler", "scope"],  # scope=global_before/route_before/route_after/global_after
            registry=self.registry,
        )
        self._metrics["chain_duration_seconds"] = Histogram(
            self._name("chain_duration_seconds"),
            "Duration of invocations that reached the handler",
            labelnames=["handler"],
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
            registry=self.registry,
        )

    def _metric(
        self,
        name: str,
        kind: type[Counter] | type[Gauge] | type[Histogram],
        labels: tuple[tuple[str, str], ...],
    ) -> Counter | Gauge | Histogram:
        with self._lock:
            self._ensure_registered()
            metric = self._metrics.get(name)
            if metric is None:
                labelnames = [k for k, _ in labels] if labels else []
                metric = kind(
                    self._name(name),
                    f"{kind.__name__}: {name}",
                    labelnames=labelnames,
                    registry=self.registry,
                )
                self._metrics[name] = metric
        if labels:
            return metric.labels(**dict(labels))
        return metric

    def incr(self, name: str, value: int = 1, labels: tuple[tuple[str, str], ...] = ()) -> None:
        """Increase a named counter."""
        if not self._config.enabled:
            return
        self._metric(name, Counter, labels).inc(value)

    def gauge(self, name: str, value: float, labels: tuple[tuple[str, str], ...] = ()) -> None:
        """Set a gauge value."""
        if not self._config.enabled:
            return
        self._metric(name, Gauge, labels).set(value)

    def histogram(
        self, name: str, value: float, labels: tuple[tuple[str, str], ...] = ()
    ) -> None:
        """Observe a histogram value."""
        if not self._config.enabled:
            return
        self._metric(name, Histogram, labels).observe(value)

    def timing(
        self, name: str, value: float, labels: tuple[tuple[str, str], ...] = ()
    ) -> None:
        """Record timing in seconds (alias for histogram)."""
        self.histogram(name, value, labels)

    def render(self) -> bytes:
        """Metrics in the Prometheus text exposition format."""
        if self._config.enabled:
            with self._lock:
                self._ensure_registered()
        return generate_latest(self.registry)
