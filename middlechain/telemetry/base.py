"""Base telemetry port protocol."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from middlechain.config.schema import ChainSettings


@runtime_checkable
class TelemetryPort(Protocol):
    """Protocol for telemetry backends (Prometheus, in-memory, no-op).

    A registry binds its backend to its settings once, then compiled chains
    report through this port:
    - Counters: invocations, completions, aborts per scope
    - Timing: duration of invocations that reached the handler
    """

    def bind(self, settings: ChainSettings) -> None:
        """Adopt backend-relevant settings (such as the metric prefix)."""

    def incr(self, name: str, value: int = 1, labels: tuple[tuple[str, str], ...] = ()) -> None:
        """Increase a named counter by ``value`` with optional labels.

        Args:
            name: Metric name (e.g., "chain_invocations_total")
            value: Amount to increment (default 1)
            labels: Optional label tuples (e.g., (("handler", "index"), ("scope", "route_before")))
        """

    def gauge(self, name: str, value: float, labels: tuple[tuple[str, str], ...] = ()) -> None:
        """Set a gauge value."""

    def histogram(
        self, name: str, value: float, labels: tuple[tuple[str, str], ...] = ()
    ) -> None:
        """Observe a histogram value."""

    def timing(
        self, name: str, value: float, labels: tuple[tuple[str, str], ...] = ()
    ) -> None:
        """Record timing of an operation in seconds.

        Args:
            name: Metric name (e.g., "chain_duration_seconds")
            value: Duration in seconds
            labels: Optional label tuples
        """
