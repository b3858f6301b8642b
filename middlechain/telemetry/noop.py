"""No-op telemetry implementation."""

from __future__ import annotations

from middlechain.config.schema import ChainSettings
from middlechain.telemetry.base import TelemetryPort


class NoopTelemetry(TelemetryPort):
    """TelemetryPort implementation that records nothing."""

    def bind(self, settings: ChainSettings) -> None:
        del settings

    def incr(self, name: str, value: int = 1, labels: tuple[tuple[str, str], ...] = ()) -> None:
        del name, value, labels

    def gauge(self, name: str, value: float, labels: tuple[tuple[str, str], ...] = ()) -> None:
        del name, value, labels

    def histogram(self, name: str, value: float, labels: tuple[tuple[str, str], ...] = ()) -> None:
        del name, value, labels

    def timing(self, name: str, value: float, labels: tuple[tuple[str, str], ...] = ()) -> None:
        del name, value, labels
