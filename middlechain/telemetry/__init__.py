"""Telemetry backends for chain observability.

Provides no-op (default), in-memory (for testing) and Prometheus backends.
"""

from middlechain.telemetry.base import TelemetryPort
from middlechain.telemetry.inmemory import InMemoryTelemetry
from middlechain.telemetry.noop import NoopTelemetry
from middlechain.telemetry.prometheus import PrometheusConfig, PrometheusTelemetry

__all__ = [
    "InMemoryTelemetry",
    "NoopTelemetry",
    "PrometheusConfig",
    "PrometheusTelemetry",
    "TelemetryPort",
]
