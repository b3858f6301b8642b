"""Process-wide registry of global steps and the global wrapper."""

from __future__ import annotations

import threading
from dataclasses import dataclass

from loguru import logger

from middlechain.config.schema import ChainSettings
from middlechain.core.ports import Step, Wrapper
from middlechain.telemetry import NoopTelemetry, TelemetryPort


def callable_name(fn: object) -> str:
    """Readable name of a step, wrapper or handler for logs and reprs."""
    name = getattr(fn, "__qualname__", None) or getattr(fn, "__name__", None)
    if name is None:
        name = type(fn).__name__
    return str(name)


@dataclass(frozen=True, slots=True)
class Layers:
    """Immutable view of the global registry at one point in time."""

    before: tuple[Step, ...] = ()
    after: tuple[Step, ...] = ()
    wrapper: Wrapper | None = None


class Registry:
    """Shared, in-place mutable registry of global steps.

    Every chain derived from the same ``new()`` call holds a reference to one
    registry and reads it when a compiled handler runs, so registrations made
    after compiling still apply to earlier handlers.  Registration order is
    execution order.  Register during startup; the lock keeps concurrent
    registrations from losing entries, and readers always see a whole
    snapshot.
    """

    def __init__(
        self,
        settings: ChainSettings | None = None,
        telemetry: TelemetryPort | None = None,
    ) -> None:
        self.settings = settings if settings is not None else ChainSettings()
        self.telemetry: TelemetryPort = telemetry if telemetry is not None else NoopTelemetry()
        self.telemetry.bind(self.settings)
        self._lock = threading.RLock()
        self._layers = Layers()

    def use_before(self, *steps: Step) -> None:
        """Append global steps that run before every route's own steps."""
        if not steps:
            return
        with self._lock:
            layers = self._layers
            self._layers = Layers(layers.before + steps, layers.after, layers.wrapper)
        logger.debug("global before += {}", ", ".join(callable_name(s) for s in steps))

    def use_after(self, *steps: Step) -> None:
        """Append global steps that run after every route's own after-steps."""
        if not steps:
            return
        with self._lock:
            layers = self._layers
            self._layers = Layers(layers.before, layers.after + steps, layers.wrapper)
        logger.debug("global after += {}", ", ".join(callable_name(s) for s in steps))

    def use_wrap(self, wrapper: Wrapper | None) -> None:
        """Replace the global wrapper.  A route wrapper always takes precedence."""
        with self._lock:
            layers = self._layers
            self._layers = Layers(layers.before, layers.after, wrapper)
        logger.debug("global wrapper = {}", callable_name(wrapper) if wrapper is not None else None)

    def snapshot(self) -> Layers:
        # Single attribute read; Layers is immutable.
        return self._layers

    def __repr__(self) -> str:
        layers = self._layers
        return (
            f"Registry(before={[callable_name(s) for s in layers.before]}, "
            f"after={[callable_name(s) for s in layers.after]}, "
            f"wrapper={callable_name(layers.wrapper) if layers.wrapper else None})"
        )
