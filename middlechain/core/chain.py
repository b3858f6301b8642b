"""Route chain builder and the compiled request pipeline.

A ``Chain`` is an immutable value.  ``before``/``after``/``wrap`` return a new
chain, so one base chain can be branched into many routes without steps
leaking between them.  ``use_before``/``use_after``/``use_wrap`` go to the
shared :class:`Registry` instead and affect every chain built from it.

Usage::

    chain = middlechain.new()
    chain.use_before(log_request)           # every route
    api = chain.before(require_auth)        # branch for API routes
    handler = api.after(add_headers).then(list_users)
    handler(response, request)

Execution order of a compiled handler::

    global before → route before → wrapper(handler) or handler
                  → route after → global after

A step returning ``False`` stops everything after it.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from typing import Any

from loguru import logger

from middlechain.config.schema import ChainSettings
from middlechain.core.ports import Handler, Step, Wrapper
from middlechain.core.registry import Registry, callable_name
from middlechain.telemetry import TelemetryPort


@dataclass(frozen=True, slots=True, repr=False)
class Chain:
    """Immutable per-route configuration bound to a shared global registry."""

    before_steps: tuple[Step, ...] = ()
    after_steps: tuple[Step, ...] = ()
    wrapper: Wrapper | None = None
    registry: Registry = field(default_factory=Registry, compare=False)

    # ── Route scope (returns a new chain) ────────────────────────────

    def before(self, *steps: Step) -> Chain:
        """Return a chain with *steps* appended to the route's before-steps."""
        return replace(self, before_steps=self.before_steps + steps)

    def after(self, *steps: Step) -> Chain:
        """Return a chain with *steps* appended to the route's after-steps."""
        return replace(self, after_steps=self.after_steps + steps)

    def wrap(self, wrapper: Wrapper | None) -> Chain:
        """Return a chain whose route wrapper is *wrapper* (replacing any previous one)."""
        return replace(self, wrapper=wrapper)

    # ── Global scope (mutates the shared registry) ───────────────────

    def use_before(self, *steps: Step) -> None:
        self.registry.use_before(*steps)

    def use_after(self, *steps: Step) -> None:
        self.registry.use_after(*steps)

    def use_wrap(self, wrapper: Wrapper | None) -> None:
        self.registry.use_wrap(wrapper)

    # ── Compilation ──────────────────────────────────────────────────

    def then(self, handler: Handler) -> Handler:
        """Bind *handler* as the terminal and return the executable handler.

        The returned callable takes the same arguments as *handler* and passes
        them to every step.  Route steps and the route wrapper are fixed now;
        global steps and the global wrapper are read from the registry on each
        call.  It returns the wrapper's result when a wrapper is in effect,
        the handler's result otherwise, and ``None`` when a before-step
        aborted.
        """
        registry = self.registry
        route_before = self.before_steps
        route_after = self.after_steps
        route_wrapper = self.wrapper
        name = callable_name(handler)

        @functools.wraps(handler)
        def run(*args: Any, **kwargs: Any) -> Any:
            layers = registry.snapshot()
            settings = registry.settings
            telemetry = registry.telemetry
            labels = (("handler", name),)
            started = time.perf_counter()
            if settings.metrics_enabled:
                telemetry.incr("chain_invocations_total", labels=labels)

            if not _run_steps(layers.before, "global_before", name, settings, telemetry, args, kwargs):
                return None
            if not _run_steps(route_before, "route_before", name, settings, telemetry, args, kwargs):
                return None

            wrapper = route_wrapper if route_wrapper is not None else layers.wrapper
            if wrapper is None:
                result = handler(*args, **kwargs)
            else:

                def proceed(*new_args: Any, **new_kwargs: Any) -> Any:
                    if new_args or new_kwargs:
                        return handler(*new_args, **new_kwargs)
                    return handler(*args, **kwargs)

                result = wrapper(*args, proceed, **kwargs)
            if settings.metrics_enabled:
                telemetry.incr("chain_completed_total", labels=labels)

            if _run_steps(route_after, "route_after", name, settings, telemetry, args, kwargs):
                _run_steps(layers.after, "global_after", name, settings, telemetry, args, kwargs)
            if settings.metrics_enabled:
                telemetry.timing("chain_duration_seconds", time.perf_counter() - started, labels=labels)
            return result

        return run

    compile = then

    def __repr__(self) -> str:
        wrapper = callable_name(self.wrapper) if self.wrapper is not None else None
        return (
            f"Chain(before={[callable_name(s) for s in self.before_steps]}, "
            f"after={[callable_name(s) for s in self.after_steps]}, "
            f"wrapper={wrapper}, registry={self.registry!r})"
        )


def new(
    settings: ChainSettings | None = None,
    telemetry: TelemetryPort | None = None,
) -> Chain:
    """Create an empty chain bound to a fresh global registry."""
    return Chain(registry=Registry(settings=settings, telemetry=telemetry))


def _run_steps(
    steps: Sequence[Step],
    scope: str,
    handler_name: str,
    settings: ChainSettings,
    telemetry: TelemetryPort,
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> bool:
    """Run *steps* in order; return ``False`` as soon as one returns ``False``."""
    for step in steps:
        if settings.trace_steps:
            logger.trace("{} {} -> {}", handler_name, scope, callable_name(step))
        result = step(*args, **kwargs)
        if result is not True and result is not False:
            logger.warning(
                "{} {} step {} returned {!r}, not a bool; continuing",
                handler_name,
                scope,
                callable_name(step),
                result,
            )
        if result is False:
            if settings.log_aborts:
                logger.debug("{} aborted at {} step {}", handler_name, scope, callable_name(step))
            if settings.metrics_enabled:
                telemetry.incr(
                    "chain_aborts_total",
                    labels=(("handler", handler_name), ("scope", scope)),
                )
            return False
    return True
