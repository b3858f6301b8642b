"""Callable contracts for chain steps, wrappers and handlers.

Steps and wrappers are plain callables.  Closures, functions and objects
with ``__call__`` all satisfy these protocols; nothing needs to inherit
from them.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

Handler = Callable[..., Any]
"""Terminal handler: the innermost business logic, called with the in-flight arguments."""


@runtime_checkable
class Step(Protocol):
    """One ordered pre- or post-processing unit.

    Called with the same arguments as the terminal handler.  Return ``True``
    to continue, or ``False`` to abort the rest of the chain.  Any other
    result is logged as a warning and treated as continue.  Whatever
    the step wrote to the response before aborting is the final output.
    """

    def __call__(self, *args: Any, **kwargs: Any) -> bool: ...


@runtime_checkable
class Proceed(Protocol):
    """The ``next`` callable handed to a wrapper.

    ``proceed()`` runs the terminal handler with the in-flight arguments.
    Passing arguments replaces them for that call only.
    """

    def __call__(self, *args: Any, **kwargs: Any) -> Any: ...


@runtime_checkable
class Wrapper(Protocol):
    """Enclosing unit around the terminal handler.

    Called as ``wrapper(*args, proceed, **kwargs)``: ``proceed`` takes the
    positional slot right after the positional arguments the handler was
    called with, and keyword arguments follow unchanged.  A transport that
    passes the request by keyword, as in ``handler(w, r=req)``, needs a
    wrapper shaped ``(w, proceed, *, r)``.  The wrapper decides whether, when
    and how often ``proceed`` runs, and may do work on both sides.
    """

    def __call__(self, *args: Any, **kwargs: Any) -> Any: ...
