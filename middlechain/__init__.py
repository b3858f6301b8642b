"""Compose request handlers from ordered before/after steps and an optional wrapper."""

from middlechain.config.schema import ChainSettings
from middlechain.core import Chain, Handler, Layers, Proceed, Registry, Step, Wrapper, new

__version__ = "0.1.0"

__all__ = [
    "Chain",
    "ChainSettings",
    "Handler",
    "Layers",
    "Proceed",
    "Registry",
    "Step",
    "Wrapper",
    "new",
]
