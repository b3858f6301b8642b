"""Chain builder, global registry and callable contracts."""

from middlechain.core.chain import Chain, new
from middlechain.core.ports import Handler, Proceed, Step, Wrapper
from middlechain.core.registry import Layers, Registry

__all__ = [
    "Chain",
    "Handler",
    "Layers",
    "Proceed",
    "Registry",
    "Step",
    "Wrapper",
    "new",
]
