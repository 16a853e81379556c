"""Wormhole Engine - find structural bridges between pieces of code."""

__version__ = "0.1.0"

from .config import WormholeConfig
from .core.engine import WormholeEngine
from .core.types import CodeSoul, WormholeConnection, FingerprintResult
from .errors import WormholeError, FingerprintError, ConfigurationError
from .fingerprint import StructuralFingerprinter
from .traversal import traverse_wormhole, TraversalResult

__all__ = [
    "WormholeEngine",
    "WormholeConfig",
    "CodeSoul",
    "WormholeConnection",
    "FingerprintResult",
    "StructuralFingerprinter",
    "WormholeError",
    "FingerprintError",
    "ConfigurationError",
    "traverse_wormhole",
    "TraversalResult",
    "__version__",
]
