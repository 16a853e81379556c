"""
Shared fixtures for wormhole tests.

Most engine tests inject ``VectorFingerprinter`` so that feature vectors
are chosen directly instead of derived from real source code.
"""

import logging
import math
from typing import Dict, List, Sequence

import pytest

from wormhole.core.engine import WormholeEngine
from wormhole.core.types import FingerprintResult


class VectorFingerprinter:
    """Maps known code strings to fixed feature vectors."""
    
    def __init__(self, vectors: Dict[str, Sequence[float]]):
        self.vectors = dict(vectors)
        self.calls: List[str] = []
    
    def __call__(self, code: str) -> FingerprintResult:
        self.calls.append(code)
        return FingerprintResult(fingerprint=f"fp-{code}", eigenvalues=list(self.vectors[code]))


def unit_at(degrees: float) -> List[float]:
    """2-D unit vector at the given angle from the first axis."""
    radians = math.radians(degrees)
    return [math.cos(radians), math.sin(radians)]


@pytest.fixture
def make_engine():
    """Factory building an engine over a vector table."""
    def _make(vectors: Dict[str, Sequence[float]], dimensionality: int = 10) -> WormholeEngine:
        return WormholeEngine(fingerprinter=VectorFingerprinter(vectors), dimensionality=dimensionality)
    return _make


@pytest.fixture
def fan_engine(make_engine):
    """
    Four souls inserted in order A, B, C, D on a 2-D fan.

    A at 0 degrees, B at 10, C at -5, D at 35. Every pair clears the
    admission threshold; only pairs within about 20 degrees are stable.
    """
    vectors = {
        "A": unit_at(0),
        "B": unit_at(10),
        "C": unit_at(-5),
        "D": unit_at(35),
    }
    engine = make_engine(vectors)
    for code in ("A", "B", "C", "D"):
        engine.insert(code, soul_id=code, origin=f"{code}.py")
    return engine


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo handlers the CLI installs so caplog sees package records."""
    yield
    package_logger = logging.getLogger("wormhole")
    package_logger.handlers.clear()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)
