"""Core similarity-graph engine: types, normalization, metrics, engine."""

from .types import (
    CodeSoul,
    WormholeConnection,
    FingerprintResult,
    Fingerprinter,
    MultiverseStats,
    GraphExport,
)
from .normalize import normalize_features
from .metrics import (
    euclidean_distance,
    cosine_similarity,
    wormhole_energy,
    wormhole_stability,
    harmonic_resonance,
)
from .engine import WormholeEngine

__all__ = [
    'CodeSoul',
    'WormholeConnection',
    'FingerprintResult',
    'Fingerprinter',
    'MultiverseStats',
    'GraphExport',
    'normalize_features',
    'euclidean_distance',
    'cosine_similarity',
    'wormhole_energy',
    'wormhole_stability',
    'harmonic_resonance',
    'WormholeEngine',
]
