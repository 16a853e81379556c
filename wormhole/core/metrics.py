"""
Pairwise metrics between feature vectors.

All functions are pure and accept any 1-D numeric sequence. The engine
calls ``compute_metrics`` once per (new soul, existing soul) pair.
"""

import math
from typing import NamedTuple, Optional, Sequence, Union

import numpy as np
from numpy.typing import NDArray
from scipy.special import expit

from ..config import DEFAULT_HARMONIC_RATIOS

VectorLike = Union[Sequence[float], NDArray[np.float64]]

STABILITY_STEEPNESS = 10.0
STABILITY_MIDPOINT = 0.8
BASE_FREQUENCY = 432.0


class PairMetrics(NamedTuple):
    """The five scalars derived for one pair of souls."""
    similarity: float
    distance: float
    energy: float
    stability: float
    resonance: float


def euclidean_distance(v1: VectorLike, v2: VectorLike) -> float:
    """Euclidean norm of ``v1 - v2``."""
    a = np.asarray(v1, dtype=np.float64)
    b = np.asarray(v2, dtype=np.float64)
    return float(np.linalg.norm(a - b))


def cosine_similarity(v1: VectorLike, v2: VectorLike) -> float:
    """
    Cosine similarity in [-1, 1].

    Defined as exactly 0.0 when either vector has zero norm.
    """
    a = np.asarray(v1, dtype=np.float64)
    b = np.asarray(v2, dtype=np.float64)
    norm1 = np.linalg.norm(a)
    norm2 = np.linalg.norm(b)

    if norm1 == 0 or norm2 == 0:
        return 0.0

    return float(np.clip(np.dot(a, b) / (norm1 * norm2), -1.0, 1.0))


def wormhole_energy(distance: float, similarity: float) -> float:
    """
    Energy required to traverse a wormhole: ``distance**2 / similarity``.

    Lower similarity means higher energy; zero similarity is infinitely
    expensive.
    """
    if similarity == 0:
        return math.inf
    return (distance * distance) / similarity


def wormhole_stability(similarity: float,
                       steepness: float = STABILITY_STEEPNESS,
                       midpoint: float = STABILITY_MIDPOINT) -> float:
    """Logistic stability curve, 0.5 at ``midpoint``."""
    return float(expit(steepness * (similarity - midpoint)))


def harmonic_resonance(eigen1: VectorLike, eigen2: VectorLike,
                       harmonic_ratios: Optional[Sequence[float]] = None,
                       base_frequency: float = BASE_FREQUENCY) -> float:
    """
    Harmonic resonance between two eigenvalue lists.

    Each coordinate pair is mapped to frequencies ``base_frequency * e``;
    the frequency ratio scores ``exp(-(ratio - h)**2)`` against the closest
    harmonic ratio ``h`` (unison, octave, fifth, fourth). The result is the
    mean score over the compared coordinates.

    Coordinates where ``eigen1`` is zero have no defined ratio and are
    excluded from the mean. Returns 0.0 when nothing is compared.
    """
    ratios = np.asarray(
        harmonic_ratios if harmonic_ratios is not None else DEFAULT_HARMONIC_RATIOS,
        dtype=np.float64,
    )
    a = np.asarray(eigen1, dtype=np.float64).ravel()
    b = np.asarray(eigen2, dtype=np.float64).ravel()
    n = min(a.size, b.size)
    a, b = a[:n], b[:n]

    defined = a != 0
    if not defined.any():
        return 0.0

    freq1 = base_frequency * a[defined]
    freq2 = base_frequency * b[defined]
    ratio = freq2 / freq1

    scores = np.exp(-np.square(ratio[:, None] - ratios[None, :])).max(axis=1)
    return float(scores.mean())


def compute_metrics(v1: VectorLike, v2: VectorLike,
                    steepness: float = STABILITY_STEEPNESS,
                    midpoint: float = STABILITY_MIDPOINT,
                    harmonic_ratios: Optional[Sequence[float]] = None,
                    base_frequency: float = BASE_FREQUENCY) -> PairMetrics:
    """Compute all pair metrics for ``v1`` (new soul) against ``v2``."""
    distance = euclidean_distance(v1, v2)
    similarity = cosine_similarity(v1, v2)
    return PairMetrics(
        similarity=similarity,
        distance=distance,
        energy=wormhole_energy(distance, similarity),
        stability=wormhole_stability(similarity, steepness, midpoint),
        resonance=harmonic_resonance(v1, v2, harmonic_ratios, base_frequency),
    )
