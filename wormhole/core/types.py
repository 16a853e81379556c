"""Type definitions shared by the engine, the fingerprinters and consumers.

A ``CodeSoul`` is one stored code artifact; a ``WormholeConnection`` is an
admitted high-similarity bridge discovered when its source soul was
inserted. Both are immutable once created.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import (
    List,
    Optional,
    Protocol,
    Sequence,
    TypedDict,
    runtime_checkable,
)

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class FingerprintResult:
    """Output of a fingerprint collaborator.

    Attributes:
        fingerprint: Opaque content-derived token
        eigenvalues: Raw feature list; its length need not match the
            engine dimensionality
    """
    fingerprint: str
    eigenvalues: Sequence[float] = field(default_factory=list)


@runtime_checkable
class Fingerprinter(Protocol):
    """Anything that turns source text into a ``FingerprintResult``."""

    def __call__(self, code: str) -> FingerprintResult:
        ...


@dataclass(frozen=True, eq=False)
class CodeSoul:
    """A stored code artifact.

    Attributes:
        id: Identifier, unique within a corpus
        code: Raw source text
        fingerprint: Token produced by the fingerprint collaborator
        eigenvalues: Read-only feature vector of the engine dimensionality
        timestamp: Creation time
        origin: Optional free-form origin label (file or repository path)
    """
    id: str
    code: str
    fingerprint: str
    eigenvalues: NDArray[np.float64]
    timestamp: datetime
    origin: Optional[str] = None

    def __repr__(self) -> str:
        return f"CodeSoul(id={self.id!r}, fingerprint={self.fingerprint!r}, origin={self.origin!r})"


@dataclass(frozen=True)
class WormholeConnection:
    """An admitted bridge from a newly inserted soul to an earlier one."""
    source: CodeSoul
    target: CodeSoul
    similarity: float
    distance: float
    energy: float
    stability: float
    resonance: float

    def to_edge(self) -> GraphEdge:
        return {
            'source': self.source.id,
            'target': self.target.id,
            'similarity': self.similarity,
            'distance': self.distance,
            'energy': self.energy,
            'stability': self.stability,
            'resonance': self.resonance,
        }


class MultiverseStats(TypedDict):
    """Aggregate view over the corpus and its connections."""
    total_items: int
    total_connections: int
    average_similarity: float
    max_similarity: float
    stable_connections: int
    resonant_pairs: int
    connection_density: float


class GraphNode(TypedDict):
    id: str
    fingerprint: str
    eigenvalues: List[float]
    origin: Optional[str]


class GraphEdge(TypedDict):
    source: str
    target: str
    similarity: float
    distance: float
    energy: float
    stability: float
    resonance: float


class GraphExport(TypedDict):
    """Read-only snapshot handed to rendering or reporting consumers."""
    nodes: List[GraphNode]
    edges: List[GraphEdge]
