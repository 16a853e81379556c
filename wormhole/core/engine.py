"""
Incremental similarity-graph engine.

Every inserted soul is compared against the whole existing corpus; pairs
whose cosine similarity clears the admission threshold become wormhole
connections recorded under the inserting soul. The scan is exact and
O(corpus size) per insertion.

The engine assumes a single writer. Concurrent reads are safe only when
no insertion is in flight.
"""

import logging
import time
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from ..config import WormholeConfig
from .metrics import compute_metrics
from .normalize import normalize_features
from .types import (
    CodeSoul,
    FingerprintResult,
    Fingerprinter,
    GraphExport,
    GraphNode,
    MultiverseStats,
    WormholeConnection,
)

logger = logging.getLogger(__name__)


def coerce_fingerprint(result: Any) -> FingerprintResult:
    """
    Accept the shapes a fingerprint collaborator may reasonably return.

    Supported: ``FingerprintResult``, a ``(token, eigenvalues)`` pair, or a
    mapping with ``fingerprint`` and ``eigenvalues`` (or ``top_eigenvalues``).
    """
    if isinstance(result, FingerprintResult):
        return result
    if isinstance(result, Mapping):
        eigenvalues = result.get('eigenvalues', result.get('top_eigenvalues', []))
        return FingerprintResult(fingerprint=str(result['fingerprint']), eigenvalues=eigenvalues)
    if isinstance(result, tuple) and len(result) == 2:
        token, eigenvalues = result
        return FingerprintResult(fingerprint=str(token), eigenvalues=eigenvalues)
    raise TypeError(
        f"Fingerprinter returned unsupported type {type(result).__name__}; "
        "expected FingerprintResult, (token, eigenvalues) or a mapping"
    )


class WormholeEngine:
    """
    Owns the soul corpus and the connection index.

    ``_souls`` maps identifier to the latest ``CodeSoul`` stored under it.
    ``_connections`` maps identifier to connections discovered when a soul
    with that identifier was inserted, ordered by descending similarity.
    Earlier souls never receive the reverse edge.
    """
    
    def __init__(self, fingerprinter: Optional[Fingerprinter] = None,
                 config: Optional[WormholeConfig] = None,
                 dimensionality: Optional[int] = None) -> None:
        """
        Initialize the engine.
        
        Args:
            fingerprinter: Callable mapping source text to a fingerprint
                result; defaults to the built-in structural fingerprinter
            config: Engine configuration
            dimensionality: Overrides ``config.dimensionality``
        """
        self.config = config or WormholeConfig()
        if dimensionality is not None:
            if int(dimensionality) != dimensionality or dimensionality <= 0:
                raise ValueError(f"dimensionality must be a positive integer, got {dimensionality}")
            self._dimensionality = int(dimensionality)
        else:
            self._dimensionality = self.config.dimensionality
        
        if fingerprinter is None:
            from ..fingerprint import StructuralFingerprinter
            fingerprinter = StructuralFingerprinter(top_k=self.config.fingerprint_top_k)
        self.fingerprinter = fingerprinter
        
        self._souls: Dict[str, CodeSoul] = {}
        self._connections: Dict[str, List[WormholeConnection]] = {}
    
    @property
    def dimensionality(self) -> int:
        return self._dimensionality
    
    def __len__(self) -> int:
        return len(self._souls)
    
    def __contains__(self, soul_id: object) -> bool:
        return soul_id in self._souls
    
    def insert(self, code: str, soul_id: Optional[str] = None,
               origin: Optional[str] = None) -> Tuple[CodeSoul, List[WormholeConnection]]:
        """
        Add code to the multiverse and discover its wormholes.
        
        Fingerprinting happens before any mutation, so a failing
        collaborator leaves the engine untouched.
        
        Args:
            code: Raw source text
            soul_id: Identifier; defaults to the fingerprint token
            origin: Optional origin label
            
        Returns:
            The stored soul and the connections discovered for it, strongest first
        """
        start_time = time.time()
        result = coerce_fingerprint(self.fingerprinter(code))
        
        soul = CodeSoul(
            id=soul_id if soul_id is not None else result.fingerprint,
            code=code,
            fingerprint=result.fingerprint,
            eigenvalues=self._freeze(normalize_features(result.eigenvalues, self._dimensionality)),
            timestamp=datetime.now(),
            origin=origin,
        )
        
        if soul.id in self._souls:
            logger.debug(f"Overwriting soul {soul.id!r}")
        self._souls[soul.id] = soul
        
        connections = self._find_wormholes(soul)
        
        # Earlier connections under a reused identifier are kept
        existing = self._connections.get(soul.id, [])
        if existing:
            merged = existing + connections
            merged.sort(key=lambda c: c.similarity, reverse=True)
            self._connections[soul.id] = merged
        else:
            self._connections[soul.id] = list(connections)
        
        logger.debug(
            f"Inserted soul {soul.id!r}: {len(self._souls) - 1} comparisons, "
            f"{len(connections)} wormholes in {time.time() - start_time:.4f}s",
            extra={'soul_id': soul.id, 'origin': soul.origin},
        )
        return soul, connections
    
    def _find_wormholes(self, soul: CodeSoul) -> List[WormholeConnection]:
        """Score ``soul`` against every other soul and admit strong pairs."""
        cfg = self.config
        connections: List[WormholeConnection] = []
        
        for other_id, other in self._souls.items():
            if other_id == soul.id:
                continue
            
            metrics = compute_metrics(
                soul.eigenvalues, other.eigenvalues,
                steepness=cfg.stability_steepness,
                midpoint=cfg.stability_midpoint,
                harmonic_ratios=cfg.harmonic_ratios,
                base_frequency=cfg.base_frequency,
            )
            
            if metrics.similarity > cfg.admission_threshold:
                connections.append(WormholeConnection(
                    source=soul,
                    target=other,
                    similarity=metrics.similarity,
                    distance=metrics.distance,
                    energy=metrics.energy,
                    stability=metrics.stability,
                    resonance=metrics.resonance,
                ))
        
        # list.sort is stable: ties keep corpus order
        connections.sort(key=lambda c: c.similarity, reverse=True)
        return connections
    
    @staticmethod
    def _freeze(vector):
        vector.setflags(write=False)
        return vector
    
    def get_item(self, soul_id: str) -> Optional[CodeSoul]:
        """Return the soul stored under ``soul_id``, or None."""
        return self._souls.get(soul_id)
    
    def items(self) -> List[CodeSoul]:
        """Snapshot of all souls in corpus order."""
        return list(self._souls.values())
    
    def connections_for(self, soul_id: str) -> List[WormholeConnection]:
        """Copy of the connection list recorded under ``soul_id``."""
        return list(self._connections.get(soul_id, []))
    
    def _all_connections(self):
        for connections in self._connections.values():
            yield from connections
    
    def nearest_neighbors(self, soul_id: str, k: Optional[int] = None) -> List[WormholeConnection]:
        """
        Strongest ``k`` connections of a soul; empty for unknown ids.
        
        ``k`` defaults to ``config.neighbor_count``. Raises ValueError when
        ``k`` is negative.
        """
        if k is None:
            k = self.config.neighbor_count
        if k < 0:
            raise ValueError(f"k must be non-negative, got {k}")
        return list(self._connections.get(soul_id, [])[:k])
    
    def stable_connections(self, min_stability: Optional[float] = None) -> List[WormholeConnection]:
        """All connections with stability >= ``min_stability``."""
        if min_stability is None:
            min_stability = self.config.min_stability
        return [c for c in self._all_connections() if c.stability >= min_stability]
    
    def resonant_pairs(self, min_resonance: Optional[float] = None) -> List[WormholeConnection]:
        """All connections with resonance >= ``min_resonance``."""
        if min_resonance is None:
            min_resonance = self.config.min_resonance
        return [c for c in self._all_connections() if c.resonance >= min_resonance]
    
    def stats(self) -> MultiverseStats:
        """
        Aggregate statistics over the corpus.
        
        Density divides by the undirected pair count even though
        connections are stored per inserting soul.
        """
        total_items = len(self._souls)
        total_connections = 0
        similarity_sum = 0.0
        max_similarity = 0.0
        stable_count = 0
        resonant_count = 0
        
        for conn in self._all_connections():
            total_connections += 1
            similarity_sum += conn.similarity
            max_similarity = max(max_similarity, conn.similarity)
            if conn.stability > 0.8:
                stable_count += 1
            if conn.resonance > 0.7:
                resonant_count += 1
        
        return {
            'total_items': total_items,
            'total_connections': total_connections,
            'average_similarity': similarity_sum / total_connections if total_connections else 0.0,
            'max_similarity': max_similarity,
            'stable_connections': stable_count,
            'resonant_pairs': resonant_count,
            'connection_density': total_connections / max(1, total_items * (total_items - 1) / 2),
        }
    
    def export_graph(self) -> GraphExport:
        """Snapshot of nodes and edges for rendering or reporting consumers."""
        nodes: List[GraphNode] = [
            {
                'id': soul.id,
                'fingerprint': soul.fingerprint,
                'eigenvalues': soul.eigenvalues.tolist(),
                'origin': soul.origin,
            }
            for soul in self._souls.values()
        ]
        edges = [conn.to_edge() for conn in self._all_connections()]
        return {'nodes': nodes, 'edges': edges}
