"""
Wormhole traversal: a cosmetic line-level blend of two connected souls.

The outcome is random and carries no correctness guarantee. Pass a seeded
``random.Random`` for reproducible output.
"""

import random
from dataclasses import dataclass
from itertools import zip_longest
from typing import Optional

from .core.types import WormholeConnection


@dataclass(frozen=True)
class TraversalResult:
    transformed_code: str
    energy_cost: float
    traversal_time: float


def traverse_wormhole(connection: WormholeConnection,
                      rng: Optional[random.Random] = None) -> TraversalResult:
    """
    Blend the source soul's code toward the target's.

    Line ``i`` of the result is taken from the target with probability
    ``connection.similarity``, otherwise from the source. The shorter side
    contributes empty lines.
    """
    rng = rng or random.Random()
    from_lines = connection.source.code.split('\n')
    to_lines = connection.target.code.split('\n')

    blended = [
        to_line if rng.random() < connection.similarity else from_line
        for from_line, to_line in zip_longest(from_lines, to_lines, fillvalue='')
    ]

    if connection.stability == 0:
        traversal_time = float('inf')
    else:
        traversal_time = connection.distance / connection.stability

    return TraversalResult(
        transformed_code='\n'.join(blended),
        energy_cost=connection.energy,
        traversal_time=traversal_time,
    )
