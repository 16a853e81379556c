"""Tests for wormhole traversal."""

import math
import random

import pytest

from wormhole.core.engine import WormholeEngine
from wormhole.traversal import TraversalResult, traverse_wormhole

from conftest import VectorFingerprinter


@pytest.fixture
def connection():
    source = "a1\na2\na3"
    target = "b1\nb2\nb3\nb4"
    engine = WormholeEngine(fingerprinter=VectorFingerprinter({
        target: [1.0, 0.0],
        source: [1.0, 0.2],
    }))
    engine.insert(target, soul_id="target")
    _, bridges = engine.insert(source, soul_id="source")
    return bridges[0]


class TestTraverseWormhole:
    
    def test_seeded_rng_is_reproducible(self, connection):
        first = traverse_wormhole(connection, random.Random(42))
        second = traverse_wormhole(connection, random.Random(42))
        
        assert first == second
    
    def test_lines_come_from_either_side(self, connection):
        result = traverse_wormhole(connection, random.Random(1))
        lines = result.transformed_code.split("\n")
        
        assert len(lines) == 4
        for i, line in enumerate(lines[:3]):
            assert line in (f"a{i + 1}", f"b{i + 1}")
        assert lines[3] in ("", "b4")
    
    def test_blend_follows_injected_stream(self, connection):
        class Always:
            def __init__(self, value):
                self.value = value
            
            def random(self):
                return self.value
        
        assert traverse_wormhole(connection, Always(0.0)).transformed_code == "b1\nb2\nb3\nb4"
        assert traverse_wormhole(connection, Always(0.999999)).transformed_code == "a1\na2\na3\n"
    
    def test_costs(self, connection):
        result = traverse_wormhole(connection, random.Random(0))
        
        assert isinstance(result, TraversalResult)
        assert result.energy_cost == connection.energy
        assert result.traversal_time == pytest.approx(connection.distance / connection.stability)
    
    def test_default_rng(self, connection):
        result = traverse_wormhole(connection)
        assert math.isfinite(result.traversal_time)
