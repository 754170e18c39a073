"""Shared test fixtures for neuralcore."""

import pytest

from neuralcore.cortex import CerebralCortex
from neuralcore.models.records import ConnectionRecord, KernelRecord, StreamRecord
from neuralcore.settings import CortexSettings
from neuralcore.storage.graph_store import GraphStore


@pytest.fixture
def settings():
    """Default settings with a fixed feature seed."""
    return CortexSettings(feature_seed=42)


@pytest.fixture
def cortex(settings):
    """Fresh engine: core node + attractors, no entities."""
    return CerebralCortex(settings)


@pytest.fixture
def graph_store():
    """Empty GraphStore."""
    return GraphStore()


@pytest.fixture
def sample_batch():
    """A small batch touching every ingestion path."""
    return {
        "kernels": [
            KernelRecord(id=1, title="Quantum dream", type="quantum",
                         resonance_count=80, resonance_state="core", is_core_mind=True),
            KernelRecord(id=2, title="Foggy code", type="code",
                         resonance_count=10, resonance_state="fog"),
            KernelRecord(id=3, title="Fresh thought", type="dream",
                         resonance_count=0, resonance_state="born"),
        ],
        "streams": [
            StreamRecord(id=1, content="A long stream of consciousness that keeps going", resonance_count=30),
            StreamRecord(id=2, content="short", resonance_count=0),
        ],
        "connections": [
            ConnectionRecord(source_id=1, source_type="Kernel", target_id=2, target_type="Kernel",
                             connection_strength=60, symbolic_relation="entangles"),
            ConnectionRecord(source_id=1, source_type="stream", target_id=3, target_type="kernel",
                             connection_strength=40, symbolic_relation="echoes"),
            ConnectionRecord(source_id=99, source_type="kernel", target_id=1, target_type="kernel",
                             connection_strength=50, symbolic_relation="orphan"),
        ],
    }
