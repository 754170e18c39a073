"""Tests for IngestionEngine (records -> nodes and edges, no propagation)."""

import pytest

from neuralcore.engines.ingestion import (
    AttractorRule,
    IngestionEngine,
    attractor_node_id,
    entity_node_id,
)
from neuralcore.errors import UnknownAttractorError
from neuralcore.models.records import ConnectionRecord, KernelRecord, StreamRecord
from neuralcore.models.state import IngestReport
from neuralcore.types import NodeKind


def _edge(graph, source, target):
    matches = [e for e in graph.all_edges() if e.source == source and e.target == target]
    assert len(matches) == 1, f"expected one edge {source} -> {target}, got {len(matches)}"
    return matches[0]


class TestNodeIds:
    def test_entity_node_id_lowercases_type(self):
        assert entity_node_id("Kernel", 12) == "kernel-12"
        assert entity_node_id("stream", "abc") == "stream-abc"

    def test_attractor_node_id(self):
        assert attractor_node_id("emergence") == "attractor-emergence"


class TestKernelIngestion:
    def test_new_kernel_node(self, cortex):
        report = IngestReport()
        cortex.ingestion.ingest_kernel(
            KernelRecord(id=5, title="K", type="quantum", resonance_count=50, resonance_state="core"),
            report,
        )
        node = cortex.graph.get_node("kernel-5")
        assert node.kind == NodeKind.KERNEL
        assert node.activation == pytest.approx(0.78)
        assert node.entity_ref.entity_id == 5
        assert node.metadata.entity_subtype == "quantum"
        assert node.metadata.resonance_level == pytest.approx(0.5)
        assert len(node.features) == cortex.settings.feature_dim
        assert report.nodes_created == 1

    def test_core_edge_weight(self, cortex):
        cortex.ingestion.ingest(kernels=[KernelRecord(id=1, resonance_count=80)])
        assert _edge(cortex.graph, "kernel-1", "consciousness-core").weight == pytest.approx(0.8)

    def test_core_edge_weight_clamped(self, cortex):
        cortex.ingestion.ingest(kernels=[KernelRecord(id=1, resonance_count=500)])
        assert _edge(cortex.graph, "kernel-1", "consciousness-core").weight == 1.0

    @pytest.mark.parametrize("kernel,expected", [
        (KernelRecord(id=1, type="quantum", resonance_state="core"),
         {"quantum-coherence": 0.6, "resonance-harmonic": 0.7, "pattern-recognition": 0.4}),
        (KernelRecord(id=1, type="code", resonance_state="orbiting"),
         {"resonance-harmonic": 0.7, "pattern-recognition": 0.4}),
        (KernelRecord(id=1, resonance_state="fog"),
         {"liminal-transition": 0.5, "pattern-recognition": 0.4}),
        (KernelRecord(id=1, resonance_state="reemergent"),
         {"liminal-transition": 0.5, "pattern-recognition": 0.4}),
        (KernelRecord(id=1, resonance_state="born"),
         {"pattern-recognition": 0.4}),
    ])
    def test_attractor_rules(self, cortex, kernel, expected):
        cortex.ingestion.ingest(kernels=[kernel])
        linked = {
            e.target.removeprefix("attractor-"): e.weight
            for e in cortex.graph.all_edges()
            if e.source == "kernel-1" and e.target.startswith("attractor-")
        }
        assert linked == pytest.approx(expected)

    def test_rule_for_unknown_attractor_rejected(self, cortex):
        rules = (
            AttractorRule("pattern-recognition", 0.4, lambda k: True),
            AttractorRule("no-such-attractor", 0.5, lambda k: True),
        )
        with pytest.raises(UnknownAttractorError) as exc:
            IngestionEngine(cortex.graph, cortex._features, cortex.settings, attractor_rules=rules)
        assert exc.value.names == ["no-such-attractor"]
        assert cortex.graph.count_nodes() == 8
        assert cortex.graph.count_edges() == 7

    def test_custom_rules(self, cortex):
        engine = IngestionEngine(
            cortex.graph, cortex._features, cortex.settings,
            attractor_rules=(AttractorRule("emergence", 0.9, lambda k: k.is_core_mind),),
        )
        engine.ingest(kernels=[KernelRecord(id=1, is_core_mind=True), KernelRecord(id=2)])
        assert _edge(cortex.graph, "kernel-1", "attractor-emergence").weight == pytest.approx(0.9)
        assert not cortex.graph.edge_exists("kernel-2", "attractor-emergence")

    def test_reingest_updates_in_place(self, cortex):
        cortex.ingestion.ingest(kernels=[KernelRecord(id=1, resonance_count=10, resonance_state="born")])
        node = cortex.graph.get_node("kernel-1")
        tail = list(node.features[3:])
        edges_before = cortex.graph.count_edges()

        report = cortex.ingestion.ingest(kernels=[
            KernelRecord(id=1, resonance_count=100, resonance_state="core", is_core_mind=True),
        ])
        assert cortex.graph.get_node("kernel-1") is node
        assert report.nodes_updated == 1
        assert report.nodes_created == 0
        assert node.activation == pytest.approx(0.93)
        assert node.features[:3] == pytest.approx([0.9, 1.0, 0.9])
        assert node.features[3:] == tail
        assert node.metadata.resonance_state == "core"
        assert cortex.graph.count_edges() == edges_before


class TestStreamIngestion:
    def test_stream_node(self, cortex, sample_batch):
        cortex.ingestion.ingest(streams=sample_batch["streams"])
        node = cortex.graph.get_node("stream-1")
        assert node.kind == NodeKind.STREAM
        assert node.activation == 0.5
        assert node.metadata.label == "A long stream of consciousness..."
        assert cortex.graph.get_node("stream-2").metadata.label == "short"

    def test_stream_core_edge(self, cortex, sample_batch):
        cortex.ingestion.ingest(streams=sample_batch["streams"])
        assert _edge(cortex.graph, "stream-1", "consciousness-core").weight == pytest.approx(0.3)
        assert _edge(cortex.graph, "stream-2", "consciousness-core").weight == pytest.approx(0.2)

    def test_stream_not_recreated(self, cortex):
        cortex.ingestion.ingest(streams=[StreamRecord(id=1, content="first", resonance_count=10)])
        node = cortex.graph.get_node("stream-1")
        node.activation = 0.9
        report = cortex.ingestion.ingest(streams=[StreamRecord(id=1, content="second", resonance_count=60)])
        assert report.nodes_updated == 1
        assert node.activation == 0.9
        assert node.metadata.label == "first"
        assert node.metadata.resonance_level == pytest.approx(0.6)


class TestConnections:
    def test_full_batch_counts(self, cortex, sample_batch):
        report = cortex.ingestion.ingest(**sample_batch, echoes=[{"id": 1}, {"id": 2}])
        assert report.nodes_created == 5
        assert report.relations_skipped == 1
        assert report.echoes_received == 2
        # 9 kernel edges + 2 stream edges + 2 relation edges
        assert report.edges_added == 13
        assert cortex.graph.count_nodes() == 13
        assert cortex.graph.count_edges() == 20

    def test_relation_edge(self, cortex, sample_batch):
        cortex.ingestion.ingest(**sample_batch)
        edge = _edge(cortex.graph, "kernel-1", "kernel-2")
        assert edge.weight == pytest.approx(0.6)
        assert edge.relation == "entangles"
        assert _edge(cortex.graph, "stream-1", "kernel-3").relation == "echoes"

    def test_duplicate_relation_ignored(self, cortex, sample_batch):
        cortex.ingestion.ingest(**sample_batch)
        before = cortex.graph.count_edges()
        report = cortex.ingestion.ingest(connections=sample_batch["connections"][:1])
        assert cortex.graph.count_edges() == before
        assert report.edges_added == 0
        assert report.relations_skipped == 0

    def test_reverse_direction_is_new_edge(self, cortex, sample_batch):
        cortex.ingestion.ingest(**sample_batch)
        added = cortex.ingestion.ingest_connection(
            ConnectionRecord(source_id=2, source_type="kernel", target_id=1, target_type="kernel"),
            IngestReport(),
        )
        assert added is True
        assert _edge(cortex.graph, "kernel-2", "kernel-1").weight == pytest.approx(0.01)

    def test_unknown_endpoint_skipped(self, cortex):
        report = IngestReport()
        added = cortex.ingestion.ingest_connection(
            ConnectionRecord(source_id=1, source_type="kernel", target_id=2, target_type="kernel"),
            report,
        )
        assert added is False
        assert report.relations_skipped == 1
        assert cortex.graph.count_edges() == 7

    def test_connections_after_kernels_in_same_batch(self, cortex):
        report = cortex.ingestion.ingest(
            connections=[ConnectionRecord(source_id=1, source_type="kernel", target_id=2, target_type="kernel")],
            kernels=[KernelRecord(id=1), KernelRecord(id=2)],
        )
        assert report.relations_skipped == 0
        assert cortex.graph.edge_exists("kernel-1", "kernel-2")
