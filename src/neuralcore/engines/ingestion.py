"""IngestionEngine - turns domain records into graph nodes and edges.

Order of a batch:
1. Kernels (primary entities): create or update in place; new kernels
   link to the core and to attractors picked by the rule table
2. Streams (secondary entities): created once with a weaker core link
3. Echoes: counted only
4. Connection records: deduplicated edges between known entities;
   records naming unknown entities are skipped, not raised

Propagation is run by the caller (``CerebralCortex.ingest``).
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable

from neuralcore.activation.features import (
    SeededFeatureGenerator,
    normalized_popularity,
    refresh_features,
    seed_activation,
)
from neuralcore.config import (
    ATTRACTOR_PREFIX,
    ATTRACTOR_RULE_WEIGHTS,
    CORE_NODE_ID,
    RELATION_ENTITY_ATTRACTOR,
    STREAM_INITIAL_ACTIVATION,
    STREAM_LABEL_LENGTH,
)
from neuralcore.errors import UnknownAttractorError
from neuralcore.models.edge import NeuralEdge
from neuralcore.models.node import EntityRef, NeuralNode, NodeMetadata
from neuralcore.models.records import ConnectionRecord, EchoRecord, KernelRecord, StreamRecord
from neuralcore.models.state import IngestReport
from neuralcore.settings import CortexSettings
from neuralcore.storage.graph_store import GraphStore
from neuralcore.types import NodeKind, ResonanceState

logger = logging.getLogger("neuralcore-ingest")


def entity_node_id(entity_type: str, entity_id) -> str:
    """Node id for a domain entity, e.g. ``kernel-12``."""
    return f"{entity_type.lower()}-{entity_id}"


def attractor_node_id(name: str) -> str:
    return f"{ATTRACTOR_PREFIX}{name}"


@dataclass(frozen=True)
class AttractorRule:
    """Link a new kernel to ``attractor`` at ``weight`` when ``applies`` holds."""
    attractor: str
    weight: float
    applies: Callable[[KernelRecord], bool]


DEFAULT_ATTRACTOR_RULES: tuple[AttractorRule, ...] = (
    AttractorRule(
        "quantum-coherence",
        ATTRACTOR_RULE_WEIGHTS["quantum-coherence"],
        lambda k: k.type == "quantum",
    ),
    AttractorRule(
        "resonance-harmonic",
        ATTRACTOR_RULE_WEIGHTS["resonance-harmonic"],
        lambda k: k.resonance_state in (ResonanceState.ORBITING.value, ResonanceState.CORE.value),
    ),
    AttractorRule(
        "liminal-transition",
        ATTRACTOR_RULE_WEIGHTS["liminal-transition"],
        lambda k: k.resonance_state in (ResonanceState.FOG.value, ResonanceState.REEMERGENT.value),
    ),
    AttractorRule(
        "pattern-recognition",
        ATTRACTOR_RULE_WEIGHTS["pattern-recognition"],
        lambda k: True,
    ),
)


class IngestionEngine:
    """Writes ingested records into the graph store.

    Every attractor named by ``attractor_rules`` must already be in the
    graph; construction raises ``UnknownAttractorError`` otherwise.
    """

    def __init__(
        self,
        graph: GraphStore,
        features: SeededFeatureGenerator,
        settings: CortexSettings,
        attractor_rules: tuple[AttractorRule, ...] = DEFAULT_ATTRACTOR_RULES,
        core_id: str = CORE_NODE_ID,
    ):
        self._graph = graph
        self._features = features
        self._settings = settings
        self._rules = attractor_rules
        self._core_id = core_id

        missing = [
            rule.attractor for rule in attractor_rules
            if not graph.has_node(attractor_node_id(rule.attractor))
        ]
        if missing:
            raise UnknownAttractorError(missing)

    # =========================================================================
    # Batch entry point
    # =========================================================================

    def ingest(
        self,
        kernels: Iterable[KernelRecord] = (),
        streams: Iterable[StreamRecord] = (),
        echoes: Iterable[EchoRecord] = (),
        connections: Iterable[ConnectionRecord] = (),
    ) -> IngestReport:
        """Apply one batch of records. Kernels are always processed first."""
        report = IngestReport()
        for kernel in kernels:
            self.ingest_kernel(kernel, report)
        for stream in streams:
            self.ingest_stream(stream, report)
        report.echoes_received = sum(1 for _ in echoes)
        for connection in connections:
            self.ingest_connection(connection, report)

        logger.info(
            f"Ingested batch: {report.nodes_created} created, {report.nodes_updated} updated, "
            f"{report.edges_added} edges, {report.relations_skipped} relations skipped"
        )
        return report

    # =========================================================================
    # Kernels
    # =========================================================================

    def ingest_kernel(self, kernel: KernelRecord, report: IngestReport) -> NeuralNode:
        """Create a kernel node, or refresh it in place if already known."""
        s = self._settings
        node_id = entity_node_id(NodeKind.KERNEL.value, kernel.id)
        popularity = normalized_popularity(kernel.resonance_count, s.popularity_scale)
        activation = seed_activation(
            kernel.resonance_count,
            kernel.resonance_state,
            scale=s.popularity_scale,
            popularity_weight=s.popularity_weight,
            state_weight=s.state_weight,
        )

        existing = self._graph.get_node(node_id)
        if existing is not None:
            existing.activation = activation
            existing.metadata.resonance_level = popularity
            existing.metadata.resonance_state = kernel.resonance_state
            existing.metadata.last_updated = datetime.now()
            refresh_features(
                existing.features,
                kernel.resonance_state,
                popularity,
                kernel.is_core_mind,
                protected=s.protected_slice,
            )
            report.nodes_updated += 1
            return existing

        node = NeuralNode(
            id=node_id,
            kind=NodeKind.KERNEL,
            activation=activation,
            features=self._features.generate(s.feature_dim),
            entity_ref=EntityRef(entity_id=kernel.id, entity_type=NodeKind.KERNEL.value),
            metadata=NodeMetadata(
                label=kernel.title or None,
                resonance_level=popularity,
                resonance_state=kernel.resonance_state,
                entity_subtype=kernel.type,
                created_at=kernel.created_at or datetime.now(),
            ),
        )
        self._graph.add_node(node)
        report.nodes_created += 1

        self._link(
            node_id, self._core_id,
            s.kernel_edge_base + max(kernel.resonance_count, 0) / s.kernel_edge_scale,
            "kernel-consciousness", report,
        )
        for rule in self._rules:
            if rule.applies(kernel):
                self._link(
                    node_id, attractor_node_id(rule.attractor),
                    rule.weight, RELATION_ENTITY_ATTRACTOR, report,
                )
        return node

    # =========================================================================
    # Streams
    # =========================================================================

    def ingest_stream(self, stream: StreamRecord, report: IngestReport) -> NeuralNode:
        """Create a stream node once; later sightings only refresh metadata."""
        s = self._settings
        node_id = entity_node_id(NodeKind.STREAM.value, stream.id)
        popularity = normalized_popularity(stream.resonance_count, s.popularity_scale)

        existing = self._graph.get_node(node_id)
        if existing is not None:
            existing.metadata.resonance_level = popularity
            existing.metadata.last_updated = datetime.now()
            report.nodes_updated += 1
            return existing

        label = stream.content[:STREAM_LABEL_LENGTH]
        if len(stream.content) > STREAM_LABEL_LENGTH:
            label += "..."

        node = NeuralNode(
            id=node_id,
            kind=NodeKind.STREAM,
            activation=STREAM_INITIAL_ACTIVATION,
            features=self._features.generate(s.feature_dim),
            entity_ref=EntityRef(entity_id=stream.id, entity_type=NodeKind.STREAM.value),
            metadata=NodeMetadata(
                label=label or None,
                resonance_level=popularity,
                created_at=stream.created_at or datetime.now(),
            ),
        )
        self._graph.add_node(node)
        report.nodes_created += 1

        self._link(
            node_id, self._core_id,
            s.stream_edge_base + max(stream.resonance_count, 0) / s.stream_edge_scale,
            "stream-consciousness", report,
        )
        return node

    # =========================================================================
    # Connection records
    # =========================================================================

    def ingest_connection(self, connection: ConnectionRecord, report: IngestReport) -> bool:
        """Add an edge for a relation record if both ends are known and unlinked.

        Records that reference entities outside the graph are skipped: relation
        data may point at entities that have not been ingested yet.

        Returns:
            True if an edge was added.
        """
        source_id = entity_node_id(connection.source_type, connection.source_id)
        target_id = entity_node_id(connection.target_type, connection.target_id)

        if not (self._graph.has_node(source_id) and self._graph.has_node(target_id)):
            logger.debug(f"Skipping relation {source_id} -> {target_id}: unknown endpoint")
            report.relations_skipped += 1
            return False
        if self._graph.edge_exists(source_id, target_id):
            return False

        self._link(
            source_id, target_id,
            connection.connection_strength / self._settings.relation_strength_scale,
            connection.symbolic_relation, report,
        )
        return True

    # =========================================================================
    # Helpers
    # =========================================================================

    def _link(self, source: str, target: str, weight: float, relation: str, report: IngestReport) -> None:
        self._graph.add_edge(NeuralEdge(
            source=source,
            target=target,
            weight=weight,
            relation=relation,
            features=self._features.generate(self._settings.edge_feature_dim),
        ))
        report.edges_added += 1
