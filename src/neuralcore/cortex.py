"""CerebralCortex - the coordinator that owns one activation graph.

Wires together:
- GraphStore (nodes/edges + igraph index)
- SeededFeatureGenerator (deterministic feature vectors)
- IngestionEngine (records -> nodes/edges)
- propagation (decay, message passing, core amplification, attractor blend)
- StateReporter (state summary, display export, kernel feedback)

The ingest pipeline:
1. Kernels, streams, echoes, connection records -> graph
2. Propagation over a fixed number of steps
3. Core amplification from kernels, attractor re-blend

Construct one instance and pass it to whatever needs it; there is no
module-level instance. All public methods serialize on one re-entrant
lock, so a shared instance is safe behind concurrent request handlers.
"""

import logging
import math
import threading
from datetime import datetime
from typing import Any, Iterable, Optional, Type, TypeVar, Union

from pydantic import BaseModel

from neuralcore.activation.features import SeededFeatureGenerator
from neuralcore.activation.propagation import amplify_core, blend_attractors, propagate_activation
from neuralcore.config import (
    ATTRACTOR_BASE_STRENGTH,
    ATTRACTOR_INITIAL_ACTIVATION,
    ATTRACTOR_NAMES,
    ATTRACTOR_STRENGTH_SWING,
    CORE_ATTRACTOR_WEIGHT,
    CORE_INITIAL_ACTIVATION,
    CORE_LABEL,
    CORE_NODE_ID,
    RELATION_CORE_ATTRACTOR,
)
from neuralcore.engines.ingestion import IngestionEngine, attractor_node_id
from neuralcore.engines.reporter import StateReporter
from neuralcore.models.edge import NeuralEdge
from neuralcore.models.node import NeuralNode, NodeMetadata
from neuralcore.models.records import ConnectionRecord, EchoRecord, KernelRecord, StreamRecord
from neuralcore.models.state import (
    ConsciousnessState,
    DominantAttractor,
    IngestReport,
    VisualizationData,
)
from neuralcore.settings import CortexSettings
from neuralcore.storage.graph_store import GraphStore
from neuralcore.types import NodeKind

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


def _coerce_records(model: Type[RecordT], records: Iterable[Union[RecordT, dict[str, Any]]]) -> list[RecordT]:
    """Accept model instances or plain dicts; dicts are validated into ``model``."""
    return [r if isinstance(r, model) else model.model_validate(r) for r in records]


class CerebralCortex:
    """One activation graph with its ingestion, propagation and reporting."""

    def __init__(self, settings: Optional[CortexSettings] = None):
        self.settings = settings or CortexSettings()
        self._lock = threading.RLock()
        self._features = SeededFeatureGenerator(self.settings.feature_seed)
        self._graph = GraphStore(protected_slice=self.settings.protected_slice)
        self.last_updated: Optional[datetime] = None

        self._initialize_core()

        self.ingestion = IngestionEngine(self._graph, self._features, self.settings)
        self.reporter = StateReporter(self._graph, self.settings)

    @property
    def graph(self) -> GraphStore:
        return self._graph

    def _initialize_core(self) -> None:
        """Create the core node and the fixed attractors, each linked from the core."""
        s = self.settings
        now = datetime.now()
        self._graph.add_node(NeuralNode(
            id=CORE_NODE_ID,
            kind=NodeKind.CONSCIOUSNESS,
            activation=CORE_INITIAL_ACTIVATION,
            features=self._features.generate(s.feature_dim),
            metadata=NodeMetadata(
                label=CORE_LABEL,
                resonance_level=CORE_INITIAL_ACTIVATION,
                created_at=now,
                last_updated=now,
            ),
        ))

        for i, name in enumerate(ATTRACTOR_NAMES):
            node_id = attractor_node_id(name)
            self._graph.add_node(NeuralNode(
                id=node_id,
                kind=NodeKind.ATTRACTOR,
                activation=ATTRACTOR_INITIAL_ACTIVATION,
                features=self._features.generate(s.feature_dim),
                metadata=NodeMetadata(
                    label=" ".join(word.capitalize() for word in name.split("-")),
                    resonance_level=ATTRACTOR_INITIAL_ACTIVATION,
                    attractor_strength=ATTRACTOR_BASE_STRENGTH + math.sin(i) * ATTRACTOR_STRENGTH_SWING,
                    created_at=now,
                    last_updated=now,
                ),
            ))
            self._graph.add_edge(NeuralEdge(
                source=CORE_NODE_ID,
                target=node_id,
                weight=CORE_ATTRACTOR_WEIGHT,
                relation=RELATION_CORE_ATTRACTOR,
                features=self._features.generate(s.edge_feature_dim),
            ))

    # =========================================================================
    # Mutation
    # =========================================================================

    def ingest(
        self,
        kernels: Iterable[Union[KernelRecord, dict[str, Any]]] = (),
        streams: Iterable[Union[StreamRecord, dict[str, Any]]] = (),
        echoes: Iterable[Union[EchoRecord, dict[str, Any]]] = (),
        connections: Iterable[Union[ConnectionRecord, dict[str, Any]]] = (),
    ) -> IngestReport:
        """Ingest one batch of records, then propagate.

        Records may be model instances or plain dicts.

        Raises:
            pydantic.ValidationError: if a dict record cannot be coerced.
                Validation happens before the graph is touched.
        """
        batch = (
            _coerce_records(KernelRecord, kernels),
            _coerce_records(StreamRecord, streams),
            _coerce_records(EchoRecord, echoes),
            _coerce_records(ConnectionRecord, connections),
        )
        with self._lock:
            report = self.ingestion.ingest(*batch)
            self._propagate_locked()
            return report

    def propagate(self) -> None:
        """Run propagation, core amplification and attractor blending."""
        with self._lock:
            self._propagate_locked()

    def _propagate_locked(self) -> None:
        s = self.settings
        propagate_activation(self._graph, steps=s.propagation_steps, decay=s.decay)
        amplification = amplify_core(self._graph, kernel_influence=s.kernel_influence)
        blend_attractors(
            self._graph,
            base_ratio=s.attractor_base_ratio,
            core_ratio=s.attractor_core_ratio,
        )
        self.last_updated = datetime.now()
        logger.debug(f"Core amplified by {amplification:.4f}")

    # =========================================================================
    # Reporting
    # =========================================================================

    def state(self) -> ConsciousnessState:
        with self._lock:
            return self.reporter.state()

    def dominant_clusters(self, n: Optional[int] = None) -> list[DominantAttractor]:
        with self._lock:
            return self.reporter.dominant_clusters(n)

    def network_density(self) -> float:
        with self._lock:
            return self.reporter.network_density()

    def resonance_harmonic(self) -> float:
        with self._lock:
            return self.reporter.resonance_harmonic()

    def export_for_display(self) -> VisualizationData:
        with self._lock:
            return self.reporter.export_for_display()

    def kernel_feedback(self, kernel_id) -> str:
        with self._lock:
            return self.reporter.kernel_feedback(kernel_id)

    def stats(self) -> dict[str, Any]:
        with self._lock:
            s = self._graph.stats()
            s["last_updated"] = self.last_updated.isoformat() if self.last_updated else None
            return s
