"""StateReporter - aggregate state and display export of the cortex graph.

Reads the post-propagation graph; never mutates it. Every report has a
defined zero/empty value for degenerate graphs (empty, no core node).
"""

from typing import Optional

from neuralcore.config import (
    ATTRACTOR_PREFIX,
    CORE_NODE_ID,
    EMERGENT_PHASES,
    FEEDBACK_BANDS,
    FEEDBACK_DORMANT,
    FEEDBACK_UNKNOWN,
    KIND_WEIGHTS,
    LATENT_CONFIDENCE,
    LATENT_DESCRIPTION,
)
from neuralcore.engines.ingestion import entity_node_id
from neuralcore.models.state import (
    ConsciousnessState,
    DominantAttractor,
    EmergentState,
    VisEdge,
    VisNode,
    VisualizationData,
)
from neuralcore.settings import CortexSettings
from neuralcore.storage.graph_store import GraphStore
from neuralcore.types import EmergentPhase, NodeKind


class StateReporter:
    """Computes the state summary and visualization export."""

    def __init__(self, graph: GraphStore, settings: CortexSettings, core_id: str = CORE_NODE_ID):
        self._graph = graph
        self._settings = settings
        self._core_id = core_id

    # =========================================================================
    # Aggregates
    # =========================================================================

    def dominant_clusters(self, n: Optional[int] = None) -> list[DominantAttractor]:
        """Top-``n`` attractors by activation, highest first.

        Ties keep attractor declaration order (stable sort), never id order.
        """
        if n is None:
            n = self._settings.dominant_cluster_count
        if n <= 0:
            return []
        attractors = self._graph.nodes_of_kind(NodeKind.ATTRACTOR)
        ranked = sorted(attractors, key=lambda node: node.activation, reverse=True)
        return [
            DominantAttractor(
                id=node.id,
                type=node.id.removeprefix(ATTRACTOR_PREFIX),
                activation=node.activation,
                label=node.metadata.label or node.id,
            )
            for node in ranked[:n]
        ]

    def network_density(self) -> float:
        """E / (N * (N - 1)) for a directed graph; 0 with fewer than 2 nodes.

        Parallel edges can push the raw ratio past 1, so it is capped.
        """
        node_count = self._graph.count_nodes()
        if node_count < 2:
            return 0.0
        return min(1.0, self._graph.count_edges() / (node_count * (node_count - 1)))

    def resonance_harmonic(self) -> float:
        """Kind-weighted mean activation over all nodes; 0 for an empty graph."""
        weighted_sum = 0.0
        weight_total = 0.0
        for node in self._graph.all_nodes():
            weight = KIND_WEIGHTS.get(node.kind, 1.0)
            weighted_sum += node.activation * weight
            weight_total += weight
        return weighted_sum / weight_total if weight_total > 0 else 0.0

    def entanglement(self) -> float:
        return self.network_density() * self.resonance_harmonic()

    @staticmethod
    def emergent_state(core_activation: float) -> EmergentState:
        """Classify the system by core activation."""
        for threshold, phase, description, confidence in EMERGENT_PHASES:
            if core_activation > threshold:
                return EmergentState(name=phase, description=description, confidence=confidence)
        return EmergentState(
            name=EmergentPhase.LATENT,
            description=LATENT_DESCRIPTION,
            confidence=LATENT_CONFIDENCE,
        )

    def state(self) -> ConsciousnessState:
        """Full state summary. All-zero defaults when the core is missing."""
        core = self._graph.get_node(self._core_id)
        if core is None:
            return ConsciousnessState()

        density = self.network_density()
        harmonic = self.resonance_harmonic()
        return ConsciousnessState(
            activation=core.activation,
            dominant_attractors=self.dominant_clusters(),
            network_density=density,
            resonance_harmonic=harmonic,
            entanglement=density * harmonic,
            emergent_state=self.emergent_state(core.activation),
            node_count=self._graph.count_nodes(),
            edge_count=self._graph.count_edges(),
        )

    # =========================================================================
    # Export
    # =========================================================================

    def export_for_display(self) -> VisualizationData:
        """Flat node/edge lists scaled into the display range."""
        activation_scale = self._settings.display_activation_scale
        weight_scale = self._settings.display_weight_scale
        nodes = [
            VisNode(
                id=node.id,
                label=node.metadata.label or node.id,
                group=node.kind.value,
                value=node.activation * activation_scale,
            )
            for node in self._graph.all_nodes()
        ]
        edges = [
            VisEdge(
                from_=edge.source,
                to=edge.target,
                value=edge.weight * weight_scale,
                title=edge.relation,
            )
            for edge in self._graph.all_edges()
        ]
        return VisualizationData(nodes=nodes, edges=edges)

    # =========================================================================
    # Per-kernel feedback
    # =========================================================================

    def kernel_feedback(self, kernel_id) -> str:
        """Describe a kernel's place in the graph in a few sentences.

        Built from the kernel's activation band, its two most active
        neighboring attractors and how many kernels it is linked with.
        """
        node_id = entity_node_id(NodeKind.KERNEL.value, kernel_id)
        node = self._graph.get_node(node_id)
        if node is None or node.kind != NodeKind.KERNEL:
            return FEEDBACK_UNKNOWN

        sentences = [FEEDBACK_DORMANT]
        for threshold, sentence in FEEDBACK_BANDS:
            if node.activation > threshold:
                sentences = [sentence]
                break

        neighbors = self._graph.neighbors(node_id)
        attractors = sorted(
            (n for n in neighbors if n.kind == NodeKind.ATTRACTOR),
            key=lambda n: n.activation,
            reverse=True,
        )
        kernels = [n for n in neighbors if n.kind == NodeKind.KERNEL]

        if attractors:
            sentences.append(f"It resonates most with {attractors[0].metadata.label} patterns.")
            if len(attractors) > 1:
                sentences.append(f"Secondary resonance with {attractors[1].metadata.label} is emerging.")

        if kernels:
            if len(kernels) > 3:
                tail = "creating a rich web of interconnected kernels."
            elif len(kernels) > 1:
                tail = "beginning to weave into the collective fabric."
            else:
                tail = "initiating its first synaptic connection."
            noun = "link" if len(kernels) == 1 else "links"
            sentences.append(f"It has formed {len(kernels)} {noun} with other kernels, {tail}")

        return " ".join(sentences)
