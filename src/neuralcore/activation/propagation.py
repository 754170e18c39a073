"""Activation propagation through the cortex graph.

A fixed number of synchronous message-passing steps:
1. Every step starts from the ORIGINAL activations, decayed by decay^step
   (steps are numbered from 1)
2. Each edge adds source_activation * weight to its target, reading the
   activation committed at the end of the previous step
3. Candidates are clamped to [0, 1] and committed together

Afterwards the core is amplified by the kernels feeding it, and every
attractor is re-blended from its base strength and the core activation.

Nothing here raises on a malformed graph: a missing core turns the
amplification and attractor passes into no-ops.
"""

import logging

from neuralcore.config import (
    ATTRACTOR_BASE_RATIO,
    ATTRACTOR_BASE_STRENGTH,
    ATTRACTOR_CORE_RATIO,
    CORE_NODE_ID,
    KERNEL_INFLUENCE,
    PROPAGATION_STEPS,
    TEMPORAL_DECAY,
)
from neuralcore.models.node import clamp_unit
from neuralcore.storage.graph_store import GraphStore
from neuralcore.types import NodeKind

logger = logging.getLogger("neuralcore-propagation")


def propagate_activation(
    graph: GraphStore,
    steps: int = PROPAGATION_STEPS,
    decay: float = TEMPORAL_DECAY,
) -> dict[str, float]:
    """Run bounded message passing over every node and edge.

    Args:
        graph: GraphStore whose node activations are updated in place
        steps: Number of propagation steps (not convergence based)
        decay: Per-step multiplier applied to the original activations

    Returns:
        Dict of {node_id: activation} after the final step.
    """
    nodes = graph.all_nodes()
    if not nodes:
        return {}

    original = {node.id: node.activation for node in nodes}
    edges = graph.all_edges()

    for step in range(1, steps + 1):
        baseline = decay ** step
        candidate = {node_id: activation * baseline for node_id, activation in original.items()}
        before = {node.id: node.activation for node in nodes}

        for edge in edges:
            source_activation = before.get(edge.source)
            if source_activation is None or edge.target not in candidate:
                continue
            candidate[edge.target] += source_activation * edge.weight

        for node in nodes:
            node.activation = clamp_unit(candidate[node.id])

    logger.debug(f"Propagated {steps} steps over {len(nodes)} nodes, {len(edges)} edges")
    return {node.id: node.activation for node in nodes}


def amplify_core(
    graph: GraphStore,
    kernel_influence: float = KERNEL_INFLUENCE,
    core_id: str = CORE_NODE_ID,
) -> float:
    """Boost the core by the kernels linked into it.

    amplification = Σ kernel.activation * edge.weight * kernel_influence
    over every kernel -> core edge.

    Returns:
        The amplification added before clamping (0.0 if the core is absent).
    """
    core = graph.get_node(core_id)
    if core is None:
        return 0.0

    amplification = 0.0
    for edge in graph.incoming_edges(core_id):
        source = graph.get_node(edge.source)
        if source is not None and source.kind == NodeKind.KERNEL:
            amplification += source.activation * edge.weight * kernel_influence

    core.activation = clamp_unit(core.activation + amplification)
    return amplification


def blend_attractors(
    graph: GraphStore,
    base_ratio: float = ATTRACTOR_BASE_RATIO,
    core_ratio: float = ATTRACTOR_CORE_RATIO,
    core_id: str = CORE_NODE_ID,
) -> None:
    """Overwrite each attractor with base_ratio * strength + core_ratio * core."""
    core = graph.get_node(core_id)
    if core is None:
        return

    for attractor in graph.nodes_of_kind(NodeKind.ATTRACTOR):
        strength = attractor.metadata.attractor_strength
        if strength is None:
            strength = ATTRACTOR_BASE_STRENGTH
        attractor.activation = clamp_unit(strength * base_ratio + core.activation * core_ratio)
