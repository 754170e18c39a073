"""Graph store: id-keyed node/edge storage + igraph topology index.

Canonical state is an insertion-ordered dict of nodes and an ordered list
of edges. A directed igraph mirrors the topology (vertex per node, edge per
edge, same order) for fast existence, neighbor and degree queries.

Nothing here creates nodes implicitly: edges to unknown endpoints are
rejected with ``UnknownEndpointError``.
"""

from typing import Optional

import igraph  # type: ignore

from neuralcore.errors import UnknownEndpointError
from neuralcore.models.edge import NeuralEdge
from neuralcore.models.node import NeuralNode
from neuralcore.types import NodeKind


class GraphStore:
    """Owns the nodes and edges of one cortex graph."""

    def __init__(self, protected_slice: slice = slice(0, 3)):
        self._protected_slice = protected_slice
        self._nodes: dict[str, NeuralNode] = {}
        self._edges: list[NeuralEdge] = []
        self._graph = igraph.Graph(directed=True)
        self._id_to_vertex: dict[str, int] = {}
        self._vertex_to_id: dict[int, str] = {}

    @property
    def graph(self) -> igraph.Graph:
        return self._graph

    # =========================================================================
    # Nodes
    # =========================================================================

    def add_node(self, node: NeuralNode) -> bool:
        """Insert a node, or refresh the mutable fields of an existing one.

        On an id collision the stored node keeps its identity (id, kind,
        entity_ref); activation and metadata are replaced and only the
        protected feature slots are copied over.

        Returns:
            True if a new node was created, False if an existing one was updated.
        """
        existing = self._nodes.get(node.id)
        if existing is not None:
            existing.activation = node.activation
            existing.metadata = node.metadata
            protected = range(*self._protected_slice.indices(len(existing.features)))
            for i in protected:
                if i < len(node.features):
                    existing.features[i] = node.features[i]
            return False

        self._nodes[node.id] = node
        idx = self._graph.vcount()
        self._graph.add_vertices(1)
        self._graph.vs[idx]["node_id"] = node.id
        self._id_to_vertex[node.id] = idx
        self._vertex_to_id[idx] = node.id
        return True

    def get_node(self, node_id: str) -> Optional[NeuralNode]:
        """Get the live node object (mutations are visible to the graph)."""
        return self._nodes.get(node_id)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def all_nodes(self) -> list[NeuralNode]:
        """All nodes in insertion order."""
        return list(self._nodes.values())

    def nodes_of_kind(self, kind: NodeKind) -> list[NeuralNode]:
        """Nodes of one kind, in insertion order."""
        return [n for n in self._nodes.values() if n.kind == kind]

    def count_nodes(self) -> int:
        return len(self._nodes)

    # =========================================================================
    # Edges
    # =========================================================================

    def add_edge(self, edge: NeuralEdge) -> None:
        """Append an edge. Both endpoints must already exist.

        Raises:
            UnknownEndpointError: if source or target is missing. The edge
                list is left unchanged.
        """
        missing = [nid for nid in (edge.source, edge.target) if nid not in self._nodes]
        if missing:
            raise UnknownEndpointError(edge.source, edge.target, missing)

        self._edges.append(edge)
        self._graph.add_edges([(self._id_to_vertex[edge.source], self._id_to_vertex[edge.target])])
        self._graph.es[self._graph.ecount() - 1]["relation"] = edge.relation

    def edge_exists(self, source_id: str, target_id: str) -> bool:
        """Check for any edge source -> target, regardless of relation or weight."""
        src_idx = self._id_to_vertex.get(source_id)
        tgt_idx = self._id_to_vertex.get(target_id)
        if src_idx is None or tgt_idx is None:
            return False
        return self._graph.get_eid(src_idx, tgt_idx, directed=True, error=False) != -1

    def all_edges(self) -> list[NeuralEdge]:
        """All edges in insertion order."""
        return list(self._edges)

    def incoming_edges(self, node_id: str) -> list[NeuralEdge]:
        """Edges whose target is ``node_id``, in insertion order."""
        vertex_idx = self._id_to_vertex.get(node_id)
        if vertex_idx is None:
            return []
        return [self._edges[eid] for eid in sorted(self._graph.incident(vertex_idx, mode="in"))]

    def count_edges(self) -> int:
        return len(self._edges)

    # =========================================================================
    # Traversal
    # =========================================================================

    def neighbors(self, node_id: str, direction: str = "all") -> list[NeuralNode]:
        """Distinct adjacent nodes via igraph, in vertex order.

        Args:
            direction: "all", "outgoing", or "incoming".
        """
        vertex_idx = self._id_to_vertex.get(node_id)
        if vertex_idx is None:
            return []

        mode_map = {"all": "all", "outgoing": "out", "incoming": "in"}
        mode = mode_map.get(direction, "all")

        result = []
        for v in sorted(set(self._graph.neighbors(vertex_idx, mode=mode))):
            neighbor_id = self._vertex_to_id[v]
            if neighbor_id != node_id:
                result.append(self._nodes[neighbor_id])
        return result

    def get_degree(self, node_id: str) -> int:
        """Total degree (in + out), counting parallel edges."""
        vertex_idx = self._id_to_vertex.get(node_id)
        if vertex_idx is None:
            return 0
        return self._graph.degree(vertex_idx, mode="all")

    # =========================================================================
    # Stats
    # =========================================================================

    def stats(self) -> dict:
        """Node/edge counts, by kind and by relation."""
        kinds = {k.value: 0 for k in NodeKind}
        for node in self._nodes.values():
            kinds[node.kind.value] += 1
        relations: dict[str, int] = {}
        for edge in self._edges:
            relations[edge.relation] = relations.get(edge.relation, 0) + 1
        return {
            "nodes": len(self._nodes),
            "edges": len(self._edges),
            "node_kinds": kinds,
            "relations": relations,
            "igraph_vertices": self._graph.vcount(),
            "igraph_edges": self._graph.ecount(),
        }
