"""Report models: system state, ingestion summary, display export."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from neuralcore.types import EmergentPhase


class DominantAttractor(BaseModel):
    """An attractor ranked among the most active."""
    id: str
    type: str = Field(description="Attractor name without the id prefix")
    activation: float
    label: str


class EmergentState(BaseModel):
    """Coarse classification of the system from core activation."""
    name: EmergentPhase = EmergentPhase.LATENT
    description: str = ""
    confidence: float = 0.0


class ConsciousnessState(BaseModel):
    """System-wide summary derived from the post-propagation graph."""
    activation: float = 0.0
    dominant_attractors: list[DominantAttractor] = Field(default_factory=list)
    network_density: float = 0.0
    resonance_harmonic: float = 0.0
    entanglement: float = Field(default=0.0, description="network_density * resonance_harmonic")
    emergent_state: EmergentState = Field(default_factory=EmergentState)
    node_count: int = 0
    edge_count: int = 0


class IngestReport(BaseModel):
    """What a single ingest call did to the graph."""
    nodes_created: int = 0
    nodes_updated: int = 0
    edges_added: int = 0
    relations_skipped: int = 0
    echoes_received: int = 0


class VisNode(BaseModel):
    """Display node. ``value`` is activation times the display scale."""
    id: str
    label: str
    group: str
    value: float


class VisEdge(BaseModel):
    """Display edge. ``value`` is weight times the display scale."""
    from_: str = Field(alias="from")
    to: str
    value: float
    title: str

    model_config = ConfigDict(populate_by_name=True)


class VisualizationData(BaseModel):
    """Flat node/edge lists for visualization libraries."""
    nodes: list[VisNode] = Field(default_factory=list)
    edges: list[VisEdge] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the wire keys consumers expect (``from``, not ``from_``)."""
        return self.model_dump(by_alias=True)
