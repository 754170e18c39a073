"""Neural node model - the vertices of the cortex graph."""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

from neuralcore.types import NodeKind


def clamp_unit(value: float) -> float:
    """Clamp a value into [0, 1]."""
    return max(0.0, min(1.0, float(value)))


class EntityRef(BaseModel):
    """Back-reference to the domain record that produced a node."""
    entity_id: Union[int, str]
    entity_type: str


class NodeMetadata(BaseModel):
    """Descriptive fields carried by a node. Never read by propagation math,
    except ``attractor_strength`` for attractor nodes."""
    label: Optional[str] = None
    resonance_level: float = 0.0
    resonance_state: Optional[str] = None
    entity_subtype: Optional[str] = Field(
        default=None, description="Record-level type, e.g. a kernel's 'quantum' or 'dream'"
    )
    attractor_strength: Optional[float] = Field(
        default=None, description="Base strength blended with the core (attractors only)"
    )
    created_at: datetime = Field(default_factory=datetime.now)
    last_updated: datetime = Field(default_factory=datetime.now)


class NeuralNode(BaseModel):
    """A vertex in the cortex graph.

    ``activation`` is clamped to [0, 1] on construction and on every
    assignment, so propagation can write raw sums back without checking.
    """
    id: str
    kind: NodeKind
    activation: float = 0.0
    features: list[float] = Field(default_factory=list)
    entity_ref: Optional[EntityRef] = None
    metadata: NodeMetadata = Field(default_factory=NodeMetadata)

    model_config = {"validate_assignment": True}

    @field_validator("activation")
    @classmethod
    def _clamp_activation(cls, v: float) -> float:
        return clamp_unit(v)
