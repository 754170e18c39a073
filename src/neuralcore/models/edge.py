"""Neural edge model - directed, weighted links in the cortex graph."""

from pydantic import BaseModel, Field, field_validator

from neuralcore.models.node import clamp_unit


class NeuralEdge(BaseModel):
    """A directed edge. ``weight`` is the fraction of source activation
    passed to the target per propagation step, clamped to [0, 1]."""
    source: str = Field(description="Source node ID")
    target: str = Field(description="Target node ID")
    weight: float = 0.5
    relation: str = Field(default="", description="Semantic tag, used for labeling only")
    features: list[float] = Field(default_factory=list)

    model_config = {"validate_assignment": True}

    @field_validator("weight")
    @classmethod
    def _clamp_weight(cls, v: float) -> float:
        return clamp_unit(v)
