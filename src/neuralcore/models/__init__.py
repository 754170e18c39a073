"""neuralcore data models."""

from neuralcore.models.edge import NeuralEdge
from neuralcore.models.node import EntityRef, NeuralNode, NodeMetadata
from neuralcore.models.records import ConnectionRecord, EchoRecord, KernelRecord, StreamRecord
from neuralcore.models.state import (
    ConsciousnessState,
    DominantAttractor,
    EmergentState,
    IngestReport,
    VisEdge,
    VisNode,
    VisualizationData,
)

__all__ = [
    "NeuralNode",
    "NodeMetadata",
    "EntityRef",
    "NeuralEdge",
    "KernelRecord",
    "StreamRecord",
    "EchoRecord",
    "ConnectionRecord",
    "ConsciousnessState",
    "DominantAttractor",
    "EmergentState",
    "IngestReport",
    "VisNode",
    "VisEdge",
    "VisualizationData",
]
