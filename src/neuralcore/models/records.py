"""Domain records the cortex ingests.

These mirror the rows the surrounding application already stores. Field
names accept both snake_case and the camelCase the application's JSON uses
(``resonanceCount``, ``isCoreMind``, ...). Unknown fields are ignored.
"""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

EntityId = Union[int, str]

_RECORD_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class KernelRecord(BaseModel):
    """A primary content item."""
    id: EntityId
    title: str = ""
    type: Optional[str] = None
    resonance_count: float = 0
    resonance_state: Optional[str] = None
    is_core_mind: bool = False
    created_at: Optional[datetime] = None

    model_config = _RECORD_CONFIG


class StreamRecord(BaseModel):
    """A secondary content item."""
    id: EntityId
    content: str = ""
    resonance_count: float = 0
    created_at: Optional[datetime] = None

    model_config = _RECORD_CONFIG


class EchoRecord(BaseModel):
    """An echo. Accepted by ingestion but not modelled as a node."""
    id: EntityId
    content: str = ""
    type: Optional[str] = None
    kernel_id: Optional[EntityId] = None
    created_at: Optional[datetime] = None

    model_config = _RECORD_CONFIG


class ConnectionRecord(BaseModel):
    """An externally stored relation between two entities."""
    source_id: EntityId
    source_type: str
    target_id: EntityId
    target_type: str
    connection_strength: float = 1
    symbolic_relation: str = "synaptic"

    model_config = _RECORD_CONFIG
