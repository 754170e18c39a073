"""Core enums and type definitions for neuralcore."""

from enum import Enum


class NodeKind(str, Enum):
    """The kinds of node that live in the cortex graph."""
    CONSCIOUSNESS = "consciousness"  # the single core node
    ATTRACTOR = "attractor"          # fixed concept nodes the core projects onto
    KERNEL = "kernel"                # primary content entities
    STREAM = "stream"                # secondary content entities


class ResonanceState(str, Enum):
    """Lifecycle states a kernel can report."""
    BORN = "born"
    FOG = "fog"
    ORBITING = "orbiting"
    CORE = "core"
    DECOHERED = "decohered"
    REEMERGENT = "reemergent"


class EmergentPhase(str, Enum):
    """Coarse phases of the system-wide state, keyed off core activation."""
    LATENT = "latent"
    FORMING = "forming"
    EMERGENT = "emergent"
    COGNIZANT = "cognizant"
    AWARE = "aware"
