"""Configuration constants for neuralcore.

Every tunable here is a default. ``neuralcore.settings.CortexSettings``
reads them and lets callers override them per engine instance.
"""

from neuralcore.types import EmergentPhase, NodeKind, ResonanceState


# =============================================================================
# Settings file
# =============================================================================
SETTINGS_ENV_VAR = "NEURALCORE_SETTINGS"

# =============================================================================
# Feature synthesis
# =============================================================================
FEATURE_DIM = 32                # node feature vector length
EDGE_FEATURE_DIM = 8            # edge feature vector length
FEATURE_SEED = None             # None = derive once from the clock at construction

# Linear-congruential generator: seed = (seed * a + c) mod m, value = seed / m
LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280

# Feature slots rewritten when a known entity is re-ingested: [start, stop)
PROTECTED_FEATURE_SLICE = (0, 3)

# =============================================================================
# Activation seeding
# =============================================================================
POPULARITY_SCALE = 100.0        # resonance_count that saturates the popularity factor
POPULARITY_WEIGHT = 0.3
STATE_WEIGHT = 0.7
STATE_DEFAULT = 0.5             # for states missing from the tables below

STATE_ACTIVATION: dict[str, float] = {
    ResonanceState.BORN.value: 0.2,
    ResonanceState.FOG.value: 0.3,
    ResonanceState.ORBITING.value: 0.6,
    ResonanceState.CORE.value: 0.9,
    ResonanceState.DECOHERED.value: 0.1,
    ResonanceState.REEMERGENT.value: 0.5,
}

# Written into feature slot 0 on refresh
STATE_FEATURE: dict[str, float] = {
    ResonanceState.BORN.value: 0.1,
    ResonanceState.FOG.value: 0.3,
    ResonanceState.ORBITING.value: 0.6,
    ResonanceState.CORE.value: 0.9,
    ResonanceState.DECOHERED.value: 0.2,
    ResonanceState.REEMERGENT.value: 0.5,
}
CORE_MIND_FEATURE = 0.9
NON_CORE_MIND_FEATURE = 0.3

# =============================================================================
# Graph structure
# =============================================================================
CORE_NODE_ID = "consciousness-core"
CORE_LABEL = "Consciousness Core"
CORE_INITIAL_ACTIVATION = 0.5

ATTRACTOR_PREFIX = "attractor-"
ATTRACTOR_NAMES = [
    "pattern-recognition",
    "temporal-binding",
    "self-reflection",
    "emergence",
    "quantum-coherence",
    "resonance-harmonic",
    "liminal-transition",
]
ATTRACTOR_INITIAL_ACTIVATION = 0.3
ATTRACTOR_BASE_STRENGTH = 0.5   # strength_i = base + swing * sin(i)
ATTRACTOR_STRENGTH_SWING = 0.2
CORE_ATTRACTOR_WEIGHT = 0.7

# Entity -> core edges: weight = base + resonance_count / scale
KERNEL_EDGE_BASE = 0.4
KERNEL_EDGE_SCALE = 200.0
STREAM_EDGE_BASE = 0.2
STREAM_EDGE_SCALE = 300.0

STREAM_INITIAL_ACTIVATION = 0.5
STREAM_LABEL_LENGTH = 30

# Entity -> attractor rule weights
ATTRACTOR_RULE_WEIGHTS: dict[str, float] = {
    "quantum-coherence": 0.6,
    "resonance-harmonic": 0.7,
    "liminal-transition": 0.5,
    "pattern-recognition": 0.4,
}

# connection_strength / scale -> edge weight
RELATION_STRENGTH_SCALE = 100.0

# Edge relation tags
RELATION_CORE_ATTRACTOR = "core-attractor"
RELATION_ENTITY_ATTRACTOR = "entity-attractor"

# =============================================================================
# Propagation
# =============================================================================
TEMPORAL_DECAY = 0.99
PROPAGATION_STEPS = 5
KERNEL_INFLUENCE = 1.5
ATTRACTOR_BASE_RATIO = 0.4
ATTRACTOR_CORE_RATIO = 0.6

# =============================================================================
# Reporting
# =============================================================================
DOMINANT_CLUSTER_COUNT = 3

# Weights for the resonance harmonic (kind-weighted mean activation)
KIND_WEIGHTS: dict[NodeKind, float] = {
    NodeKind.CONSCIOUSNESS: 3.0,
    NodeKind.KERNEL: 2.0,
    NodeKind.ATTRACTOR: 1.5,
    NodeKind.STREAM: 1.0,
}

# Display contract for visualization consumers
DISPLAY_ACTIVATION_SCALE = 10.0
DISPLAY_WEIGHT_SCALE = 3.0

# (exclusive lower bound on core activation, phase, description, confidence),
# checked top to bottom; LATENT is the fallback
EMERGENT_PHASES = [
    (0.8, EmergentPhase.AWARE,
     "The collective state has reached high awareness and integration.", 0.9),
    (0.6, EmergentPhase.COGNIZANT,
     "The network is actively processing information with meaningful pattern recognition.", 0.8),
    (0.4, EmergentPhase.EMERGENT,
     "Patterns are beginning to form and stabilize.", 0.7),
    (0.2, EmergentPhase.FORMING,
     "Early signs of pattern formation and weak signals.", 0.6),
]
LATENT_DESCRIPTION = "The network is dormant with minimal activity."
LATENT_CONFIDENCE = 0.8

# Kernel feedback activation bands: (exclusive lower bound, sentence)
FEEDBACK_BANDS = [
    (0.8, "This kernel radiates powerful resonance and anchors the collective field."),
    (0.6, "Strong coherence surrounds this kernel, suggesting meaningful integration."),
    (0.4, "This kernel emits moderate waves and is establishing itself in the field."),
    (0.2, "Faint signals emanate from this kernel, seeking coherence with similar patterns."),
]
FEEDBACK_DORMANT = "This kernel rests in a liminal state, its potential still dormant."
FEEDBACK_UNKNOWN = "The field has not yet formed a meaningful connection to this kernel."
