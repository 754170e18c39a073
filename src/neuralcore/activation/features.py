"""Feature synthesis and activation seeding for ingested entities.

Feature vectors are pseudo-random but reproducible: a linear-congruential
generator advances one shared seed per engine, so the same initial seed
and the same ingestion order always produce the same vectors.

Activation seeding blends two factors:
    activation = popularity_weight * min(count / scale, 1)
               + state_weight * STATE_ACTIVATION[state]
"""

import math
import time
from typing import Optional, Sequence

from neuralcore.config import (
    CORE_MIND_FEATURE,
    LCG_INCREMENT,
    LCG_MODULUS,
    LCG_MULTIPLIER,
    NON_CORE_MIND_FEATURE,
    POPULARITY_SCALE,
    POPULARITY_WEIGHT,
    PROTECTED_FEATURE_SLICE,
    STATE_ACTIVATION,
    STATE_DEFAULT,
    STATE_FEATURE,
    STATE_WEIGHT,
)
from neuralcore.models.node import clamp_unit


def l2_normalize(values: Sequence[float]) -> list[float]:
    """Scale a vector to unit L2 norm. A zero vector is returned as-is."""
    norm = math.sqrt(sum(v * v for v in values))
    if norm == 0:
        return list(values)
    return [v / norm for v in values]


class SeededFeatureGenerator:
    """Deterministic feature vectors from a process-local LCG seed."""

    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = int(time.time() * 1000) % LCG_MODULUS
        self._seed = seed

    @property
    def seed(self) -> int:
        """Current generator state."""
        return self._seed

    def next_value(self) -> float:
        """Advance the seed once and return a value in [0, 1)."""
        self._seed = (self._seed * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self._seed / LCG_MODULUS

    def generate(self, dim: int) -> list[float]:
        """Draw ``dim`` values and normalize them to unit length."""
        return l2_normalize([self.next_value() for _ in range(dim)])


# =============================================================================
# Activation seeding
# =============================================================================


def normalized_popularity(count: float, scale: float = POPULARITY_SCALE) -> float:
    """Map a popularity count into [0, 1], saturating at ``scale``."""
    if scale <= 0:
        return 0.0
    return clamp_unit(count / scale)


def state_activation(state: Optional[str]) -> float:
    """Activation contribution of a resonance state (0.5 if unrecognized)."""
    if state is None:
        return STATE_DEFAULT
    return STATE_ACTIVATION.get(state, STATE_DEFAULT)


def seed_activation(
    popularity_count: float,
    state: Optional[str],
    scale: float = POPULARITY_SCALE,
    popularity_weight: float = POPULARITY_WEIGHT,
    state_weight: float = STATE_WEIGHT,
) -> float:
    """Initial activation for an ingested entity.

    Args:
        popularity_count: Raw count (e.g. resonance_count)
        state: Resonance state name; unknown names fall back to 0.5
        scale: Count that saturates the popularity factor at 1.0
        popularity_weight: Weight of the popularity factor (default 0.3)
        state_weight: Weight of the state factor (default 0.7)

    Returns:
        Activation clamped to [0, 1].
    """
    popularity = normalized_popularity(popularity_count, scale)
    return clamp_unit(popularity * popularity_weight + state_activation(state) * state_weight)


# =============================================================================
# Feature refresh
# =============================================================================


def refresh_features(
    features: list[float],
    state: Optional[str],
    popularity: float,
    is_core_mind: bool,
    protected: slice = slice(*PROTECTED_FEATURE_SLICE),
) -> list[float]:
    """Overwrite the protected slots of ``features`` in place.

    The slots receive, in order: the state feature, the normalized
    popularity, and the core-mind flag. Slots outside the slice keep their
    values so a node's representation stays stable across updates. A slice
    shorter than three slots takes only the leading values.
    """
    state_value = STATE_FEATURE.get(state, STATE_DEFAULT) if state is not None else STATE_DEFAULT
    fresh = (
        state_value,
        popularity,
        CORE_MIND_FEATURE if is_core_mind else NON_CORE_MIND_FEATURE,
    )
    slots = range(*protected.indices(len(features)))
    for i, value in zip(slots, fresh):
        features[i] = value
    return features
