"""Runtime settings for a cortex engine instance.

Layers (lowest → highest priority):
    config.py defaults → settings JSON file → keyword overrides

Usage:
    from neuralcore.settings import load_settings

    settings = load_settings()                          # defaults + $NEURALCORE_SETTINGS
    settings = load_settings(path, propagation_steps=3)  # explicit file + override

The JSON file is nested by section, e.g.::

    {"propagation": {"steps": 3, "decay": 0.95}, "display": {"weight_scale": 2}}
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, model_validator

import neuralcore.config as cfg

logger = logging.getLogger("neuralcore-settings")

# Mapping: settings JSON path → CortexSettings field
_SETTING_MAP: dict[str, str] = {
    # Features
    "features.node_dim": "feature_dim",
    "features.edge_dim": "edge_feature_dim",
    "features.seed": "feature_seed",
    "features.protected_slice": "protected_feature_slice",
    # Seeding
    "seeding.popularity_scale": "popularity_scale",
    "seeding.popularity_weight": "popularity_weight",
    "seeding.state_weight": "state_weight",
    # Edges
    "edges.kernel_base": "kernel_edge_base",
    "edges.kernel_scale": "kernel_edge_scale",
    "edges.stream_base": "stream_edge_base",
    "edges.stream_scale": "stream_edge_scale",
    "edges.relation_scale": "relation_strength_scale",
    # Propagation
    "propagation.decay": "decay",
    "propagation.steps": "propagation_steps",
    "propagation.kernel_influence": "kernel_influence",
    "propagation.attractor_base_ratio": "attractor_base_ratio",
    "propagation.attractor_core_ratio": "attractor_core_ratio",
    # Display
    "display.activation_scale": "display_activation_scale",
    "display.weight_scale": "display_weight_scale",
    "display.dominant_clusters": "dominant_cluster_count",
}


class CortexSettings(BaseModel):
    """Tunables for one engine instance. Defaults come from ``neuralcore.config``."""

    feature_dim: int = Field(default=cfg.FEATURE_DIM, gt=0)
    edge_feature_dim: int = Field(default=cfg.EDGE_FEATURE_DIM, gt=0)
    feature_seed: Optional[int] = cfg.FEATURE_SEED
    protected_feature_slice: tuple[int, int] = cfg.PROTECTED_FEATURE_SLICE

    popularity_scale: float = Field(default=cfg.POPULARITY_SCALE, gt=0)
    popularity_weight: float = Field(default=cfg.POPULARITY_WEIGHT, ge=0)
    state_weight: float = Field(default=cfg.STATE_WEIGHT, ge=0)

    kernel_edge_base: float = Field(default=cfg.KERNEL_EDGE_BASE, ge=0)
    kernel_edge_scale: float = Field(default=cfg.KERNEL_EDGE_SCALE, gt=0)
    stream_edge_base: float = Field(default=cfg.STREAM_EDGE_BASE, ge=0)
    stream_edge_scale: float = Field(default=cfg.STREAM_EDGE_SCALE, gt=0)
    relation_strength_scale: float = Field(default=cfg.RELATION_STRENGTH_SCALE, gt=0)

    decay: float = Field(default=cfg.TEMPORAL_DECAY, ge=0.0, le=1.0)
    propagation_steps: int = Field(default=cfg.PROPAGATION_STEPS, ge=0)
    kernel_influence: float = Field(default=cfg.KERNEL_INFLUENCE, ge=0)
    attractor_base_ratio: float = Field(default=cfg.ATTRACTOR_BASE_RATIO, ge=0)
    attractor_core_ratio: float = Field(default=cfg.ATTRACTOR_CORE_RATIO, ge=0)

    display_activation_scale: float = cfg.DISPLAY_ACTIVATION_SCALE
    display_weight_scale: float = cfg.DISPLAY_WEIGHT_SCALE
    dominant_cluster_count: int = Field(default=cfg.DOMINANT_CLUSTER_COUNT, ge=0)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_protected_slice(self) -> "CortexSettings":
        start, stop = self.protected_feature_slice
        if start < 0 or stop < start or stop > self.feature_dim:
            raise ValueError(
                f"protected_feature_slice {self.protected_feature_slice} "
                f"must lie within [0, {self.feature_dim}]"
            )
        return self

    @property
    def protected_slice(self) -> slice:
        start, stop = self.protected_feature_slice
        return slice(start, stop)


# =========================================================================
# JSON file layer
# =========================================================================

def _load_settings_json(path: Path) -> dict[str, Any]:
    """Load a settings file, returning empty dict if missing/corrupt."""
    if not path.exists():
        logger.warning(f"Settings file {path} does not exist, using defaults")
        return {}
    try:
        data = json.loads(path.read_text())
    except Exception as e:
        logger.warning(f"Failed to load {path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Settings file {path} is not a JSON object, ignoring")
        return {}
    return data


def _flatten(saved: dict[str, Any]) -> dict[str, Any]:
    """Map nested ``{section: {key: value}}`` onto CortexSettings field names."""
    result: dict[str, Any] = {}
    for section, values in saved.items():
        if not isinstance(values, dict):
            continue
        for key, value in values.items():
            field = _SETTING_MAP.get(f"{section}.{key}")
            if field is None:
                logger.debug(f"Ignoring unknown setting {section}.{key}")
                continue
            result[field] = value
    return result


# =========================================================================
# Public API
# =========================================================================

def load_settings(path: Optional[Union[str, Path]] = None, **overrides: Any) -> CortexSettings:
    """Build settings from config defaults, an optional JSON file, and overrides.

    Args:
        path: Settings JSON file. Falls back to ``$NEURALCORE_SETTINGS``.
        **overrides: CortexSettings field values applied last, as given
            (``feature_seed=None`` replaces a seed set in the file).

    Raises:
        pydantic.ValidationError: if the merged values are out of range.
    """
    values: dict[str, Any] = {}
    file_path = path or os.environ.get(cfg.SETTINGS_ENV_VAR)
    if file_path:
        values.update(_flatten(_load_settings_json(Path(file_path))))
    values.update(overrides)

    if values:
        logger.info(f"Loaded {len(values)} settings overrides")
    return CortexSettings(**values)


def settings_as_sections(settings: CortexSettings) -> dict[str, dict[str, Any]]:
    """Return settings nested by section, the same shape the JSON file uses."""
    dumped = settings.model_dump()
    result: dict[str, dict[str, Any]] = {}
    for dotpath, field in _SETTING_MAP.items():
        section, _, key = dotpath.partition(".")
        value = dumped[field]
        result.setdefault(section, {})[key] = list(value) if isinstance(value, tuple) else value
    return result
