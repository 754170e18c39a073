"""neuralcore - activation-propagation graph engine."""

__version__ = "0.1.0"

from neuralcore.cortex import CerebralCortex
from neuralcore.settings import CortexSettings, load_settings

__all__ = ["CerebralCortex", "CortexSettings", "load_settings", "__version__"]
