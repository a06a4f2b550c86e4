from .loader import load_config, load_config_with_overrides
from .schema import (
    CooccurrenceConfig,
    DatasetConfig,
    HypothesisConfig,
    PlotConfig,
    ReportConfig,
)

__all__ = [
    "load_config",
    "load_config_with_overrides",
    "ReportConfig",
    "DatasetConfig",
    "CooccurrenceConfig",
    "HypothesisConfig",
    "PlotConfig",
]
