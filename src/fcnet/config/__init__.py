"""Configuration module: dataclass types and YAML loader."""

from .types import Config, BaseConfig, LayerConfig, DataConfig
from .loader import load_config

__all__ = [
    "Config",
    "BaseConfig",
    "LayerConfig",
    "DataConfig",
    "load_config",
]
