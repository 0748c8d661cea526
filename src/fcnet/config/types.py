"""Configuration dataclasses for fcnet.

Three flat dataclasses form a nested Config that is populated from YAML
via :func:`fcnet.config.loader.load_config`.  Every field has a default,
so a partial YAML file only needs to list what it changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class BaseConfig:
    """Global experiment settings."""

    experiment_name: str = "base"
    seed: int = 42


@dataclass
class LayerConfig:
    """FullyConnected layer hyperparameters."""

    units: int = 1
    bias: bool = True
    activation: str = "linear"     # see fcnet.activations.ActivationFunction
    std_dev: float = 0.05          # weight init N(0, std_dev²)


@dataclass
class DataConfig:
    """Dataset source and partitioning.

    When ``data_path`` is unset a synthetic linear-regression dataset of
    ``n_samples`` x ``n_inputs`` -> ``n_outputs`` is generated from
    ``base.seed``.
    """

    data_path: Optional[str] = None
    n_samples: int = 100
    n_inputs: int = 4
    n_outputs: int = 1
    train_split: float = 0.8
    n_folds: int = 5
    shuffle: bool = True


@dataclass
class Config:
    """Top-level config with one attribute per YAML section."""

    base: BaseConfig = field(default_factory=BaseConfig)
    layer: LayerConfig = field(default_factory=LayerConfig)
    data: DataConfig = field(default_factory=DataConfig)
