"""YAML config loader.

Usage::

    from fcnet.config import load_config
    cfg = load_config("configs/smoke.yaml")
    print(cfg.layer.units)   # 2

The loader merges each YAML section over the corresponding dataclass
defaults, so partial YAML files (smoke configs) work without listing
every field.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from ..activations import ActivationFunction
from .types import Config


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _merge(dataclass_instance: Any, overrides: dict) -> Any:
    """Apply *overrides* dict onto *dataclass_instance* in-place.

    Unknown keys are ignored.
    """
    for key, value in overrides.items():
        if hasattr(dataclass_instance, key):
            setattr(dataclass_instance, key, value)
    return dataclass_instance


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def load_config(yaml_path: str | Path) -> Config:
    """Load a :class:`Config` from a YAML file.

    Sections missing from the YAML keep their dataclass defaults.
    Only the recognised top-level keys (``base``, ``layer``, ``data``)
    are processed; anything else is ignored.

    Args:
        yaml_path: Path to the YAML configuration file.

    Returns:
        Fully populated :class:`Config`.

    Raises:
        FileNotFoundError: If *yaml_path* does not exist.
        ValueError: If semantic validation fails (e.g. units < 1).
    """
    yaml_path = Path(yaml_path)
    if not yaml_path.exists():
        raise FileNotFoundError(f"Config file not found: {yaml_path}")

    with yaml_path.open("r", encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    cfg = Config()

    if "base" in raw:
        _merge(cfg.base, raw["base"])
    if "layer" in raw:
        _merge(cfg.layer, raw["layer"])
    if "data" in raw:
        _merge(cfg.data, raw["data"])

    _validate(cfg)
    return cfg


def _validate(cfg: Config) -> None:
    """Raise :exc:`ValueError` for obviously invalid configurations."""
    if cfg.layer.units < 1:
        raise ValueError(f"layer.units must be >= 1, got {cfg.layer.units}")
    if cfg.layer.std_dev <= 0.0:
        raise ValueError(f"layer.std_dev must be > 0, got {cfg.layer.std_dev}")
    ActivationFunction.from_name(cfg.layer.activation)
    if not (0.0 < cfg.data.train_split < 1.0):
        raise ValueError(
            f"data.train_split must be in (0, 1), got {cfg.data.train_split}"
        )
    if cfg.data.n_folds < 2:
        raise ValueError(f"data.n_folds must be >= 2, got {cfg.data.n_folds}")
    if cfg.data.data_path is None and cfg.data.n_samples < 1:
        raise ValueError(f"data.n_samples must be >= 1, got {cfg.data.n_samples}")
