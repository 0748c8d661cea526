#!/usr/bin/env python3
"""Check FullyConnected backpropagation against finite differences.

For every fold (or the single train split with ``--no-folds``) the
script accumulates the layer's weight gradient over the training view
with a sum-of-squared-errors loss

    L = ½ Σ_n ‖y_n − t_n‖²,   ∂L/∂y_n = y_n − t_n

and compares it with a central-difference estimate.

Usage::

    PYTHONPATH=src python scripts/check_gradients.py --config configs/smoke.yaml
    PYTHONPATH=src python scripts/check_gradients.py --config configs/smoke.yaml --no-folds
"""

from __future__ import annotations

import argparse
import logging
import random
import sys

import torch

# --- Package imports -------------------------------------------------------
from fcnet.activations import ActivationFunction
from fcnet.config import load_config
from fcnet.data import DataModule, DataSet
from fcnet.layers import FullyConnected, OutputInfo
from fcnet.parameters import ParameterRegistry
from fcnet.utils import finite_difference_gradient, max_relative_error

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def set_seed(seed: int) -> None:
    random.seed(seed)
    torch.manual_seed(seed)


def build_layer(cfg, inputs: int, registry: ParameterRegistry) -> FullyConnected:
    layer = FullyConnected(
        OutputInfo((inputs,)),
        units=cfg.layer.units,
        bias=cfg.layer.bias,
        act=ActivationFunction.from_name(cfg.layer.activation),
        std_dev=cfg.layer.std_dev,
    )
    layer.initialize(registry)
    return layer


def sse(layer: FullyConnected, view: DataSet) -> float:
    total = 0.0
    for n in range(view.samples()):
        y = layer.forward_propagate(view.get_instance(n))
        total += 0.5 * float(((y - view.get_target(n)) ** 2).sum())
    return total


def accumulate_gradient(layer: FullyConnected, view: DataSet) -> float:
    layer.zero_gradients()
    total = 0.0
    for n in range(view.samples()):
        y = layer.forward_propagate(view.get_instance(n))
        diff = y - view.get_target(n)
        total += 0.5 * float((diff ** 2).sum())
        layer.backpropagate(diff)
    view.finish_iteration(layer)
    return total


def check(layer: FullyConnected, registry: ParameterRegistry, view: DataSet) -> float:
    loss = accumulate_gradient(layer, view)
    analytic = registry.derivatives()
    numeric = finite_difference_gradient(registry, lambda: sse(layer, view))
    err = max_relative_error(analytic, numeric)
    log.info("samples: %d | loss: %.6f | max relative error: %.3e",
             view.samples(), loss, err)
    return err


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main() -> None:
    parser = argparse.ArgumentParser(description="Gradient check for FullyConnected.")
    parser.add_argument("--config", required=True, help="Path to YAML config file.")
    parser.add_argument("--no-folds", action="store_true",
                        help="Check on the train split only instead of every fold.")
    parser.add_argument("--tolerance", type=float, default=1e-6,
                        help="Maximum accepted relative error.")
    args = parser.parse_args()

    cfg = load_config(args.config)
    set_seed(cfg.base.seed)
    log.info("Experiment: %s | seed: %d", cfg.base.experiment_name, cfg.base.seed)

    data = DataModule(cfg)
    dataset = data.load()
    if args.no_folds:
        train_view, _ = data.build()
        views = [train_view]
    else:
        views = [train for train, _ in data.folds()]

    registry = ParameterRegistry()
    layer = build_layer(cfg, dataset.inputs(), registry)
    if layer.J != dataset.outputs():
        log.error("layer.units (%d) must equal the target dimension (%d)",
                  layer.J, dataset.outputs())
        sys.exit(1)

    worst = max(check(layer, registry, view) for view in views)
    if worst > args.tolerance:
        log.error("Gradient check failed: %.3e > %.3e", worst, args.tolerance)
        sys.exit(1)
    log.info("Gradient check passed (worst relative error %.3e)", worst)


if __name__ == "__main__":
    main()
