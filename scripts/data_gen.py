#!/usr/bin/env python3
"""Generate a synthetic regression dataset as a ``.npz`` archive.

Usage::

    PYTHONPATH=src python scripts/data_gen.py \\
        --name smoke \\
        --n_samples 200 \\
        --n_inputs 4 \\
        --n_outputs 2 \\
        --activation tanh \\
        --output_dir data

Output: ``<output_dir>/<name>.npz`` with arrays

    X   (N, D)  instances
    T   (N, F)  targets

Generative model
----------------
    X ~ N(0, 1)
    A ~ N(0, 1 / D)                 (D, F) ground-truth weights
    b ~ N(0, 1)                     (F,)   ground-truth bias
    T = g(X A + b) + N(0, noise²)

where g is the chosen activation, so a single ``FullyConnected`` layer
with the same activation can fit the data exactly up to noise.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import numpy as np

from fcnet.activations import ActivationFunction


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class RegressionGenerator:
    """Synthetic single-layer regression data generator.

    Args:
        n_samples: Number of rows N.
        n_inputs: Instance dimension D.
        n_outputs: Target dimension F.
        activation: Name of the output nonlinearity.
        noise: Standard deviation of the additive target noise.
        seed: Random seed for reproducibility.
    """

    def __init__(
        self,
        n_samples: int = 200,
        n_inputs: int = 4,
        n_outputs: int = 1,
        activation: str = "linear",
        noise: float = 0.1,
        seed: int = 42,
    ) -> None:
        self.rng = np.random.default_rng(seed)
        self.n_samples = n_samples
        self.n_inputs = n_inputs
        self.n_outputs = n_outputs
        self.activation = activation
        self.noise = noise

        self.A = self.rng.normal(0.0, 1.0 / np.sqrt(n_inputs), size=(n_inputs, n_outputs))
        self.b = self.rng.standard_normal(n_outputs)

    def _apply(self, a: np.ndarray) -> np.ndarray:
        if self.activation == "logistic":
            return 1.0 / (1.0 + np.exp(-a))
        if self.activation == "tanh":
            return np.tanh(a)
        if self.activation == "tanh_scaled":
            return 1.7159 * np.tanh(2.0 * a / 3.0)
        if self.activation == "rectifier":
            return np.maximum(a, 0.0)
        return a

    def generate(self) -> tuple[np.ndarray, np.ndarray]:
        X = self.rng.standard_normal((self.n_samples, self.n_inputs))
        T = self._apply(X @ self.A + self.b)
        T = T + self.noise * self.rng.standard_normal(T.shape)
        return X, T


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate a synthetic regression dataset.")
    p.add_argument("--name", default="synthetic")
    p.add_argument("--n_samples", type=int, default=200)
    p.add_argument("--n_inputs", type=int, default=4)
    p.add_argument("--n_outputs", type=int, default=1)
    p.add_argument("--activation", default="linear")
    p.add_argument("--noise", type=float, default=0.1)
    p.add_argument("--seed", type=int, default=42)
    p.add_argument("--output_dir", default="data")
    return p.parse_args()


def main() -> None:
    args = parse_args()
    try:
        act = ActivationFunction.from_name(args.activation)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        sys.exit(1)

    gen = RegressionGenerator(
        n_samples=args.n_samples,
        n_inputs=args.n_inputs,
        n_outputs=args.n_outputs,
        activation=act.value,
        noise=args.noise,
        seed=args.seed,
    )
    X, T = gen.generate()

    out_dir = Path(args.output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / f"{args.name}.npz"
    np.savez(out_path, X=X, T=T)

    metadata = {
        "n_samples": args.n_samples,
        "n_inputs": args.n_inputs,
        "n_outputs": args.n_outputs,
        "activation": act.value,
        "noise": args.noise,
        "seed": args.seed,
    }
    with (out_dir / f"{args.name}.json").open("w", encoding="utf-8") as fh:
        json.dump(metadata, fh, indent=2)

    print(f"Wrote {X.shape[0]} samples to {out_path}")


if __name__ == "__main__":
    main()
