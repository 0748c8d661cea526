"""Numerical gradient checking against a :class:`ParameterRegistry`.

Central differences over the flat parameter vector:

    ∂L/∂θ_p ≈ (L(θ + ε e_p) − L(θ − ε e_p)) / 2ε

Each evaluation writes the perturbed vector back through
:meth:`ParameterRegistry.set_parameters`, so *loss_fn* simply runs the
usual forward pass.  The original parameters are restored on return.
"""

from __future__ import annotations

from typing import Callable

import torch
from torch import Tensor

from ..parameters import ParameterRegistry


def finite_difference_gradient(
    registry: ParameterRegistry,
    loss_fn: Callable[[], float],
    eps: float = 1e-5,
) -> Tensor:
    """Approximate ∂L/∂θ for every registered parameter.

    Args:
        registry: Registry holding the parameters to perturb.
        loss_fn: Zero-argument callable returning the scalar loss for the
            registry's current parameters.
        eps: Perturbation size.

    Returns:
        Flat gradient estimate of length ``len(registry)``.
    """
    theta = registry.parameters()
    grad = torch.zeros_like(theta)
    try:
        for p in range(theta.numel()):
            perturbed = theta.clone()
            perturbed[p] += eps
            registry.set_parameters(perturbed)
            loss_plus = float(loss_fn())
            perturbed[p] -= 2.0 * eps
            registry.set_parameters(perturbed)
            loss_minus = float(loss_fn())
            grad[p] = (loss_plus - loss_minus) / (2.0 * eps)
    finally:
        registry.set_parameters(theta)
    return grad


def max_relative_error(analytic: Tensor, numeric: Tensor, floor: float = 1e-8) -> float:
    """Largest ``|a − n| / max(|a| + |n|, floor)`` over all entries."""
    denom = (analytic.abs() + numeric.abs()).clamp(min=floor)
    return float(((analytic - numeric).abs() / denom).max().item()) if analytic.numel() else 0.0
