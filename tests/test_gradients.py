"""Tests for the finite-difference gradient check."""

from __future__ import annotations

import torch

from fcnet.parameters import ParameterRegistry
from fcnet.utils import finite_difference_gradient, max_relative_error


def test_quadratic_gradient():
    w = torch.tensor([1.0, -2.0, 0.5], dtype=torch.float64)
    registry = ParameterRegistry()
    registry.register("w", w, torch.zeros_like(w))

    grad = finite_difference_gradient(registry, lambda: float((w ** 2).sum()))
    assert torch.allclose(grad, 2.0 * torch.tensor([1.0, -2.0, 0.5], dtype=torch.float64), atol=1e-8)


def test_parameters_restored():
    w = torch.tensor([3.0, 4.0], dtype=torch.float64)
    registry = ParameterRegistry()
    registry.register("w", w, torch.zeros_like(w))
    finite_difference_gradient(registry, lambda: float(w.prod()))
    assert torch.equal(w, torch.tensor([3.0, 4.0], dtype=torch.float64))


def test_max_relative_error():
    a = torch.tensor([1.0, 2.0], dtype=torch.float64)
    assert max_relative_error(a, a) == 0.0
    assert abs(max_relative_error(a, torch.tensor([1.0, 3.0], dtype=torch.float64)) - 0.2) < 1e-12
    assert max_relative_error(torch.empty(0), torch.empty(0)) == 0.0
