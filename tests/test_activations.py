"""Tests for ActivationFunction values and output-based derivatives."""

from __future__ import annotations

import pytest
import torch

from fcnet.activations import ActivationFunction


REFERENCE = {
    ActivationFunction.LOGISTIC: torch.sigmoid,
    ActivationFunction.TANH: torch.tanh,
    ActivationFunction.TANH_SCALED: lambda a: 1.7159 * torch.tanh(a * 2.0 / 3.0),
    ActivationFunction.RECTIFIER: torch.relu,
    ActivationFunction.LINEAR: lambda a: a,
}


@pytest.mark.parametrize("act", list(ActivationFunction))
def test_apply_matches_reference(act):
    a = torch.linspace(-3.0, 3.0, 13, dtype=torch.float64)
    assert torch.allclose(act.apply(a), REFERENCE[act](a))


@pytest.mark.parametrize("act", list(ActivationFunction))
def test_apply_into_buffer(act):
    a = torch.randn(5, dtype=torch.float64)
    out = torch.empty(5, dtype=torch.float64)
    result = act.apply(a, out=out)
    assert result.data_ptr() == out.data_ptr()
    assert torch.allclose(out, REFERENCE[act](a))


@pytest.mark.parametrize("act", list(ActivationFunction))
def test_derivative_matches_autograd(act):
    # Avoid a = 0 where the rectifier is not differentiable.
    a = torch.tensor([-2.5, -1.0, -0.3, 0.4, 1.2, 2.0], dtype=torch.float64, requires_grad=True)
    REFERENCE[act](a).sum().backward()
    y = act.apply(a.detach())
    assert torch.allclose(act.derivative(y), a.grad)


def test_linear_apply_does_not_alias_input():
    a = torch.ones(3, dtype=torch.float64)
    y = ActivationFunction.LINEAR.apply(a)
    y.zero_()
    assert torch.all(a == 1.0)


def test_scaled_tanh_unit_gain_at_one():
    y = ActivationFunction.TANH_SCALED.apply(torch.tensor([1.0], dtype=torch.float64))
    assert abs(y.item() - 1.0) < 1e-3


class TestFromName:
    @pytest.mark.parametrize("name,expected", [
        ("tanh", ActivationFunction.TANH),
        ("LOGISTIC", ActivationFunction.LOGISTIC),
        ("Tanh_Scaled", ActivationFunction.TANH_SCALED),
        ("rectifier", ActivationFunction.RECTIFIER),
        ("linear", ActivationFunction.LINEAR),
    ])
    def test_known_names(self, name, expected):
        assert ActivationFunction.from_name(name) is expected

    def test_unknown_name_raises(self):
        with pytest.raises(ValueError, match="Unknown activation"):
            ActivationFunction.from_name("softsign")
