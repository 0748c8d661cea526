"""Elementwise activation functions for fully-connected layers.

Every activation is paired with its derivative expressed in terms of the
*outputs* ``y = g(a)``, which is what the layer caches after a forward
pass:

    LOGISTIC      y = 1 / (1 + exp(-a))         g'(a) = y (1 - y)
    TANH          y = tanh(a)                   g'(a) = 1 - y²
    TANH_SCALED   y = 1.7159 tanh(2a / 3)       g'(a) = 2/3 / 1.7159 (1.7159² - y²)
    RECTIFIER     y = max(0, a)                 g'(a) = 1[y > 0]
    LINEAR        y = a                         g'(a) = 1

The scaled tanh keeps unit variance outputs for unit variance inputs
(LeCun et al., "Efficient BackProp").
"""

from __future__ import annotations

from enum import Enum

import torch
from torch import Tensor

_SCALED_TANH_A = 1.7159
_SCALED_TANH_B = 2.0 / 3.0


class ActivationFunction(Enum):
    """Activation applied by a layer after its affine transform."""

    LOGISTIC = "logistic"
    TANH = "tanh"
    TANH_SCALED = "tanh_scaled"
    RECTIFIER = "rectifier"
    LINEAR = "linear"

    @classmethod
    def from_name(cls, name: str) -> "ActivationFunction":
        """Parse a config value such as ``"tanh"`` or ``"LINEAR"``.

        Raises:
            ValueError: If *name* does not name an activation.
        """
        try:
            return cls(name.lower())
        except ValueError:
            known = ", ".join(a.value for a in cls)
            raise ValueError(
                f"Unknown activation function {name!r}; expected one of: {known}"
            ) from None

    def apply(self, a: Tensor, out: Tensor | None = None) -> Tensor:
        """Compute ``y = g(a)``, optionally into the preallocated *out*."""
        if self is ActivationFunction.LOGISTIC:
            return torch.sigmoid(a, out=out)
        if self is ActivationFunction.TANH:
            return torch.tanh(a, out=out)
        if self is ActivationFunction.TANH_SCALED:
            y = torch.tanh(a * _SCALED_TANH_B, out=out)
            return y.mul_(_SCALED_TANH_A)
        if self is ActivationFunction.RECTIFIER:
            return torch.clamp(a, min=0.0, out=out)
        if out is None:
            return a.clone()
        return out.copy_(a)

    def derivative(self, y: Tensor, out: Tensor | None = None) -> Tensor:
        """Compute ``g'(a)`` from the activations ``y``."""
        if out is None:
            out = torch.empty_like(y)
        if self is ActivationFunction.LOGISTIC:
            torch.mul(y, 1.0 - y, out=out)
        elif self is ActivationFunction.TANH:
            torch.mul(y, y, out=out).neg_().add_(1.0)
        elif self is ActivationFunction.TANH_SCALED:
            torch.mul(y, y, out=out).neg_().add_(_SCALED_TANH_A * _SCALED_TANH_A)
            out.mul_(_SCALED_TANH_B / _SCALED_TANH_A)
        elif self is ActivationFunction.RECTIFIER:
            out.copy_((y > 0.0).to(y.dtype))
        else:
            out.fill_(1.0)
        return out
