"""Fully-connected (dense) layer with hand-written backpropagation.

Theory
------
With inputs x ∈ R^I, weights W ∈ R^{J×I} and an optional bias column
b ∈ R^J (stored as the last column of W, shape J×(I+1)):

Forward:
    a  = W x + b                 (J,)  pre-activation
    y  = g(a)                    (J,)  activation
    y' = g'(a)                   (J,)  cached for the backward pass

Backward, given e_in = ∂L/∂y:
    δ      = e_in ⊙ y'           (J,)
    ∂L/∂W += δ xᵀ                (J, I),   ∂L/∂b += δ
    e_out  = Wᵀ δ                (I,)      bias column excluded

Gradients accumulate across backward calls until they are zeroed, which
is what mini-batch training over several samples needs.

Buffers
-------
``a``, ``y``, ``y'``, ``δ`` and ``e_out`` are allocated once in
:meth:`FullyConnected.initialize` and overwritten in place by every
call.  The tensors returned by :meth:`forward_propagate` and
:meth:`backpropagate` *are* those buffers: copy them if they must
survive the next call.  The forward input ``x`` is kept by reference.
"""

from __future__ import annotations

import logging
from typing import Optional

import torch
from torch import Tensor

from ..activations import ActivationFunction
from ..errors import DimensionMismatch, UninitializedLayer
from ..parameters import ParameterHandle, ParameterRegistry
from .base import Layer, LayerState, OutputInfo

log = logging.getLogger(__name__)


class FullyConnected(Layer):
    """Dense layer ``y = g(W x + b)``.

    Args:
        info: Output description of the previous layer; its
            ``outputs()`` is the input size I.
        units: Number of output units J.
        bias: Add a learned bias per unit.
        act: Activation function g.
        std_dev: Standard deviation of the zero-mean normal used to
            initialise W.
        dtype: Floating point type of all buffers.
        generator: Optional ``torch.Generator`` for reproducible weights.
    """

    def __init__(
        self,
        info: OutputInfo,
        units: int,
        bias: bool,
        act: ActivationFunction,
        std_dev: float,
        dtype: torch.dtype = torch.float64,
        generator: Optional[torch.Generator] = None,
    ) -> None:
        if units < 1:
            raise ValueError(f"units must be >= 1, got {units}")
        if std_dev <= 0.0:
            raise ValueError(f"std_dev must be > 0, got {std_dev}")
        self.I = info.outputs()
        self.J = units
        self.bias = bias
        self.act = act
        self.std_dev = std_dev
        self.dtype = dtype
        self.generator = generator
        self.state = LayerState.UNINITIALIZED

        self.W: Optional[Tensor] = None
        self.Wd: Optional[Tensor] = None
        self.x: Optional[Tensor] = None
        self.a: Optional[Tensor] = None
        self.y: Optional[Tensor] = None
        self.yd: Optional[Tensor] = None
        self.deltas: Optional[Tensor] = None
        self.e: Optional[Tensor] = None
        self.handle: Optional[ParameterHandle] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self, registry: ParameterRegistry) -> OutputInfo:
        """Allocate buffers, draw W ~ N(0, std_dev²) and register W / Wd.

        Returns:
            ``OutputInfo((J,))`` for the next layer.

        Raises:
            RuntimeError: If the layer was already initialised.
        """
        if self.state is not LayerState.UNINITIALIZED:
            raise RuntimeError("FullyConnected.initialize() called twice")

        columns = self.I + 1 if self.bias else self.I
        self.W = torch.randn(
            self.J, columns, dtype=self.dtype, generator=self.generator
        ).mul_(self.std_dev)
        self.Wd = torch.zeros_like(self.W)

        self.a = torch.zeros(self.J, dtype=self.dtype)
        self.y = torch.zeros(self.J, dtype=self.dtype)
        self.yd = torch.zeros(self.J, dtype=self.dtype)
        self.deltas = torch.zeros(self.J, dtype=self.dtype)
        self.e = torch.zeros(self.I, dtype=self.dtype)

        self.handle = registry.register("fully_connected.W", self.W, self.Wd)
        self.state = LayerState.INITIALIZED
        log.info(
            "FullyConnected %d -> %d (bias=%s, act=%s): %d parameters",
            self.I, self.J, self.bias, self.act.value, self.W.numel(),
        )
        return OutputInfo((self.J,))

    # ------------------------------------------------------------------
    # Propagation
    # ------------------------------------------------------------------

    def forward_propagate(self, x: Tensor) -> Tensor:
        """Compute and cache the layer output for input *x*.

        Args:
            x: Input vector of length I.  Kept by reference until the
                next forward pass.

        Returns:
            The internal activation buffer ``y`` (length J).

        Raises:
            UninitializedLayer: Before :meth:`initialize`.
            DimensionMismatch: If *x* is not a vector of length I.
        """
        self._require_initialized("forward_propagate")
        if x.dim() != 1 or x.shape[0] != self.I:
            raise DimensionMismatch(
                f"Expected an input vector of length {self.I}, got shape {tuple(x.shape)}"
            )

        self.x = x
        torch.mv(self.W[:, : self.I], x.to(self.dtype), out=self.a)
        if self.bias:
            self.a.add_(self.W[:, self.I])
        self.act.apply(self.a, out=self.y)
        self.act.derivative(self.y, out=self.yd)

        self.state = LayerState.FORWARD_READY
        return self.y

    def backpropagate(self, ein: Tensor) -> Tensor:
        """Accumulate parameter gradients and return the input gradient.

        Args:
            ein: Gradient of the loss w.r.t. this layer's output (length J).

        Returns:
            The internal buffer ``e`` = ∂L/∂x (length I).

        Raises:
            UninitializedLayer: Before :meth:`initialize`.
            RuntimeError: If no forward pass has been cached.
            DimensionMismatch: If *ein* is not a vector of length J.
        """
        self._require_initialized("backpropagate")
        if self.state is LayerState.INITIALIZED:
            raise RuntimeError("backpropagate() called before forward_propagate()")
        if ein.dim() != 1 or ein.shape[0] != self.J:
            raise DimensionMismatch(
                f"Expected an error vector of length {self.J}, got shape {tuple(ein.shape)}"
            )

        torch.mul(ein.to(self.dtype), self.yd, out=self.deltas)
        self.Wd[:, : self.I].addr_(self.deltas, self.x.to(self.dtype))
        if self.bias:
            self.Wd[:, self.I].add_(self.deltas)
        torch.mv(self.W[:, : self.I].t(), self.deltas, out=self.e)

        self.state = LayerState.BACKWARD_READY
        return self.e

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def weights(self) -> Tensor:
        self._require_initialized("weights")
        return self.W

    @property
    def weight_gradient(self) -> Tensor:
        self._require_initialized("weight_gradient")
        return self.Wd

    def zero_gradients(self) -> None:
        self._require_initialized("zero_gradients")
        self.Wd.zero_()

    def _require_initialized(self, operation: str) -> None:
        if self.state is LayerState.UNINITIALIZED:
            raise UninitializedLayer(
                f"FullyConnected.{operation} requires initialize() to be called first"
            )
