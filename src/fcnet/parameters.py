"""Central registry of trainable parameters and their gradients.

Layers own their weight and gradient tensors.  During
:meth:`~fcnet.layers.base.Layer.initialize` a layer registers each pair
with a :class:`ParameterRegistry`, which assigns it a contiguous slice of
one flat parameter vector.  An optimiser works on that flat vector:

    theta = registry.parameters()        # flat copy, (P,)
    grad  = registry.derivatives()       # flat copy, (P,)
    registry.set_parameters(theta - lr * grad)   # written back in place
    registry.zero_derivatives()

The registered tensors remain the single source of truth for each scalar;
the flat vectors are assembled on demand.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

import torch
from torch import Tensor

from .errors import DimensionMismatch

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParameterHandle:
    """Location of one registered tensor inside the flat parameter vector."""

    name: str
    offset: int
    shape: Tuple[int, ...]

    @property
    def size(self) -> int:
        n = 1
        for d in self.shape:
            n *= d
        return n

    @property
    def slice(self) -> slice:
        return slice(self.offset, self.offset + self.size)


class ParameterRegistry:
    """Aggregates (parameter, derivative) tensor pairs into flat vectors."""

    def __init__(self) -> None:
        self._handles: List[ParameterHandle] = []
        self._parameters: List[Tensor] = []
        self._derivatives: List[Tensor] = []
        self._size = 0

    def __len__(self) -> int:
        return self._size

    @property
    def handles(self) -> Tuple[ParameterHandle, ...]:
        return tuple(self._handles)

    def register(self, name: str, parameter: Tensor, derivative: Tensor) -> ParameterHandle:
        """Register *parameter* and its gradient accumulator *derivative*.

        Both tensors are kept by reference, not copied.

        Raises:
            DimensionMismatch: If the two tensors differ in shape.
        """
        if parameter.shape != derivative.shape:
            raise DimensionMismatch(
                f"Parameter {name!r} has shape {tuple(parameter.shape)} but its "
                f"derivative has shape {tuple(derivative.shape)}"
            )
        handle = ParameterHandle(name=name, offset=self._size, shape=tuple(parameter.shape))
        self._handles.append(handle)
        self._parameters.append(parameter)
        self._derivatives.append(derivative)
        self._size += handle.size
        log.debug("Registered %s at offset %d (%d scalars)", name, handle.offset, handle.size)
        return handle

    def parameters(self) -> Tensor:
        """Return a flat copy of all registered parameters."""
        return self._flatten(self._parameters)

    def derivatives(self) -> Tensor:
        """Return a flat copy of all registered gradient accumulators."""
        return self._flatten(self._derivatives)

    def set_parameters(self, flat: Tensor) -> None:
        """Write *flat* back into the registered parameter tensors in place.

        Raises:
            DimensionMismatch: If ``flat`` does not hold ``len(self)`` scalars.
        """
        if flat.dim() != 1 or flat.numel() != self._size:
            raise DimensionMismatch(
                f"Expected a flat vector of {self._size} parameters, "
                f"got shape {tuple(flat.shape)}"
            )
        for handle, parameter in zip(self._handles, self._parameters):
            parameter.copy_(flat[handle.slice].reshape(handle.shape))

    def zero_derivatives(self) -> None:
        for derivative in self._derivatives:
            derivative.zero_()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _flatten(tensors: List[Tensor]) -> Tensor:
        if not tensors:
            return torch.empty(0, dtype=torch.float64)
        return torch.cat([t.reshape(-1) for t in tensors])
