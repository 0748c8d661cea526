"""Layer interface shared by all network layers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from torch import Tensor

from ..parameters import ParameterRegistry


@dataclass(frozen=True)
class OutputInfo:
    """Shape of a layer's output, consumed by the next layer."""

    dimensions: Tuple[int, ...]

    def outputs(self) -> int:
        n = 1
        for d in self.dimensions:
            n *= d
        return n


class LayerState(Enum):
    """Lifecycle of a layer's cached buffers.

    ``FORWARD_READY`` and ``BACKWARD_READY`` both mean a forward pass has
    been cached; backpropagation may be repeated against the same cache.
    """

    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    FORWARD_READY = "forward_ready"
    BACKWARD_READY = "backward_ready"


class Layer(ABC):
    """Differentiable building block with explicit forward/backward passes."""

    @abstractmethod
    def initialize(self, registry: ParameterRegistry) -> OutputInfo:
        """Allocate parameters, register them and describe the output."""
        raise NotImplementedError

    @abstractmethod
    def forward_propagate(self, x: Tensor) -> Tensor:
        raise NotImplementedError

    @abstractmethod
    def backpropagate(self, ein: Tensor) -> Tensor:
        raise NotImplementedError
