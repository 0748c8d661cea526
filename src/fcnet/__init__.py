"""fcnet: dataset views and a fully-connected layer for feed-forward networks.

Subpackages:
- ``fcnet.data``    dataset capability, index views, split / merge
- ``fcnet.layers``  layer interface and ``FullyConnected``
- ``fcnet.config``  YAML-backed dataclass configuration
- ``fcnet.utils``   finite-difference gradient checks
"""

from .activations import ActivationFunction
from .errors import (
    FcnetError,
    IndexOutOfRange,
    DimensionMismatch,
    UninitializedLayer,
    InvalidRatio,
)
from .parameters import ParameterHandle, ParameterRegistry

__version__ = "0.1.0"

__all__ = [
    "ActivationFunction",
    "FcnetError",
    "IndexOutOfRange",
    "DimensionMismatch",
    "UninitializedLayer",
    "InvalidRatio",
    "ParameterHandle",
    "ParameterRegistry",
]
