"""Layers: interface and the fully-connected layer."""

from .base import Layer, LayerState, OutputInfo
from .fully_connected import FullyConnected

__all__ = ["Layer", "LayerState", "OutputInfo", "FullyConnected"]
