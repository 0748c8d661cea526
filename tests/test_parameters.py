"""Tests for ParameterRegistry flat-vector aggregation."""

from __future__ import annotations

import pytest
import torch

from fcnet.errors import DimensionMismatch
from fcnet.parameters import ParameterHandle, ParameterRegistry


class TestParameterRegistry:
    def setup_method(self):
        self.registry = ParameterRegistry()
        self.W1 = torch.arange(6, dtype=torch.float64).reshape(2, 3)
        self.G1 = torch.zeros(2, 3, dtype=torch.float64)
        self.W2 = torch.tensor([10.0, 11.0], dtype=torch.float64)
        self.G2 = torch.zeros(2, dtype=torch.float64)
        self.h1 = self.registry.register("first", self.W1, self.G1)
        self.h2 = self.registry.register("second", self.W2, self.G2)

    def test_empty_registry(self):
        registry = ParameterRegistry()
        assert len(registry) == 0
        assert registry.parameters().numel() == 0

    def test_handles_are_contiguous(self):
        assert self.h1 == ParameterHandle("first", 0, (2, 3))
        assert self.h2.offset == 6
        assert self.h2.size == 2
        assert self.h2.slice == slice(6, 8)
        assert self.registry.handles == (self.h1, self.h2)

    def test_length_counts_scalars(self):
        assert len(self.registry) == 8

    def test_parameters_flattened_in_order(self):
        expected = torch.tensor([0, 1, 2, 3, 4, 5, 10, 11], dtype=torch.float64)
        assert torch.equal(self.registry.parameters(), expected)

    def test_parameters_is_a_copy(self):
        flat = self.registry.parameters()
        flat.zero_()
        assert self.W1[1, 2] == 5.0

    def test_set_parameters_writes_through(self):
        W1 = self.W1
        self.registry.set_parameters(torch.arange(8, 0, -1, dtype=torch.float64))
        assert self.W1 is W1
        assert torch.equal(self.W1, torch.tensor([[8.0, 7.0, 6.0], [5.0, 4.0, 3.0]], dtype=torch.float64))
        assert torch.equal(self.W2, torch.tensor([2.0, 1.0], dtype=torch.float64))

    def test_derivatives_track_live_tensors(self):
        self.G2 += 3.0
        assert torch.equal(self.registry.derivatives()[6:], torch.tensor([3.0, 3.0], dtype=torch.float64))

    def test_zero_derivatives(self):
        self.G1.fill_(1.0)
        self.G2.fill_(2.0)
        self.registry.zero_derivatives()
        assert torch.all(self.registry.derivatives() == 0.0)

    def test_wrong_flat_length_raises(self):
        with pytest.raises(DimensionMismatch):
            self.registry.set_parameters(torch.zeros(7, dtype=torch.float64))

    def test_mismatched_shapes_raise(self):
        with pytest.raises(DimensionMismatch):
            self.registry.register("bad", torch.zeros(2, 2), torch.zeros(4))
