"""Tests for DirectStorageDataSet."""

from __future__ import annotations

import numpy as np
import pytest
import torch

from fcnet.data import DirectStorageDataSet
from fcnet.errors import DimensionMismatch, IndexOutOfRange


class TestDirectStorageDataSet:
    def setup_method(self):
        self.X = torch.randn(6, 4, dtype=torch.float64)
        self.T = torch.randn(6, 2, dtype=torch.float64)
        self.dataset = DirectStorageDataSet(self.X, self.T)

    def test_dimensions(self):
        assert self.dataset.samples() == 6
        assert self.dataset.inputs() == 4
        assert self.dataset.outputs() == 2
        assert len(self.dataset) == 6

    def test_rows_are_views(self):
        self.dataset.get_instance(3).zero_()
        assert torch.all(self.X[3] == 0.0)

    def test_vector_targets_become_columns(self):
        dataset = DirectStorageDataSet(self.X, torch.arange(6, dtype=torch.float64))
        assert dataset.outputs() == 1
        assert dataset.get_target(4).item() == 4.0

    def test_row_count_mismatch_raises(self):
        with pytest.raises(DimensionMismatch):
            DirectStorageDataSet(self.X, torch.zeros(5, 2))

    def test_non_matrix_inputs_raise(self):
        with pytest.raises(DimensionMismatch):
            DirectStorageDataSet(torch.zeros(6), self.T)

    @pytest.mark.parametrize("i", [-1, 6, 100])
    def test_out_of_range_raises(self, i):
        with pytest.raises(IndexOutOfRange):
            self.dataset.get_instance(i)
        with pytest.raises(IndexOutOfRange):
            self.dataset.get_target(i)

    def test_finish_iteration_counts(self):
        self.dataset.finish_iteration(None)
        assert self.dataset.iteration == 1


class TestFromNpz:
    def test_round_trip(self, tmp_path):
        X = np.arange(12, dtype=np.float64).reshape(4, 3)
        T = np.ones((4, 1))
        path = tmp_path / "tiny.npz"
        np.savez(path, X=X, T=T)

        dataset = DirectStorageDataSet.from_npz(path)
        assert dataset.samples() == 4
        assert dataset.inputs() == 3
        assert dataset.outputs() == 1
        assert dataset.X.dtype == torch.float64
        assert torch.equal(dataset.get_instance(2), torch.tensor([6.0, 7.0, 8.0], dtype=torch.float64))

    def test_dtype_conversion(self, tmp_path):
        path = tmp_path / "f32.npz"
        np.savez(path, X=np.zeros((2, 2), dtype=np.float32), T=np.zeros(2, dtype=np.float32))
        dataset = DirectStorageDataSet.from_npz(path, dtype=torch.float64)
        assert dataset.X.dtype == torch.float64
        assert dataset.outputs() == 1

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            DirectStorageDataSet.from_npz(tmp_path / "missing.npz")
