"""Tests for DataModule and make_regression."""

from __future__ import annotations

import numpy as np
import pytest
import torch

from fcnet.config import Config
from fcnet.data import DataModule, DirectStorageDataSet, make_regression


def make_config(**data_overrides) -> Config:
    cfg = Config()
    cfg.data.n_samples = 40
    cfg.data.n_inputs = 3
    cfg.data.n_outputs = 2
    cfg.data.train_split = 0.75
    cfg.data.n_folds = 4
    for key, value in data_overrides.items():
        setattr(cfg.data, key, value)
    return cfg


class TestMakeRegression:
    def test_shapes(self):
        dataset = make_regression(20, 5, 2)
        assert dataset.samples() == 20
        assert dataset.inputs() == 5
        assert dataset.outputs() == 2
        assert dataset.X.dtype == torch.float64

    def test_seeded(self):
        a = make_regression(10, 2, 1, generator=torch.Generator().manual_seed(9))
        b = make_regression(10, 2, 1, generator=torch.Generator().manual_seed(9))
        assert torch.equal(a.X, b.X)
        assert torch.equal(a.T, b.T)


class TestDataModule:
    def test_build_split_sizes(self):
        train, test = DataModule(make_config()).build()
        assert train.samples() == 30
        assert test.samples() == 10
        assert sorted(train.indices + test.indices) == list(range(40))

    def test_views_share_dataset(self):
        module = DataModule(make_config())
        train, test = module.build()
        assert train.dataset is module.dataset
        assert test.dataset is module.dataset

    def test_load_is_cached(self):
        module = DataModule(make_config())
        assert module.load() is module.load()

    def test_unshuffled_split_is_ordered(self):
        train, test = DataModule(make_config(shuffle=False)).build()
        assert train.indices == tuple(range(30))
        assert test.indices == tuple(range(30, 40))

    def test_seed_reproducibility(self):
        a_train, _ = DataModule(make_config()).build()
        b_train, _ = DataModule(make_config()).build()
        assert a_train.indices == b_train.indices

    def test_folds(self):
        folds = DataModule(make_config()).folds()
        assert len(folds) == 4
        for train, val in folds:
            assert train.samples() == 30
            assert val.samples() == 10
            assert set(train.indices).isdisjoint(val.indices)

    def test_loads_npz(self, tmp_path):
        path = tmp_path / "data.npz"
        np.savez(path, X=np.random.randn(8, 2), T=np.random.randn(8, 1))
        module = DataModule(make_config(data_path=str(path)))
        dataset = module.load()
        assert isinstance(dataset, DirectStorageDataSet)
        assert dataset.samples() == 8
        train, test = module.build()
        assert train.samples() == 6
        assert test.samples() == 2

    def test_missing_npz_raises(self, tmp_path):
        module = DataModule(make_config(data_path=str(tmp_path / "nope.npz")))
        with pytest.raises(FileNotFoundError):
            module.load()
