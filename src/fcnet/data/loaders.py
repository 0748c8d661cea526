"""Dataset construction and train / test partitioning for fcnet.

Data format
-----------
A dataset file is a numpy ``.npz`` archive with two arrays:

    X   (N, D)  instances, one per row
    T   (N, F)  targets, one per row

``scripts/data_gen.py`` writes archives in this format.  Without a data
file the module generates a synthetic linear-regression problem

    T = X A + noise,   X ~ N(0, 1),  A ~ N(0, 1),  noise ~ N(0, 0.1²)

seeded from ``cfg.base.seed`` so runs are reproducible.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import torch

from ..config.types import Config
from .dataset import DataSet, DirectStorageDataSet
from .views import DataSetView, cross_validation_folds, split_ratio

log = logging.getLogger(__name__)


def make_regression(
    n_samples: int,
    n_inputs: int,
    n_outputs: int,
    noise: float = 0.1,
    generator: Optional[torch.Generator] = None,
) -> DirectStorageDataSet:
    """Synthetic linear-regression dataset in double precision."""
    X = torch.randn(n_samples, n_inputs, dtype=torch.float64, generator=generator)
    A = torch.randn(n_inputs, n_outputs, dtype=torch.float64, generator=generator)
    T = X @ A + noise * torch.randn(n_samples, n_outputs, dtype=torch.float64, generator=generator)
    return DirectStorageDataSet(X, T)


class DataModule:
    """Builds the dataset and its train / test (or k-fold) views.

    Args:
        cfg: Full ``Config``; uses ``cfg.data`` and ``cfg.base.seed``.

    After calling :meth:`build`, use :attr:`train_view` and
    :attr:`test_view`.
    """

    def __init__(self, cfg: Config) -> None:
        self.cfg = cfg
        self.generator = torch.Generator().manual_seed(cfg.base.seed)

        # Populated by load() / build()
        self.dataset: Optional[DataSet] = None
        self.train_view: Optional[DataSetView] = None
        self.test_view: Optional[DataSetView] = None

    # ------------------------------------------------------------------
    # Public
    # ------------------------------------------------------------------

    def load(self) -> DataSet:
        """Load (or generate) the underlying dataset once.

        Raises:
            FileNotFoundError: If ``data_path`` is set but missing.
        """
        if self.dataset is not None:
            return self.dataset

        d = self.cfg.data
        if d.data_path:
            self.dataset = DirectStorageDataSet.from_npz(d.data_path, dtype=torch.float64)
        else:
            self.dataset = make_regression(
                d.n_samples, d.n_inputs, d.n_outputs, generator=self.generator
            )
            log.info("Generated synthetic dataset: %d samples, %d -> %d",
                     d.n_samples, d.n_inputs, d.n_outputs)
        return self.dataset

    def build(self) -> Tuple[DataSetView, DataSetView]:
        """Split the dataset into train / test views.

        Returns:
            ``(train_view, test_view)``
        """
        dataset = self.load()
        self.train_view, self.test_view = split_ratio(
            dataset,
            self.cfg.data.train_split,
            shuffling=self.cfg.data.shuffle,
            generator=self.generator,
        )
        log.info("Train samples: %d | test samples: %d",
                 self.train_view.samples(), self.test_view.samples())
        return self.train_view, self.test_view

    def folds(self) -> List[Tuple[DataSetView, DataSetView]]:
        """Return ``cfg.data.n_folds`` (training, validation) view pairs."""
        return cross_validation_folds(
            self.load(),
            self.cfg.data.n_folds,
            shuffling=self.cfg.data.shuffle,
            generator=self.generator,
        )
