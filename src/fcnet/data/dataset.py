"""Dataset capability and a tensor-backed implementation.

Storage convention
------------------
Instances and targets are stored row-major: ``X`` has shape ``(N, D)``
and ``T`` has shape ``(N, F)``.  ``get_instance(i)`` returns the row
``X[i]``, which is a *view* into ``X``.  Writing to the returned tensor
writes to the dataset, and the same holds for every
:class:`~fcnet.data.views.DataSetView` that references it.

Every ``DataSet`` is also a ``torch.utils.data.Dataset``, so it can be
handed to a ``DataLoader`` directly.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Tuple

import numpy as np
import torch
from torch import Tensor
from torch.utils.data import Dataset

from ..errors import DimensionMismatch, IndexOutOfRange

log = logging.getLogger(__name__)


class DataSet(Dataset, ABC):
    """Indexable collection of (instance, target) vector pairs."""

    @abstractmethod
    def samples(self) -> int:
        """Number of instances."""

    @abstractmethod
    def inputs(self) -> int:
        """Dimension of each instance vector."""

    @abstractmethod
    def outputs(self) -> int:
        """Dimension of each target vector."""

    @abstractmethod
    def get_instance(self, i: int) -> Tensor:
        """Return instance *i* as a mutable alias into the storage."""

    @abstractmethod
    def get_target(self, i: int) -> Tensor:
        """Return target *i* as a mutable alias into the storage."""

    def finish_iteration(self, learner: object) -> None:
        """Hook called by the training loop once per pass over the data.

        The learner is opaque to the dataset.  The default does nothing.
        """

    def __len__(self) -> int:
        return self.samples()

    def __getitem__(self, i: int) -> Tuple[Tensor, Tensor]:
        return self.get_instance(i), self.get_target(i)

    def _check_index(self, i: int) -> None:
        n = self.samples()
        if not 0 <= i < n:
            raise IndexOutOfRange(f"Index {i} out of range for {n} samples")


class DirectStorageDataSet(DataSet):
    """Dataset that keeps all instances and targets in two tensors.

    Args:
        inputs: ``(N, D)`` instance matrix.  Stored by reference.
        targets: ``(N, F)`` target matrix.  Stored by reference.
            A 1-D tensor of length N is treated as ``(N, 1)``.

    Raises:
        DimensionMismatch: If the two tensors disagree on N.
    """

    def __init__(self, inputs: Tensor, targets: Tensor) -> None:
        if inputs.dim() != 2:
            raise DimensionMismatch(
                f"inputs must be a (N, D) matrix, got shape {tuple(inputs.shape)}"
            )
        if targets.dim() == 1:
            targets = targets.unsqueeze(1)
        if targets.dim() != 2 or targets.shape[0] != inputs.shape[0]:
            raise DimensionMismatch(
                f"targets must be a ({inputs.shape[0]}, F) matrix, "
                f"got shape {tuple(targets.shape)}"
            )
        self.X = inputs
        self.T = targets
        self.iteration = 0

    @classmethod
    def from_npz(cls, path: str | Path, dtype: Optional[torch.dtype] = None) -> "DirectStorageDataSet":
        """Load arrays ``X`` and ``T`` from a ``.npz`` archive.

        Raises:
            FileNotFoundError: If *path* does not exist.
            KeyError: If the archive lacks ``X`` or ``T``.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Dataset file not found: {path}")
        with np.load(path) as archive:
            X = torch.from_numpy(np.ascontiguousarray(archive["X"]))
            T = torch.from_numpy(np.ascontiguousarray(archive["T"]))
        if dtype is not None:
            X, T = X.to(dtype), T.to(dtype)
        log.info("Loaded %s: %d samples, %d inputs, %d outputs",
                 path, X.shape[0], X.shape[1], T.shape[1] if T.dim() > 1 else 1)
        return cls(X, T)

    def samples(self) -> int:
        return self.X.shape[0]

    def inputs(self) -> int:
        return self.X.shape[1]

    def outputs(self) -> int:
        return self.T.shape[1]

    def get_instance(self, i: int) -> Tensor:
        self._check_index(i)
        return self.X[i]

    def get_target(self, i: int) -> Tensor:
        self._check_index(i)
        return self.T[i]

    def finish_iteration(self, learner: object) -> None:
        self.iteration += 1
        log.debug("Finished iteration %d over %d samples", self.iteration, self.samples())
