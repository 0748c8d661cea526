"""Index-based views on a :class:`~fcnet.data.dataset.DataSet`.

A ``DataSetView`` holds nothing but a list of indices into a referenced
dataset.  Instance and target lookups are translated through that list
and answered by the dataset itself, so views never copy instance data
and always see the current contents of the dataset.

Partitioning helpers build and combine views by manipulating index
lists only:

    groups = split(dataset, 5)                  # five disjoint views
    train, test = split_ratio(dataset, 0.8)     # 80 / 20
    merged = DataSetView(dataset).merge(groups) # all five, in order

Lifetime: a view borrows its dataset.  Mutating the dataset (for example
in ``finish_iteration``) is visible through every view.
"""

from __future__ import annotations

import copy
import logging
import math
from typing import Iterable, List, Optional, Sequence, Tuple

import torch
from torch import Tensor

from ..errors import IndexOutOfRange, InvalidRatio
from .dataset import DataSet

log = logging.getLogger(__name__)


class DataSetView(DataSet):
    """Re-indexable window into another dataset.

    Args:
        dataset: Dataset referenced (not owned) by this view.
        indices: Indices into *dataset* that make up the view, in view
            order.  Copied.  Omit for an empty view.

    Raises:
        IndexOutOfRange: If an index is not valid for *dataset*.
    """

    def __init__(self, dataset: DataSet, indices: Iterable[int] = ()) -> None:
        self.dataset = dataset
        self._indices: List[int] = [int(i) for i in indices]
        n = dataset.samples()
        for i in self._indices:
            if not 0 <= i < n:
                raise IndexOutOfRange(f"Index {i} out of range for {n} samples")

    def __copy__(self) -> "DataSetView":
        return DataSetView(self.dataset, self._indices)

    def __repr__(self) -> str:
        return f"DataSetView(samples={self.samples()}, dataset={type(self.dataset).__name__})"

    def copy(self) -> "DataSetView":
        """Return a view with its own index list on the same dataset."""
        return copy.copy(self)

    @property
    def indices(self) -> Tuple[int, ...]:
        return tuple(self._indices)

    # ------------------------------------------------------------------
    # DataSet interface
    # ------------------------------------------------------------------

    def samples(self) -> int:
        return len(self._indices)

    def inputs(self) -> int:
        return self.dataset.inputs()

    def outputs(self) -> int:
        return self.dataset.outputs()

    def get_instance(self, i: int) -> Tensor:
        self._check_index(i)
        return self.dataset.get_instance(self._indices[i])

    def get_target(self, i: int) -> Tensor:
        self._check_index(i)
        return self.dataset.get_target(self._indices[i])

    def finish_iteration(self, learner: object) -> None:
        self.dataset.finish_iteration(learner)

    # ------------------------------------------------------------------
    # Index manipulation
    # ------------------------------------------------------------------

    def shuffle(self, generator: Optional[torch.Generator] = None) -> "DataSetView":
        """Permute the view's indices uniformly at random, in place.

        Returns:
            ``self``, to allow ``view.shuffle().get_instance(0)``.
        """
        order = torch.randperm(len(self._indices), generator=generator).tolist()
        self._indices = [self._indices[j] for j in order]
        return self

    def merge(self, groups: Iterable["DataSetView"]) -> "DataSetView":
        """Append the indices of every view in *groups*, in order.

        Indices are not deduplicated: overlapping groups produce repeated
        samples.

        Raises:
            ValueError: If a group references a different dataset.
        """
        for group in groups:
            if group.dataset is not self.dataset:
                raise ValueError("Cannot merge views of different datasets")
            self._indices.extend(group._indices)
        return self


# ---------------------------------------------------------------------------
# Partitioning
# ---------------------------------------------------------------------------


def _index_universe(
    dataset: DataSet, shuffling: bool, generator: Optional[torch.Generator]
) -> List[int]:
    n = dataset.samples()
    if shuffling:
        return torch.randperm(n, generator=generator).tolist()
    return list(range(n))


def split(
    dataset: DataSet,
    number_of_groups: int,
    shuffling: bool = True,
    generator: Optional[torch.Generator] = None,
) -> List[DataSetView]:
    """Partition *dataset* into ``number_of_groups`` disjoint views.

    Group sizes differ by at most one; the first ``N % number_of_groups``
    groups hold the extra sample.  Every index appears in exactly one
    group.

    Args:
        dataset: Dataset to partition.
        number_of_groups: Number of views to produce (>= 1).
        shuffling: Permute the indices before slicing, randomising group
            membership.
        generator: Optional ``torch.Generator`` for reproducible shuffles.

    Raises:
        ValueError: If ``number_of_groups < 1``.
    """
    if number_of_groups < 1:
        raise ValueError(f"number_of_groups must be >= 1, got {number_of_groups}")

    indices = _index_universe(dataset, shuffling, generator)
    base, extra = divmod(len(indices), number_of_groups)

    groups: List[DataSetView] = []
    start = 0
    for g in range(number_of_groups):
        stop = start + base + (1 if g < extra else 0)
        groups.append(DataSetView(dataset, indices[start:stop]))
        start = stop

    log.debug("Split %d samples into %d groups: %s",
              len(indices), number_of_groups, [v.samples() for v in groups])
    return groups


def split_ratio(
    dataset: DataSet,
    ratio: float = 0.5,
    shuffling: bool = True,
    generator: Optional[torch.Generator] = None,
) -> List[DataSetView]:
    """Split *dataset* into two disjoint views.

    The first view holds ``round(ratio * N)`` samples (halves round up),
    the second holds the rest.

    Raises:
        InvalidRatio: If *ratio* is outside ``[0, 1]``.
    """
    if not 0.0 <= ratio <= 1.0:
        raise InvalidRatio(f"ratio must be in [0, 1], got {ratio}")

    indices = _index_universe(dataset, shuffling, generator)
    n_first = int(math.floor(ratio * len(indices) + 0.5))

    groups = [
        DataSetView(dataset, indices[:n_first]),
        DataSetView(dataset, indices[n_first:]),
    ]
    log.debug("Split %d samples with ratio %.3f: %d / %d",
              len(indices), ratio, groups[0].samples(), groups[1].samples())
    return groups


def merge(merging: DataSetView, groups: Sequence[DataSetView]) -> DataSetView:
    """Append all indices of *groups* to *merging*.  See :meth:`DataSetView.merge`."""
    return merging.merge(groups)


def cross_validation_folds(
    dataset: DataSet,
    k: int,
    shuffling: bool = True,
    generator: Optional[torch.Generator] = None,
) -> List[Tuple[DataSetView, DataSetView]]:
    """Build ``k`` (training, validation) view pairs for k-fold validation.

    Fold *i* validates on group *i* of :func:`split` and trains on the
    remaining groups merged in group order.

    Raises:
        ValueError: If ``k < 2``.
    """
    if k < 2:
        raise ValueError(f"k must be >= 2 for cross-validation, got {k}")

    groups = split(dataset, k, shuffling=shuffling, generator=generator)
    folds = []
    for i, validation in enumerate(groups):
        training = DataSetView(dataset).merge(
            g for j, g in enumerate(groups) if j != i
        )
        folds.append((training, validation))
    return folds
