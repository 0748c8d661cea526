"""Data module: dataset capability, index views and partitioning."""

from .dataset import DataSet, DirectStorageDataSet
from .views import DataSetView, split, split_ratio, merge, cross_validation_folds
from .loaders import DataModule, make_regression

__all__ = [
    "DataSet",
    "DirectStorageDataSet",
    "DataSetView",
    "split",
    "split_ratio",
    "merge",
    "cross_validation_folds",
    "DataModule",
    "make_regression",
]
