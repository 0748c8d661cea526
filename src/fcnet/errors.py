"""Error kinds raised at the library's contract boundaries.

Each error also derives from the built-in exception a caller would
naturally catch (``IndexError``, ``ValueError``, ``RuntimeError``), so
code that does not know about ``fcnet`` still handles them sensibly.
"""

from __future__ import annotations


class FcnetError(Exception):
    """Base class for all fcnet errors."""


class IndexOutOfRange(FcnetError, IndexError):
    """A dataset or view was queried outside ``[0, samples())``."""


class DimensionMismatch(FcnetError, ValueError):
    """A vector or matrix does not have the size a component expects."""


class UninitializedLayer(FcnetError, RuntimeError):
    """A layer was propagated before :meth:`initialize` was called."""


class InvalidRatio(FcnetError, ValueError):
    """A split ratio lies outside ``[0, 1]``."""
