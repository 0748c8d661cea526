"""Utilities: numerical gradient checking."""

from .gradients import finite_difference_gradient, max_relative_error

__all__ = ["finite_difference_gradient", "max_relative_error"]
