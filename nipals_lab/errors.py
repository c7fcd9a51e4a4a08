"""
errors.py - Exception Taxonomy for nipals_lab

Two failure kinds are surfaced to callers:

- InvalidArgumentError: the caller asked for something the input cannot
  support (out-of-range n_comp, empty or ragged matrix, NaN/Inf values,
  mismatched labels, unknown method).
- DegenerateInputError: the input is well-formed but numerically degenerate
  (zero-variance column under scaling, residual exhausted before all
  requested components were extracted).

Both derive from PCAError, which is itself a ValueError so that callers
catching ValueError keep working.
"""

from __future__ import annotations

from typing import Optional


class PCAError(ValueError):
    """Base class for all errors raised by nipals_lab."""


class InvalidArgumentError(PCAError):
    """Raised when an argument or the input matrix violates a precondition."""


class DegenerateInputError(PCAError):
    """
    Raised when the input cannot be decomposed without dividing by zero.

    Parameters
    ----------
    message : str
        Human readable description of the violated precondition.
    column : str, optional
        Label of the zero-variance column, when that is the cause.
    component : int, optional
        1-based index of the component whose residual was exhausted.
    """

    def __init__(
        self,
        message: str,
        column: Optional[str] = None,
        component: Optional[int] = None,
    ):
        super().__init__(message)
        self.column = column
        self.component = component
