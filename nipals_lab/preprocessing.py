"""
preprocessing.py - Input Validation, Labels and Column Scaling
==============================================================

Turns whatever the caller hands over (ndarray, DataFrame, nested lists) into
a dense float matrix plus sample/variable labels, then centers and
optionally autoscales it. Nothing here mutates the caller's data.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from loguru import logger

from .errors import InvalidArgumentError, DegenerateInputError
from .types import MatrixLike, ScalingParameters

# Standard deviations at or below this fraction of the column's largest
# absolute value are treated as zero; a constant column rarely centers to
# exact zeros.
ZERO_VARIANCE_RTOL = 1e-12


def _default_sample_labels(n: int) -> Tuple[str, ...]:
    return tuple(str(i + 1) for i in range(n))


def _default_variable_labels(p: int) -> Tuple[str, ...]:
    return tuple(f"V{j + 1}" for j in range(p))


def _check_labels(labels: Sequence, expected: int, kind: str) -> Tuple[str, ...]:
    labels = tuple(str(label) for label in labels)
    if len(labels) != expected:
        logger.error(f"Label count mismatch: {len(labels)} {kind} labels for {expected} {kind}s")
        raise InvalidArgumentError(
            f"Got {len(labels)} {kind} labels for {expected} {kind}s"
        )
    return labels


def as_matrix(
    data: MatrixLike,
    min_rows: int = 2,
    sample_labels: Optional[Sequence] = None,
    variable_labels: Optional[Sequence] = None,
) -> Tuple[np.ndarray, Tuple[str, ...], Tuple[str, ...]]:
    """
    Validate ``data`` and convert it to a 2D float array with labels.

    Parameters
    ----------
    data : ndarray, DataFrame or nested sequence (n, p)
        Samples in rows, variables in columns.
    min_rows : int, default=2
        Minimum number of rows accepted.
    sample_labels, variable_labels : sequence, optional
        Explicit labels. When omitted, a DataFrame's index/columns are used,
        otherwise ``"1".."n"`` and ``"V1".."Vp"``.

    Returns
    -------
    X : ndarray (n, p)
    sample_labels : tuple of str
    variable_labels : tuple of str

    Raises
    ------
    InvalidArgumentError
        If the input is empty, ragged, non-numeric, not 2D, too short,
        contains NaN/Inf, or the label counts do not match.
    """
    if isinstance(data, pd.DataFrame):
        frame_samples = tuple(data.index)
        frame_variables = tuple(data.columns)
        try:
            X = data.to_numpy(dtype=float)
        except (TypeError, ValueError) as e:
            logger.error(f"Rejected non-numeric DataFrame: {e}")
            raise InvalidArgumentError(f"Data must be numeric: {e}") from e
    else:
        frame_samples = frame_variables = None
        try:
            X = np.asarray(data, dtype=float)
        except (TypeError, ValueError) as e:
            logger.error(f"Rejected input that is not a rectangular numeric matrix: {e}")
            raise InvalidArgumentError(
                f"Data must be a rectangular numeric matrix: {e}"
            ) from e

    if X.ndim != 2:
        logger.error(f"Rejected input with shape {X.shape}")
        raise InvalidArgumentError(f"Data must be 2D, got shape {X.shape}")

    n, p = X.shape
    if p < 1 or n < min_rows:
        logger.error(f"Rejected input with shape {X.shape} (min_rows={min_rows})")
        raise InvalidArgumentError(
            f"Data must have at least {min_rows} rows and 1 column, got shape {X.shape}"
        )

    finite = np.isfinite(X)
    if not finite.all():
        row, col = np.argwhere(~finite)[0]
        logger.error(f"Rejected input with {np.count_nonzero(~finite)} non-finite values")
        raise InvalidArgumentError(
            f"Data contains {np.count_nonzero(~finite)} NaN/Inf values "
            f"(first at row {row}, column {col}); remove them before decomposition"
        )

    if sample_labels is None:
        sample_labels = frame_samples if frame_samples is not None else _default_sample_labels(n)
    if variable_labels is None:
        variable_labels = frame_variables if frame_variables is not None else _default_variable_labels(p)

    return (
        X,
        _check_labels(sample_labels, n, "sample"),
        _check_labels(variable_labels, p, "variable"),
    )


def compute_scaling(
    X: np.ndarray,
    scale: bool = False,
    variable_labels: Optional[Sequence[str]] = None,
) -> ScalingParameters:
    """
    Compute column means and, if requested, column standard deviations.

    Raises
    ------
    DegenerateInputError
        If ``scale`` is True and some column has zero variance. The first
        such column is named in the message and stored on ``.column``.
    """
    mean = X.mean(axis=0)
    if not scale:
        return ScalingParameters(mean=mean)

    std = X.std(axis=0, ddof=1)
    zero = (std == 0) | (std <= ZERO_VARIANCE_RTOL * np.abs(X).max(axis=0))
    if zero.any():
        labels = list(variable_labels) if variable_labels is not None else _default_variable_labels(X.shape[1])
        bad = [labels[j] for j in np.flatnonzero(zero)]
        logger.error(f"Zero-variance columns under scaling: {bad}")
        raise DegenerateInputError(
            f"Column '{bad[0]}' has zero variance and cannot be scaled "
            f"(zero-variance columns: {bad}); drop it or run with scale=False",
            column=bad[0],
        )

    return ScalingParameters(mean=mean, scale=std)


def preprocess(
    data: MatrixLike,
    scale: bool = False,
    sample_labels: Optional[Sequence] = None,
    variable_labels: Optional[Sequence] = None,
) -> Tuple[np.ndarray, ScalingParameters, Tuple[str, ...], Tuple[str, ...]]:
    """
    Validate, center and optionally autoscale ``data``.

    Returns
    -------
    Z : ndarray (n, p)
        Preprocessed copy of the input.
    scaling : ScalingParameters
        Statistics needed to repeat the transformation on new samples.
    sample_labels, variable_labels : tuple of str
    """
    X, samples, variables = as_matrix(
        data, sample_labels=sample_labels, variable_labels=variable_labels
    )
    scaling = compute_scaling(X, scale=scale, variable_labels=variables)
    Z = scaling.apply(X)
    logger.debug(
        f"Preprocessed {X.shape[0]}x{X.shape[1]} matrix "
        f"({'autoscaled' if scaling.is_scaled else 'mean-centered'})"
    )
    return Z, scaling, samples, variables
