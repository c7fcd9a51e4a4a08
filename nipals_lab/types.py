"""
types.py - Core Data Structures for nipals_lab

This module defines the value objects passed between the preprocessing,
decomposition and I/O layers:

- NipalsConfig: iteration settings for the NIPALS inner loop
- ScalingParameters: per-column centering/scaling captured from the input
- PCAResult: scores, loadings and variance accounting of one decomposition

Design Principles:
-----------------
1. Immutability for configuration (frozen dataclasses)
2. Validation at construction time (fail-fast)
3. Labels travel with the matrices they describe
4. Numpy-style docstrings throughout

Example Usage:
-------------
    >>> import numpy as np
    >>> from nipals_lab import nipals_pca
    >>>
    >>> X = np.random.default_rng(0).normal(size=(20, 4))
    >>> result = nipals_pca(X, n_comp=2, scale=True)
    >>> result.scores.shape, result.loadings.shape
    ((20, 2), (4, 2))
    >>> result.variance_frame()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .errors import InvalidArgumentError


# =============================================================================
# CONSTANTS
# =============================================================================

# Fixed inner-loop length; published results were computed with 30.
DEFAULT_N_ITER = 30

MatrixLike = Union[np.ndarray, pd.DataFrame, Sequence[Sequence[float]]]


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class NipalsConfig:
    """
    Iteration settings for the NIPALS component extraction.

    Parameters
    ----------
    n_iter : int, default=30
        Number of loading/score refinement steps per component. With
        ``tol=None`` exactly this many steps are run.
    tol : float, optional
        Relative change in the score vector below which the inner loop
        stops early. ``None`` disables the early exit.

    Examples
    --------
    >>> NipalsConfig()                       # 30 fixed iterations
    >>> NipalsConfig(n_iter=500, tol=1e-12)  # iterate to convergence
    """
    n_iter: int = DEFAULT_N_ITER
    tol: Optional[float] = None

    def __post_init__(self):
        if isinstance(self.n_iter, bool) or not isinstance(self.n_iter, (int, np.integer)):
            raise InvalidArgumentError(f"n_iter must be an integer, got {self.n_iter!r}")
        if self.n_iter < 1:
            raise InvalidArgumentError(f"n_iter must be >= 1, got n_iter={self.n_iter}")
        if self.tol is not None and not (np.isfinite(self.tol) and self.tol > 0):
            raise InvalidArgumentError(f"tol must be a positive finite number, got tol={self.tol}")


# =============================================================================
# PREPROCESSING PARAMETERS
# =============================================================================

@dataclass(frozen=True)
class ScalingParameters:
    """
    Column statistics captured from the training matrix.

    Parameters
    ----------
    mean : np.ndarray
        Column means with shape (p,). Always subtracted.
    scale : np.ndarray, optional
        Column sample standard deviations (ddof=1) with shape (p,). Present
        only when the decomposition was run with ``scale=True``.
    """
    mean: np.ndarray
    scale: Optional[np.ndarray] = None

    @property
    def is_scaled(self) -> bool:
        """True when columns are divided by their standard deviation."""
        return self.scale is not None

    def apply(self, X: np.ndarray) -> np.ndarray:
        """Center (and scale) ``X`` with the stored statistics. Returns a new array."""
        Z = X - self.mean
        if self.scale is not None:
            Z = Z / self.scale
        return Z


# =============================================================================
# PCA RESULT
# =============================================================================

@dataclass
class PCAResult:
    """
    Outcome of a principal component decomposition.

    Parameters
    ----------
    scores : np.ndarray
        Sample coordinates with shape (n, k).
    loadings : np.ndarray
        Unit-length variable weights with shape (p, k), one column per
        component.
    explained_variance : np.ndarray
        Fraction of the total sum of squares of the preprocessed matrix
        captured by each component, shape (k,).
    residual_variance : np.ndarray
        ``1 - explained_variance`` for each component on its own, shape (k,).
        This is a per-component quantity; see ``cumulative_residual_variance``
        for what remains after removing components 1..a.
    cumulative_variance : np.ndarray
        Running sum of ``explained_variance``, shape (k,).
    scaling : ScalingParameters
        Column statistics used to preprocess the input.
    sample_labels : tuple of str
        Row labels of ``scores``.
    variable_labels : tuple of str
        Row labels of ``loadings``.
    method : str, default="nipals"
        Name of the solver that produced the result.
    iterations : tuple of int
        Inner-loop steps run for each component (empty for SVD).

    Attributes
    ----------
    n_comp, n_samples, n_variables : int
        Read-only dimensions.
    component_labels : tuple of str
        ``("PC1", ..., "PCk")``.
    """
    scores: np.ndarray
    loadings: np.ndarray
    explained_variance: np.ndarray
    residual_variance: np.ndarray
    cumulative_variance: np.ndarray
    scaling: ScalingParameters
    sample_labels: Tuple[str, ...]
    variable_labels: Tuple[str, ...]
    method: str = "nipals"
    iterations: Tuple[int, ...] = field(default_factory=tuple)

    def __post_init__(self):
        """Normalize labels and validate dimensions on construction."""
        self.sample_labels = tuple(str(s) for s in self.sample_labels)
        self.variable_labels = tuple(str(v) for v in self.variable_labels)
        self.iterations = tuple(int(i) for i in self.iterations)
        self.validate()

    @property
    def n_comp(self) -> int:
        """Number of extracted components."""
        return self.loadings.shape[1]

    @property
    def n_samples(self) -> int:
        """Number of samples (rows of the input)."""
        return self.scores.shape[0]

    @property
    def n_variables(self) -> int:
        """Number of variables (columns of the input)."""
        return self.loadings.shape[0]

    @property
    def component_labels(self) -> Tuple[str, ...]:
        return tuple(f"PC{a + 1}" for a in range(self.n_comp))

    @property
    def cumulative_residual_variance(self) -> np.ndarray:
        """Fraction of the total sum of squares left after components 1..a."""
        return 1.0 - self.cumulative_variance

    def validate(self) -> None:
        """
        Validate internal consistency of the result.

        Raises
        ------
        ValueError
            If any dimension or label count mismatches.
        """
        if self.scores.ndim != 2 or self.loadings.ndim != 2:
            raise ValueError(
                f"scores and loadings must be 2D, got {self.scores.shape} and {self.loadings.shape}"
            )

        n, k = self.scores.shape
        p = self.loadings.shape[0]

        if self.loadings.shape[1] != k:
            raise ValueError(
                f"Component count mismatch: scores has {k}, loadings has {self.loadings.shape[1]}"
            )

        for name in ("explained_variance", "residual_variance", "cumulative_variance"):
            arr = getattr(self, name)
            if arr.shape != (k,):
                raise ValueError(f"{name} shape mismatch: expected ({k},), got {arr.shape}")

        if len(self.sample_labels) != n:
            raise ValueError(
                f"Expected {n} sample labels, got {len(self.sample_labels)}"
            )
        if len(self.variable_labels) != p:
            raise ValueError(
                f"Expected {p} variable labels, got {len(self.variable_labels)}"
            )

        if self.scaling.mean.shape != (p,):
            raise ValueError(
                f"scaling.mean shape mismatch: expected ({p},), got {self.scaling.mean.shape}"
            )
        if self.scaling.scale is not None and self.scaling.scale.shape != (p,):
            raise ValueError(
                f"scaling.scale shape mismatch: expected ({p},), got {self.scaling.scale.shape}"
            )

    def transform(self, data: MatrixLike) -> np.ndarray:
        """
        Project samples onto the extracted components.

        The stored column means (and standard deviations) are applied before
        multiplying by the loadings, so transforming the training matrix
        reproduces ``scores``.

        Parameters
        ----------
        data : ndarray or DataFrame (m, p)
            New samples. A DataFrame is matched to ``variable_labels`` by
            column name.

        Returns
        -------
        np.ndarray
            Scores with shape (m, k).

        Raises
        ------
        InvalidArgumentError
            If the columns do not match the training variables.
        """
        from .preprocessing import as_matrix

        if isinstance(data, pd.DataFrame):
            missing = [v for v in self.variable_labels if v not in data.columns.astype(str)]
            if missing:
                raise InvalidArgumentError(f"Missing variables for projection: {missing}")
            data = data.set_axis(data.columns.astype(str), axis=1)[list(self.variable_labels)]

        X, _, _ = as_matrix(data, min_rows=1)
        if X.shape[1] != self.n_variables:
            raise InvalidArgumentError(
                f"Expected {self.n_variables} variables, got {X.shape[1]}"
            )
        return self.scaling.apply(X) @ self.loadings

    def scores_frame(self) -> pd.DataFrame:
        """Scores as a DataFrame indexed by sample label."""
        return pd.DataFrame(
            self.scores, index=list(self.sample_labels), columns=list(self.component_labels)
        )

    def loadings_frame(self) -> pd.DataFrame:
        """Loadings as a DataFrame indexed by variable label."""
        return pd.DataFrame(
            self.loadings, index=list(self.variable_labels), columns=list(self.component_labels)
        )

    def variance_frame(self) -> pd.DataFrame:
        """Per-component explained, residual and cumulative fractions."""
        return pd.DataFrame(
            {
                "explained": self.explained_variance,
                "residual": self.residual_variance,
                "cumulative": self.cumulative_variance,
            },
            index=list(self.component_labels),
        )

    def __repr__(self) -> str:
        total = self.cumulative_variance[-1] if self.n_comp else 0.0
        return (
            f"PCAResult(method='{self.method}', n_samples={self.n_samples}, "
            f"n_variables={self.n_variables}, n_comp={self.n_comp}, "
            f"cumulative={total:.4f})"
        )
