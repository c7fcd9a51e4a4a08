"""
decomposition.py - Principal Component Extraction
=================================================

NIPALS (Nonlinear Iterative Partial Least Squares) engine plus a dense SVD
reference solver sharing the same preprocessing, validation and variance
accounting. Uses loguru for diagnostics.

The NIPALS variant reproduced here:
    * initial score vector = residual column with the largest standard deviation
    * fixed number of loading/score refinements (30) with no early exit
    * rank-1 deflation after each component
    * explained variance relative to the sum of squares before deflation
"""

from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Optional, Sequence, Tuple, Union

import numpy as np
import scipy.linalg
from loguru import logger

from .errors import InvalidArgumentError, DegenerateInputError
from .preprocessing import preprocess
from .types import MatrixLike, NipalsConfig, PCAResult

# =============================================================================
# ENUMS & CONSTANTS
# =============================================================================

class PCAMethod(str, Enum):
    """Available solvers for compute_pca."""
    NIPALS = "nipals"
    SVD = "svd"


# A residual holding less than this fraction of the initial sum of squares
# is considered exhausted.
ZERO_RESIDUAL_RTOL = 1e-20

# Column standard deviations this close to the maximum count as tied; the
# first tied column wins.
_TIE_RTOL = 1e-12

# =============================================================================
# HELPERS
# =============================================================================

def _check_n_comp(n_comp: int, n: int, p: int) -> None:
    if isinstance(n_comp, bool) or not isinstance(n_comp, (int, np.integer)):
        logger.error(f"Rejected non-integer n_comp={n_comp!r}")
        raise InvalidArgumentError(f"n_comp must be an integer, got {n_comp!r}")

    bound = min(n, p)
    if n_comp < 1 or n_comp > bound:
        logger.error(f"Rejected n_comp={n_comp} for a {n}x{p} matrix")
        raise InvalidArgumentError(
            f"n_comp must be in range [1, {bound}] for a {n}x{p} matrix, got n_comp={n_comp}"
        )


def _check_residual(X: np.ndarray, ss_tot: float, component: int) -> None:
    ss = float(np.sum(X ** 2))
    if ss <= ZERO_RESIDUAL_RTOL * ss_tot:
        logger.error(f"Residual exhausted before component {component} (SS={ss:.3e})")
        raise DegenerateInputError(
            f"Residual matrix is zero before extracting component {component}; "
            f"the data support at most {component - 1} component(s)",
            component=component,
        )


def _initial_scores(X: np.ndarray) -> Tuple[int, np.ndarray]:
    """Pick the column with the largest sample standard deviation as the start vector."""
    sd = X.std(axis=0, ddof=1)
    j = int(np.flatnonzero(sd >= sd.max() * (1.0 - _TIE_RTOL))[0])
    return j, X[:, j].copy()


def _extract_component(
    X: np.ndarray, config: NipalsConfig
) -> Tuple[np.ndarray, np.ndarray, int, int]:
    """
    Run the NIPALS inner loop on the residual ``X``.

    Returns
    -------
    t : ndarray (n,)
        Score vector.
    p : ndarray (p,)
        Unit-length loading vector.
    steps : int
        Refinements performed.
    start_column : int
        Index of the column used to initialize ``t``.
    """
    start_column, t = _initial_scores(X)

    steps = 0
    for steps in range(1, config.n_iter + 1):
        p = X.T @ t
        p /= np.linalg.norm(p)
        t_new = X @ p

        if config.tol is not None:
            delta = np.linalg.norm(t_new - t) / np.linalg.norm(t_new)
            t = t_new
            if delta < config.tol:
                break
        else:
            t = t_new

    return t, p, steps, start_column


def _variance_summary(explained: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    # residual is per component, not 1 - cumulative
    residual = 1.0 - explained
    cumulative = np.cumsum(explained)
    return residual, cumulative

# =============================================================================
# MAIN DECOMPOSITION FUNCTIONS
# =============================================================================

def nipals_pca(
    data: MatrixLike,
    n_comp: int,
    scale: bool = False,
    config: Optional[NipalsConfig] = None,
    sample_labels: Optional[Sequence] = None,
    variable_labels: Optional[Sequence] = None,
) -> PCAResult:
    """
    Extract principal components one at a time with NIPALS.

    Parameters
    ----------
    data : ndarray, DataFrame or nested sequence (n, p)
        Samples in rows, variables in columns. No missing values.
    n_comp : int
        Number of components, ``1 <= n_comp <= min(n, p)``.
    scale : bool, default=False
        Divide centered columns by their standard deviation
        (correlation-matrix PCA). When False the data are only centered
        (covariance-matrix PCA).
    config : NipalsConfig, optional
        Inner-loop settings. Defaults to 30 fixed iterations.
    sample_labels, variable_labels : sequence, optional
        Override the labels inferred from ``data``.

    Returns
    -------
    result : PCAResult
        Scores (n, k), unit-norm loadings (p, k) and variance accounting.

    Raises
    ------
    InvalidArgumentError
        If ``n_comp`` is out of range or ``data`` is not a finite 2D matrix
        with at least 2 rows.
    DegenerateInputError
        If a column has zero variance while ``scale`` is True, or the
        residual is exhausted before ``n_comp`` components are extracted.

    Examples
    --------
    >>> result = nipals_pca(peak_areas, n_comp=2, scale=True)
    >>> result.variance_frame()
    """
    config = config if config is not None else NipalsConfig()

    Z, scaling, samples, variables = preprocess(
        data, scale=scale, sample_labels=sample_labels, variable_labels=variable_labels
    )
    n, p = Z.shape
    _check_n_comp(n_comp, n, p)

    logger.info(
        f"Starting NIPALS PCA: {n} samples, {p} variables, n_comp={n_comp}, "
        f"scale={scale}, n_iter={config.n_iter}"
    )

    ss_tot = float(np.sum(Z ** 2))

    X = Z.copy()
    T = np.zeros((n, n_comp))
    P = np.zeros((p, n_comp))
    explained = np.zeros(n_comp)
    iterations = []

    for a in range(n_comp):
        _check_residual(X, ss_tot, component=a + 1)

        t, p_vec, steps, start_column = _extract_component(X, config)
        T[:, a] = t
        P[:, a] = p_vec
        iterations.append(steps)

        contribution = np.outer(t, p_vec)
        X -= contribution
        explained[a] = np.sum(contribution ** 2) / ss_tot

        logger.debug(
            f"PC{a + 1}: start column '{variables[start_column]}', "
            f"{steps} iterations, explained {explained[a]:.2%}"
        )

    residual, cumulative = _variance_summary(explained)
    logger.success(f"NIPALS complete. Cumulative explained variance: {cumulative[-1]:.2%}")

    return PCAResult(
        scores=T,
        loadings=P,
        explained_variance=explained,
        residual_variance=residual,
        cumulative_variance=cumulative,
        scaling=scaling,
        sample_labels=samples,
        variable_labels=variables,
        method=PCAMethod.NIPALS.value,
        iterations=tuple(iterations),
    )


def svd_pca(
    data: MatrixLike,
    n_comp: int,
    scale: bool = False,
    sample_labels: Optional[Sequence] = None,
    variable_labels: Optional[Sequence] = None,
) -> PCAResult:
    """
    Reference decomposition via dense SVD of the preprocessed matrix.

    Accepts the same arguments (minus ``config``) and raises the same
    errors as :func:`nipals_pca`. Components are exact singular vectors, so
    this is the yardstick NIPALS results are compared against.

    Returns
    -------
    result : PCAResult
        With ``method="svd"`` and no iteration counts.
    """
    Z, scaling, samples, variables = preprocess(
        data, scale=scale, sample_labels=sample_labels, variable_labels=variable_labels
    )
    n, p = Z.shape
    _check_n_comp(n_comp, n, p)

    logger.info(f"Starting SVD PCA: {n} samples, {p} variables, n_comp={n_comp}, scale={scale}")

    ss_tot = float(np.sum(Z ** 2))
    _check_residual(Z, ss_tot, component=1)

    try:
        U, s, Vt = scipy.linalg.svd(Z, full_matrices=False)
    except np.linalg.LinAlgError:
        logger.exception("SVD solver failed to converge.")
        raise

    for a in range(n_comp):
        if s[a] ** 2 <= ZERO_RESIDUAL_RTOL * ss_tot:
            logger.error(f"Singular value {a + 1} is zero (s={s[a]:.3e})")
            raise DegenerateInputError(
                f"Singular value {a + 1} is zero; the data support at most {a} component(s)",
                component=a + 1,
            )

    explained = s[:n_comp] ** 2 / ss_tot
    residual, cumulative = _variance_summary(explained)
    logger.success(f"SVD complete. Cumulative explained variance: {cumulative[-1]:.2%}")

    return PCAResult(
        scores=U[:, :n_comp] * s[:n_comp],
        loadings=Vt[:n_comp, :].T.copy(),
        explained_variance=explained,
        residual_variance=residual,
        cumulative_variance=cumulative,
        scaling=scaling,
        sample_labels=samples,
        variable_labels=variables,
        method=PCAMethod.SVD.value,
    )


def compute_pca(
    data: MatrixLike,
    n_comp: int,
    scale: bool = False,
    method: Union[PCAMethod, str] = PCAMethod.NIPALS,
    config: Optional[NipalsConfig] = None,
    sample_labels: Optional[Sequence] = None,
    variable_labels: Optional[Sequence] = None,
) -> PCAResult:
    """
    Dispatch to the requested solver.

    Parameters
    ----------
    method : PCAMethod or str, default="nipals"
        ``"nipals"`` or ``"svd"``.
    config : NipalsConfig, optional
        Only used by NIPALS; ignored (with a warning) by SVD.

    Raises
    ------
    InvalidArgumentError
        If ``method`` is unknown, plus everything the solvers raise.
    """
    try:
        method = PCAMethod(method)
    except ValueError:
        valid = [m.value for m in PCAMethod]
        logger.error(f"Rejected unknown method {method!r}")
        raise InvalidArgumentError(f"Unknown method: '{method}'. Valid methods are: {valid}") from None

    if method == PCAMethod.SVD:
        if config is not None:
            logger.warning("NipalsConfig is ignored by the SVD solver")
        return svd_pca(
            data, n_comp, scale=scale,
            sample_labels=sample_labels, variable_labels=variable_labels,
        )

    return nipals_pca(
        data, n_comp, scale=scale, config=config,
        sample_labels=sample_labels, variable_labels=variable_labels,
    )

# =============================================================================
# UTILITIES
# =============================================================================

def orient_components(result: PCAResult) -> PCAResult:
    """
    Fix the arbitrary sign of each component.

    Each loading vector is flipped, together with its scores, so that its
    largest-magnitude entry is positive. Use before comparing results from
    different solvers or against reference values.
    """
    idx = np.argmax(np.abs(result.loadings), axis=0)
    signs = np.sign(result.loadings[idx, np.arange(result.n_comp)])
    signs[signs == 0] = 1.0

    return dataclasses.replace(
        result,
        scores=result.scores * signs,
        loadings=result.loadings * signs,
    )
