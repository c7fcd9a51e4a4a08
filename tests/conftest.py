"""
conftest.py - Pytest Configuration and Shared Fixtures

This file contains fixtures used across all test modules. Fixtures are
organized by category:
- Random number generators (for reproducibility)
- Canonical matrices (hand-built inputs with known structure)
- Peak-area tables (simulated batch data)
"""

import pytest
import numpy as np

from nipals_lab import simulate_peak_areas


# =============================================================================
# RANDOM NUMBER GENERATORS
# =============================================================================

@pytest.fixture
def rng():
    """
    Provide a seeded random number generator for reproducible tests.

    All tests should use this fixture (or derive from it) to ensure
    reproducibility across runs.
    """
    return np.random.default_rng(seed=42)


# =============================================================================
# CANONICAL MATRICES
# =============================================================================

@pytest.fixture
def identity_like_matrix():
    """
    10 x 4 matrix: a scaled identity block on top of six rows of ones.

    Rows 1-4 are diag(5, 4, 3, 2); rows 5-10 are [1, 1, 1, 1].
    """
    X = np.ones((10, 4))
    X[:4, :] = np.diag([5.0, 4.0, 3.0, 2.0])
    return X


@pytest.fixture
def separated_data(rng):
    """
    60 x 5 matrix with well-separated column variances.

    Independent columns with standard deviations 8, 4, 2, 1, 0.5 give a
    covariance spectrum where each eigenvalue is about four times the next,
    so 30 NIPALS iterations converge to machine precision.
    """
    return rng.standard_normal((60, 5)) * np.array([8.0, 4.0, 2.0, 1.0, 0.5]) + 10.0


@pytest.fixture
def correlated_data(rng):
    """
    60 x 5 matrix driven by two latent factors plus small noise.

    After autoscaling the first two eigenvalues of the correlation matrix
    are far apart and hold nearly all the variance.
    """
    latent = rng.standard_normal((60, 2)) * np.array([3.0, 1.0])
    weights = np.array([
        [1.0, 1.0, 1.0, 1.0, 1.0],
        [1.0, -1.0, 0.5, -0.5, 0.0],
    ])
    return latent @ weights + 0.1 * rng.standard_normal((60, 5))


@pytest.fixture
def constant_column_matrix(rng):
    """8 x 3 matrix whose last column is constant."""
    X = rng.standard_normal((8, 3))
    X[:, 2] = 7.5
    return X


# =============================================================================
# PEAK-AREA TABLES
# =============================================================================

@pytest.fixture
def peak_table(rng):
    """Five batches of six replicates, four peaks."""
    return simulate_peak_areas(n_batches=5, replicates=6, n_peaks=4, rng=rng)


# =============================================================================
# HELPER FIXTURES
# =============================================================================

@pytest.fixture
def tolerance():
    """Standard numerical tolerance for float comparisons."""
    return {"rtol": 1e-9, "atol": 1e-9}
