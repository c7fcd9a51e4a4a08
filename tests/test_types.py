"""
test_types.py - Tests for Core Data Structures

Tests cover:
- PCAResult validation and properties
- Labeled DataFrame views
- ScalingParameters application
- NipalsConfig defaults
"""

import pytest
import numpy as np

from nipals_lab import (
    PCAResult,
    ScalingParameters,
    NipalsConfig,
    DEFAULT_N_ITER,
)


def make_result(n=4, p=3, k=2, **overrides):
    """Build a small, internally consistent PCAResult."""
    explained = np.linspace(0.5, 0.2, k)
    fields = dict(
        scores=np.arange(n * k, dtype=float).reshape(n, k),
        loadings=np.eye(p, k),
        explained_variance=explained,
        residual_variance=1.0 - explained,
        cumulative_variance=np.cumsum(explained),
        scaling=ScalingParameters(mean=np.zeros(p)),
        sample_labels=[f"s{i}" for i in range(n)],
        variable_labels=[f"v{j}" for j in range(p)],
    )
    fields.update(overrides)
    return PCAResult(**fields)


class TestPCAResult:
    """Tests for PCAResult dataclass."""

    def test_dimension_properties(self):
        result = make_result(n=6, p=4, k=3)

        assert result.n_samples == 6
        assert result.n_variables == 4
        assert result.n_comp == 3
        assert result.component_labels == ("PC1", "PC2", "PC3")

    def test_labels_become_strings(self):
        result = make_result(sample_labels=[1, 2, 3, 4])

        assert result.sample_labels == ("1", "2", "3", "4")

    def test_validation_component_mismatch(self):
        with pytest.raises(ValueError, match="Component count mismatch"):
            make_result(loadings=np.eye(3, 3))

    def test_validation_variance_shape(self):
        with pytest.raises(ValueError, match="explained_variance shape mismatch"):
            make_result(explained_variance=np.array([0.5]))

    def test_validation_sample_labels(self):
        with pytest.raises(ValueError, match="Expected 4 sample labels"):
            make_result(sample_labels=["a", "b"])

    def test_validation_variable_labels(self):
        with pytest.raises(ValueError, match="Expected 3 variable labels"):
            make_result(variable_labels=["a"])

    def test_validation_scaling_shape(self):
        with pytest.raises(ValueError, match="scaling.mean shape mismatch"):
            make_result(scaling=ScalingParameters(mean=np.zeros(5)))

    def test_validation_scores_2d(self):
        with pytest.raises(ValueError, match="must be 2D"):
            make_result(scores=np.zeros(4))

    def test_cumulative_residual(self):
        result = make_result()

        np.testing.assert_allclose(
            result.cumulative_residual_variance, 1.0 - np.cumsum([0.5, 0.2])
        )

    def test_repr(self):
        text = repr(make_result())

        assert "n_comp=2" in text
        assert "method='nipals'" in text


class TestFrames:

    def test_scores_frame(self):
        frame = make_result().scores_frame()

        assert list(frame.index) == ["s0", "s1", "s2", "s3"]
        assert list(frame.columns) == ["PC1", "PC2"]
        assert frame.loc["s1", "PC2"] == 3.0

    def test_loadings_frame(self):
        frame = make_result().loadings_frame()

        assert list(frame.index) == ["v0", "v1", "v2"]
        assert frame.loc["v0", "PC1"] == 1.0

    def test_variance_frame(self):
        frame = make_result().variance_frame()

        assert list(frame.columns) == ["explained", "residual", "cumulative"]
        assert np.isclose(frame.loc["PC2", "cumulative"], 0.7)
        assert np.isclose(frame.loc["PC1", "residual"], 0.5)


class TestScalingParameters:

    def test_center_only(self):
        params = ScalingParameters(mean=np.array([1.0, 2.0]))
        X = np.array([[1.0, 2.0], [3.0, 6.0]])

        assert not params.is_scaled
        np.testing.assert_array_equal(params.apply(X), [[0.0, 0.0], [2.0, 4.0]])

    def test_center_and_scale(self):
        params = ScalingParameters(mean=np.array([1.0, 2.0]), scale=np.array([2.0, 4.0]))
        X = np.array([[1.0, 2.0], [3.0, 6.0]])

        assert params.is_scaled
        np.testing.assert_array_equal(params.apply(X), [[0.0, 0.0], [1.0, 1.0]])

    def test_apply_returns_new_array(self):
        params = ScalingParameters(mean=np.array([1.0]))
        X = np.array([[2.0], [4.0]])
        params.apply(X)

        np.testing.assert_array_equal(X, [[2.0], [4.0]])


class TestNipalsConfig:

    def test_defaults(self):
        config = NipalsConfig()

        assert config.n_iter == DEFAULT_N_ITER == 30
        assert config.tol is None

    def test_frozen(self):
        config = NipalsConfig()

        with pytest.raises(AttributeError):
            config.n_iter = 10
