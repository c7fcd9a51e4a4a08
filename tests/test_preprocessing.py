"""
test_preprocessing.py - Tests for Input Validation and Column Scaling

Tests cover:
- Conversion of arrays, DataFrames and nested lists
- Label inference and overrides
- Centering and autoscaling statistics
- Zero-variance detection
"""

import pytest
import numpy as np
import pandas as pd
from loguru import logger

from nipals_lab import (
    as_matrix,
    compute_scaling,
    preprocess,
    InvalidArgumentError,
    DegenerateInputError,
)


class TestAsMatrix:

    def test_array_passthrough(self, rng):
        X = rng.standard_normal((5, 2))
        out, samples, variables = as_matrix(X)

        np.testing.assert_array_equal(out, X)
        assert samples == ("1", "2", "3", "4", "5")
        assert variables == ("V1", "V2")

    def test_integer_input_becomes_float(self):
        out, _, _ = as_matrix([[1, 2], [3, 4]])

        assert out.dtype == np.float64

    def test_frame_labels(self):
        frame = pd.DataFrame(
            [[1.0, 2.0], [3.0, 4.0], [5.0, 7.0]],
            index=["a", "b", "c"],
            columns=["Area_peak_1", "Area_peak_2"],
        )
        _, samples, variables = as_matrix(frame)

        assert samples == ("a", "b", "c")
        assert variables == ("Area_peak_1", "Area_peak_2")

    def test_min_rows(self):
        as_matrix(np.ones((1, 3)), min_rows=1)

        with pytest.raises(InvalidArgumentError):
            as_matrix(np.ones((1, 3)))

    def test_sample_label_mismatch(self):
        with pytest.raises(InvalidArgumentError, match="sample labels"):
            as_matrix(np.ones((3, 2)), sample_labels=["only-one"])


class TestComputeScaling:

    def test_means_only(self):
        X = np.array([[1.0, 10.0], [3.0, 20.0]])
        params = compute_scaling(X)

        np.testing.assert_allclose(params.mean, [2.0, 15.0])
        assert params.scale is None

    def test_sample_standard_deviation(self, rng):
        X = rng.standard_normal((20, 3)) * [1.0, 2.0, 3.0]
        params = compute_scaling(X, scale=True)

        np.testing.assert_allclose(params.scale, X.std(axis=0, ddof=1))

    def test_nearly_constant_column_is_zero_variance(self):
        """Rounding noise around a constant is still a constant."""
        X = np.column_stack([np.arange(10.0), np.full(10, 0.1) * 3])

        with pytest.raises(DegenerateInputError) as excinfo:
            compute_scaling(X, scale=True, variable_labels=["t", "flat"])

        assert excinfo.value.column == "flat"

    def test_lists_every_constant_column(self):
        X = np.column_stack([np.ones(4), np.arange(4.0), np.zeros(4)])

        with pytest.raises(DegenerateInputError, match=r"\['V1', 'V3'\]"):
            compute_scaling(X, scale=True)


class TestPreprocess:

    def test_centered_columns(self, rng):
        X = rng.standard_normal((15, 4)) + 100.0
        Z, params, _, _ = preprocess(X)

        np.testing.assert_allclose(Z.mean(axis=0), 0.0, atol=1e-12)
        assert not params.is_scaled

    def test_autoscaled_columns(self, rng):
        X = rng.standard_normal((15, 4)) * [1.0, 5.0, 10.0, 0.1]
        Z, params, _, _ = preprocess(X, scale=True)

        np.testing.assert_allclose(Z.mean(axis=0), 0.0, atol=1e-12)
        np.testing.assert_allclose(Z.std(axis=0, ddof=1), 1.0)
        assert params.is_scaled

    def test_total_sum_of_squares_when_scaled(self, rng):
        """Each standardized column contributes n - 1 to the sum of squares."""
        X = rng.standard_normal((12, 3))
        Z, _, _, _ = preprocess(X, scale=True)

        assert np.isclose(np.sum(Z ** 2), 11 * 3)

    def test_returns_copy(self, rng):
        X = rng.standard_normal((6, 2))
        original = X.copy()
        Z, _, _, _ = preprocess(X)
        Z[0, 0] = 999.0

        np.testing.assert_array_equal(X, original)


class TestSmallMagnitudeColumns:
    """Zero variance is judged relative to each column's own size."""

    def test_tiny_varying_column_scales(self):
        X = np.array([[1.0, 1e-13], [2.0, 2e-13], [3.0, 0.0]])
        params = compute_scaling(X, scale=True)

        np.testing.assert_allclose(params.scale, [1.0, 1e-13])

    def test_tiny_column_standardized(self):
        X = np.array([[1.0, 1e-13], [2.0, 2e-13], [3.0, 0.0]])
        Z, _, _, _ = preprocess(X, scale=True)

        np.testing.assert_allclose(Z[:, 1], [0.0, 1.0, -1.0], atol=1e-12)

    def test_zero_column_still_rejected(self):
        X = np.column_stack([np.array([1e-13, 2e-13, 0.0]), np.zeros(3)])

        with pytest.raises(DegenerateInputError) as excinfo:
            compute_scaling(X, scale=True)

        assert excinfo.value.column == "V2"


class TestErrorLogging:
    """Rejected input is logged at ERROR level before the exception."""

    @pytest.fixture
    def error_messages(self):
        messages = []
        handler_id = logger.add(messages.append, level="ERROR", format="{message}")
        yield messages
        logger.remove(handler_id)

    def test_label_mismatch_logged(self, error_messages):
        with pytest.raises(InvalidArgumentError):
            as_matrix(np.ones((3, 2)), variable_labels=["a"])

        assert any("Label count mismatch" in m for m in error_messages)

    def test_bad_shape_logged(self, error_messages):
        with pytest.raises(InvalidArgumentError):
            as_matrix(np.ones(4))

        with pytest.raises(InvalidArgumentError):
            as_matrix(np.ones((1, 4)))

        assert len(error_messages) == 2
