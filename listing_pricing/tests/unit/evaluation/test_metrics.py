"""Unit tests for evaluation metrics."""

import numpy as np
import pytest

from listing_pricing.evaluation import (
    EmptyDatasetError,
    MetricsError,
    PredictionMetrics,
    calculate_metrics,
    mae,
    r2_score,
    rmse,
    validate_predictions,
)


class TestCalculateMetrics:
    """Tests for calculate_metrics function."""

    def test_perfect_predictions(self) -> None:
        """Perfect predictions should have 0 error and R² of 1."""
        y_true = np.array([85.0, 140.0, 60.0])

        metrics = calculate_metrics(y_true, y_true.copy())

        assert metrics.rmse == 0.0
        assert metrics.mae == 0.0
        assert metrics.r2 == 1.0
        assert metrics.n_samples == 3

    def test_known_values(self) -> None:
        """Errors of 10, -10 and 30 dollars."""
        y_true = np.array([100.0, 150.0, 200.0])
        y_pred = np.array([110.0, 140.0, 230.0])
        # squared errors 100, 100, 900 -> RMSE = sqrt(366.67)
        # SS_tot = 5000, SS_res = 1100 -> R² = 0.78

        metrics = calculate_metrics(y_true, y_pred)

        assert metrics.rmse == pytest.approx(19.1485, rel=1e-4)
        assert metrics.mae == pytest.approx(16.6667, rel=1e-4)
        assert metrics.r2 == pytest.approx(0.78)

    def test_rmse_penalizes_large_errors(self) -> None:
        """One large miss raises RMSE above MAE."""
        y_true = np.array([100.0, 100.0, 100.0, 100.0])
        y_pred = np.array([100.0, 100.0, 100.0, 180.0])

        metrics = calculate_metrics(y_true, y_pred)

        assert metrics.mae == pytest.approx(20.0)
        assert metrics.rmse == pytest.approx(40.0)

    def test_r2_negative_for_bad_model(self) -> None:
        """Predictions worse than the mean give negative R²."""
        y_true = np.array([50.0, 100.0, 150.0])
        y_pred = np.array([150.0, 100.0, 50.0])

        metrics = calculate_metrics(y_true, y_pred)

        assert metrics.r2 < 0

    def test_accepts_lists_and_column_vectors(self) -> None:
        """Inputs are flattened to 1D."""
        metrics = calculate_metrics([[1.0], [2.0]], np.array([1.0, 4.0]))

        assert metrics.n_samples == 2
        assert metrics.mae == pytest.approx(1.0)


class TestCalculateMetricsErrors:
    """Tests for calculate_metrics error handling."""

    def test_length_mismatch_raises_error(self) -> None:
        """Different array lengths should raise MetricsError."""
        with pytest.raises(MetricsError, match="length mismatch"):
            calculate_metrics(np.array([1.0, 2.0]), np.array([1.0]))

    def test_empty_arrays_raise_error(self) -> None:
        """Empty arrays should raise EmptyDatasetError."""
        with pytest.raises(EmptyDatasetError):
            calculate_metrics(np.array([]), np.array([]))


class TestMetricFunctions:
    """Tests for the individual metric functions."""

    def test_rmse(self) -> None:
        assert rmse(np.array([0.0, 0.0]), np.array([3.0, 4.0])) == pytest.approx(
            np.sqrt(12.5)
        )

    def test_mae(self) -> None:
        assert mae(np.array([0.0, 0.0]), np.array([3.0, -4.0])) == pytest.approx(3.5)

    def test_r2_constant_truth_perfect(self) -> None:
        """Constant ground truth predicted exactly gives 1."""
        y = np.array([75.0, 75.0, 75.0])
        assert r2_score(y, y.copy()) == 1.0

    def test_r2_constant_truth_imperfect(self) -> None:
        """Constant ground truth with any error gives 0."""
        y = np.array([75.0, 75.0, 75.0])
        assert r2_score(y, np.array([75.0, 80.0, 75.0])) == 0.0


class TestValidatePredictions:
    """Tests for validate_predictions function."""

    def test_valid_1d_array(self) -> None:
        """1D array passes through unchanged."""
        predictions = np.array([85.0, 140.0, 60.0])

        result = validate_predictions(predictions)

        np.testing.assert_array_equal(result, predictions)

    def test_valid_column_vector(self) -> None:
        """(N, 1) predictions are flattened."""
        result = validate_predictions(np.array([[85.0], [140.0]]))

        assert result.shape == (2,)

    def test_expected_length_mismatch(self) -> None:
        """Wrong prediction count should raise MetricsError."""
        with pytest.raises(MetricsError, match="count mismatch"):
            validate_predictions(np.array([1.0, 2.0]), expected_length=3)

    def test_nan_values_raise_error(self) -> None:
        """NaN predictions should raise MetricsError."""
        with pytest.raises(MetricsError, match="NaN"):
            validate_predictions(np.array([1.0, np.nan]))

    def test_inf_values_raise_error(self) -> None:
        """Inf predictions should raise MetricsError."""
        with pytest.raises(MetricsError, match="Inf"):
            validate_predictions(np.array([1.0, np.inf]))

    def test_invalid_shape_raises_error(self) -> None:
        """Matrix predictions should raise MetricsError."""
        with pytest.raises(MetricsError, match="shape"):
            validate_predictions(np.ones((2, 3)))


class TestPredictionMetrics:
    """Tests for PredictionMetrics dataclass."""

    def test_to_dict_rounds_values(self) -> None:
        """to_dict rounds metrics to four decimals."""
        metrics = PredictionMetrics(rmse=19.148542, mae=16.666667, r2=0.78, n_samples=3)

        assert metrics.to_dict() == {
            "rmse": 19.1485,
            "mae": 16.6667,
            "r2": 0.78,
            "n_samples": 3,
        }

    def test_frozen(self) -> None:
        """Metrics cannot be reassigned."""
        metrics = PredictionMetrics(rmse=1.0, mae=1.0, r2=0.5, n_samples=2)

        with pytest.raises(AttributeError):
            metrics.rmse = 2.0  # type: ignore[misc]
