"""
This module provides functions to calculate prediction accuracy metrics:
- RMSE: Root Mean Squared Error
- MAE: Mean Absolute Error
- R²: Coefficient of Determination

RMSE and MAE are in the label's units (price per night). RMSE is the
quantity minimized when tuning k.
"""

import numpy as np

from .errors import EmptyDatasetError, MetricsError
from .models import PredictionMetrics


def calculate_metrics(y_true: np.ndarray, y_pred: np.ndarray) -> PredictionMetrics:
    """
    Calculate all prediction metrics.

    Args:
        y_true: Ground truth prices (1D array)
        y_pred: Predicted prices (1D array)

    Returns:
        PredictionMetrics with all computed values

    Raises:
        MetricsError: If arrays have different lengths
        EmptyDatasetError: If arrays are empty

    Example:
        >>> y_true = np.array([100.0, 150.0, 200.0])
        >>> y_pred = np.array([110.0, 140.0, 230.0])
        >>> metrics = calculate_metrics(y_true, y_pred)
        >>> print(f"RMSE: {metrics.rmse:.2f}, MAE: {metrics.mae:.2f}")
        RMSE: 19.15, MAE: 16.67
    """
    y_true = np.asarray(y_true, dtype=np.float64).flatten()
    y_pred = np.asarray(y_pred, dtype=np.float64).flatten()

    if len(y_true) != len(y_pred):
        raise MetricsError(
            f"Array length mismatch: y_true={len(y_true)}, y_pred={len(y_pred)}"
        )

    if len(y_true) == 0:
        raise EmptyDatasetError("Empty input arrays")

    return PredictionMetrics(
        rmse=rmse(y_true, y_pred),
        mae=mae(y_true, y_pred),
        r2=r2_score(y_true, y_pred),
        n_samples=len(y_true),
    )


# --- Individual metric functions ---


def rmse(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Root Mean Squared Error: sqrt(mean((y_pred - y_true)²))."""
    return float(np.sqrt(np.mean((y_true - y_pred) ** 2)))


def mae(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Mean Absolute Error: mean(|y_pred - y_true|)."""
    return float(np.mean(np.abs(y_true - y_pred)))


def r2_score(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """
    Coefficient of determination, 1 - SS_res / SS_tot.

    Negative when predictions are worse than always guessing the mean
    price. With constant ground truth SS_tot is zero: exact predictions
    score 1.0 and anything else 0.0.
    """
    residual = np.sum(np.square(y_true - y_pred))
    total = np.sum(np.square(y_true - y_true.mean()))

    if total == 0:
        return 1.0 if residual == 0 else 0.0
    return float(1.0 - residual / total)


def validate_predictions(
    predictions: np.ndarray,
    expected_length: int | None = None,
) -> np.ndarray:
    """
    Check model output before it is scored.

    Accepts a 1D array or an (N, 1) column, which is flattened.

    Args:
        predictions: Predicted prices
        expected_length: Number of test listings, if known

    Returns:
        Predictions as a 1D float array

    Raises:
        MetricsError: On a wrong shape, a wrong count, or NaN/Inf values
    """
    values = np.asarray(predictions, dtype=np.float64)

    if values.ndim == 2 and values.shape[1] == 1:
        values = values[:, 0]
    if values.ndim != 1:
        raise MetricsError(
            f"Invalid prediction shape: {values.shape}. Expected (N,) or (N, 1)."
        )

    if expected_length is not None and len(values) != expected_length:
        raise MetricsError(
            f"Prediction count mismatch: {len(values)} predictions "
            f"for {expected_length} listings"
        )

    n_nan = int(np.isnan(values).sum())
    n_inf = int(np.isinf(values).sum())
    if n_nan or n_inf:
        raise MetricsError(
            f"Predictions contain {n_nan} NaN and {n_inf} Inf values"
        )

    return values
