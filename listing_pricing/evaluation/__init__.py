"""
Evaluation module for scoring price predictions.

This module provides:
- Prediction metrics (RMSE, MAE, R²)
- Prediction array validation

Usage:
    from listing_pricing.evaluation import calculate_metrics

    metrics = calculate_metrics(y_true, y_pred)
    print(f"RMSE: {metrics.rmse:.2f}, R²: {metrics.r2:.3f}")
"""

from .errors import EmptyDatasetError, EvaluationError, MetricsError
from .metrics import (
    calculate_metrics,
    mae,
    r2_score,
    rmse,
    validate_predictions,
)
from .models import PredictionMetrics

__all__ = [
    "calculate_metrics",
    # Metric functions
    "rmse",
    "mae",
    "r2_score",
    "validate_predictions",
    # Models
    "PredictionMetrics",
    # Errors
    "EvaluationError",
    "MetricsError",
    "EmptyDatasetError",
]
