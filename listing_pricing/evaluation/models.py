"""Data models for evaluation module."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PredictionMetrics:
    """
    Error metrics for a set of price predictions.

    RMSE and MAE are in price units; R² is unitless.
    """

    # Error metrics (lower is better)
    rmse: float  # Root Mean Squared Error
    mae: float  # Mean Absolute Error

    # Explanatory metrics
    r2: float  # Coefficient of determination (-inf, 1]

    # Metadata
    n_samples: int  # Number of samples evaluated

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "rmse": round(self.rmse, 4),
            "mae": round(self.mae, 4),
            "r2": round(self.r2, 4),
            "n_samples": self.n_samples,
        }
