"""Data models for analysis sessions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import numpy as np

if TYPE_CHECKING:
    from listing_pricing.evaluation import PredictionMetrics
    from listing_pricing.modeling import ScalingParameters, TuningResult


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for an analysis session."""

    test_size: float = 0.25
    """Fraction of listings held out for the final evaluation."""

    num_folds: int = 5
    """Folds used when tuning k on the training split."""

    candidate_ks: tuple[int, ...] | None = None
    """Explicit k values to try. None = 1..max_k, capped by fold size."""

    max_k: int = 100
    """Largest k tried when candidate_ks is None."""

    seed: int = 42
    """Seed for the train/test split and fold assignment."""

    max_workers: int = 1
    """Folds evaluated concurrently during tuning."""

    iqr_multiplier: float = 1.5
    """Tukey fence multiplier for price outlier removal."""


@dataclass
class SessionResult:
    """
    Result of one fit-tune-evaluate session.

    Scaling and k are fitted on the training split only; metrics are on
    the held-out test split.
    """

    label: str
    n_train: int
    n_test: int
    tuning: TuningResult
    scaling: ScalingParameters
    test_metrics: PredictionMetrics
    reference_point: dict[str, float] | None = None
    """distance_to_center origin resolved on the training split."""
    predictions: np.ndarray | None = field(default=None, repr=False)

    @property
    def selected_k(self) -> int:
        return self.tuning.selected_k

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization (excludes predictions array)."""
        return {
            "label": self.label,
            "n_train": self.n_train,
            "n_test": self.n_test,
            "selected_k": self.selected_k,
            "test_metrics": self.test_metrics.to_dict(),
            "scaling": self.scaling.to_dict(),
            "reference_point": self.reference_point,
            "tuning": self.tuning.to_dict(),
        }


@dataclass
class AnalysisReport:
    """Sessions on all cleaned listings and after removing price outliers."""

    full: SessionResult
    """Session on every cleaned listing."""

    without_outliers: SessionResult
    """Session after IQR price-outlier removal."""

    n_listings: int
    """Cleaned listings before outlier removal."""

    n_outliers_removed: int

    @property
    def sessions(self) -> list[SessionResult]:
        return [self.full, self.without_outliers]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "n_listings": self.n_listings,
            "n_outliers_removed": self.n_outliers_removed,
            "sessions": [s.to_dict() for s in self.sessions],
        }
