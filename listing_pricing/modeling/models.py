"""Data models for modeling module."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from .errors import InvalidDatasetError


@dataclass(frozen=True)
class Dataset:
    """
    Ordered, immutable collection of observations.

    Each row of `features` is one observation's feature vector and the
    matching entry of `labels` is its price. Arrays are copied on
    construction and marked read-only, so a drawn split can never change.
    """

    features: np.ndarray
    labels: np.ndarray
    feature_names: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        features = np.array(self.features, dtype=np.float64)
        labels = np.array(self.labels, dtype=np.float64)

        if features.ndim != 2:
            raise InvalidDatasetError(
                f"Features must be 2D (n_samples, n_features), got shape {features.shape}"
            )
        labels = labels.reshape(-1) if labels.ndim == 2 and labels.shape[1] == 1 else labels
        if labels.ndim != 1:
            raise InvalidDatasetError(
                f"Labels must be 1D (n_samples,), got shape {labels.shape}"
            )
        if len(features) != len(labels):
            raise InvalidDatasetError(
                f"Row count mismatch: features={len(features)}, labels={len(labels)}"
            )
        if not np.all(np.isfinite(features)):
            bad = int(np.sum(~np.isfinite(features)))
            raise InvalidDatasetError(f"Features contain {bad} NaN/Inf values")
        if not np.all(np.isfinite(labels)):
            bad = int(np.sum(~np.isfinite(labels)))
            raise InvalidDatasetError(f"Labels contain {bad} NaN/Inf values")

        names = tuple(self.feature_names) or tuple(
            f"x{i}" for i in range(features.shape[1])
        )
        if len(names) != features.shape[1]:
            raise InvalidDatasetError(
                f"Got {len(names)} feature names for {features.shape[1]} features"
            )

        features.setflags(write=False)
        labels.setflags(write=False)
        object.__setattr__(self, "features", features)
        object.__setattr__(self, "labels", labels)
        object.__setattr__(self, "feature_names", names)

    def __len__(self) -> int:
        return len(self.labels)

    def __repr__(self) -> str:
        return f"Dataset({len(self)} observations, {self.n_features} features)"

    @property
    def n_features(self) -> int:
        return int(self.features.shape[1])

    def subset(self, indices: np.ndarray) -> Dataset:
        """Return the observations at `indices`, in the given order."""
        indices = np.asarray(indices, dtype=np.intp)
        return Dataset(
            features=self.features[indices],
            labels=self.labels[indices],
            feature_names=self.feature_names,
        )

    def with_features(self, features: np.ndarray) -> Dataset:
        """Return a dataset with the same labels and names but new features."""
        return Dataset(
            features=features, labels=self.labels, feature_names=self.feature_names
        )


@dataclass(frozen=True)
class ScalingParameters:
    """Per-feature mean and sample standard deviation from training data."""

    mean: np.ndarray
    std: np.ndarray
    feature_names: tuple[str, ...]

    def __post_init__(self) -> None:
        mean = np.array(self.mean, dtype=np.float64)
        std = np.array(self.std, dtype=np.float64)
        mean.setflags(write=False)
        std.setflags(write=False)
        object.__setattr__(self, "mean", mean)
        object.__setattr__(self, "std", std)
        object.__setattr__(self, "feature_names", tuple(self.feature_names))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            name: {"mean": float(m), "std": float(s)}
            for name, m, s in zip(self.feature_names, self.mean, self.std)
        }


@dataclass(frozen=True)
class CandidateScore:
    """Cross-validated error of one candidate k, averaged across folds."""

    k: int
    mean_rmse: float
    mean_mae: float
    mean_r2: float
    fold_rmse: tuple[float, ...]
    """RMSE of each fold, in fold order."""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "k": self.k,
            "mean_rmse": round(self.mean_rmse, 4),
            "mean_mae": round(self.mean_mae, 4),
            "mean_r2": round(self.mean_r2, 4),
            "fold_rmse": [round(v, 4) for v in self.fold_rmse],
        }


@dataclass(frozen=True)
class TuningResult:
    """Outcome of a cross-validated search over candidate k values."""

    scores: tuple[CandidateScore, ...]
    """One entry per candidate, ascending by k."""

    selected_k: int
    """Candidate with the lowest mean RMSE (smallest k among ties)."""

    num_folds: int
    n_samples: int
    seed: int

    @property
    def candidate_ks(self) -> tuple[int, ...]:
        return tuple(s.k for s in self.scores)

    @property
    def best(self) -> CandidateScore:
        """Score entry of the selected k."""
        return self.get_score(self.selected_k)

    def get_score(self, k: int) -> CandidateScore:
        """Get the score entry for candidate `k`."""
        for score in self.scores:
            if score.k == k:
                return score
        raise KeyError(f"k={k} was not a tuning candidate")

    def get_ranking(self) -> list[tuple[int, float]]:
        """
        Get candidates ranked by mean RMSE (lowest first).

        Returns:
            List of (k, mean_rmse) tuples; equal RMSE is ordered by k.
        """
        return sorted(
            ((s.k, s.mean_rmse) for s in self.scores), key=lambda x: (x[1], x[0])
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "selected_k": self.selected_k,
            "num_folds": self.num_folds,
            "n_samples": self.n_samples,
            "seed": self.seed,
            "scores": [s.to_dict() for s in self.scores],
        }
