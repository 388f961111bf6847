"""
Cross-validated search for the neighbourhood size k.

Each fold is scored with scaling fitted on the remaining folds only, so
validation rows never influence the parameters they are scored against.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import numpy as np

from ..evaluation.metrics import calculate_metrics
from ..evaluation.models import PredictionMetrics
from .errors import InvalidCandidateKError
from .models import CandidateScore, Dataset, TuningResult
from .preprocessor import FeaturePreprocessor
from .regressor import KNNRegressor
from .splits import kfold_indices, max_candidate_k, validate_fold_count

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TunerConfig:
    """Configuration for cross-validated tuning."""

    num_folds: int = 5
    """Default number of folds when tune() is not given one."""

    seed: int = 42
    """Seed for fold assignment."""

    max_workers: int = 1
    """Folds evaluated concurrently. 1 = sequential."""


class CrossValidatedTuner:
    """
    Select k by k-fold cross-validation.

    For every fold and every candidate k:
    - Fit scaling on the other folds and apply it to both parts
    - Predict every observation of the held-out fold
    - Record RMSE (plus MAE and R²)

    The selected k has the lowest RMSE averaged over folds; among equal
    averages the smallest k wins.

    Usage:
        tuner = CrossValidatedTuner(TunerConfig(seed=7))
        result = tuner.tune(train, candidate_ks=range(1, 51), num_folds=5)
        print(f"Selected k={result.selected_k}")
    """

    def __init__(self, config: TunerConfig | None = None):
        """
        Initialize tuner.

        Args:
            config: Tuner configuration. Uses defaults if None.
        """
        self._config = config or TunerConfig()
        self._preprocessor = FeaturePreprocessor()

    @property
    def config(self) -> TunerConfig:
        return self._config

    def tune(
        self,
        training_set: Dataset,
        candidate_ks: Iterable[int],
        num_folds: int | None = None,
    ) -> TuningResult:
        """
        Run the cross-validated search.

        Args:
            training_set: Observations to cross-validate on (unscaled).
            candidate_ks: Neighbourhood sizes to evaluate.
            num_folds: Number of folds; defaults to config.num_folds.

        Returns:
            TuningResult with per-candidate scores and the selected k.

        Raises:
            InvalidFoldCountError: If num_folds is not in 2..n.
            InvalidCandidateKError: If the candidate set is empty or a
                candidate exceeds the smallest training-fold size.
            InvalidFeatureError: If a training fold has a constant feature.
        """
        n_samples = len(training_set)
        if num_folds is None:
            num_folds = self._config.num_folds
        num_folds = validate_fold_count(num_folds, n_samples)
        ks = validate_candidate_ks(candidate_ks, n_samples, num_folds)

        start_time = time.time()
        folds = list(kfold_indices(n_samples, num_folds, self._config.seed))

        logger.info(
            f"Tuning k over {len(ks)} candidates ({ks[0]}..{ks[-1]}) "
            f"with {num_folds}-fold CV on {n_samples} observations"
        )

        def evaluate(fold_index: int) -> list[PredictionMetrics]:
            train_idx, val_idx = folds[fold_index]
            return self._evaluate_fold(
                training_set, train_idx, val_idx, ks, f"{fold_index + 1}/{num_folds}"
            )

        if self._config.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self._config.max_workers) as pool:
                # map() yields in submission order, so fold order is preserved
                per_fold = list(pool.map(evaluate, range(num_folds)))
        else:
            per_fold = [evaluate(i) for i in range(num_folds)]

        scores = tuple(
            _aggregate(k, [fold[j] for fold in per_fold]) for j, k in enumerate(ks)
        )
        selected = min(scores, key=lambda s: (s.mean_rmse, s.k))

        elapsed_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Selected k={selected.k} (mean RMSE={selected.mean_rmse:.4f}) "
            f"in {elapsed_ms:.1f}ms"
        )

        return TuningResult(
            scores=scores,
            selected_k=selected.k,
            num_folds=num_folds,
            n_samples=n_samples,
            seed=self._config.seed,
        )

    def _evaluate_fold(
        self,
        training_set: Dataset,
        train_idx: np.ndarray,
        val_idx: np.ndarray,
        ks: list[int],
        fold_name: str,
    ) -> list[PredictionMetrics]:
        """Score every candidate k on one held-out fold."""
        train = training_set.subset(train_idx)
        validation = training_set.subset(val_idx)

        params, train_scaled = self._preprocessor.fit_apply(train)
        validation_scaled = self._preprocessor.apply(params, validation)

        # Neighbour ranking is shared by all candidates; each k takes a prefix
        model = KNNRegressor(ks[-1]).fit(train_scaled)
        order = model.neighbour_order(validation_scaled.features, limit=ks[-1])
        neighbour_labels = train_scaled.labels[order]

        results = []
        for k in ks:
            predictions = neighbour_labels[:, :k].mean(axis=1)
            results.append(calculate_metrics(validation_scaled.labels, predictions))

        logger.debug(
            f"Fold {fold_name}: train={len(train)}, "
            f"val={len(validation)}, best RMSE={min(m.rmse for m in results):.4f}"
        )
        return results


def validate_candidate_ks(
    candidate_ks: Iterable[int], n_samples: int, num_folds: int
) -> list[int]:
    """
    Check candidates and return them deduplicated in ascending order.

    Raises:
        InvalidCandidateKError: If the set is empty or any candidate is not
            an integer in 1..max_candidate_k(n_samples, num_folds).
    """
    max_k = max_candidate_k(n_samples, num_folds)
    ks = list(candidate_ks)
    if not ks:
        raise InvalidCandidateKError("No candidate k values given", max_k=max_k)

    for k in ks:
        if isinstance(k, bool) or not isinstance(k, (int, np.integer)):
            raise InvalidCandidateKError(
                f"Candidate k must be an integer, got {k!r}", k=k, max_k=max_k
            )
        if not 1 <= k <= max_k:
            raise InvalidCandidateKError(
                f"Candidate k={k} is out of range for {n_samples} observations "
                f"and {num_folds} folds (expected 1 <= k <= {max_k})",
                k=k,
                max_k=max_k,
            )

    return sorted({int(k) for k in ks})


def _aggregate(k: int, fold_metrics: list[PredictionMetrics]) -> CandidateScore:
    """Average one candidate's metrics across folds."""
    fold_rmse = tuple(m.rmse for m in fold_metrics)
    return CandidateScore(
        k=k,
        mean_rmse=float(np.mean(fold_rmse)),
        mean_mae=float(np.mean([m.mae for m in fold_metrics])),
        mean_r2=float(np.mean([m.r2 for m in fold_metrics])),
        fold_rmse=fold_rmse,
    )


def create_tuner(
    num_folds: int = 5,
    seed: int = 42,
    max_workers: int = 1,
) -> CrossValidatedTuner:
    """
    Create a tuner with custom configuration.

    Example:
        tuner = create_tuner(num_folds=10, seed=0, max_workers=4)
    """
    return CrossValidatedTuner(
        TunerConfig(num_folds=num_folds, seed=seed, max_workers=max_workers)
    )
