"""Analysis session - coordinates the listing price modeling pipeline."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from listing_pricing.data import ListingEncoder, remove_price_outliers
from listing_pricing.evaluation import calculate_metrics, validate_predictions
from listing_pricing.modeling import (
    CrossValidatedTuner,
    Dataset,
    FeaturePreprocessor,
    KNNRegressor,
    TunerConfig,
    TuningResult,
    max_candidate_k,
    split_indices,
)

from .models import AnalysisConfig, AnalysisReport, SessionResult

logger = logging.getLogger(__name__)


class AnalysisSession:
    """
    Coordinates a full modeling session.

    Stateless between runs - every run recomputes scaling and k from its
    own training split. All dependencies injected.

    Pipeline steps:
    1. Clean listings and split them into training and test rows (seeded)
    2. Encode features, resolving the distance reference point on training rows
    3. Tune k by cross-validation on the training set
    4. Fit scaling and k-NN on the full training set with the selected k
    5. Predict the test set and compute RMSE, MAE, R²
    """

    def __init__(
        self,
        encoder: ListingEncoder,
        tuner: CrossValidatedTuner,
        config: AnalysisConfig,
    ):
        """
        Initialize session with all dependencies.

        Args:
            encoder: Listing encoder (feature configuration)
            tuner: Cross-validated tuner for k
            config: Split, tuning and outlier settings
        """
        self._encoder = encoder
        self._tuner = tuner
        self._config = config
        self._preprocessor = FeaturePreprocessor()

    @classmethod
    def create(
        cls,
        *,
        feature_config_path: Path | None = None,
        config: AnalysisConfig | None = None,
    ) -> AnalysisSession:
        """
        Create session with default dependencies.

        Args:
            feature_config_path: Path to feature config YAML. If None, uses default.
            config: Analysis configuration. Uses defaults if None.

        Returns:
            Configured AnalysisSession.
        """
        config = config or AnalysisConfig()
        return cls(
            encoder=ListingEncoder(config_path=feature_config_path),
            tuner=CrossValidatedTuner(
                TunerConfig(
                    num_folds=config.num_folds,
                    seed=config.seed,
                    max_workers=config.max_workers,
                )
            ),
            config=config,
        )

    @property
    def encoder(self) -> ListingEncoder:
        return self._encoder

    @property
    def config(self) -> AnalysisConfig:
        return self._config

    def candidate_ks(self, n_train: int) -> list[int]:
        """
        Candidate k values for a training set of n_train observations.

        Explicit candidates are returned as configured (the tuner validates
        them); otherwise 1..max_k capped at the smallest training fold.
        """
        if self._config.candidate_ks is not None:
            return list(self._config.candidate_ks)
        limit = max_candidate_k(n_train, self._config.num_folds)
        return list(range(1, min(self._config.max_k, limit) + 1))

    def tune(self, frame: pd.DataFrame) -> TuningResult:
        """Clean, split and encode listings, then tune k on the training split."""
        train, _, _ = self._split_encode(self._encoder.prepare(frame))
        return self._tuner.tune(
            train, self.candidate_ks(len(train)), self._config.num_folds
        )

    def run(self, frame: pd.DataFrame, label: str = "all listings") -> SessionResult:
        """
        Run the pipeline on raw listings.

        Args:
            frame: Raw listings DataFrame
            label: Name for the session in reports

        Returns:
            SessionResult with tuning table and test metrics

        Raises:
            DataError: If listings cannot be cleaned or encoded
            ModelingError: If the split or tuning configuration is invalid
        """
        return self._run_prepared(self._encoder.prepare(frame), label)

    def run_with_outlier_removal(self, frame: pd.DataFrame) -> AnalysisReport:
        """
        Run the pipeline twice: on all listings, then without price outliers.

        Args:
            frame: Raw listings DataFrame

        Returns:
            AnalysisReport with both sessions
        """
        prepared = self._encoder.prepare(frame)
        full = self._run_prepared(prepared, "all listings")

        trimmed = remove_price_outliers(
            prepared,
            column=self._encoder.label_field,
            iqr_multiplier=self._config.iqr_multiplier,
        )
        without_outliers = self._run_prepared(trimmed, "price outliers removed")

        return AnalysisReport(
            full=full,
            without_outliers=without_outliers,
            n_listings=len(prepared),
            n_outliers_removed=len(prepared) - len(trimmed),
        )

    def _run_prepared(self, frame: pd.DataFrame, label: str) -> SessionResult:
        logger.info(f"Starting session '{label}' on {len(frame)} listings")

        # 1-2. Split and encode
        train, test, reference_point = self._split_encode(frame)

        # 3. Tune k on the training split
        tuning = self._tuner.tune(
            train, self.candidate_ks(len(train)), self._config.num_folds
        )

        # 4-5. Refit on the full training split and score the test split
        return self._evaluate(label, train, test, tuning, reference_point)

    def _split_encode(
        self, frame: pd.DataFrame
    ) -> tuple[Dataset, Dataset, dict[str, float] | None]:
        """Split prepared listings, then encode both sides against training rows."""
        train_idx, test_idx = split_indices(
            len(frame), test_size=self._config.test_size, seed=self._config.seed
        )
        reference_point = self._encoder.fit_reference_point(frame.iloc[train_idx])
        dataset = self._encoder.encode(frame, reference_point=reference_point)
        logger.debug(f"Split: train={len(train_idx)}, test={len(test_idx)}")
        return dataset.subset(train_idx), dataset.subset(test_idx), reference_point

    def _evaluate(
        self,
        label: str,
        train: Dataset,
        test: Dataset,
        tuning: TuningResult,
        reference_point: dict[str, float] | None = None,
    ) -> SessionResult:
        params, train_scaled = self._preprocessor.fit_apply(train)
        model = KNNRegressor(tuning.selected_k).fit(train_scaled)
        test_scaled = self._preprocessor.apply(params, test)

        predictions = validate_predictions(
            model.predict(test_scaled.features), expected_length=len(test)
        )
        metrics = calculate_metrics(test.labels, predictions)

        logger.info(
            f"Session '{label}': k={tuning.selected_k}, test RMSE={metrics.rmse:.2f}, "
            f"MAE={metrics.mae:.2f}, R²={metrics.r2:.4f}"
        )

        return SessionResult(
            label=label,
            n_train=len(train),
            n_test=len(test),
            tuning=tuning,
            scaling=params,
            test_metrics=metrics,
            reference_point=reference_point,
            predictions=predictions,
        )
