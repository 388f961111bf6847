"""Feature standardization fitted on training data only."""

from __future__ import annotations

import logging

import numpy as np

from .errors import InvalidFeatureError
from .models import Dataset, ScalingParameters

logger = logging.getLogger(__name__)


class FeaturePreprocessor:
    """
    Center and scale features before distance computation.

    Parameters come from `fit` on a training set and are applied unchanged
    to any data scored against that model. Validation and test data are
    never used to fit.

    Usage:
        preprocessor = FeaturePreprocessor()
        params = preprocessor.fit(train)
        train_scaled = preprocessor.apply(params, train)
        test_scaled = preprocessor.apply(params, test)
    """

    def fit(self, training_set: Dataset) -> ScalingParameters:
        """
        Compute per-column sample mean and sample standard deviation.

        Args:
            training_set: Observations to fit on.

        Returns:
            ScalingParameters for use with `apply`.

        Raises:
            InvalidFeatureError: If fewer than two observations are given,
                or a column has zero variance.
        """
        if len(training_set) < 2:
            raise InvalidFeatureError(
                f"Need at least 2 observations to estimate feature spread, "
                f"got {len(training_set)}"
            )

        features = training_set.features
        mean = features.mean(axis=0)
        std = features.std(axis=0, ddof=1)
        # Constant columns can leave a rounding-sized std, so test the range
        spread = np.ptp(features, axis=0)

        for name, value, width in zip(training_set.feature_names, std, spread):
            if width == 0 or value == 0 or not np.isfinite(value):
                raise InvalidFeatureError(
                    f"Feature '{name}' has zero variance in the training set",
                    column=name,
                )

        logger.debug(
            f"Fitted scaling on {len(training_set)} observations, "
            f"{training_set.n_features} features"
        )
        return ScalingParameters(
            mean=mean, std=std, feature_names=training_set.feature_names
        )

    def apply(self, params: ScalingParameters, dataset: Dataset) -> Dataset:
        """
        Standardize every observation as (x - mean) / std.

        Raises:
            InvalidFeatureError: If the dataset's features do not match the
                fitted feature layout.
        """
        if dataset.feature_names != params.feature_names:
            raise InvalidFeatureError(
                f"Dataset features {list(dataset.feature_names)} do not match "
                f"fitted features {list(params.feature_names)}"
            )
        return dataset.with_features((dataset.features - params.mean) / params.std)

    def fit_apply(self, training_set: Dataset) -> tuple[ScalingParameters, Dataset]:
        """Fit on `training_set` and return it standardized."""
        params = self.fit(training_set)
        return params, self.apply(params, training_set)
