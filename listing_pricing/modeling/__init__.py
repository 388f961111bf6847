"""
Modeling module: k-NN price regression with cross-validated k.

This module provides:
- FeaturePreprocessor: standardization fitted on training data
- KNNRegressor: mean of the k nearest labels under Euclidean distance
- CrossValidatedTuner: k-fold search for the k with the lowest RMSE
- Seeded train/test and fold splitting

Usage:
    from listing_pricing.modeling import (
        CrossValidatedTuner,
        FeaturePreprocessor,
        KNNRegressor,
        train_test_split,
    )

    train, test = train_test_split(dataset, test_size=0.25, seed=42)
    result = CrossValidatedTuner().tune(train, candidate_ks=range(1, 31), num_folds=5)

    preprocessor = FeaturePreprocessor()
    params = preprocessor.fit(train)
    model = KNNRegressor(result.selected_k).fit(preprocessor.apply(params, train))
    predictions = model.predict(preprocessor.apply(params, test).features)
"""

from .errors import (
    InvalidCandidateKError,
    InvalidDatasetError,
    InvalidFeatureError,
    InvalidFoldCountError,
    InvalidKError,
    ModelingError,
)
from .models import CandidateScore, Dataset, ScalingParameters, TuningResult
from .preprocessor import FeaturePreprocessor
from .regressor import (
    KNNRegressor,
    euclidean_distances,
    neighbour_order,
    predict,
    validate_k,
)
from .splits import (
    assign_folds,
    kfold_indices,
    max_candidate_k,
    split_indices,
    train_test_split,
    validate_fold_count,
)
from .tuner import (
    CrossValidatedTuner,
    TunerConfig,
    create_tuner,
    validate_candidate_ks,
)

__all__ = [
    # Factory (main entry points)
    "create_tuner",
    "predict",
    # Components
    "FeaturePreprocessor",
    "KNNRegressor",
    "CrossValidatedTuner",
    "TunerConfig",
    # Helpers
    "euclidean_distances",
    "neighbour_order",
    "validate_k",
    "validate_candidate_ks",
    "validate_fold_count",
    "max_candidate_k",
    "assign_folds",
    "kfold_indices",
    "split_indices",
    "train_test_split",
    # Models
    "Dataset",
    "ScalingParameters",
    "CandidateScore",
    "TuningResult",
    # Errors
    "ModelingError",
    "InvalidDatasetError",
    "InvalidFeatureError",
    "InvalidKError",
    "InvalidCandidateKError",
    "InvalidFoldCountError",
]
