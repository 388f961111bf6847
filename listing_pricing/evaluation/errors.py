"""Custom exceptions for evaluation module."""


class EvaluationError(Exception):
    """Base exception for evaluation-related errors."""

    pass


class MetricsError(EvaluationError):
    """
    Raised when metrics calculation fails.

    This can happen when:
    - Input arrays have different lengths
    - Predictions have an unexpected shape
    - Predictions contain NaN or Inf
    """

    pass


class EmptyDatasetError(MetricsError):
    """
    Raised when there is nothing to evaluate.

    This can happen when:
    - The test split is empty
    - All listings were filtered out before scoring
    """

    pass
