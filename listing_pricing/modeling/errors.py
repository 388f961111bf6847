"""Custom exceptions for modeling module."""


class ModelingError(Exception):
    """Base exception for modeling-related errors."""

    pass


class InvalidDatasetError(ModelingError):
    """
    Raised when a dataset cannot be constructed or split.

    This can happen when:
    - Features are not a 2D array or labels are not 1D
    - Feature and label counts differ
    - Features or labels contain NaN or Inf
    - A train/test split would leave one side empty
    """

    pass


class InvalidFeatureError(ModelingError):
    """
    Raised when a feature column cannot be used for distance computation.

    This can happen when:
    - A column is constant across the training set (zero variance)
    - Fewer than two observations are available to estimate a spread
    - A dataset or query does not match the fitted feature layout
    """

    def __init__(self, message: str, column: str | None = None):
        super().__init__(message)
        self.column = column


class InvalidKError(ModelingError):
    """
    Raised when the neighbourhood size is outside 1..n for a regression call.
    """

    def __init__(self, message: str, k: object = None, n_samples: int | None = None):
        super().__init__(message)
        self.k = k
        self.n_samples = n_samples


class InvalidCandidateKError(ModelingError):
    """
    Raised when a tuning candidate k cannot be evaluated on every fold.

    This can happen when:
    - The candidate set is empty
    - A candidate is not a positive integer
    - A candidate exceeds the smallest training-fold size
    """

    def __init__(self, message: str, k: object = None, max_k: int | None = None):
        super().__init__(message)
        self.k = k
        self.max_k = max_k


class InvalidFoldCountError(ModelingError):
    """
    Raised when the number of folds is not in 2..n.
    """

    def __init__(
        self, message: str, num_folds: object = None, n_samples: int | None = None
    ):
        super().__init__(message)
        self.num_folds = num_folds
        self.n_samples = n_samples
