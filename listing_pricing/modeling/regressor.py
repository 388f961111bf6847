"""
k-nearest-neighbours regression under Euclidean distance.

Neighbours are ranked with a stable sort, so among observations at equal
distance the one earlier in the training set is chosen first. Exactly k
labels are averaged for every prediction.

Every query scans the whole training set (O(n·d) per query). When only
the first k neighbours are needed they are selected with a partition
(O(n) per query) and only the candidates that reach the k-th distance are
sorted, so memory stays at O(m·k) for m queries.
"""

from __future__ import annotations

import logging

import numpy as np

from .errors import InvalidFeatureError, InvalidKError, ModelingError
from .models import Dataset

logger = logging.getLogger(__name__)


def validate_k(k: object, n_samples: int) -> int:
    """
    Check that k is an integer in 1..n_samples.

    Returns:
        k as a plain int

    Raises:
        InvalidKError: If k is not an integer or is out of range.
    """
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)):
        raise InvalidKError(
            f"k must be an integer, got {k!r}", k=k, n_samples=n_samples
        )
    if not 1 <= k <= n_samples:
        raise InvalidKError(
            f"k={k} is out of range for a training set of {n_samples} observations "
            f"(expected 1 <= k <= {n_samples})",
            k=k,
            n_samples=n_samples,
        )
    return int(k)


def euclidean_distances(training_features: np.ndarray, query: np.ndarray) -> np.ndarray:
    """Distance from `query` to every row of `training_features`."""
    diff = training_features - query
    return np.sqrt(np.sum(diff * diff, axis=1))


def _nearest(distances: np.ndarray, limit: int) -> np.ndarray:
    if limit >= len(distances):
        return np.argsort(distances, kind="stable")
    kth = np.partition(distances, limit - 1)[limit - 1]
    # Ascending indices, so the stable sort keeps ties in training-set order
    candidates = np.flatnonzero(distances <= kth)
    ranked = candidates[np.argsort(distances[candidates], kind="stable")]
    return ranked[:limit]


def neighbour_order(
    training_features: np.ndarray,
    queries: np.ndarray,
    limit: int | None = None,
) -> np.ndarray:
    """
    Rank training rows by distance to each query.

    Args:
        training_features: Training feature matrix (n, d)
        queries: Query matrix (m, d)
        limit: Keep only the nearest `limit` rows per query. None ranks the
            whole training set.

    Returns:
        Index matrix (m, min(limit, n)); row i lists training indices
        nearest-first for query i, with ties kept in training-set order.

    Raises:
        ModelingError: If limit is smaller than 1.
    """
    n = len(training_features)
    if limit is None:
        limit = n
    elif limit < 1:
        raise ModelingError(f"limit must be at least 1, got {limit}")
    width = min(int(limit), n)

    order = np.empty((len(queries), width), dtype=np.intp)
    for i, query in enumerate(queries):
        order[i] = _nearest(euclidean_distances(training_features, query), width)
    return order


def _as_query_matrix(queries: np.ndarray, n_features: int) -> np.ndarray:
    queries = np.asarray(queries, dtype=np.float64)
    if queries.ndim == 1:
        queries = queries.reshape(1, -1)
    if queries.ndim != 2 or queries.shape[1] != n_features:
        raise InvalidFeatureError(
            f"Query shape {queries.shape} does not match {n_features} training features"
        )
    return queries


def predict(training_set: Dataset, query_vector: np.ndarray, k: int) -> float:
    """
    Predict a single label as the mean of the k nearest training labels.

    Args:
        training_set: Labelled observations to search.
        query_vector: Feature vector (d,) in the same space as training_set.
        k: Number of neighbours, 1 <= k <= len(training_set).

    Returns:
        Mean label of the k nearest neighbours.

    Raises:
        InvalidKError: If k is out of range.
        InvalidFeatureError: If the query dimension does not match.

    Example:
        >>> ds = Dataset(np.arange(1, 11).reshape(-1, 1), np.arange(1, 11))
        >>> predict(ds, np.array([5.0]), k=3)
        5.0
    """
    return KNNRegressor(k).fit(training_set).predict_one(query_vector)


class KNNRegressor:
    """
    Estimator wrapper around k-NN prediction.

    Usage:
        model = KNNRegressor(k=5).fit(train_scaled)
        predictions = model.predict(test_scaled.features)
    """

    def __init__(self, k: int = 5):
        self._k = k
        self._training_set: Dataset | None = None

    @property
    def k(self) -> int:
        return self._k

    @property
    def training_set(self) -> Dataset:
        if self._training_set is None:
            raise ModelingError("KNNRegressor is not fitted; call fit() first")
        return self._training_set

    def fit(self, training_set: Dataset) -> KNNRegressor:
        """
        Store the training set.

        Raises:
            InvalidKError: If k is not in 1..len(training_set).
        """
        self._k = validate_k(self._k, len(training_set))
        self._training_set = training_set
        logger.debug(f"KNNRegressor fitted: k={self._k}, n={len(training_set)}")
        return self

    def neighbour_order(
        self, queries: np.ndarray, limit: int | None = None
    ) -> np.ndarray:
        """Training indices ordered nearest-first for each query row, truncated to `limit`."""
        training_set = self.training_set
        queries = _as_query_matrix(queries, training_set.n_features)
        return neighbour_order(training_set.features, queries, limit)

    def predict(self, queries: np.ndarray) -> np.ndarray:
        """
        Predict labels for a batch of queries.

        Args:
            queries: Query matrix (m, d) or a single vector (d,)

        Returns:
            Predictions array of shape (m,)
        """
        order = self.neighbour_order(queries, limit=self._k)
        return self.training_set.labels[order].mean(axis=1)

    def predict_one(self, query_vector: np.ndarray) -> float:
        """Predict the label of a single feature vector."""
        query = np.asarray(query_vector, dtype=np.float64)
        if query.ndim != 1:
            raise InvalidFeatureError(
                f"Expected a 1D query vector, got shape {query.shape}"
            )
        return float(self.predict(query)[0])
