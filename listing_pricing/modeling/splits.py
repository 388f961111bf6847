"""Seeded train/test splitting and k-fold assignment."""

from __future__ import annotations

import numpy as np

from .errors import InvalidDatasetError, InvalidFoldCountError
from .models import Dataset


def split_indices(
    n_samples: int,
    test_size: float = 0.25,
    seed: int = 42,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Draw seeded (train_idx, test_idx) positions for n_samples observations.

    Raises:
        InvalidDatasetError: If test_size is out of range or either side
            would be empty.
    """
    if not 0.0 < test_size < 1.0:
        raise InvalidDatasetError(f"test_size must be in (0, 1), got {test_size}")

    n = int(n_samples)
    n_test = int(round(test_size * n))
    if n_test == 0 or n_test == n:
        raise InvalidDatasetError(
            f"Cannot split {n} observations with test_size={test_size}: "
            f"train={n - n_test}, test={n_test}"
        )

    rng = np.random.default_rng(seed)
    idx = rng.permutation(n)
    return idx[n_test:], idx[:n_test]


def train_test_split(
    dataset: Dataset,
    test_size: float = 0.25,
    seed: int = 42,
) -> tuple[Dataset, Dataset]:
    """
    Randomly partition a dataset into training and test sets.

    The partition depends only on len(dataset), test_size and seed.

    Args:
        dataset: Observations to split.
        test_size: Fraction of observations held out (0 < test_size < 1).
        seed: Seed for the permutation.

    Returns:
        (train, test) datasets.

    Raises:
        InvalidDatasetError: If test_size is out of range or either side
            would be empty.
    """
    train_idx, test_idx = split_indices(len(dataset), test_size, seed)
    return dataset.subset(train_idx), dataset.subset(test_idx)


def validate_fold_count(num_folds: object, n_samples: int) -> int:
    """
    Check that num_folds is an integer in 2..n_samples.

    Raises:
        InvalidFoldCountError: If the fold count is invalid.
    """
    if isinstance(num_folds, bool) or not isinstance(num_folds, (int, np.integer)):
        raise InvalidFoldCountError(
            f"num_folds must be an integer, got {num_folds!r}",
            num_folds=num_folds,
            n_samples=n_samples,
        )
    if not 2 <= num_folds <= n_samples:
        raise InvalidFoldCountError(
            f"num_folds={num_folds} is invalid for {n_samples} observations "
            f"(expected 2 <= num_folds <= {n_samples})",
            num_folds=num_folds,
            n_samples=n_samples,
        )
    return int(num_folds)


def max_candidate_k(n_samples: int, num_folds: int) -> int:
    """
    Largest k usable on every fold: floor(n * (num_folds - 1) / num_folds).

    This equals the size of the smallest training part, n - ceil(n / num_folds).
    """
    return n_samples - (-(-n_samples // num_folds))


def assign_folds(n_samples: int, num_folds: int, seed: int = 42) -> list[np.ndarray]:
    """
    Partition 0..n_samples-1 into disjoint folds.

    Fold sizes differ by at most one. No fold is empty.

    Raises:
        InvalidFoldCountError: If num_folds is not in 2..n_samples.
    """
    num_folds = validate_fold_count(num_folds, n_samples)
    rng = np.random.default_rng(seed)
    idx = rng.permutation(n_samples)
    return [np.sort(fold) for fold in np.array_split(idx, num_folds)]


def kfold_indices(n_samples: int, num_folds: int, seed: int = 42):
    """Yield (train_idx, val_idx) for each fold of `assign_folds`."""
    folds = assign_folds(n_samples, num_folds, seed)
    for i, val_idx in enumerate(folds):
        train_idx = np.concatenate([f for j, f in enumerate(folds) if j != i])
        yield np.sort(train_idx), val_idx
