"""Pytest configuration and shared fixtures."""

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from listing_pricing.data import load_listings
from listing_pricing.modeling import Dataset

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "data"


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding CSV and YAML fixtures."""
    return FIXTURES_DIR


@pytest.fixture
def listings_path() -> Path:
    """Path to the sample listings export (42 rows, 3 unusable, 2 extreme prices)."""
    return FIXTURES_DIR / "listings_sample.csv"


@pytest.fixture
def raw_listings(listings_path: Path) -> pd.DataFrame:
    """Sample listings as read from CSV."""
    return load_listings(listings_path)


@pytest.fixture
def line_dataset() -> Dataset:
    """Ten observations with one feature 1..10 and labels equal to the feature."""
    values = np.arange(1, 11, dtype=float)
    return Dataset(features=values.reshape(-1, 1), labels=values, feature_names=("x",))


@pytest.fixture
def random_dataset() -> Dataset:
    """Sixty observations, three features, noisy linear labels."""
    rng = np.random.default_rng(0)
    features = rng.normal(size=(60, 3)) * np.array([1.0, 10.0, 100.0])
    labels = 50 + features @ np.array([5.0, 0.5, 0.05]) + rng.normal(scale=2.0, size=60)
    return Dataset(features=features, labels=labels, feature_names=("a", "b", "c"))
