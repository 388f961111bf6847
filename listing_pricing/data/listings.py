"""Loading and cleaning of Airbnb listings exports."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from .errors import (
    InvalidOutlierThresholdError,
    InvalidPriceError,
    ListingsFileError,
    MissingColumnError,
)

logger = logging.getLogger(__name__)

_NUMBER_PATTERN = re.compile(r"(\d+(?:\.\d+)?)")


def load_listings(path: str | Path) -> pd.DataFrame:
    """
    Read a listings CSV.

    Raises:
        ListingsFileError: If the file is missing, empty, or not valid CSV.
    """
    path = Path(path)
    if not path.exists():
        raise ListingsFileError(f"Listings file not found: {path}")

    try:
        frame = pd.read_csv(path, low_memory=False)
    except pd.errors.EmptyDataError as e:
        raise ListingsFileError(f"Listings file is empty: {path}") from e
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise ListingsFileError(f"Cannot parse listings file {path}: {e}") from e

    logger.info(f"Loaded {len(frame)} listings with {len(frame.columns)} columns from {path}")
    return frame


def parse_price(value: Any) -> float:
    """
    Convert a price such as '$1,250.00' to a float.

    Returns NaN for missing or blank values.

    Raises:
        InvalidPriceError: If the value cannot be interpreted as a price.

    Example:
        >>> parse_price("$1,250.00")
        1250.0
    """
    if value is None:
        return float("nan")
    if isinstance(value, bool):
        raise InvalidPriceError(f"Cannot parse price from boolean {value!r}")
    if isinstance(value, (int, float, np.integer, np.floating)):
        return float(value)
    if not isinstance(value, str):
        raise InvalidPriceError(f"Cannot parse price from {type(value).__name__}")

    cleaned = value.strip().replace("$", "").replace(",", "")
    if not cleaned:
        return float("nan")
    try:
        return float(cleaned)
    except ValueError as e:
        raise InvalidPriceError(f"Cannot parse price from {value!r}") from e


def parse_bathrooms_text(value: Any) -> float:
    """
    Extract a bathroom count from text such as '1.5 shared baths'.

    'Half-bath' variants count as 0.5; unparseable text gives NaN.
    """
    if not isinstance(value, str):
        return float("nan")
    match = _NUMBER_PATTERN.search(value)
    if match:
        return float(match.group(1))
    if "half" in value.lower():
        return 0.5
    return float("nan")


def clean_listings(
    frame: pd.DataFrame,
    required_columns: Iterable[str],
    label_field: str = "price",
) -> pd.DataFrame:
    """
    Prepare raw listings for encoding.

    Steps:
    1. Derive numeric 'bathrooms' from 'bathrooms_text' when absent
    2. Parse the label column as a price
    3. Coerce required columns to numeric
    4. Drop rows with missing required values or a non-positive price

    Args:
        frame: Raw listings
        required_columns: Columns every kept row must have (features and
            transform sources)
        label_field: Price column

    Returns:
        New DataFrame; the input is not modified.

    Raises:
        MissingColumnError: If a required column is absent.
        InvalidPriceError: If a price value cannot be parsed.
    """
    frame = frame.copy()
    required = list(dict.fromkeys([*required_columns, label_field]))

    if (
        "bathrooms" in required
        and "bathrooms_text" in frame.columns
        and ("bathrooms" not in frame.columns or frame["bathrooms"].isna().all())
    ):
        frame["bathrooms"] = frame["bathrooms_text"].map(parse_bathrooms_text)

    missing = [c for c in required if c not in frame.columns]
    if missing:
        raise MissingColumnError(
            f"Listings are missing required columns: {missing}. "
            f"Available columns: {list(frame.columns)}"
        )

    frame[label_field] = frame[label_field].map(parse_price).astype(float)
    for column in required:
        if column != label_field:
            frame[column] = pd.to_numeric(frame[column], errors="coerce")

    n_raw = len(frame)
    frame = frame.dropna(subset=required)
    n_missing = n_raw - len(frame)

    frame = frame[frame[label_field] > 0]
    n_nonpositive = n_raw - n_missing - len(frame)

    logger.info(
        f"Cleaned listings: kept {len(frame)}/{n_raw} "
        f"(dropped {n_missing} with missing values, {n_nonpositive} with price <= 0)"
    )
    return frame.reset_index(drop=True)


def remove_price_outliers(
    frame: pd.DataFrame,
    column: str = "price",
    iqr_multiplier: float = 1.5,
) -> pd.DataFrame:
    """
    Drop rows whose price lies outside the Tukey fences.

    Fences are Q1 - m * IQR and Q3 + m * IQR. Returns the frame unchanged
    (as a copy) when the IQR is zero.

    Raises:
        MissingColumnError: If the price column is absent.
        InvalidOutlierThresholdError: If iqr_multiplier is negative.
    """
    if column not in frame.columns:
        raise MissingColumnError(f"Cannot remove outliers: column '{column}' not found")
    if iqr_multiplier < 0:
        raise InvalidOutlierThresholdError(
            f"iqr_multiplier must be non-negative, got {iqr_multiplier}",
            iqr_multiplier=iqr_multiplier,
        )

    values = pd.to_numeric(frame[column], errors="coerce")
    q1 = values.quantile(0.25)
    q3 = values.quantile(0.75)
    iqr = q3 - q1
    if not iqr > 0:
        logger.warning(f"IQR of '{column}' is zero; no outliers removed")
        return frame.copy()

    lower = q1 - iqr_multiplier * iqr
    upper = q3 + iqr_multiplier * iqr
    kept = frame[(values >= lower) & (values <= upper)]

    logger.info(
        f"Removed {len(frame) - len(kept)} price outliers outside "
        f"[{lower:.2f}, {upper:.2f}]; {len(kept)} listings remain"
    )
    return kept.reset_index(drop=True)
