"""Tests for loading and cleaning listings."""

import math

import numpy as np
import pandas as pd
import pytest

from listing_pricing.data import (
    DataError,
    InvalidOutlierThresholdError,
    InvalidPriceError,
    ListingsFileError,
    MissingColumnError,
    clean_listings,
    load_listings,
    parse_bathrooms_text,
    parse_price,
    remove_price_outliers,
)

REQUIRED = ["accommodates", "bedrooms", "bathrooms", "beds", "latitude", "longitude"]


class TestLoadListings:
    """Tests for load_listings."""

    def test_loads_sample(self, listings_path):
        frame = load_listings(listings_path)

        assert len(frame) == 42
        assert "bathrooms_text" in frame.columns

    def test_accepts_string_path(self, listings_path):
        assert len(load_listings(str(listings_path))) == 42

    def test_missing_file_raises_error(self, tmp_path):
        with pytest.raises(ListingsFileError, match="not found"):
            load_listings(tmp_path / "missing.csv")

    def test_empty_file_raises_error(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("")

        with pytest.raises(ListingsFileError, match="empty"):
            load_listings(path)


class TestParsePrice:
    """Tests for parse_price."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("$85.00", 85.0),
            ("$1,250.00", 1250.0),
            (" 99 ", 99.0),
            (120, 120.0),
            (75.5, 75.5),
            (np.int64(40), 40.0),
        ],
    )
    def test_valid_prices(self, value, expected):
        assert parse_price(value) == expected

    @pytest.mark.parametrize("value", [None, "", "   ", "$"])
    def test_blank_prices_are_nan(self, value):
        assert math.isnan(parse_price(value))

    def test_nan_passes_through(self):
        assert math.isnan(parse_price(float("nan")))

    @pytest.mark.parametrize("value", ["free", "$12abc", True, ["$5"]])
    def test_invalid_prices_raise_error(self, value):
        with pytest.raises(InvalidPriceError):
            parse_price(value)


class TestParseBathroomsText:
    """Tests for parse_bathrooms_text."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("1 bath", 1.0),
            ("2 baths", 2.0),
            ("1.5 shared baths", 1.5),
            ("1 private bath", 1.0),
            ("Half-bath", 0.5),
            ("Shared half-bath", 0.5),
        ],
    )
    def test_parses_counts(self, text, expected):
        assert parse_bathrooms_text(text) == expected

    @pytest.mark.parametrize("value", [None, float("nan"), "bath", 2])
    def test_unparseable_is_nan(self, value):
        assert math.isnan(parse_bathrooms_text(value))


class TestCleanListings:
    """Tests for clean_listings."""

    def test_drops_unusable_rows(self, raw_listings):
        """Missing bedrooms, zero price and blank price are removed."""
        cleaned = clean_listings(raw_listings, REQUIRED)

        assert len(cleaned) == 39
        assert set(cleaned["id"]).isdisjoint({39, 40, 41})
        assert list(cleaned.index) == list(range(39))

    def test_parses_prices_and_bathrooms(self, raw_listings):
        cleaned = clean_listings(raw_listings, REQUIRED)

        assert cleaned["price"].dtype == float
        assert cleaned.loc[cleaned["id"] == 36, "price"].item() == 2500.0
        assert cleaned.loc[cleaned["id"] == 4, "bathrooms"].item() == 2.0

    def test_does_not_modify_input(self, raw_listings):
        before = raw_listings.copy()

        clean_listings(raw_listings, REQUIRED)

        pd.testing.assert_frame_equal(raw_listings, before)

    def test_existing_bathrooms_column_kept(self):
        frame = pd.DataFrame(
            {
                "bathrooms": [2.0],
                "bathrooms_text": ["1 bath"],
                "price": ["$50.00"],
            }
        )

        cleaned = clean_listings(frame, ["bathrooms"])

        assert cleaned["bathrooms"].tolist() == [2.0]

    def test_missing_column_raises_error(self, raw_listings):
        with pytest.raises(MissingColumnError, match="square_feet"):
            clean_listings(raw_listings, ["accommodates", "square_feet"])

    def test_missing_label_raises_error(self):
        frame = pd.DataFrame({"accommodates": [2]})

        with pytest.raises(MissingColumnError, match="price"):
            clean_listings(frame, ["accommodates"])

    def test_non_numeric_values_dropped(self):
        frame = pd.DataFrame({"beds": ["2", "many"], "price": ["$80.00", "$90.00"]})

        cleaned = clean_listings(frame, ["beds"])

        assert cleaned["beds"].tolist() == [2]

    def test_invalid_price_raises_error(self):
        frame = pd.DataFrame({"beds": [1], "price": ["call us"]})

        with pytest.raises(InvalidPriceError):
            clean_listings(frame, ["beds"])


class TestRemovePriceOutliers:
    """Tests for remove_price_outliers."""

    def test_sample_outliers(self, raw_listings):
        """The 420, 1150 and 2500 nightly prices lie above Q3 + 1.5 IQR."""
        cleaned = clean_listings(raw_listings, REQUIRED)

        trimmed = remove_price_outliers(cleaned)

        assert len(trimmed) == 36
        assert trimmed["price"].max() == 330.0
        assert list(trimmed.index) == list(range(36))

    def test_larger_multiplier_keeps_more(self, raw_listings):
        cleaned = clean_listings(raw_listings, REQUIRED)

        trimmed = remove_price_outliers(cleaned, iqr_multiplier=3.0)

        # upper fence 195 + 3 * 106 = 513
        assert sorted(cleaned["price"])[-2:] == [1150.0, 2500.0]
        assert len(trimmed) == 37

    def test_low_outliers_removed(self):
        frame = pd.DataFrame({"price": [1.0, 100.0, 101.0, 102.0, 103.0, 104.0]})

        trimmed = remove_price_outliers(frame)

        assert trimmed["price"].min() == 100.0

    def test_zero_iqr_returns_copy(self):
        frame = pd.DataFrame({"price": [100.0, 100.0, 100.0, 100.0, 500.0]})

        trimmed = remove_price_outliers(frame)

        pd.testing.assert_frame_equal(trimmed, frame)
        assert trimmed is not frame

    def test_missing_column_raises_error(self):
        with pytest.raises(MissingColumnError, match="nightly_rate"):
            remove_price_outliers(pd.DataFrame({"price": [1.0]}), column="nightly_rate")

    def test_negative_multiplier_raises_error(self):
        with pytest.raises(InvalidOutlierThresholdError, match="non-negative") as exc_info:
            remove_price_outliers(pd.DataFrame({"price": [1.0, 2.0]}), iqr_multiplier=-1)

        assert isinstance(exc_info.value, DataError)
        assert exc_info.value.iqr_multiplier == -1
