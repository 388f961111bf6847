"""Tests for feature transform functions."""

import numpy as np
import pandas as pd
import pytest

from listing_pricing.data import (
    EARTH_RADIUS_KM,
    InvalidTransformValueError,
    MissingTransformFieldError,
    feature_transform,
    get_registered_feature_transforms,
    get_transform_sources,
    haversine_km,
)
from listing_pricing.data.feature_transforms import (
    _FEATURE_TRANSFORM_REGISTRY,
    _FEATURE_TRANSFORM_SOURCES,
)

SEATTLE = {"latitude": 47.6062, "longitude": -122.3321}


class TestHaversine:
    """Tests for haversine_km."""

    def test_one_degree_of_longitude_at_equator(self) -> None:
        """One degree along the equator is 2*pi*R/360."""
        result = haversine_km(0.0, 0.0, 0.0, 1.0)

        assert result == pytest.approx(EARTH_RADIUS_KM * np.pi / 180)

    def test_same_point_is_zero(self) -> None:
        assert haversine_km(47.6, -122.3, 47.6, -122.3) == pytest.approx(0.0)

    def test_vectorized(self) -> None:
        """Arrays of points against a single reference."""
        result = haversine_km(np.array([0.0, 0.0]), np.array([1.0, -1.0]), 0.0, 0.0)

        np.testing.assert_allclose(result, [111.195, 111.195], rtol=1e-4)


class TestDistanceToCenter:
    """Tests for distance_to_center transform."""

    def setup_method(self):
        """Get the transform function."""
        self.transform = _FEATURE_TRANSFORM_REGISTRY["distance_to_center"]

    def test_listing_at_reference_point(self):
        """Distance to the configured point itself is zero."""
        frame = pd.DataFrame({"latitude": [47.6062, 47.6162], "longitude": [-122.3321] * 2})

        result = self.transform(frame, {"reference_point": SEATTLE})

        assert result.iloc[0] == pytest.approx(0.0)
        # 0.01 degrees of latitude
        assert result.iloc[1] == pytest.approx(1.112, rel=1e-3)

    def test_result_aligned_with_index(self):
        """Output keeps the frame's index."""
        frame = pd.DataFrame(
            {"latitude": [47.61, 47.62], "longitude": [-122.33, -122.34]}, index=[5, 9]
        )

        result = self.transform(frame, {"reference_point": SEATTLE})

        assert list(result.index) == [5, 9]
        assert result.name == "distance_to_center"

    def test_centroid_used_without_reference_point(self):
        """Symmetric listings are equally far from their centroid."""
        frame = pd.DataFrame({"latitude": [10.0, -10.0], "longitude": [0.0, 0.0]})

        result = self.transform(frame, {"reference_point": None})

        assert result.iloc[0] == pytest.approx(result.iloc[1])
        assert result.iloc[0] == pytest.approx(EARTH_RADIUS_KM * np.radians(10.0))

    def test_missing_column_raises_error(self):
        """Raises MissingTransformFieldError when longitude is absent."""
        frame = pd.DataFrame({"latitude": [47.6]})

        with pytest.raises(MissingTransformFieldError, match="longitude"):
            self.transform(frame, {})

    def test_out_of_range_coordinates_raise_error(self):
        """Latitude beyond 90 degrees is rejected."""
        frame = pd.DataFrame({"latitude": [95.0], "longitude": [0.0]})

        with pytest.raises(InvalidTransformValueError, match="valid ranges"):
            self.transform(frame, {})

    @pytest.mark.parametrize(
        "point",
        [{"latitude": 47.6}, {"latitude": "north", "longitude": 0}, [47.6, -122.3]],
    )
    def test_malformed_reference_point_raises_error(self, point):
        """reference_point needs numeric latitude and longitude keys."""
        frame = pd.DataFrame({"latitude": [47.6], "longitude": [-122.3]})

        with pytest.raises(InvalidTransformValueError, match="reference_point"):
            self.transform(frame, {"reference_point": point})

    def test_reference_point_out_of_range_raises_error(self):
        frame = pd.DataFrame({"latitude": [47.6], "longitude": [-122.3]})

        with pytest.raises(InvalidTransformValueError, match="outside valid"):
            self.transform(frame, {"reference_point": {"latitude": 0, "longitude": 200}})


class TestBedroomsPerGuest:
    """Tests for bedrooms_per_guest transform."""

    def setup_method(self):
        """Get the transform function."""
        self.transform = _FEATURE_TRANSFORM_REGISTRY["bedrooms_per_guest"]

    def test_ratio(self):
        frame = pd.DataFrame({"bedrooms": [1, 3], "accommodates": [2, 6]})

        result = self.transform(frame, {})

        assert result.tolist() == [0.5, 0.5]

    def test_zero_guests_gives_zero(self):
        """Listings accommodating nobody get 0.0."""
        frame = pd.DataFrame({"bedrooms": [2], "accommodates": [0]})

        result = self.transform(frame, {})

        assert result.tolist() == [0.0]


class TestRegistry:
    """Tests for the transform registry."""

    def test_builtin_transforms_registered(self):
        names = get_registered_feature_transforms()

        assert "distance_to_center" in names
        assert "bedrooms_per_guest" in names

    def test_transform_sources(self):
        """Sources are recorded at registration."""
        assert get_transform_sources("distance_to_center") == ("latitude", "longitude")
        assert get_transform_sources("not_registered") == ()

    def test_decorator_registers_function(self):
        """@feature_transform adds the function under the given name."""
        try:

            @feature_transform("beds_squared", requires=("beds",))
            def beds_squared(frame, config):
                return frame["beds"] ** 2

            assert _FEATURE_TRANSFORM_REGISTRY["beds_squared"] is beds_squared
            assert get_transform_sources("beds_squared") == ("beds",)
        finally:
            _FEATURE_TRANSFORM_REGISTRY.pop("beds_squared", None)
            _FEATURE_TRANSFORM_SOURCES.pop("beds_squared", None)
