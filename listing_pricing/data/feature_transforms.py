"""Feature transform registry and implementations.

Each transform function is registered via @feature_transform decorator.
The name must match a key in feature_config.yaml's feature_transforms section.

These are derived features computed from whole listing columns.
"""

from collections.abc import Callable
from typing import Any

import numpy as np
import pandas as pd

from .errors import InvalidTransformValueError, MissingTransformFieldError

EARTH_RADIUS_KM = 6371.0

# Each function takes (listings frame, feature config) and returns a Series
TransformFn = Callable[[pd.DataFrame, dict[str, Any]], pd.Series]

# Registry for feature transform functions
_FEATURE_TRANSFORM_REGISTRY: dict[str, TransformFn] = {}

# Source columns each transform reads; rows missing them are dropped on cleaning
_FEATURE_TRANSFORM_SOURCES: dict[str, tuple[str, ...]] = {}


def feature_transform(name: str, requires: tuple[str, ...] = ()):
    """
    Decorator to register a feature transform function.

    The `name` argument MUST match an entry in `feature_transforms` list of
    feature_config.yaml. This binding is validated at encoder initialization.

    Args:
        name: The feature name as it appears in feature_config.yaml
        requires: Listing columns the transform reads

    Usage:
        @feature_transform("distance_to_center", requires=("latitude", "longitude"))
        def compute_distance_to_center(frame, config) -> pd.Series:
            ...

    The function receives:
        - frame: Cleaned listings DataFrame
        - config: Parsed feature configuration

    Returns:
        pd.Series: One float per listing, aligned with frame.index
    """

    def decorator(func: TransformFn):
        _FEATURE_TRANSFORM_REGISTRY[name] = func
        _FEATURE_TRANSFORM_SOURCES[name] = tuple(requires)
        return func

    return decorator


def get_registered_feature_transforms() -> list[str]:
    """Return list of all registered feature transform names."""
    return list(_FEATURE_TRANSFORM_REGISTRY.keys())


def get_transform_sources(name: str) -> tuple[str, ...]:
    """Return the listing columns a registered transform reads."""
    return _FEATURE_TRANSFORM_SOURCES.get(name, ())


# --- Helper functions ---


def haversine_km(
    lat1: np.ndarray | float,
    lon1: np.ndarray | float,
    lat2: np.ndarray | float,
    lon2: np.ndarray | float,
) -> np.ndarray:
    """Great-circle distance in kilometres between points given in degrees."""
    phi1, phi2 = np.radians(lat1), np.radians(lat2)
    dphi = np.radians(np.asarray(lat2) - np.asarray(lat1))
    dlambda = np.radians(np.asarray(lon2) - np.asarray(lon1))
    a = np.sin(dphi / 2.0) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(dlambda / 2.0) ** 2
    return 2 * EARTH_RADIUS_KM * np.arcsin(np.sqrt(a))


def _require_columns(frame: pd.DataFrame, columns: tuple[str, ...], name: str) -> None:
    missing = [c for c in columns if c not in frame.columns]
    if missing:
        raise MissingTransformFieldError(
            f"Missing required columns {missing} for {name} transform"
        )


def resolve_reference_point(
    frame: pd.DataFrame, config: dict[str, Any]
) -> tuple[float, float]:
    """
    Resolve the point distances are measured from.

    Uses config['reference_point'] ({latitude, longitude}) when set,
    otherwise the centroid of `frame`. Sessions resolve it on their
    training rows only and encode every row with that fixed point.

    Raises:
        InvalidTransformValueError: If the configured point is malformed or
            out of range.
    """
    point = config.get("reference_point")
    if point is None:
        return float(frame["latitude"].mean()), float(frame["longitude"].mean())

    try:
        lat, lon = float(point["latitude"]), float(point["longitude"])
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidTransformValueError(
            f"reference_point must have numeric 'latitude' and 'longitude', got {point!r}"
        ) from e

    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        raise InvalidTransformValueError(
            f"reference_point ({lat}, {lon}) is outside valid coordinate ranges"
        )
    return lat, lon


# --- Transform implementations ---


@feature_transform("distance_to_center", requires=("latitude", "longitude"))
def _compute_distance_to_center(frame: pd.DataFrame, config: dict[str, Any]) -> pd.Series:
    """Haversine distance (km) from each listing to the reference point."""
    _require_columns(frame, ("latitude", "longitude"), "distance_to_center")

    lat = pd.to_numeric(frame["latitude"], errors="coerce")
    lon = pd.to_numeric(frame["longitude"], errors="coerce")
    if ((lat.abs() > 90) | (lon.abs() > 180)).any():
        raise InvalidTransformValueError(
            "Latitude/longitude outside valid ranges for distance_to_center transform"
        )

    center_lat, center_lon = resolve_reference_point(
        frame.assign(latitude=lat, longitude=lon), config
    )
    distances = haversine_km(lat.to_numpy(), lon.to_numpy(), center_lat, center_lon)
    return pd.Series(distances, index=frame.index, name="distance_to_center")


@feature_transform("bedrooms_per_guest", requires=("bedrooms", "accommodates"))
def _compute_bedrooms_per_guest(frame: pd.DataFrame, config: dict[str, Any]) -> pd.Series:
    """
    Bedrooms divided by guest capacity.

    Listings that accommodate zero guests get 0.0.
    """
    _require_columns(frame, ("bedrooms", "accommodates"), "bedrooms_per_guest")

    bedrooms = pd.to_numeric(frame["bedrooms"], errors="coerce")
    guests = pd.to_numeric(frame["accommodates"], errors="coerce")
    ratio = bedrooms / guests.where(guests != 0)
    return ratio.fillna(0.0).rename("bedrooms_per_guest")
