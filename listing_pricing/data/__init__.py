"""Data module for listing ingestion and feature encoding."""

from .errors import (
    DataError,
    FeatureConfigError,
    InvalidOutlierThresholdError,
    InvalidPriceError,
    InvalidTransformValueError,
    ListingsFileError,
    MissingColumnError,
    MissingTransformFieldError,
)
from .feature_encoder import DEFAULT_CONFIG_PATH, ListingEncoder
from .feature_transforms import (
    EARTH_RADIUS_KM,
    feature_transform,
    get_registered_feature_transforms,
    get_transform_sources,
    haversine_km,
    resolve_reference_point,
)
from .listings import (
    clean_listings,
    load_listings,
    parse_bathrooms_text,
    parse_price,
    remove_price_outliers,
)

__all__ = [
    # Errors
    "DataError",
    "FeatureConfigError",
    "InvalidOutlierThresholdError",
    "InvalidPriceError",
    "InvalidTransformValueError",
    "ListingsFileError",
    "MissingColumnError",
    "MissingTransformFieldError",
    # Feature encoding
    "ListingEncoder",
    "DEFAULT_CONFIG_PATH",
    "feature_transform",
    "get_registered_feature_transforms",
    "get_transform_sources",
    "haversine_km",
    "resolve_reference_point",
    "EARTH_RADIUS_KM",
    # Listings
    "load_listings",
    "clean_listings",
    "parse_price",
    "parse_bathrooms_text",
    "remove_price_outliers",
]
