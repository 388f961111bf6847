"""Custom exceptions for data module."""


class DataError(Exception):
    """Base exception for data-related errors."""

    pass


# --- Listings file errors ---


class ListingsFileError(DataError):
    """
    Raised when the listings CSV cannot be read.

    This can happen when:
    - File not found
    - File is empty or not valid CSV
    """

    pass


class MissingColumnError(DataError):
    """
    Raised when a required column is missing from the listings.

    This can happen when:
    - CSV export doesn't include a numeric field named in feature_config.yaml
    - Label column (price) is absent
    """

    pass


class InvalidPriceError(DataError):
    """
    Raised when a price value cannot be parsed.

    This can happen when:
    - Price contains text other than currency symbols and separators
    - Value is of an unexpected type
    """

    pass


class InvalidOutlierThresholdError(DataError):
    """
    Raised when the Tukey fence multiplier is unusable.

    This can happen when:
    - iqr_multiplier is negative
    """

    def __init__(self, message: str, iqr_multiplier: float | None = None):
        super().__init__(message)
        self.iqr_multiplier = iqr_multiplier


# --- Feature encoding errors ---


class FeatureConfigError(DataError):
    """
    Raised when feature configuration is invalid or cannot be loaded.

    This can happen when:
    - Config file not found
    - Invalid YAML syntax
    - Missing required keys in config
    - Feature transform named in config has no registered function
    """

    pass


# --- Feature transform errors ---


class MissingTransformFieldError(DataError):
    """
    Raised when a required field for a transform is missing.

    This can happen when:
    - Listings don't have the source columns needed by the transform
    """

    pass


class InvalidTransformValueError(DataError):
    """
    Raised when a field value cannot be used by a transform.

    This can happen when:
    - Latitude/longitude are out of range
    - Reference point in config is malformed
    """

    pass
