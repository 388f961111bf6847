"""Feature encoder for converting listings to model datasets."""

import logging
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd
import yaml

from ..modeling.models import Dataset
from .errors import FeatureConfigError, MissingColumnError
from .feature_transforms import (
    _FEATURE_TRANSFORM_REGISTRY,
    get_registered_feature_transforms,
    get_transform_sources,
    resolve_reference_point,
)
from .listings import clean_listings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config" / "feature_config.yaml"


class ListingEncoder:
    """
    Encodes a listings DataFrame into a Dataset for k-NN modeling.

    Loads feature configuration from YAML.
    Validates configured transforms against the registry.
    Outputs features in `feature_order` with the price as label.
    """

    def __init__(self, config_path: Path | None = None):
        """
        Load and check the feature configuration.

        Args:
            config_path: Feature config YAML. Defaults to the bundled
                data/config/feature_config.yaml.

        Raises:
            FeatureConfigError: If the file is missing, malformed, or names a
                transform without a registered function.
        """
        self._config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._config = self._read_config()
        self._check_feature_layout()
        self._check_transforms_registered()

        logger.info(
            f"ListingEncoder ready: {self.get_feature_count()} features, "
            f"label '{self.label_field}' ({self._config_path})"
        )

    def _read_config(self) -> dict[str, Any]:
        try:
            with open(self._config_path) as f:
                config = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise FeatureConfigError(
                f"Feature config not found: {self._config_path}"
            ) from e
        except yaml.YAMLError as e:
            raise FeatureConfigError(
                f"Invalid YAML in {self._config_path.name}: {e}"
            ) from e

        if not isinstance(config, dict):
            raise FeatureConfigError(
                f"Feature config must be a mapping, got {type(config).__name__}"
            )

        absent = sorted(
            {"label_field", "numeric_fields", "feature_transforms", "feature_order"}
            - config.keys()
        )
        if absent:
            raise FeatureConfigError(f"Feature config missing required keys: {absent}")

        for key in ("numeric_fields", "feature_transforms", "feature_order"):
            config[key] = list(config[key] or [])
        return config

    def _check_feature_layout(self) -> None:
        """Every feature in feature_order is a numeric field or a transform."""
        order = self._config["feature_order"]
        if not order:
            raise FeatureConfigError("feature_order must list at least one feature")

        declared = {*self._config["numeric_fields"], *self._config["feature_transforms"]}
        undeclared = [name for name in order if name not in declared]
        if undeclared:
            raise FeatureConfigError(
                f"Features in feature_order are neither numeric fields "
                f"nor transforms: {undeclared}"
            )

    def _check_transforms_registered(self) -> None:
        unregistered = [
            name
            for name in self._config["feature_transforms"]
            if name not in _FEATURE_TRANSFORM_REGISTRY
        ]
        if unregistered:
            raise FeatureConfigError(
                f"Feature transforms {unregistered} have no registered functions "
                f"(registered: {get_registered_feature_transforms()}). "
                f"Register one with @feature_transform('{unregistered[0]}')."
            )

    @property
    def label_field(self) -> str:
        return str(self._config["label_field"])

    @property
    def config(self) -> dict[str, Any]:
        return dict(self._config)

    def required_columns(self) -> list[str]:
        """Listing columns needed to encode every configured feature."""
        columns: list[str] = []
        for field in self._config["feature_order"]:
            if field in self._config["feature_transforms"]:
                columns.extend(get_transform_sources(field))
            else:
                columns.append(field)
        return list(dict.fromkeys(columns))

    def prepare(self, frame: pd.DataFrame) -> pd.DataFrame:
        """Clean raw listings so every required value is present."""
        return clean_listings(frame, self.required_columns(), self.label_field)

    def fit_reference_point(self, frame: pd.DataFrame) -> dict[str, float] | None:
        """
        Resolve the distance_to_center reference point from `frame`.

        Returns the configured point when one is set, otherwise the centroid
        of `frame`. Returns None when distance_to_center is not configured.

        Raises:
            MissingColumnError: If the centroid is needed and coordinates are absent
            InvalidTransformValueError: If the configured point is malformed
        """
        if "distance_to_center" not in self._config["feature_transforms"]:
            return None
        if self._config.get("reference_point") is None:
            missing = [c for c in ("latitude", "longitude") if c not in frame.columns]
            if missing:
                raise MissingColumnError(
                    f"Cannot compute listing centroid: missing columns {missing}"
                )
            frame = frame.assign(
                latitude=pd.to_numeric(frame["latitude"], errors="coerce"),
                longitude=pd.to_numeric(frame["longitude"], errors="coerce"),
            )
        lat, lon = resolve_reference_point(frame, self._config)
        logger.debug(f"Reference point ({lat:.6f}, {lon:.6f}) from {len(frame)} listings")
        return {"latitude": lat, "longitude": lon}

    def encode(
        self,
        frame: pd.DataFrame,
        reference_point: dict[str, float] | None = None,
    ) -> Dataset:
        """
        Encode cleaned listings to a Dataset.

        Args:
            frame: Listings as returned by `prepare`
            reference_point: Fixed {latitude, longitude} for distance_to_center,
                typically from `fit_reference_point` on training rows. None
                falls back to the configured reference_point.

        Returns:
            Dataset with features in feature_order and price labels

        Raises:
            MissingColumnError: If a numeric field or the label is missing
            InvalidDatasetError: If any encoded value is NaN or Inf
        """
        logger.debug(f"Encoding {len(frame)} listings")

        if self.label_field not in frame.columns:
            raise MissingColumnError(f"Missing label column: '{self.label_field}'")

        transform_config = self._config
        if reference_point is not None:
            transform_config = {**self._config, "reference_point": reference_point}

        columns = []
        for field in self._config["feature_order"]:
            if field in self._config["feature_transforms"]:
                values = _FEATURE_TRANSFORM_REGISTRY[field](frame, transform_config)
            else:
                if field not in frame.columns:
                    raise MissingColumnError(f"Missing required numeric field: '{field}'")
                values = pd.to_numeric(frame[field], errors="coerce")
            columns.append(np.asarray(values, dtype=np.float64))

        features = np.column_stack(columns) if len(frame) else np.empty(
            (0, self.get_feature_count())
        )
        labels = pd.to_numeric(frame[self.label_field], errors="coerce").to_numpy(
            dtype=np.float64
        )

        dataset = Dataset(
            features=features,
            labels=labels,
            feature_names=tuple(self.get_feature_names()),
        )
        logger.debug(f"Encoded to {dataset!r}")
        return dataset

    def get_feature_names(self) -> list[str]:
        """Return ordered list of feature names."""
        return list(self._config["feature_order"])

    def get_feature_count(self) -> int:
        """Return total number of features in encoded output."""
        return len(self._config["feature_order"])
