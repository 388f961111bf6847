"""
CLI configuration management.

Every option can be overridden by a LISTING_PRICING_* environment variable.
"""

from __future__ import annotations

import argparse
import os

from ..analysis import AnalysisConfig
from .errors import ConfigurationError

ENV_PREFIX = "LISTING_PRICING_"


def _env(name: str, default: str) -> str:
    return os.environ.get(ENV_PREFIX + name, default)


def _env_int(name: str, default: int) -> int:
    value = _env(name, str(default))
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(
            f"Environment variable {ENV_PREFIX}{name}={value!r} is not an integer"
        ) from e


def _env_float(name: str, default: float) -> float:
    value = _env(name, str(default))
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(
            f"Environment variable {ENV_PREFIX}{name}={value!r} is not a number"
        ) from e


def parse_k_values(text: str | None) -> tuple[int, ...] | None:
    """
    Parse a k list such as '1,3,5' or a range such as '1-50'.

    Returns None for an empty value.

    Raises:
        ConfigurationError: If the text is not a valid list or range.
    """
    if text is None or not text.strip():
        return None

    values: list[int] = []
    try:
        for part in text.split(","):
            part = part.strip()
            if "-" in part:
                low, high = (int(p) for p in part.split("-", 1))
                if low > high:
                    raise ValueError(f"empty range {part}")
                values.extend(range(low, high + 1))
            else:
                values.append(int(part))
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid k values {text!r}: expected integers like '1,3,5' or '1-50' ({e})"
        ) from e
    return tuple(values)


def add_args(parser: argparse.ArgumentParser) -> None:
    """
    Add analysis arguments to the parser.

    Arguments can be overridden by environment variables.
    """
    parser.add_argument(
        "--data.path",
        dest="data_path",
        metavar="PATH",
        default=_env("DATA_PATH", "") or None,
        help="Listings CSV file.",
    )

    parser.add_argument(
        "--config.path",
        dest="config_path",
        metavar="PATH",
        default=_env("CONFIG_PATH", "") or None,
        help="Feature config YAML (default: bundled feature_config.yaml).",
    )

    parser.add_argument(
        "--test-size",
        dest="test_size",
        type=float,
        default=_env_float("TEST_SIZE", 0.25),
        help="Fraction of listings held out for testing (default: 0.25).",
    )

    parser.add_argument(
        "--folds",
        dest="num_folds",
        type=int,
        default=_env_int("NUM_FOLDS", 5),
        help="Cross-validation folds for tuning k (default: 5).",
    )

    parser.add_argument(
        "--k.max",
        dest="max_k",
        type=int,
        default=_env_int("MAX_K", 100),
        help="Largest k tried when --k.values is not given (default: 100).",
    )

    parser.add_argument(
        "--k.values",
        dest="k_values",
        default=_env("K_VALUES", "") or None,
        metavar="LIST",
        help="Explicit candidate k values, e.g. '1,3,5' or '1-50'.",
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=_env_int("SEED", 42),
        help="Seed for the train/test split and folds (default: 42).",
    )

    parser.add_argument(
        "--workers",
        dest="max_workers",
        type=int,
        default=_env_int("MAX_WORKERS", 1),
        help="Folds evaluated concurrently (default: 1).",
    )

    parser.add_argument(
        "--iqr-multiplier",
        dest="iqr_multiplier",
        type=float,
        default=_env_float("IQR_MULTIPLIER", 1.5),
        help="Tukey fence multiplier for price outliers (default: 1.5).",
    )

    parser.add_argument(
        "--output",
        metavar="PATH",
        default=_env("OUTPUT", "") or None,
        help="Write the JSON report to this file.",
    )

    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=_env("LOG_LEVEL", "WARNING").upper(),
        help="Logging level (default: WARNING).",
    )


def build_analysis_config(args: argparse.Namespace) -> AnalysisConfig:
    """Build AnalysisConfig from parsed arguments."""
    if args.max_workers < 1:
        raise ConfigurationError(f"--workers must be at least 1, got {args.max_workers}")
    if args.iqr_multiplier < 0:
        raise ConfigurationError(
            f"--iqr-multiplier must be non-negative, got {args.iqr_multiplier}"
        )

    return AnalysisConfig(
        test_size=args.test_size,
        num_folds=args.num_folds,
        candidate_ks=parse_k_values(args.k_values),
        max_k=args.max_k,
        seed=args.seed,
        max_workers=args.max_workers,
        iqr_multiplier=args.iqr_multiplier,
    )
