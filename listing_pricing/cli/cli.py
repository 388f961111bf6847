"""
Listing pricing CLI - tune and evaluate k-NN price models on Airbnb listings.

Usage:
    listing-pricing analyze --data.path ./listings.csv
    listing-pricing analyze --data.path ./listings.csv --k.values 1-50 \\
        --folds 10 --output report.json
    listing-pricing tune --data.path ./listings.csv --folds 5
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from ..analysis import AnalysisConfig, AnalysisSession
from ..data import DataError, load_listings
from ..evaluation import EvaluationError
from ..modeling import ModelingError, TuningResult
from .config import add_args, build_analysis_config
from .errors import CLIError, ConfigurationError

TOP_CANDIDATES = 5


def _create_session(
    args: argparse.Namespace, analysis_config: AnalysisConfig
) -> AnalysisSession:
    return AnalysisSession.create(
        feature_config_path=Path(args.config_path) if args.config_path else None,
        config=analysis_config,
    )


def _print_tuning(tuning: TuningResult) -> None:
    print(f"  Cross-validation: {tuning.num_folds} folds, {tuning.n_samples} observations")
    print(f"  Best candidates (of {len(tuning.scores)}):")
    for k, rmse in tuning.get_ranking()[:TOP_CANDIDATES]:
        marker = "*" if k == tuning.selected_k else " "
        print(f"   {marker} k={k:<4d} mean RMSE={rmse:,.2f}")
    print(f"  Selected k: {tuning.selected_k}")


def _write_report(path: str, payload: dict[str, Any]) -> None:
    output = Path(path)
    if not output.parent.exists():
        raise ConfigurationError(f"Output directory does not exist: {output.parent}")
    with open(output, "w") as f:
        json.dump(payload, f, indent=2)
    print(f"Report written to {output}")


def cmd_analyze(args: argparse.Namespace, analysis_config: AnalysisConfig) -> int:
    """Execute the analyze command."""
    session = _create_session(args, analysis_config)
    frame = load_listings(args.data_path)

    print(f"Analyzing listings: {args.data_path}")
    print()

    if args.skip_outliers:
        results = [session.run(frame)]
        payload: dict[str, Any] = {"sessions": [r.to_dict() for r in results]}
    else:
        report = session.run_with_outlier_removal(frame)
        results = report.sessions
        payload = report.to_dict()
        print(
            f"Listings: {report.n_listings} "
            f"({report.n_outliers_removed} price outliers)"
        )
        print()

    for result in results:
        metrics = result.test_metrics
        print(f"Session: {result.label} (train={result.n_train}, test={result.n_test})")
        _print_tuning(result.tuning)
        print("  Test metrics:")
        print(f"    RMSE: {metrics.rmse:,.2f}")
        print(f"    MAE:  {metrics.mae:,.2f}")
        print(f"    R²:   {metrics.r2:.4f}")
        print()

    if args.output:
        _write_report(args.output, payload)

    return 0


def cmd_tune(args: argparse.Namespace, analysis_config: AnalysisConfig) -> int:
    """Execute the tune command."""
    session = _create_session(args, analysis_config)
    frame = load_listings(args.data_path)

    print(f"Tuning k on listings: {args.data_path}")
    print()

    tuning = session.tune(frame)
    _print_tuning(tuning)

    if args.output:
        print()
        _write_report(args.output, tuning.to_dict())

    return 0


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="listing-pricing",
        description="Tune and evaluate k-NN price models on Airbnb listings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        help="Command to execute",
    )

    # ─────────────────────────────────────────────────────────────────────────
    # ANALYZE command
    # ─────────────────────────────────────────────────────────────────────────
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Tune k, evaluate on a test split, repeat without price outliers",
        description="Run the full session on all listings and without price outliers.",
    )
    add_args(analyze_parser)
    analyze_parser.add_argument(
        "--skip-outliers",
        dest="skip_outliers",
        action="store_true",
        help="Only run the session on all listings",
    )

    # ─────────────────────────────────────────────────────────────────────────
    # TUNE command
    # ─────────────────────────────────────────────────────────────────────────
    tune_parser = subparsers.add_parser(
        "tune",
        help="Run only the cross-validated search for k",
        description="Cross-validate candidate k values on the training split.",
    )
    add_args(tune_parser)

    return parser.parse_args(args)


def main(args: list[str] | None = None) -> int:
    """CLI entry point."""
    try:
        config = parse_args(args)
    except ConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    if not config.data_path:
        print(
            "ERROR: --data.path is required (or set LISTING_PRICING_DATA_PATH)",
            file=sys.stderr,
        )
        return 2

    try:
        analysis_config = build_analysis_config(config)
    except ConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    try:
        if config.command == "analyze":
            return cmd_analyze(config, analysis_config)
        elif config.command == "tune":
            return cmd_tune(config, analysis_config)
        else:
            print(f"ERROR: Unknown command: {config.command}", file=sys.stderr)
            return 2

    except ConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    except (CLIError, DataError, ModelingError, EvaluationError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
