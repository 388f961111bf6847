"""
Command-line interface for listing price modeling.

This module provides commands to:
- Run the full analysis (tune, evaluate, repeat without price outliers)
- Run only the cross-validated search for k

Usage:
    # Full analysis with a JSON report
    listing-pricing analyze --data.path ./listings.csv --output report.json

    # Cross-validate k = 1..50 with 10 folds
    listing-pricing tune --data.path ./listings.csv --k.values 1-50 --folds 10
"""

from .errors import CLIError, ConfigurationError

__all__ = [
    "CLIError",
    "ConfigurationError",
]
