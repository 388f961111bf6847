"""Custom exceptions for the command-line interface."""


class CLIError(Exception):
    """Base exception for all CLI errors."""

    pass


class ConfigurationError(CLIError):
    """
    Raised when command-line or environment configuration is invalid.

    This can happen when:
    - --k.values is not a comma-separated list of integers
    - An environment variable default cannot be parsed
    - Output path directory does not exist
    """

    pass
