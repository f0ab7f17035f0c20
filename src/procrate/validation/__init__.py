"""
Validation and error handling for the procrate package.

This module provides input validation, the exception taxonomy used by the
report store, and helpers for consistent error reporting.
"""

from .exceptions import (
    EmptyStoreError,
    ErrorSeverity,
    ReportStoreError,
    RoleNotFoundError,
    SerializationError,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
)

from .validators import (
    validate_enum_choice,
    validate_histogram_boundaries,
    validate_metric_prefix,
    validate_positive_float,
    validate_positive_integer,
    validate_regex_pattern,
    validate_role_name,
)

__all__ = [
    # Exceptions
    "ErrorSeverity",
    "ValidationError",
    "ReportStoreError",
    "RoleNotFoundError",
    "EmptyStoreError",
    "SerializationError",
    # Handlers
    "handle_error",
    "handle_config_error",
    "handle_cli_error",
    # Validators
    "validate_enum_choice",
    "validate_histogram_boundaries",
    "validate_metric_prefix",
    "validate_positive_float",
    "validate_positive_integer",
    "validate_regex_pattern",
    "validate_role_name",
]
