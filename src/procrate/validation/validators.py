"""
Validation functions for configuration values.

Each validator returns the normalised value or raises ValidationError
naming the offending field.
"""

import math
import re
from typing import Any, List, Optional

from .exceptions import ValidationError

_METRIC_PREFIX_RE = re.compile(r'^[a-zA-Z_:][a-zA-Z0-9_:]*$')


def validate_positive_integer(
    value: Any,
    min_value: int = 1,
    max_value: Optional[int] = None,
    field_name: str = "value"
) -> int:
    """
    Validate that a value is an integer within bounds.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated integer value

    Raises:
        ValidationError: If validation fails
    """
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a valid integer, got {value}",
            field_name=field_name,
            value=value
        )
    try:
        int_value = int(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid integer, got {value}",
            field_name=field_name,
            value=value
        )
    if int_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and int_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    return int_value


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
    field_name: str = "value"
) -> float:
    """
    Validate that a value is a finite number within bounds.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated float value

    Raises:
        ValidationError: If validation fails
    """
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    try:
        float_value = float(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    if not math.isfinite(float_value):
        raise ValidationError(
            f"{field_name} must be finite, got {float_value}",
            field_name=field_name,
            value=value
        )
    if float_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and float_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    return float_value


def validate_enum_choice(value: Any, valid_choices: List[str], field_name: str = "value") -> str:
    """
    Validate that a value is one of the allowed string choices.

    Raises:
        ValidationError: If the value is not in valid_choices
    """
    if not isinstance(value, str) or value not in valid_choices:
        raise ValidationError(
            f"{field_name} must be one of {valid_choices}, got {value!r}",
            field_name=field_name,
            value=value
        )
    return value


def validate_regex_pattern(pattern: str, field_name: str = "regex_pattern") -> str:
    """
    Validate regex pattern format.

    Args:
        pattern: Regex pattern to validate
        field_name: Name of the field being validated

    Returns:
        Validated pattern

    Raises:
        ValidationError: If pattern is invalid
    """
    if not pattern or not isinstance(pattern, str):
        raise ValidationError(
            f"{field_name} must be a non-empty string",
            field_name=field_name,
            value=pattern
        )

    try:
        re.compile(pattern)
    except re.error as e:
        raise ValidationError(
            f"{field_name} is not a valid regex pattern: {e}",
            field_name=field_name,
            value=pattern
        )

    return pattern


def validate_role_name(
    name: str,
    existing_names: Optional[List[str]] = None,
    field_name: str = "role_name"
) -> str:
    """
    Validate a role name.

    Role names end up inside metric label values, so they are restricted to
    alphanumerics, underscores, hyphens and dots.

    Raises:
        ValidationError: If the name is empty, malformed or duplicated
    """
    if not name or not isinstance(name, str):
        raise ValidationError(
            f"{field_name} must be a non-empty string",
            field_name=field_name,
            value=name
        )

    if not re.match(r'^[a-zA-Z0-9_.-]+$', name):
        raise ValidationError(
            f"{field_name} must contain only alphanumeric characters, dots, underscores, and hyphens: {name}",
            field_name=field_name,
            value=name
        )

    if existing_names and name in existing_names:
        raise ValidationError(
            f"{field_name} must be unique, '{name}' already exists",
            field_name=field_name,
            value=name
        )

    return name


def validate_metric_prefix(prefix: str, field_name: str = "metric_prefix") -> str:
    """Validate that a prefix is a legal Prometheus metric name."""
    if not isinstance(prefix, str) or not _METRIC_PREFIX_RE.match(prefix):
        raise ValidationError(
            f"{field_name} is not a valid metric name: {prefix!r}",
            field_name=field_name,
            value=prefix
        )
    return prefix


def validate_histogram_boundaries(boundaries: Any, field_name: str = "histogram_boundaries") -> List[float]:
    """
    Validate rate histogram boundaries.

    Boundaries are fractions of one CPU; they must be a non-empty list of
    positive finite numbers in strictly ascending order.

    Raises:
        ValidationError: If the list is empty, unordered or holds bad values
    """
    if not isinstance(boundaries, list) or not boundaries:
        raise ValidationError(
            f"{field_name} must be a non-empty list",
            field_name=field_name,
            value=boundaries
        )

    validated: List[float] = []
    for i, boundary in enumerate(boundaries):
        value = validate_positive_float(boundary, min_value=0.0, field_name=f"{field_name}[{i}]")
        if value <= 0.0:
            raise ValidationError(
                f"{field_name}[{i}] must be > 0, got {value}",
                field_name=field_name,
                value=boundaries
            )
        if validated and value <= validated[-1]:
            raise ValidationError(
                f"{field_name} must be strictly ascending, got {boundaries}",
                field_name=field_name,
                value=boundaries
            )
        validated.append(value)

    return validated
