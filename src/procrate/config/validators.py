"""
Configuration validation utilities.

This module turns raw TOML data into validated MonitorConfig and RoleConfig
instances.
"""

import logging
from typing import Any, Dict, List

from ..models.config import DEFAULT_HISTOGRAM_BOUNDARIES, MonitorConfig, RoleConfig
from ..validation import (
    ValidationError,
    validate_enum_choice,
    validate_histogram_boundaries,
    validate_metric_prefix,
    validate_positive_float,
    validate_positive_integer,
    validate_regex_pattern,
    validate_role_name,
)

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ["json", "text"]


def validate_monitor_config(monitor_data: Dict[str, Any]) -> MonitorConfig:
    """
    Validate and create a MonitorConfig from raw configuration data.

    Args:
        monitor_data: Raw `[monitor]` table from TOML

    Returns:
        Validated MonitorConfig instance

    Raises:
        ValidationError: If validation fails
    """
    collection_settings = monitor_data.get("collection", {})
    reporting_settings = monitor_data.get("reporting", {})
    statistics_settings = monitor_data.get("statistics", {})

    sampling_interval_seconds = validate_positive_float(
        collection_settings.get("sampling_interval_seconds", 1.0),
        min_value=0.01,  # 10ms minimum
        max_value=3600.0,
        field_name="monitor.collection.sampling_interval_seconds",
    )

    report_interval_seconds = validate_positive_float(
        reporting_settings.get("report_interval_seconds", 10.0),
        min_value=0.01,
        max_value=86400.0,
        field_name="monitor.reporting.report_interval_seconds",
    )

    # Window statistics need at least one new sample per flush.
    if report_interval_seconds < sampling_interval_seconds:
        raise ValidationError(
            "monitor.reporting.report_interval_seconds must be >= "
            f"monitor.collection.sampling_interval_seconds ({report_interval_seconds} < {sampling_interval_seconds})",
            field_name="monitor.reporting.report_interval_seconds",
            value=report_interval_seconds,
        )

    output_format = validate_enum_choice(
        reporting_settings.get("output_format", "json"),
        valid_choices=OUTPUT_FORMATS,
        field_name="monitor.reporting.output_format",
    )

    metric_prefix = validate_metric_prefix(
        reporting_settings.get("metric_prefix", "procrate"),
        field_name="monitor.reporting.metric_prefix",
    )

    output_file = reporting_settings.get("output_file", "")
    if not isinstance(output_file, str):
        raise ValidationError(
            "monitor.reporting.output_file must be a string",
            field_name="monitor.reporting.output_file",
            value=output_file,
        )

    flush_on_exit = reporting_settings.get("flush_on_exit", True)
    if not isinstance(flush_on_exit, bool):
        raise ValidationError(
            "monitor.reporting.flush_on_exit must be a boolean",
            field_name="monitor.reporting.flush_on_exit",
            value=flush_on_exit,
        )

    window_size = validate_positive_integer(
        statistics_settings.get("window_size", 10),
        min_value=1,
        max_value=100000,
        field_name="monitor.statistics.window_size",
    )

    histogram_boundaries = validate_histogram_boundaries(
        statistics_settings.get("histogram_boundaries", list(DEFAULT_HISTOGRAM_BOUNDARIES)),
        field_name="monitor.statistics.histogram_boundaries",
    )

    return MonitorConfig(
        sampling_interval_seconds=sampling_interval_seconds,
        report_interval_seconds=report_interval_seconds,
        output_format=output_format,
        metric_prefix=metric_prefix,
        output_file=output_file or None,
        flush_on_exit=flush_on_exit,
        window_size=window_size,
        histogram_boundaries=histogram_boundaries,
    )


def validate_roles_config(roles_data: List[Dict[str, Any]]) -> List[RoleConfig]:
    """
    Validate the `[[roles]]` tables.

    Raises:
        ValidationError: If no role is defined, or a role is malformed or duplicated
    """
    if not roles_data:
        raise ValidationError("At least one [[roles]] entry must be configured", field_name="roles")

    roles: List[RoleConfig] = []
    seen: List[str] = []
    for i, role_data in enumerate(roles_data):
        if not isinstance(role_data, dict):
            raise ValidationError(f"roles[{i}] must be a table", field_name=f"roles[{i}]", value=role_data)

        name = validate_role_name(
            role_data.get("name", ""), existing_names=seen, field_name=f"roles[{i}].name"
        )
        pattern = validate_regex_pattern(
            role_data.get("pattern", ""), field_name=f"roles[{i}].pattern"
        )
        seen.append(name)
        roles.append(RoleConfig(name=name, pattern=pattern))

    logger.debug(f"Validated {len(roles)} roles: {seen}")
    return roles
