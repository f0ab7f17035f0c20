"""
Command-line interface for the procrate process CPU-rate monitor.

This module parses command-line arguments, loads and validates the
configuration, installs signal handlers and runs the monitor until it is
interrupted.
"""

import argparse
import dataclasses
import logging
import signal
import sys
import tomllib
from pathlib import Path
from typing import List, Optional

from ..config import get_config, set_config_path
from ..config.validators import OUTPUT_FORMATS
from ..validation import ValidationError, handle_cli_error, validate_positive_float
from .orchestrator import MonitorRunner

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="procrate",
        description="Sample long-lived processes by role and publish CPU-rate snapshots.",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to config.toml (defaults to conf/config.toml in the project root).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=OUTPUT_FORMATS,
        help="Override the output format from the config.",
    )
    parser.add_argument(
        "--sampling-interval",
        type=float,
        help="Override monitor.collection.sampling_interval_seconds.",
    )
    parser.add_argument(
        "--report-interval",
        type=float,
        help="Override monitor.reporting.report_interval_seconds.",
    )
    parser.add_argument(
        "--duration",
        type=float,
        help="Stop after this many seconds instead of running until interrupted.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (logs go to stderr).",
    )
    return parser


def _apply_overrides(monitor_config, args: argparse.Namespace):
    """Return a copy of the monitor config with CLI overrides applied."""
    overrides = {}
    if args.format:
        overrides["output_format"] = args.format
    if args.sampling_interval is not None:
        overrides["sampling_interval_seconds"] = validate_positive_float(
            args.sampling_interval, min_value=0.01, field_name="--sampling-interval"
        )
    if args.report_interval is not None:
        overrides["report_interval_seconds"] = validate_positive_float(
            args.report_interval, min_value=0.01, field_name="--report-interval"
        )
    updated = dataclasses.replace(monitor_config, **overrides)
    if updated.report_interval_seconds < updated.sampling_interval_seconds:
        raise ValidationError(
            "report interval must be >= sampling interval "
            f"({updated.report_interval_seconds} < {updated.sampling_interval_seconds})",
            field_name="--report-interval",
            value=updated.report_interval_seconds,
        )
    return updated


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line entry point.

    Raises:
        SystemExit: On configuration or argument validation errors.
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    if args.config:
        set_config_path(args.config)

    try:
        app_config = get_config()
        app_config = dataclasses.replace(
            app_config, monitor=_apply_overrides(app_config.monitor, args)
        )
    except (FileNotFoundError, KeyError, tomllib.TOMLDecodeError, ValidationError) as e:
        handle_cli_error(error=e, context="configuration loading", exit_code=1, logger=logger)

    runner = MonitorRunner(app_config)

    def shutdown_handler(signum, frame):
        if runner.shutdown_requested.is_set():
            logger.warning("Shutdown already in progress. Please be patient.")
            return
        logger.info(f"Signal {signal.strsignal(signum)} received. Initiating graceful shutdown...")
        runner.request_shutdown()

    original_sigint = signal.signal(signal.SIGINT, shutdown_handler)
    original_sigterm = signal.signal(signal.SIGTERM, shutdown_handler)
    try:
        runner.run(duration=args.duration)
    finally:
        signal.signal(signal.SIGINT, original_sigint)
        signal.signal(signal.SIGTERM, original_sigterm)

    logger.info("procrate exited")


if __name__ == "__main__":
    main_cli()
