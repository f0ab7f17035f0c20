"""
Configuration management and caching.

The configuration file is read and validated once; later calls to
`get_config()` return the cached AppConfig.
"""

import logging
from pathlib import Path
from typing import Optional

from ..models.config import AppConfig
from ..validation import handle_config_error, ErrorSeverity
from .loader import extract_roles, load_main_config
from .validators import validate_monitor_config, validate_roles_config

logger = logging.getLogger(__name__)

_CONFIG: Optional[AppConfig] = None

# Default path to the main configuration file; overridden by the CLI's
# --config option and by tests.
_CONFIG_FILE_PATH = Path(__file__).parent.parent.parent.parent / "conf" / "config.toml"


def set_config_path(config_path: Path) -> None:
    """
    Set a custom configuration file path and drop any cached configuration.

    Args:
        config_path: Path to the main config.toml file
    """
    global _CONFIG_FILE_PATH, _CONFIG
    _CONFIG_FILE_PATH = Path(config_path)
    _CONFIG = None
    logger.info(f"Configuration path set to: {config_path}")


def clear_config_cache() -> None:
    """Clear the cached configuration, forcing a reload on next access."""
    global _CONFIG
    _CONFIG = None
    logger.debug("Configuration cache cleared")


def load_config(config_path: Path) -> AppConfig:
    """
    Load and validate the configuration file at `config_path`.

    Raises:
        FileNotFoundError: If the configuration file is missing
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
        KeyError: If the roles section has the wrong shape
    """
    try:
        main_config_data = load_main_config(config_path)
        monitor_config = validate_monitor_config(main_config_data.get("monitor", {}))
        roles_config = validate_roles_config(extract_roles(main_config_data))
    except FileNotFoundError as e:
        handle_config_error(
            error=e,
            context="loading configuration file",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise
    except Exception as e:
        handle_config_error(
            error=e,
            context="processing configuration",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise

    logger.info(f"Successfully loaded configuration with {len(roles_config)} roles")
    return AppConfig(monitor=monitor_config, roles=roles_config)


def get_config() -> AppConfig:
    """
    Get the application configuration, loading it on first access.

    Raises:
        FileNotFoundError: If the configuration file is missing
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = load_config(_CONFIG_FILE_PATH)
    return _CONFIG


def is_config_loaded() -> bool:
    return _CONFIG is not None


def get_config_info() -> dict:
    """Describe the current configuration state."""
    return {
        "config_loaded": is_config_loaded(),
        "config_path": str(_CONFIG_FILE_PATH),
        "roles_count": len(_CONFIG.roles) if _CONFIG else 0,
    }
