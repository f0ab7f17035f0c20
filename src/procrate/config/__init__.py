"""
Configuration management for the procrate package.

This module provides loading, validation and cached access to the TOML
configuration file.
"""

from .manager import (
    clear_config_cache,
    get_config,
    get_config_info,
    is_config_loaded,
    load_config,
    set_config_path,
)

from .loader import (
    extract_roles,
    load_main_config,
    load_toml_file,
)
from .validators import (
    validate_monitor_config,
    validate_roles_config,
)

__all__ = [
    # Main interface
    "get_config",
    "load_config",
    "set_config_path",
    "clear_config_cache",
    "is_config_loaded",
    "get_config_info",
    # Advanced interface
    "load_toml_file",
    "load_main_config",
    "extract_roles",
    "validate_monitor_config",
    "validate_roles_config",
]
