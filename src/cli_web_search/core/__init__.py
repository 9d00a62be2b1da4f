"""Core modules for cli-web-search.

This package contains the configuration models and loaders and the logging
utilities shared by the search, fetch, CLI and MCP layers.
"""

from .config import (
    PROVIDER_NAMES,
    CacheConfig,
    DefaultsConfig,
    LoggingConfig,
    ProvidersConfig,
    RetryPolicyConfig,
    SearchConfig,
    apply_env_overrides,
    cache_dir,
    config_dir,
    config_path,
    get_config_value,
    init_config,
    load_config,
    mask_api_key,
    save_config,
    set_config_value,
)
from .logger import get_logger, setup_logging, verbosity_to_level

__all__ = [
    "PROVIDER_NAMES",
    "CacheConfig",
    "DefaultsConfig",
    "LoggingConfig",
    "ProvidersConfig",
    "RetryPolicyConfig",
    "SearchConfig",
    "apply_env_overrides",
    "cache_dir",
    "config_dir",
    "config_path",
    "get_config_value",
    "get_logger",
    "init_config",
    "load_config",
    "mask_api_key",
    "save_config",
    "set_config_value",
    "setup_logging",
    "verbosity_to_level",
]
