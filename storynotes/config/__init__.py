"""Configuration module."""

from .settings import (
    AppConfig,
    RepositoryConfiguration,
    RepositoryRef,
    Settings,
    SAMPLE_CONFIG,
    create_sample_config,
    find_config_file,
    get_app_config,
    get_settings,
    load_toml_config,
)

__all__ = [
    "AppConfig",
    "RepositoryConfiguration",
    "RepositoryRef",
    "Settings",
    "SAMPLE_CONFIG",
    "create_sample_config",
    "find_config_file",
    "get_app_config",
    "get_settings",
    "load_toml_config",
]
