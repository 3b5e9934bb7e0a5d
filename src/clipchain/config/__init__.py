"""Configuration loading for clipchain."""

from clipchain.config.env import EnvReader
from clipchain.config.loader import (
    DEFAULT_CONFIG_FILE,
    get_config,
    get_default_config_path,
    load_config_file,
)
from clipchain.config.models import (
    ClipchainConfig,
    JoinDefaultsConfig,
    LoggingConfig,
    ToolPathsConfig,
)

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "ClipchainConfig",
    "EnvReader",
    "JoinDefaultsConfig",
    "LoggingConfig",
    "ToolPathsConfig",
    "get_config",
    "get_default_config_path",
    "load_config_file",
]
