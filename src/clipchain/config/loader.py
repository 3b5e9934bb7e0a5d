"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (CLIPCHAIN_*)
3. Config file (~/.clipchain/config.toml)
4. Default values

Environment variables:
- CLIPCHAIN_FFMPEG_PATH: Path to ffmpeg executable
- CLIPCHAIN_FFPROBE_PATH: Path to ffprobe executable
- CLIPCHAIN_LOG_LEVEL: Log level (debug, info, warning, error)
- CLIPCHAIN_LOG_FILE: Log file path
- CLIPCHAIN_CONFIG_PATH: Path to config file (overrides default location)
"""

import logging
import tomllib
from pathlib import Path
from typing import Any

from clipchain.config.env import EnvReader
from clipchain.config.models import (
    ClipchainConfig,
    JoinDefaultsConfig,
    LoggingConfig,
    ToolPathsConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".clipchain"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"


def get_default_config_path(env: EnvReader | None = None) -> Path:
    """Get the config file path, honoring CLIPCHAIN_CONFIG_PATH."""
    env = env or EnvReader()
    return env.get_path(
        "CLIPCHAIN_CONFIG_PATH", must_exist=False, default=DEFAULT_CONFIG_FILE
    )


def load_config_file(path: Path) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Args:
        path: Path to config file.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist or
        cannot be parsed.
    """
    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        with path.open("rb") as f:
            config = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Failed to load config file %s: %s", path, e)
        return {}
    logger.debug("Loaded config from %s", path)
    return config


def _file_path(section: dict[str, Any], key: str) -> Path | None:
    value = section.get(key)
    return Path(value).expanduser() if value else None


def get_config(
    config_path: Path | None = None,
    env: EnvReader | None = None,
    # CLI overrides (highest precedence)
    ffmpeg_path: Path | None = None,
    ffprobe_path: Path | None = None,
    log_level: str | None = None,
    log_file: Path | None = None,
    log_json: bool = False,
) -> ClipchainConfig:
    """Get clipchain configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides CLIPCHAIN_CONFIG_PATH).
        env: Environment reader (os.environ if not given).
        ffmpeg_path: CLI override for ffmpeg path.
        ffprobe_path: CLI override for ffprobe path.
        log_level: CLI override for log level.
        log_file: CLI override for log file.
        log_json: CLI switch for JSON log output.

    Returns:
        ClipchainConfig with merged configuration.

    Raises:
        ValueError: If a merged value fails validation.
    """
    env = env or EnvReader()
    if config_path is None:
        config_path = get_default_config_path(env)
    file_config = load_config_file(config_path)

    tools_file = file_config.get("tools", {})
    tools = ToolPathsConfig(
        ffmpeg=(
            ffmpeg_path
            or env.get_path("CLIPCHAIN_FFMPEG_PATH")
            or _file_path(tools_file, "ffmpeg")
        ),
        ffprobe=(
            ffprobe_path
            or env.get_path("CLIPCHAIN_FFPROBE_PATH")
            or _file_path(tools_file, "ffprobe")
        ),
    )

    # Unknown keys in [join] are ignored rather than rejected
    join_file = file_config.get("join", {})
    join_defaults = JoinDefaultsConfig()
    join = JoinDefaultsConfig(
        transition=join_file.get("transition", join_defaults.transition),
        transition_duration=float(
            join_file.get("transition_duration", join_defaults.transition_duration)
        ),
        quality=int(join_file.get("quality", join_defaults.quality)),
        audio_bitrate=str(join_file.get("audio_bitrate", join_defaults.audio_bitrate)),
        audio_sample_rate=int(
            join_file.get("audio_sample_rate", join_defaults.audio_sample_rate)
        ),
        audio_channels=int(
            join_file.get("audio_channels", join_defaults.audio_channels)
        ),
        preset=str(join_file.get("preset", join_defaults.preset)),
    )

    logging_file = file_config.get("logging", {})
    logging_defaults = LoggingConfig()
    logging_config = LoggingConfig(
        level=(
            log_level
            or env.get_str("CLIPCHAIN_LOG_LEVEL")
            or logging_file.get("level", logging_defaults.level)
        ),
        file=(
            log_file
            or env.get_path("CLIPCHAIN_LOG_FILE", must_exist=False)
            or _file_path(logging_file, "file")
        ),
        format="json" if log_json else logging_file.get("format", "text"),
        include_stderr=bool(
            logging_file.get("include_stderr", logging_defaults.include_stderr)
        ),
        max_bytes=int(logging_file.get("max_bytes", logging_defaults.max_bytes)),
        backup_count=int(
            logging_file.get("backup_count", logging_defaults.backup_count)
        ),
    )

    return ClipchainConfig(tools=tools, join=join, logging=logging_config)
