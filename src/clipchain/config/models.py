"""Configuration data models.

This module defines dataclasses for clipchain configuration options.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path

from clipchain.planner.types import DEFAULT_TRANSITION, TransitionKind

AUDIO_BITRATE_PATTERN = re.compile(r"^\d+[kKmM]?$")


@dataclass
class ToolPathsConfig:
    """Configuration for external tool paths.

    All paths are optional. If not specified, tools are looked up in PATH.
    """

    ffmpeg: Path | None = None
    ffprobe: Path | None = None


@dataclass
class JoinDefaultsConfig:
    """Defaults applied to every join unless overridden."""

    transition: TransitionKind = DEFAULT_TRANSITION
    transition_duration: float = 1.0

    # Constant quality used when the first clip reports no bitrate
    quality: int = 23

    audio_bitrate: str = "192k"
    audio_sample_rate: int = 48000
    audio_channels: int = 2

    # libx265 preset
    preset: str = "medium"

    def __post_init__(self) -> None:
        """Validate configuration."""
        if isinstance(self.transition, str):
            try:
                self.transition = TransitionKind(self.transition.casefold())
            except ValueError:
                raise ValueError(
                    f"transition must be one of {TransitionKind.choices()}, "
                    f"got {self.transition}"
                ) from None
        if self.transition_duration <= 0:
            raise ValueError(
                "transition_duration must be greater than 0, "
                f"got {self.transition_duration}"
            )
        if not 0 <= self.quality <= 51:
            raise ValueError(f"quality must be between 0 and 51, got {self.quality}")
        if not AUDIO_BITRATE_PATTERN.match(self.audio_bitrate):
            raise ValueError(
                f"audio_bitrate must look like '192k', got {self.audio_bitrate}"
            )
        if self.audio_sample_rate <= 0:
            raise ValueError(
                f"audio_sample_rate must be positive, got {self.audio_sample_rate}"
            )
        if self.audio_channels <= 0:
            raise ValueError(
                f"audio_channels must be positive, got {self.audio_channels}"
            )


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )
        if self.max_bytes <= 0:
            raise ValueError(f"max_bytes must be positive, got {self.max_bytes}")
        if self.backup_count < 0:
            raise ValueError(
                f"backup_count must be non-negative, got {self.backup_count}"
            )


@dataclass
class ClipchainConfig:
    """Main configuration container."""

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    join: JoinDefaultsConfig = field(default_factory=JoinDefaultsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
