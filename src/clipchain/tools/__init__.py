"""External tool lookup and capability detection."""

from clipchain.tools.capability import (
    CUVID_DECODERS,
    CapabilityProbe,
    get_hw_decoder,
)
from clipchain.tools.detection import (
    detect_ffmpeg_capabilities,
    find_tool,
    require_tool,
    run_command,
)
from clipchain.tools.ffmpeg_progress import FFmpegProgress, parse_stderr_progress
from clipchain.tools.models import CapabilitySnapshot, FFmpegCapabilities

__all__ = [
    "CUVID_DECODERS",
    "CapabilityProbe",
    "CapabilitySnapshot",
    "FFmpegCapabilities",
    "FFmpegProgress",
    "detect_ffmpeg_capabilities",
    "find_tool",
    "get_hw_decoder",
    "parse_stderr_progress",
    "require_tool",
    "run_command",
]
