"""Media introspection: turn ffprobe output into MediaDescriptor objects."""

from clipchain.exceptions import ProbeError
from clipchain.introspector.ffprobe import FFprobeIntrospector
from clipchain.introspector.interface import MediaProbe
from clipchain.introspector.models import DEFAULT_FPS, MediaDescriptor
from clipchain.introspector.parsers import (
    parse_duration,
    parse_ffprobe_output,
    parse_frame_rate,
)

__all__ = [
    "DEFAULT_FPS",
    "FFprobeIntrospector",
    "MediaDescriptor",
    "MediaProbe",
    "ProbeError",
    "parse_duration",
    "parse_ffprobe_output",
    "parse_frame_rate",
]
