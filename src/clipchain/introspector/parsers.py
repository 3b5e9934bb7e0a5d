"""Pure parsing functions for ffprobe JSON output.

These functions transform ffprobe JSON data into MediaDescriptor objects.
All functions are pure (no I/O, no side effects) for easy testing.
"""

import logging
from fractions import Fraction
from pathlib import Path

from clipchain.exceptions import ProbeError
from clipchain.introspector.models import DEFAULT_FPS, MediaDescriptor

logger = logging.getLogger(__name__)

# ffprobe reports these when a color tag is present but carries no information
_UNSET_COLOR_VALUES = frozenset({"unknown", "unspecified", "reserved"})


def _log_validation_warning(
    message: str,
    field_name: str,
    file_path: str | None,
    *args: object,
) -> None:
    """Log a validation warning with optional file context."""
    context = f" in {file_path}" if file_path else ""
    logger.warning(f"{message}{context}", field_name, *args)


def validate_positive_int(
    value: object,
    field_name: str,
    file_path: str | None = None,
) -> int | None:
    """Validate that a value is a non-negative integer or None.

    ffprobe reports some integer fields as strings (bit_rate, sample_rate),
    so numeric strings are accepted as well.

    Args:
        value: Value to validate.
        field_name: Field name for warning messages.
        file_path: File path context for warnings.

    Returns:
        Validated value or None if invalid.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        _log_validation_warning(
            "Expected int for %s, got %s", field_name, file_path, type(value).__name__
        )
        return None
    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError:
            # "N/A" and friends
            return None
    if not isinstance(value, int):
        _log_validation_warning(
            "Expected int for %s, got %s", field_name, file_path, type(value).__name__
        )
        return None
    if value < 0:
        _log_validation_warning("Invalid negative %s: %d", field_name, file_path, value)
        return None
    return value


def parse_duration(value: object) -> float | None:
    """Parse duration string from ffprobe into seconds.

    Args:
        value: Duration string from ffprobe (e.g., "3600.000") or None.

    Returns:
        Duration in seconds as float, or None if missing, unparseable or
        negative.
    """
    if value is None:
        return None
    try:
        duration = float(value)
    except (ValueError, TypeError):
        return None
    if duration < 0:
        return None
    return duration


def parse_frame_rate(value: str | None) -> float | None:
    """Parse an ffprobe rational frame rate such as "30000/1001".

    Args:
        value: Frame rate string from ffprobe.

    Returns:
        Frame rate as float, or None for "0/0", malformed or non-positive
        values.
    """
    if not value:
        return None
    try:
        rate = Fraction(value.strip())
    except (ValueError, ZeroDivisionError):
        return None
    if rate <= 0:
        return None
    return float(rate)


def _clean_tag(value: object) -> str | None:
    """Return a stripped string tag, or None if empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _clean_color(value: object) -> str | None:
    """Return a color tag, treating ffprobe's placeholder values as absent."""
    text = _clean_tag(value)
    if text is None or text.casefold() in _UNSET_COLOR_VALUES:
        return None
    return text


def _known_rate(value: object, field_name: str, file_path: str) -> int | None:
    """Parse a rate or count; ffprobe reports 0 when it could not measure it."""
    rate = validate_positive_int(value, field_name, file_path)
    return rate or None


def _clean_level(value: object) -> str | None:
    """Return the level as a string; ffprobe uses negative values for unknown."""
    if value is None:
        return None
    if isinstance(value, int) and value <= 0:
        return None
    return _clean_tag(value)


def _first_stream(streams: list[dict], codec_type: str) -> dict | None:
    """Return the first stream of the given type, skipping cover art."""
    for stream in streams:
        if stream.get("codec_type") != codec_type:
            continue
        if codec_type == "video" and stream.get("disposition", {}).get(
            "attached_pic"
        ):
            continue
        return stream
    return None


def select_frame_rate(stream: dict) -> tuple[float, str | None]:
    """Pick the frame rate for a video stream.

    The average frame rate is preferred; the nominal rate (r_frame_rate) is
    the fallback.

    Args:
        stream: Video stream dictionary from ffprobe.

    Returns:
        Tuple of (fps, raw_fraction). raw_fraction is None when neither rate
        was usable, in which case fps is DEFAULT_FPS.
    """
    for key in ("avg_frame_rate", "r_frame_rate"):
        raw = stream.get(key)
        fps = parse_frame_rate(raw)
        if fps is not None:
            return fps, str(Fraction(raw.strip()))
    return DEFAULT_FPS, None


def parse_ffprobe_output(path: Path, data: dict) -> MediaDescriptor:
    """Parse ffprobe JSON output into a MediaDescriptor.

    Args:
        path: Path to the video file.
        data: Parsed ffprobe JSON output.

    Returns:
        MediaDescriptor for the first video stream and first audio stream.

    Raises:
        ProbeError: If there is no video stream with a usable resolution.
    """
    file_path = str(path)
    streams = data.get("streams") or []
    format_info = data.get("format") or {}

    video = _first_stream(streams, "video")
    if video is None:
        raise ProbeError(f"No video stream found in {path}")

    width = validate_positive_int(video.get("width"), "width", file_path)
    height = validate_positive_int(video.get("height"), "height", file_path)
    if not width or not height:
        raise ProbeError(f"Video stream in {path} has no usable resolution")

    fps, frame_rate = select_frame_rate(video)
    if frame_rate is None:
        logger.warning(
            "Could not parse frame rate for %s, assuming %s fps", path, DEFAULT_FPS
        )

    # Stream duration first, container duration as fallback
    duration = parse_duration(video.get("duration"))
    if duration is None:
        duration = parse_duration(format_info.get("duration"))

    fields: dict = {
        "path": path,
        "width": width,
        "height": height,
        "video_codec": _clean_tag(video.get("codec_name")),
        "pixel_format": _clean_tag(video.get("pix_fmt")),
        "fps": fps,
        "frame_rate": frame_rate,
        "video_bitrate": _known_rate(
            video.get("bit_rate"), "bit_rate", file_path
        ),
        "profile": _clean_tag(video.get("profile")),
        "level": _clean_level(video.get("level")),
        "color_primaries": _clean_color(video.get("color_primaries")),
        "color_transfer": _clean_color(video.get("color_transfer")),
        "color_space": _clean_color(video.get("color_space")),
        "duration_seconds": duration,
    }

    audio = _first_stream(streams, "audio")
    if audio is not None:
        fields.update(
            has_audio=True,
            audio_codec=_clean_tag(audio.get("codec_name")),
            audio_bitrate=_known_rate(
                audio.get("bit_rate"), "audio bit_rate", file_path
            ),
            audio_sample_rate=_known_rate(
                audio.get("sample_rate"), "sample_rate", file_path
            ),
            audio_channels=_known_rate(
                audio.get("channels"), "channels", file_path
            ),
        )

    return MediaDescriptor(**fields)
