"""Encoder argument planning.

The output codec is always HEVC. Parameters that can be carried over from
the first clip (bitrate, profile/level, pixel depth, color tags, audio
format) are, each independently; anything absent is left to configured
defaults or omitted.
"""

import logging
import re
from dataclasses import dataclass, replace
from pathlib import Path

from clipchain.exceptions import UnknownCodecMapping
from clipchain.introspector.models import MediaDescriptor
from clipchain.planner.graph import WORKING_FORMAT_8BIT, WORKING_FORMAT_10BIT
from clipchain.planner.types import DecodeMode
from clipchain.tools.models import CapabilitySnapshot

logger = logging.getLogger(__name__)

TARGET_VIDEO_CODEC = "hevc"

HARDWARE_ENCODER = "hevc_nvenc"
SOFTWARE_ENCODER = "libx265"

# (target codec, use hardware) -> ffmpeg encoder
VIDEO_ENCODERS: dict[tuple[str, bool], str] = {
    (TARGET_VIDEO_CODEC, True): HARDWARE_ENCODER,
    (TARGET_VIDEO_CODEC, False): SOFTWARE_ENCODER,
}

# Source audio codec (ffprobe codec_name) -> ffmpeg encoder
AUDIO_ENCODERS: dict[str, str] = {
    "aac": "aac",
    "mp3": "libmp3lame",
    "opus": "libopus",
    "vorbis": "libvorbis",
    "ac3": "ac3",
    "eac3": "eac3",
    "flac": "flac",
}

# Packed 10-bit layout accepted by NVENC
HW_PIXEL_FORMAT_10BIT = "p010le"

# Profiles libx265 accepts
HEVC_PROFILES = frozenset(
    {
        "main",
        "main10",
        "main12",
        "mainstillpicture",
        "main422-10",
        "main422-12",
        "main444-8",
        "main444-10",
        "main444-12",
    }
)

# Containers that benefit from moving the index to the front
FASTSTART_EXTENSIONS = frozenset({".mp4", ".m4v", ".mov"})

_LEVEL_NM = re.compile(r"^(\d)(\d)$")
# HEVC general_level_idc as reported by ffprobe: 30 times the level
_LEVEL_IDC = re.compile(r"^\d{3}$")
_LEVEL_VALID = re.compile(r"^\d(\.\d)?$")


@dataclass(frozen=True)
class EncodeDefaults:
    """Values substituted when the first clip does not report them."""

    quality: int = 23
    audio_bitrate: str = "192k"
    audio_sample_rate: int = 48000
    audio_channels: int = 2
    preset: str = "medium"


@dataclass(frozen=True)
class EncodePlan:
    """Encoder selection and arguments for one engine attempt."""

    video_encoder: str
    video_args: tuple[tuple[str, str], ...]
    audio_encoder: str | None = None
    audio_args: tuple[tuple[str, str], ...] = ()
    container_flags: tuple[tuple[str, str], ...] = ()
    pixel_format: str = WORKING_FORMAT_8BIT

    @property
    def uses_hardware_encoder(self) -> bool:
        """True if the video encoder runs on the GPU."""
        return self.video_encoder == HARDWARE_ENCODER

    def with_video_encoder(self, encoder: str) -> "EncodePlan":
        """Return a copy with only the video encoder replaced."""
        return replace(self, video_encoder=encoder)

    def video_arg(self, flag: str) -> str | None:
        """Look up the value of a video argument."""
        for key, value in self.video_args:
            if key == flag:
                return value
        return None

    def to_args(self) -> list[str]:
        """Flatten into ffmpeg output arguments."""
        args = ["-c:v", self.video_encoder]
        for key, value in self.video_args:
            args.extend([key, value])
        if self.audio_encoder is None:
            args.append("-an")
        else:
            args.extend(["-c:a", self.audio_encoder])
            for key, value in self.audio_args:
                args.extend([key, value])
        for key, value in self.container_flags:
            args.extend([key, value])
        return args


def normalize_profile(profile: str | None) -> str | None:
    """Normalize a profile name: whitespace removed, case folded.

    "Main 10" -> "main10"
    """
    if profile is None:
        return None
    normalized = "".join(profile.split()).casefold()
    return normalized or None


def _level_from_idc(level_idc: int) -> str | None:
    if level_idc % 3:
        return None
    major, minor = divmod(level_idc // 3, 10)
    return str(major) if minor == 0 else f"{major}.{minor}"


def normalize_level(level: str | None) -> str | None:
    """Normalize a level string.

    Two-digit numeric levels are reformatted as N.M ("41" -> "4.1").
    Three-digit HEVC level_idc values are divided by 30 ("150" -> "5",
    "153" -> "5.1"). "4.1" and "5" pass through. Anything else is unusable
    and yields None.
    """
    if level is None:
        return None
    normalized = "".join(level.split()).casefold()
    match = _LEVEL_NM.match(normalized)
    if match:
        return f"{match.group(1)}.{match.group(2)}"
    if _LEVEL_IDC.match(normalized):
        return _level_from_idc(int(normalized))
    if _LEVEL_VALID.match(normalized):
        return normalized
    return None


def select_video_encoder(use_hardware: bool) -> str:
    """Look up the HEVC encoder for hardware or software encoding."""
    return VIDEO_ENCODERS[(TARGET_VIDEO_CODEC, use_hardware)]


def select_fallback_encoder(capability: CapabilitySnapshot) -> str:
    """Encoder for the software-decode retry.

    The hardware encoder is kept when the snapshot found one (decode-only
    fallback); otherwise encoding falls back to software as well.
    """
    return select_video_encoder(capability.has_nvenc_encoder)


def get_audio_encoder(codec: str | None) -> str:
    """Look up the encoder for a source audio codec.

    Raises:
        UnknownCodecMapping: If the codec is not in AUDIO_ENCODERS.
    """
    if codec is None or codec.casefold() not in AUDIO_ENCODERS:
        raise UnknownCodecMapping(codec, kind="audio")
    return AUDIO_ENCODERS[codec.casefold()]


def output_pixel_format(first: MediaDescriptor, hardware_encoder: bool) -> str:
    """Encoder pixel format for the first clip's bit depth."""
    if first.is_10bit:
        return HW_PIXEL_FORMAT_10BIT if hardware_encoder else WORKING_FORMAT_10BIT
    return WORKING_FORMAT_8BIT


def _build_video_args(
    first: MediaDescriptor,
    hardware_encoder: bool,
    pixel_format: str,
    defaults: EncodeDefaults,
) -> list[tuple[str, str]]:
    args: list[tuple[str, str]] = []

    if first.video_bitrate is not None:
        bitrate = first.video_bitrate
        args.append(("-b:v", str(bitrate)))
        args.append(("-maxrate", str(bitrate)))
        # VBV buffer at twice the target rate
        args.append(("-bufsize", str(bitrate * 2)))
    else:
        quality_flag = "-cq" if hardware_encoder else "-crf"
        args.append((quality_flag, str(defaults.quality)))

    if not hardware_encoder:
        args.append(("-preset", defaults.preset))
        profile = normalize_profile(first.profile)
        if profile in HEVC_PROFILES:
            args.append(("-profile:v", profile))
        elif profile is not None:
            logger.debug("Source profile %r is not an HEVC profile, omitting", profile)
        level = normalize_level(first.level)
        if level is not None:
            args.append(("-level:v", level))
        elif first.level is not None:
            logger.debug("Source level %r is not usable, omitting", first.level)

    args.append(("-pix_fmt", pixel_format))

    # Color tags verbatim, never defaulted
    for flag, value in (
        ("-color_primaries", first.color_primaries),
        ("-color_trc", first.color_transfer),
        ("-colorspace", first.color_space),
    ):
        if value is not None:
            args.append((flag, value))

    return args


def _build_audio_args(
    first: MediaDescriptor, defaults: EncodeDefaults
) -> list[tuple[str, str]]:
    bitrate = (
        str(first.audio_bitrate)
        if first.audio_bitrate is not None
        else defaults.audio_bitrate
    )
    sample_rate = (
        first.audio_sample_rate
        if first.audio_sample_rate is not None
        else defaults.audio_sample_rate
    )
    channels = (
        first.audio_channels
        if first.audio_channels is not None
        else defaults.audio_channels
    )
    return [
        ("-b:a", bitrate),
        ("-ar", str(sample_rate)),
        ("-ac", str(channels)),
    ]


def plan_encode(
    first: MediaDescriptor,
    capability: CapabilitySnapshot,
    decode_mode: DecodeMode,
    defaults: EncodeDefaults,
    output_path: Path,
) -> EncodePlan:
    """Derive encoder arguments from the first clip.

    Args:
        first: Descriptor of the first clip.
        capability: Detected hardware support.
        decode_mode: Decode path of this attempt; the hardware encoder is
            only selected alongside hardware decode.
        defaults: Values used when the clip does not report them.
        output_path: Output file (its extension selects container flags).

    Returns:
        EncodePlan for the attempt.

    Raises:
        UnknownCodecMapping: If the first clip's audio codec has no encoder
            mapping.
    """
    hardware_encoder = (
        decode_mode is DecodeMode.HARDWARE and capability.has_nvenc_encoder
    )
    video_encoder = select_video_encoder(hardware_encoder)
    pixel_format = output_pixel_format(first, hardware_encoder)

    audio_encoder = None
    audio_args: list[tuple[str, str]] = []
    if first.has_audio:
        audio_encoder = get_audio_encoder(first.audio_codec)
        audio_args = _build_audio_args(first, defaults)

    container_flags: tuple[tuple[str, str], ...] = ()
    if output_path.suffix.casefold() in FASTSTART_EXTENSIONS:
        container_flags = (("-movflags", "+faststart"),)

    plan = EncodePlan(
        video_encoder=video_encoder,
        video_args=tuple(
            _build_video_args(first, hardware_encoder, pixel_format, defaults)
        ),
        audio_encoder=audio_encoder,
        audio_args=tuple(audio_args),
        container_flags=container_flags,
        pixel_format=pixel_format,
    )
    logger.debug(
        "Planned encode with %s",
        video_encoder,
        extra={"video_args": plan.video_args, "audio_encoder": audio_encoder},
    )
    return plan
