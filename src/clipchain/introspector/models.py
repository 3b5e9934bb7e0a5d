"""Normalized media descriptor built from ffprobe output."""

from dataclasses import dataclass
from pathlib import Path

DEFAULT_FPS = 30.0
"""Frame rate assumed when the probe reports no usable rate."""


@dataclass(frozen=True)
class MediaDescriptor:
    """Probe result for one input clip.

    Optional fields are None when the probe did not report them. Consumers
    must handle the None case explicitly; unknown is never the same as zero.
    """

    path: Path
    width: int
    height: int
    video_codec: str | None = None
    pixel_format: str | None = None

    fps: float = DEFAULT_FPS
    """Frame rate as a float; DEFAULT_FPS when the rate was unparseable."""

    frame_rate: str | None = None
    """Reduced fraction reported by the probe (e.g. "30000/1001"), if known."""

    video_bitrate: int | None = None
    profile: str | None = None
    level: str | None = None
    color_primaries: str | None = None
    color_transfer: str | None = None
    color_space: str | None = None
    duration_seconds: float | None = None

    has_audio: bool = False
    audio_codec: str | None = None
    audio_bitrate: int | None = None
    audio_sample_rate: int | None = None
    audio_channels: int | None = None

    @property
    def is_10bit(self) -> bool:
        """True if the pixel format uses 10-bit sampling."""
        if not self.pixel_format:
            return False
        pix_fmt = self.pixel_format.casefold()
        return "10le" in pix_fmt or "10be" in pix_fmt or pix_fmt.startswith("p010")

    @property
    def frame_rate_known(self) -> bool:
        """True if the frame rate came from the probe rather than the default."""
        return self.frame_rate is not None

    @property
    def known_duration(self) -> float:
        """Duration in seconds, or 0.0 when unknown."""
        return self.duration_seconds if self.duration_seconds is not None else 0.0

    @property
    def resolution(self) -> str:
        """Resolution as WIDTHxHEIGHT."""
        return f"{self.width}x{self.height}"
