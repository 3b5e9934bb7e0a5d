"""Value types shared by the planning functions."""

from dataclasses import dataclass
from enum import Enum


class DecodeMode(Enum):
    """Where input clips are decoded."""

    HARDWARE = "hardware"
    SOFTWARE = "software"


class TransitionKind(Enum):
    """Video transitions understood by ffmpeg's xfade filter."""

    FADE = "fade"
    DISSOLVE = "dissolve"
    FADEBLACK = "fadeblack"
    FADEWHITE = "fadewhite"
    FADEGRAYS = "fadegrays"
    WIPELEFT = "wipeleft"
    WIPERIGHT = "wiperight"
    WIPEUP = "wipeup"
    WIPEDOWN = "wipedown"
    SLIDELEFT = "slideleft"
    SLIDERIGHT = "slideright"
    SLIDEUP = "slideup"
    SLIDEDOWN = "slidedown"
    SMOOTHLEFT = "smoothleft"
    SMOOTHRIGHT = "smoothright"
    SMOOTHUP = "smoothup"
    SMOOTHDOWN = "smoothdown"
    CIRCLECROP = "circlecrop"
    RECTCROP = "rectcrop"
    CIRCLEOPEN = "circleopen"
    CIRCLECLOSE = "circleclose"
    VERTOPEN = "vertopen"
    VERTCLOSE = "vertclose"
    HORZOPEN = "horzopen"
    HORZCLOSE = "horzclose"
    DISTANCE = "distance"
    RADIAL = "radial"
    PIXELIZE = "pixelize"
    ZOOMIN = "zoomin"

    @classmethod
    def choices(cls) -> list[str]:
        """Return the transition names for CLI choices."""
        return [kind.value for kind in cls]


DEFAULT_TRANSITION = TransitionKind.FADE


@dataclass(frozen=True)
class OffsetSegment:
    """Start offset and length of one transition on the output timeline."""

    offset_seconds: float
    duration_seconds: float


@dataclass(frozen=True)
class TransitionPlan:
    """Ordered transitions for a chain of N clips (N-1 segments).

    Each offset is measured on the cumulative output timeline, i.e. after all
    earlier transitions have already overlapped their clips.
    """

    segments: tuple[OffsetSegment, ...]

    def __post_init__(self) -> None:
        """Validate offsets."""
        for segment in self.segments:
            if segment.offset_seconds < 0:
                raise ValueError(
                    f"Transition offset must be >= 0, got {segment.offset_seconds}"
                )

    def __len__(self) -> int:
        return len(self.segments)

    @property
    def offsets(self) -> list[float]:
        """Offsets of all transitions in order."""
        return [segment.offset_seconds for segment in self.segments]
