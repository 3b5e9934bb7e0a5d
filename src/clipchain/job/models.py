"""Pydantic models and the resolved form of YAML job files."""

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from clipchain.config.models import AUDIO_BITRATE_PATTERN
from clipchain.planner.types import TransitionKind


class JobModel(BaseModel):
    """Pydantic model for a join job file.

    Example:
        inputs:
          - intro.mp4
          - main.mkv
        output: joined.mp4
        transition: dissolve
        transition_duration: 0.5
    """

    model_config = ConfigDict(extra="forbid")

    inputs: list[Path] | None = None
    folder: Path | None = None
    output: Path
    transition: str | None = None
    transition_duration: float | None = Field(default=None, gt=0)
    quality: int | None = Field(default=None, ge=0, le=51)
    audio_bitrate: str | None = None

    @field_validator("transition")
    @classmethod
    def validate_transition(cls, v: str | None) -> str | None:
        """Validate the transition against the xfade transitions."""
        if v is None:
            return v
        normalized = v.casefold()
        if normalized not in TransitionKind.choices():
            raise ValueError(
                f"unknown transition {v!r}, expected one of "
                f"{', '.join(TransitionKind.choices())}"
            )
        return normalized

    @field_validator("audio_bitrate", mode="before")
    @classmethod
    def validate_audio_bitrate(cls, v: object) -> object:
        """Accept bitrates like "192k" or a plain integer."""
        if v is None:
            return v
        if isinstance(v, int) and not isinstance(v, bool):
            v = str(v)
        if not isinstance(v, str) or not AUDIO_BITRATE_PATTERN.match(v):
            raise ValueError(f"audio_bitrate must look like '192k', got {v!r}")
        return v

    @model_validator(mode="after")
    def validate_sources(self) -> "JobModel":
        """Exactly one of inputs or folder must be given."""
        if self.inputs is None and self.folder is None:
            raise ValueError("one of 'inputs' or 'folder' is required")
        if self.inputs is not None and self.folder is not None:
            raise ValueError("'inputs' and 'folder' are mutually exclusive")
        if self.inputs is not None and len(self.inputs) < 2:
            raise ValueError("'inputs' must list at least two clips")
        return self


@dataclass(frozen=True)
class JoinJob:
    """A validated job with paths resolved against the job file directory."""

    output: Path
    inputs: tuple[Path, ...] = ()
    folder: Path | None = None
    transition: TransitionKind | None = None
    transition_duration: float | None = None
    quality: int | None = None
    audio_bitrate: str | None = None
