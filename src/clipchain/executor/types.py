"""Data types used by the transcode orchestrator."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from clipchain.planner.encode import EncodePlan
from clipchain.planner.graph import FilterGraph
from clipchain.planner.types import DecodeMode


class OrchestratorState(Enum):
    """States of a join run."""

    PLANNED = "planned"
    ATTEMPT_HARDWARE = "attempt_hardware"
    ATTEMPT_SOFTWARE = "attempt_software"
    ATTEMPT_SOFTWARE_FALLBACK = "attempt_software_fallback"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class EngineResult:
    """Outcome of one ffmpeg invocation."""

    returncode: int
    stderr_tail: str = ""

    @property
    def success(self) -> bool:
        """True if ffmpeg exited with status 0."""
        return self.returncode == 0


@dataclass(frozen=True)
class AttemptPlan:
    """Everything needed to run one engine attempt."""

    decode_mode: DecodeMode
    graph: FilterGraph
    encode_plan: EncodePlan
    command: tuple[str, ...]

    def to_dict(self) -> dict:
        """Return a JSON-serializable description (for --dry-run)."""
        return {
            "decode_mode": self.decode_mode.value,
            "video_encoder": self.encode_plan.video_encoder,
            "audio_encoder": self.encode_plan.audio_encoder,
            "filter_complex": self.graph.to_filter_complex(),
            "command": list(self.command),
        }


@dataclass
class TranscodeResult:
    """Result of a successful join run."""

    output_path: Path
    decode_mode: DecodeMode
    video_encoder: str
    attempts: int
    states: list[OrchestratorState] = field(default_factory=list)

    @property
    def used_fallback(self) -> bool:
        """True if the software-decode retry produced the output."""
        return OrchestratorState.ATTEMPT_SOFTWARE_FALLBACK in self.states
