"""Join orchestration with one-shot hardware to software fallback.

State machine:

    PLANNED -> ATTEMPT_HARDWARE -> SUCCEEDED
                                -> ATTEMPT_SOFTWARE_FALLBACK -> SUCCEEDED | FAILED
    PLANNED -> ATTEMPT_SOFTWARE -> SUCCEEDED | FAILED

There is exactly one retry, and only after a failed hardware decode
attempt. Both attempts come from the same plan_attempt() call with a different
decode mode, so they can only differ where the decode path requires it.
"""

import logging
import time
from collections.abc import Sequence
from pathlib import Path

from clipchain.exceptions import EngineInvocationFailed
from clipchain.executor.command import build_ffmpeg_command
from clipchain.executor.runner import EngineRunner, FFmpegRunner
from clipchain.executor.types import (
    AttemptPlan,
    OrchestratorState,
    TranscodeResult,
)
from clipchain.introspector.models import MediaDescriptor
from clipchain.planner.encode import (
    EncodeDefaults,
    EncodePlan,
    plan_encode,
    select_fallback_encoder,
)
from clipchain.planner.graph import build_filter_graph
from clipchain.planner.offsets import plan_transitions
from clipchain.planner.types import (
    DEFAULT_TRANSITION,
    DecodeMode,
    TransitionKind,
    TransitionPlan,
)
from clipchain.tools.models import CapabilitySnapshot

logger = logging.getLogger(__name__)


class TranscodeOrchestrator:
    """Plans and runs a join, retrying once in software decode mode."""

    def __init__(
        self,
        capability: CapabilitySnapshot,
        ffmpeg_path: Path,
        runner: EngineRunner | None = None,
        defaults: EncodeDefaults | None = None,
        transition: TransitionKind = DEFAULT_TRANSITION,
        transition_duration: float = 1.0,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            capability: Hardware support detected for this run.
            ffmpeg_path: Path to ffmpeg.
            runner: Engine runner (FFmpegRunner if not given).
            defaults: Encoder defaults for values the first clip lacks.
            transition: xfade transition used at every boundary.
            transition_duration: Transition length in seconds.
        """
        if transition_duration <= 0:
            raise ValueError(
                f"Transition duration must be > 0, got {transition_duration}"
            )
        self.capability = capability
        self.ffmpeg_path = ffmpeg_path
        self.runner = runner if runner is not None else FFmpegRunner()
        self.defaults = defaults or EncodeDefaults()
        self.transition = transition
        self.transition_duration = transition_duration

    @property
    def initial_decode_mode(self) -> DecodeMode:
        """Decode mode of the first attempt."""
        if self.capability.use_hardware:
            return DecodeMode.HARDWARE
        return DecodeMode.SOFTWARE

    def plan_attempt(
        self,
        descriptors: Sequence[MediaDescriptor],
        transitions: TransitionPlan,
        output_path: Path,
        decode_mode: DecodeMode,
        encode_plan: EncodePlan | None = None,
    ) -> AttemptPlan:
        """Build the graph, encode plan and command for one attempt.

        Args:
            descriptors: Probed clips in join order.
            transitions: Transition offsets shared by all attempts.
            output_path: Output file.
            decode_mode: Decode path for this attempt.
            encode_plan: Encode plan to reuse; planned from the first clip
                when not given.

        Returns:
            AttemptPlan for the attempt.

        Raises:
            UnknownCodecMapping: If the audio codec cannot be mapped.
        """
        if encode_plan is None:
            encode_plan = plan_encode(
                descriptors[0],
                self.capability,
                decode_mode,
                self.defaults,
                output_path,
            )
        graph = build_filter_graph(
            descriptors,
            transitions,
            decode_mode,
            self.transition,
            self.transition_duration,
            output_pixel_format=encode_plan.pixel_format,
        )
        command = build_ffmpeg_command(
            self.ffmpeg_path,
            descriptors,
            graph,
            encode_plan,
            output_path,
            decode_mode,
            decoders=self.capability.decoders,
        )
        return AttemptPlan(
            decode_mode=decode_mode,
            graph=graph,
            encode_plan=encode_plan,
            command=tuple(command),
        )

    def plan_fallback(
        self,
        descriptors: Sequence[MediaDescriptor],
        transitions: TransitionPlan,
        output_path: Path,
        first_attempt: AttemptPlan,
    ) -> AttemptPlan:
        """Plan the software-decode retry after a failed hardware attempt.

        Only the video encoder of the first attempt's encode plan may change.
        """
        encode_plan = first_attempt.encode_plan.with_video_encoder(
            select_fallback_encoder(self.capability)
        )
        return self.plan_attempt(
            descriptors,
            transitions,
            output_path,
            DecodeMode.SOFTWARE,
            encode_plan=encode_plan,
        )

    def dry_run(
        self, descriptors: Sequence[MediaDescriptor], output_path: Path
    ) -> AttemptPlan:
        """Plan the first attempt without invoking the engine."""
        transitions = plan_transitions(descriptors, self.transition_duration)
        return self.plan_attempt(
            descriptors, transitions, output_path, self.initial_decode_mode
        )

    def _expected_duration(self, descriptors: Sequence[MediaDescriptor]) -> float:
        total = sum(d.known_duration for d in descriptors)
        return max(0.0, total - self.transition_duration * (len(descriptors) - 1))

    def run(
        self, descriptors: Sequence[MediaDescriptor], output_path: Path
    ) -> TranscodeResult:
        """Join the clips into output_path.

        Args:
            descriptors: Probed clips in join order (at least two).
            output_path: Output file, overwritten by every attempt.

        Returns:
            TranscodeResult describing the successful attempt.

        Raises:
            UnknownCodecMapping: Planning failed; ffmpeg was not invoked.
            EngineInvocationFailed: The final attempt exited non-zero.
        """
        states = [OrchestratorState.PLANNED]
        start_time = time.monotonic()

        # All planning happens before the first invocation
        transitions = plan_transitions(descriptors, self.transition_duration)
        decode_mode = self.initial_decode_mode
        attempt = self.plan_attempt(descriptors, transitions, output_path, decode_mode)
        total_duration = self._expected_duration(descriptors)

        output_path.parent.mkdir(parents=True, exist_ok=True)

        logger.info(
            "Starting join: %d clips -> %s",
            len(descriptors),
            output_path.name,
            extra={
                "output_path": str(output_path),
                "decode_mode": decode_mode.value,
                "video_encoder": attempt.encode_plan.video_encoder,
                "transition": self.transition.value,
                "transition_duration": self.transition_duration,
                "offsets": transitions.offsets,
            },
        )

        if decode_mode is DecodeMode.HARDWARE:
            states.append(OrchestratorState.ATTEMPT_HARDWARE)
            result = self.runner.run(
                attempt.command, "hardware attempt", total_duration
            )
            if result.success:
                return self._succeeded(output_path, attempt, states, 1, start_time)

            logger.warning(
                "Hardware attempt failed with exit code %d, retrying with "
                "software decode",
                result.returncode,
                extra={"exit_code": result.returncode, "stderr": result.stderr_tail},
            )
            states.append(OrchestratorState.ATTEMPT_SOFTWARE_FALLBACK)
            attempt = self.plan_fallback(descriptors, transitions, output_path, attempt)
            result = self.runner.run(
                attempt.command, "software fallback attempt", total_duration
            )
            if result.success:
                return self._succeeded(output_path, attempt, states, 2, start_time)
            attempt_name = "software fallback"
        else:
            states.append(OrchestratorState.ATTEMPT_SOFTWARE)
            result = self.runner.run(
                attempt.command, "software attempt", total_duration
            )
            if result.success:
                return self._succeeded(output_path, attempt, states, 1, start_time)
            attempt_name = "software"

        states.append(OrchestratorState.FAILED)
        logger.error(
            "FFmpeg failed: %s",
            result.stderr_tail,
            extra={
                "exit_code": result.returncode,
                "states": [s.value for s in states],
            },
        )
        raise EngineInvocationFailed(
            result.returncode, attempt_name, stderr_tail=result.stderr_tail
        )

    def _succeeded(
        self,
        output_path: Path,
        attempt: AttemptPlan,
        states: list[OrchestratorState],
        attempts: int,
        start_time: float,
    ) -> TranscodeResult:
        states.append(OrchestratorState.SUCCEEDED)
        elapsed = time.monotonic() - start_time
        logger.info(
            "Join completed: %s",
            output_path.name,
            extra={
                "output_path": str(output_path),
                "attempts": attempts,
                "decode_mode": attempt.decode_mode.value,
                "video_encoder": attempt.encode_plan.video_encoder,
                "elapsed_seconds": round(elapsed, 3),
            },
        )
        return TranscodeResult(
            output_path=output_path,
            decode_mode=attempt.decode_mode,
            video_encoder=attempt.encode_plan.video_encoder,
            attempts=attempts,
            states=states,
        )
