"""Transition offset planning.

ffmpeg's xfade takes the transition start as an offset into its first input.
When transitions are chained, that first input is the output of the previous
transition, so every offset is relative to the already-overlapped timeline.
"""

import logging
from collections.abc import Sequence

from clipchain.introspector.models import MediaDescriptor
from clipchain.planner.types import OffsetSegment, TransitionPlan

logger = logging.getLogger(__name__)

# Microsecond precision keeps long chains from drifting
OFFSET_PRECISION = 6


def _check_transition_duration(transition_duration: float) -> None:
    if transition_duration <= 0:
        raise ValueError(
            f"Transition duration must be > 0, got {transition_duration}"
        )


def plan_offsets(
    durations: Sequence[float], transition_duration: float
) -> TransitionPlan:
    """Compute the chain of transition offsets for N clips.

    Args:
        durations: Clip durations in seconds, in join order (>= 0).
        transition_duration: Length of every transition in seconds (> 0).

    Returns:
        TransitionPlan with len(durations) - 1 segments.

    Raises:
        ValueError: If fewer than two durations are given, a duration is
            negative, or the transition duration is not positive.
    """
    _check_transition_duration(transition_duration)
    if len(durations) < 2:
        raise ValueError(f"At least two clips are required, got {len(durations)}")
    if any(d < 0 for d in durations):
        raise ValueError(f"Clip durations must be >= 0, got {list(durations)}")

    segments: list[OffsetSegment] = []
    cumulative = float(durations[0])
    for i in range(len(durations) - 1):
        offset = max(0.0, cumulative - transition_duration)
        segments.append(
            OffsetSegment(
                offset_seconds=round(offset, OFFSET_PRECISION),
                duration_seconds=transition_duration,
            )
        )
        cumulative = cumulative + durations[i + 1] - transition_duration

    return TransitionPlan(tuple(segments))


def plan_frame_accurate_offset(
    duration: float, fps: float, transition_duration: float
) -> float:
    """Compute a two-clip transition offset that starts on a frame boundary.

    Args:
        duration: Duration of the first clip in seconds.
        fps: Output frame rate.
        transition_duration: Transition length in seconds.

    Returns:
        Offset in seconds, an exact multiple of 1/fps.
    """
    _check_transition_duration(transition_duration)
    if fps <= 0:
        raise ValueError(f"Frame rate must be > 0, got {fps}")

    frame_count = round(duration * fps)
    transition_frames = round(transition_duration * fps)
    offset_frames = max(0, frame_count - transition_frames)
    return offset_frames / fps


def known_durations(descriptors: Sequence[MediaDescriptor]) -> list[float]:
    """Return clip durations, substituting 0 for unknown ones.

    An unknown duration is not fatal: it is logged and the transition after
    that clip starts immediately at the clip boundary.
    """
    durations: list[float] = []
    for descriptor in descriptors:
        if descriptor.duration_seconds is None:
            logger.warning(
                "Duration unknown for %s, treating it as 0; the transition "
                "after this clip will start immediately",
                descriptor.path.name,
                extra={"condition": "DurationUnknown", "clip": str(descriptor.path)},
            )
        durations.append(descriptor.known_duration)
    return durations


def plan_transitions(
    descriptors: Sequence[MediaDescriptor], transition_duration: float
) -> TransitionPlan:
    """Plan transitions for a chain of probed clips.

    Two clips whose first clip reports a precise frame rate use the
    frame-quantized offset so video and audio transitions start together.
    Longer chains use the cumulative recurrence.

    Args:
        descriptors: Probed clips in join order.
        transition_duration: Transition length in seconds.

    Returns:
        TransitionPlan for the chain.
    """
    durations = known_durations(descriptors)
    first = descriptors[0] if descriptors else None

    if len(descriptors) == 2 and first is not None and first.frame_rate_known:
        offset = plan_frame_accurate_offset(
            durations[0], first.fps, transition_duration
        )
        plan = TransitionPlan(
            (
                OffsetSegment(
                    offset_seconds=round(offset, OFFSET_PRECISION),
                    duration_seconds=transition_duration,
                ),
            )
        )
    else:
        plan = plan_offsets(durations, transition_duration)

    logger.debug(
        "Planned %d transition(s)",
        len(plan),
        extra={"offsets": plan.offsets, "transition_duration": transition_duration},
    )
    return plan
