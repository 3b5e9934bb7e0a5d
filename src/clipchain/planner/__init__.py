"""Transition plan compiler: offsets, filter graphs and encoder arguments."""

from clipchain.planner.encode import (
    AUDIO_ENCODERS,
    VIDEO_ENCODERS,
    EncodeDefaults,
    EncodePlan,
    get_audio_encoder,
    normalize_level,
    normalize_profile,
    plan_encode,
    select_fallback_encoder,
)
from clipchain.planner.graph import (
    AUDIO_OUT,
    HW_DOWNLOAD_OPERATOR,
    VIDEO_OUT,
    FilterGraph,
    FilterNode,
    build_filter_graph,
)
from clipchain.planner.offsets import (
    plan_frame_accurate_offset,
    plan_offsets,
    plan_transitions,
)
from clipchain.planner.types import (
    DEFAULT_TRANSITION,
    DecodeMode,
    OffsetSegment,
    TransitionKind,
    TransitionPlan,
)

__all__ = [
    "AUDIO_ENCODERS",
    "AUDIO_OUT",
    "DEFAULT_TRANSITION",
    "HW_DOWNLOAD_OPERATOR",
    "VIDEO_ENCODERS",
    "VIDEO_OUT",
    "DecodeMode",
    "EncodeDefaults",
    "EncodePlan",
    "FilterGraph",
    "FilterNode",
    "OffsetSegment",
    "TransitionKind",
    "TransitionPlan",
    "build_filter_graph",
    "get_audio_encoder",
    "normalize_level",
    "normalize_profile",
    "plan_encode",
    "plan_frame_accurate_offset",
    "plan_offsets",
    "plan_transitions",
    "select_fallback_encoder",
]
