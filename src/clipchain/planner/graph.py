"""Filter graph model and builder.

The graph is an ordered list of typed nodes with named inputs and outputs.
It is only turned into ffmpeg's -filter_complex text at the engine boundary
(FilterGraph.to_filter_complex()).

Example (two clips, software decode):
    [0:v]scale=w=1920:h=1080[v0_scale];...;[v0][v1]xfade=transition=fade:
    duration=1:offset=9[video_out];[0:a]aresample=osr=48000[a0_rs];...
"""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from clipchain.introspector.models import MediaDescriptor
from clipchain.planner.types import DecodeMode, TransitionKind, TransitionPlan

logger = logging.getLogger(__name__)

VIDEO_OUT = "video_out"
AUDIO_OUT = "audio_out"

# Working (planar) formats used inside the graph
WORKING_FORMAT_8BIT = "yuv420p"
WORKING_FORMAT_10BIT = "yuv420p10le"

# Host formats for frames downloaded from device memory
HW_DOWNLOAD_FORMAT_8BIT = "nv12"
HW_DOWNLOAD_FORMAT_10BIT = "p010le"

HW_DOWNLOAD_OPERATOR = "hwdownload"

# Audio rate used when the first clip has audio but reports no sample rate
FALLBACK_SAMPLE_RATE = 48000

_CHANNEL_LAYOUTS = {1: "mono", 2: "stereo"}
_ENGINE_STREAM = re.compile(r"^\d+:[va]$")


def format_number(value: float) -> str:
    """Format a number for filter arguments (no trailing zeros).

    Examples:
        9.0 -> "9", 1.5 -> "1.5", 12.3456789 -> "12.345679"
    """
    text = f"{value:.6f}".rstrip("0").rstrip(".")
    return text if text not in ("", "-0") else "0"


@dataclass(frozen=True)
class FilterNode:
    """One filter operation producing one named stream.

    A node with no inputs is a source (e.g. generated silence).
    """

    inputs: tuple[str, ...]
    operator: str
    params: tuple[tuple[str, str], ...]
    output: str

    def to_text(self) -> str:
        """Serialize as [in1][in2]operator=k=v:k=v[out]."""
        labels = "".join(f"[{name}]" for name in self.inputs)
        expression = self.operator
        if self.params:
            expression += "=" + ":".join(f"{k}={v}" for k, v in self.params)
        return f"{labels}{expression}[{self.output}]"


@dataclass(frozen=True)
class FilterGraph:
    """Acyclic filter graph in topological order.

    Every stream name is introduced exactly once and referenced only after
    the node that produces it (or is an engine input stream such as "0:v").
    """

    nodes: tuple[FilterNode, ...]
    video_out: str = VIDEO_OUT
    audio_out: str | None = None

    def __post_init__(self) -> None:
        """Validate ordering and terminals."""
        produced: set[str] = set()
        for node in self.nodes:
            for name in node.inputs:
                if name not in produced and not _ENGINE_STREAM.match(name):
                    raise ValueError(
                        f"Node {node.operator}[{node.output}] consumes "
                        f"'{name}' before it is produced"
                    )
            if node.output in produced:
                raise ValueError(f"Stream name '{node.output}' produced twice")
            produced.add(node.output)
        if self.video_out not in produced:
            raise ValueError(f"Video terminal '{self.video_out}' is never produced")
        if self.audio_out is not None and self.audio_out not in produced:
            raise ValueError(f"Audio terminal '{self.audio_out}' is never produced")

    def to_filter_complex(self) -> str:
        """Serialize to ffmpeg -filter_complex text."""
        return ";".join(node.to_text() for node in self.nodes)

    def has_operator(self, operator: str) -> bool:
        """Check if any node uses the given operator."""
        return any(node.operator == operator for node in self.nodes)

    def nodes_with_operator(self, operator: str) -> list[FilterNode]:
        """Return all nodes that use the given operator."""
        return [node for node in self.nodes if node.operator == operator]


class _GraphWriter:
    """Accumulates nodes while building a graph."""

    def __init__(self) -> None:
        self.nodes: list[FilterNode] = []

    def add(
        self,
        inputs: Sequence[str],
        operator: str,
        output: str,
        **params: object,
    ) -> str:
        self.nodes.append(
            FilterNode(
                inputs=tuple(inputs),
                operator=operator,
                params=tuple((k, str(v)) for k, v in params.items()),
                output=output,
            )
        )
        return output


def working_pixel_format(first: MediaDescriptor) -> str:
    """Common pixel format all clips are converted to inside the graph."""
    return WORKING_FORMAT_10BIT if first.is_10bit else WORKING_FORMAT_8BIT


def _target_frame_rate(first: MediaDescriptor) -> str:
    """Frame rate for the fps filter, exact fraction when known."""
    if first.frame_rate is not None:
        return first.frame_rate
    return format_number(first.fps)


def _add_video_normalization(
    writer: _GraphWriter,
    index: int,
    clip: MediaDescriptor,
    first: MediaDescriptor,
    decode_mode: DecodeMode,
) -> str:
    """Resize, retime and convert one clip to the common format."""
    prefix = f"v{index}"
    current = f"{index}:v"

    if decode_mode is DecodeMode.HARDWARE:
        # Download format follows this clip's own bit depth
        host_format = (
            HW_DOWNLOAD_FORMAT_10BIT if clip.is_10bit else HW_DOWNLOAD_FORMAT_8BIT
        )
        current = writer.add([current], HW_DOWNLOAD_OPERATOR, f"{prefix}_dl")
        current = writer.add(
            [current], "format", f"{prefix}_host", pix_fmts=host_format
        )

    current = writer.add(
        [current], "scale", f"{prefix}_scale", w=first.width, h=first.height
    )
    current = writer.add([current], "setsar", f"{prefix}_sar", sar=1)
    current = writer.add(
        [current], "fps", f"{prefix}_fps", fps=_target_frame_rate(first)
    )
    current = writer.add(
        [current], "format", f"{prefix}_fmt", pix_fmts=working_pixel_format(first)
    )
    return writer.add([current], "setpts", prefix, expr="PTS-STARTPTS")


def _audio_layout(channels: int | None) -> str | None:
    """Explicit channel layout for mono/stereo; None leaves layout as-is."""
    if channels is None:
        return None
    return _CHANNEL_LAYOUTS.get(channels)


def _silence_layout(channels: int | None) -> str:
    """Channel layout for generated silence."""
    layout = _audio_layout(channels)
    if layout is not None:
        return layout
    if channels:
        return f"{channels}c"
    return "stereo"


def _add_audio_normalization(
    writer: _GraphWriter,
    index: int,
    clip: MediaDescriptor,
    sample_rate: int,
    channels: int | None,
) -> str:
    """Resample one clip's audio, or generate silence when it has none."""
    prefix = f"a{index}"

    if not clip.has_audio:
        return writer.add(
            [],
            "anullsrc",
            prefix,
            r=sample_rate,
            cl=_silence_layout(channels),
            d=format_number(clip.known_duration),
        )

    current = writer.add([f"{index}:a"], "aresample", f"{prefix}_rs", osr=sample_rate)
    layout = _audio_layout(channels)
    if layout is not None:
        current = writer.add(
            [current],
            "aformat",
            f"{prefix}_fmt",
            sample_rates=sample_rate,
            channel_layouts=layout,
        )
    return writer.add([current], "asetpts", prefix, expr="PTS-STARTPTS")


def build_filter_graph(
    descriptors: Sequence[MediaDescriptor],
    plan: TransitionPlan,
    decode_mode: DecodeMode,
    transition: TransitionKind,
    transition_duration: float,
    output_pixel_format: str | None = None,
) -> FilterGraph:
    """Build the filter graph for joining clips with transitions.

    This is a pure function: identical arguments yield an identical graph.

    Args:
        descriptors: Probed clips in join order (first clip sets the
            resolution, frame rate and audio format).
        plan: Transition offsets, one per clip boundary.
        decode_mode: HARDWARE inserts a device-to-host download per clip.
        transition: xfade transition to use at every boundary.
        transition_duration: Transition length in seconds.
        output_pixel_format: Pixel format the encoder expects. A final
            conversion node is added only when it differs from the working
            format.

    Returns:
        FilterGraph with video_out and, when the first clip has audio,
        audio_out terminals.

    Raises:
        ValueError: If the plan does not match the number of clips.
    """
    if len(descriptors) < 2:
        raise ValueError(f"At least two clips are required, got {len(descriptors)}")
    if len(plan) != len(descriptors) - 1:
        raise ValueError(
            f"Transition plan has {len(plan)} segments for {len(descriptors)} clips"
        )

    first = descriptors[0]
    writer = _GraphWriter()
    duration = format_number(transition_duration)

    # Video
    clips = [
        _add_video_normalization(writer, i, clip, first, decode_mode)
        for i, clip in enumerate(descriptors)
    ]
    working_format = working_pixel_format(first)
    needs_conversion = (
        output_pixel_format is not None and output_pixel_format != working_format
    )

    current = clips[0]
    for i, segment in enumerate(plan.segments, start=1):
        is_last = i == len(plan)
        output = VIDEO_OUT if is_last and not needs_conversion else f"xf{i}"
        current = writer.add(
            [current, clips[i]],
            "xfade",
            output,
            transition=transition.value,
            duration=duration,
            offset=format_number(segment.offset_seconds),
        )
    if needs_conversion:
        writer.add([current], "format", VIDEO_OUT, pix_fmts=output_pixel_format)

    # Audio (only when the first clip has audio)
    audio_out = None
    if first.has_audio:
        sample_rate = (
            first.audio_sample_rate
            if first.audio_sample_rate is not None
            else FALLBACK_SAMPLE_RATE
        )
        channels = first.audio_channels
        tracks = [
            _add_audio_normalization(writer, i, clip, sample_rate, channels)
            for i, clip in enumerate(descriptors)
        ]
        current = tracks[0]
        for i in range(1, len(tracks)):
            output = AUDIO_OUT if i == len(tracks) - 1 else f"ax{i}"
            current = writer.add(
                [current, tracks[i]], "acrossfade", output, d=duration
            )
        audio_out = AUDIO_OUT

    graph = FilterGraph(
        nodes=tuple(writer.nodes), video_out=VIDEO_OUT, audio_out=audio_out
    )
    logger.debug(
        "Built %s-decode filter graph with %d nodes",
        decode_mode.value,
        len(graph.nodes),
    )
    return graph
