"""FFmpeg command building for joins.

Turns a filter graph and an encode plan into the engine's argument list.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from clipchain.introspector.models import MediaDescriptor
from clipchain.planner.encode import EncodePlan
from clipchain.planner.graph import FilterGraph
from clipchain.planner.types import DecodeMode
from clipchain.tools.capability import CUDA_HWACCEL, get_hw_decoder

logger = logging.getLogger(__name__)


def build_input_args(
    descriptor: MediaDescriptor,
    decode_mode: DecodeMode,
    decoders: frozenset[str],
) -> list[str]:
    """Build the arguments for one input file.

    In hardware mode frames stay in device memory, and a hardware decoder
    selector is added when ffmpeg advertises one for the clip's codec.

    Args:
        descriptor: Probed input clip.
        decode_mode: Decode path of this attempt.
        decoders: Decoder names advertised by ffmpeg.

    Returns:
        List of arguments ending with -i <path>.
    """
    args: list[str] = []
    if decode_mode is DecodeMode.HARDWARE:
        args.extend(["-hwaccel", CUDA_HWACCEL, "-hwaccel_output_format", CUDA_HWACCEL])
        decoder = get_hw_decoder(descriptor.video_codec, decoders)
        if decoder:
            args.extend(["-c:v", decoder])
        else:
            logger.debug(
                "No hardware decoder advertised for %s (%s)",
                descriptor.path.name,
                descriptor.video_codec,
            )
    args.extend(["-i", str(descriptor.path)])
    return args


def build_ffmpeg_command(
    ffmpeg_path: Path,
    descriptors: Sequence[MediaDescriptor],
    graph: FilterGraph,
    encode_plan: EncodePlan,
    output_path: Path,
    decode_mode: DecodeMode,
    decoders: frozenset[str] = frozenset(),
) -> list[str]:
    """Build the ffmpeg command for one join attempt.

    Args:
        ffmpeg_path: Path to ffmpeg.
        descriptors: Probed clips in join order.
        graph: Filter graph for this attempt.
        encode_plan: Encoder selection and arguments.
        output_path: Output file (overwritten).
        decode_mode: Decode path of this attempt.
        decoders: Decoder names advertised by ffmpeg.

    Returns:
        List of command arguments.
    """
    cmd = [str(ffmpeg_path), "-y", "-hide_banner"]

    for descriptor in descriptors:
        cmd.extend(build_input_args(descriptor, decode_mode, decoders))

    cmd.extend(["-filter_complex", graph.to_filter_complex()])

    # Explicit mapping of the graph terminals
    cmd.extend(["-map", f"[{graph.video_out}]"])
    if graph.audio_out is not None:
        cmd.extend(["-map", f"[{graph.audio_out}]"])

    cmd.extend(encode_plan.to_args())

    # Progress output to stderr
    cmd.extend(["-stats_period", "1"])

    cmd.append(str(output_path))
    return cmd
