"""CLI join command: crossfade clips into one HEVC file."""

import logging
import uuid
from pathlib import Path

import click

from clipchain.cli.exit_codes import ExitCode, exit_code_for
from clipchain.cli.output import CLIResult, error_exit, success_output
from clipchain.config import ClipchainConfig
from clipchain.exceptions import ClipchainError
from clipchain.executor import TranscodeOrchestrator
from clipchain.introspector import FFprobeIntrospector, MediaDescriptor, MediaProbe
from clipchain.job import JoinJob, load_job
from clipchain.logging import run_context, stage_context
from clipchain.planner import EncodeDefaults, TransitionKind
from clipchain.scanner import discover_clips
from clipchain.tools import CapabilityProbe, require_tool

logger = logging.getLogger(__name__)


def _resolve_inputs(
    inputs: tuple[Path, ...],
    folder: Path | None,
    job: JoinJob | None,
    output: Path,
) -> list[Path]:
    """Pick the input clips from exactly one source."""
    sources = [bool(inputs), folder is not None]
    if not any(sources) and job is not None:
        inputs = job.inputs
        folder = job.folder
        sources = [bool(inputs), folder is not None]
    if sum(sources) != 1:
        raise click.UsageError(
            "Give either input clips, --folder, or a job file with one of them."
        )

    if folder is not None:
        with stage_context("discovery"):
            return discover_clips(folder, output_path=output)

    if len(inputs) < 2:
        raise click.UsageError("At least two input clips are required.")
    return list(inputs)


def _check_output(output: Path, clips: list[Path]) -> None:
    resolved = output.resolve()
    for clip in clips:
        if clip.resolve() == resolved:
            raise click.BadParameter(
                f"Output would overwrite input clip {clip}", param_hint="'-o'"
            )


def _build_defaults(
    config: ClipchainConfig, quality: int | None, audio_bitrate: str | None
) -> EncodeDefaults:
    join = config.join
    return EncodeDefaults(
        quality=quality if quality is not None else join.quality,
        audio_bitrate=audio_bitrate or join.audio_bitrate,
        audio_sample_rate=join.audio_sample_rate,
        audio_channels=join.audio_channels,
        preset=join.preset,
    )


def _probe_clips(probe: MediaProbe, clips: list[Path]) -> list[MediaDescriptor]:
    descriptors = []
    for clip in clips:
        descriptor = probe.get_file_info(clip)
        logger.info(
            "Probed %s: %s %s, %s fps",
            clip.name,
            descriptor.video_codec or "unknown",
            descriptor.resolution,
            descriptor.frame_rate or "unknown",
            extra={
                "clip": str(clip),
                "duration_seconds": descriptor.duration_seconds,
                "has_audio": descriptor.has_audio,
            },
        )
        descriptors.append(descriptor)
    return descriptors


@click.command("join")
@click.argument(
    "inputs", nargs=-1, type=click.Path(path_type=Path, dir_okay=False)
)
@click.option(
    "--folder",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Join every video file in this folder, in name order.",
)
@click.option(
    "--job",
    "job_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="YAML job file. Command-line options override its values.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Output file (required unless the job file sets it).",
)
@click.option(
    "--transition",
    type=click.Choice(TransitionKind.choices(), case_sensitive=False),
    default=None,
    help="xfade transition (default: fade).",
)
@click.option(
    "--duration",
    "transition_duration",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Transition duration in seconds (default: 1.0).",
)
@click.option(
    "--quality",
    type=click.IntRange(0, 51),
    default=None,
    help="CRF/CQ used when the first clip has no known bitrate (default: 23).",
)
@click.option(
    "--audio-bitrate",
    default=None,
    help="Audio bitrate used when the first clip reports none (default: 192k).",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Print the ffmpeg command without running it.",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output results as JSON.",
)
@click.pass_context
def join_command(
    ctx: click.Context,
    inputs: tuple[Path, ...],
    folder: Path | None,
    job_path: Path | None,
    output: Path | None,
    transition: str | None,
    transition_duration: float | None,
    quality: int | None,
    audio_bitrate: str | None,
    dry_run: bool,
    json_output: bool,
) -> None:
    """Join clips with crossfade transitions into one HEVC file.

    Inputs come from INPUTS, from --folder, or from a --job file. Encoder
    settings are derived from the first clip.

    \b
    Examples:
      clipchain join intro.mp4 main.mp4 -o joined.mp4
      clipchain join --folder ./clips -o joined.mkv --transition dissolve
      clipchain join --job job.yaml --dry-run
    """
    config: ClipchainConfig = ctx.obj["config"]
    run_id = uuid.uuid4().hex[:8]

    try:
        with run_context(run_id, "setup"):
            job = load_job(job_path) if job_path is not None else None

            output = output or (job.output if job else None)
            if output is None:
                raise click.UsageError("Missing option '-o' / '--output'.")

            clips = _resolve_inputs(inputs, folder, job, output)
            _check_output(output, clips)

            kind = (
                TransitionKind(transition.casefold())
                if transition
                else (job.transition if job and job.transition else None)
            ) or config.join.transition
            duration = (
                transition_duration
                or (job.transition_duration if job else None)
                or config.join.transition_duration
            )
            if quality is None and job is not None:
                quality = job.quality
            if audio_bitrate is None and job is not None:
                audio_bitrate = job.audio_bitrate

            with stage_context("preflight"):
                ffprobe_path = require_tool("ffprobe", config.tools.ffprobe)
                ffmpeg_path = require_tool("ffmpeg", config.tools.ffmpeg)

            with stage_context("probe"):
                descriptors = _probe_clips(FFprobeIntrospector(ffprobe_path), clips)

            with stage_context("capability"):
                capability = CapabilityProbe(ffmpeg_path).detect()

            orchestrator = TranscodeOrchestrator(
                capability,
                ffmpeg_path,
                defaults=_build_defaults(config, quality, audio_bitrate),
                transition=kind,
                transition_duration=duration,
            )

            if dry_run:
                with stage_context("planning"):
                    attempt = orchestrator.dry_run(descriptors, output)
                data = attempt.to_dict()
                data["clips"] = [str(c) for c in clips]
                data["capability"] = capability.to_dict()
                success_output(
                    CLIResult(
                        success=True,
                        message=" ".join(attempt.command),
                        data=data,
                    ),
                    json_output,
                )
                return

            with stage_context("encode"):
                result = orchestrator.run(descriptors, output)
    except ClipchainError as e:
        error_exit(str(e), exit_code_for(e), json_output, stage=e.stage)
    except KeyboardInterrupt:
        error_exit("Interrupted", ExitCode.INTERRUPTED, json_output)

    message = f"Joined {len(clips)} clips into {result.output_path}"
    if result.used_fallback:
        message += " (after retrying with software decode)"
    success_output(
        CLIResult(
            success=True,
            message=message,
            data={
                "run_id": run_id,
                "output": str(result.output_path),
                "clips": [str(c) for c in clips],
                "decode_mode": result.decode_mode.value,
                "video_encoder": result.video_encoder,
                "attempts": result.attempts,
                "states": [s.value for s in result.states],
            },
        ),
        json_output,
    )
