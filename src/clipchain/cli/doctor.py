"""clipchain doctor command for checking external tool health."""

import json

import click

from clipchain.cli.exit_codes import ExitCode
from clipchain.config import ClipchainConfig
from clipchain.tools import CapabilityProbe, CapabilitySnapshot, find_tool


def _format_status(available: bool) -> str:
    """Format status for display."""
    return "✓" if available else "✗"


@click.command("doctor")
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output results as JSON",
)
@click.pass_context
def doctor_command(ctx: click.Context, json_output: bool) -> None:
    """Check ffmpeg/ffprobe availability and hardware acceleration support.

    Exit codes:
      0 - Both tools available
      30 - ffmpeg or ffprobe missing
    """
    config: ClipchainConfig = ctx.obj["config"]

    ffprobe_path = find_tool("ffprobe", config.tools.ffprobe)
    ffmpeg_path = find_tool("ffmpeg", config.tools.ffmpeg)

    snapshot: CapabilitySnapshot | None = None
    if ffmpeg_path is not None:
        snapshot = CapabilityProbe(ffmpeg_path).detect()

    missing = ffprobe_path is None or ffmpeg_path is None
    exit_code = ExitCode.TOOL_NOT_AVAILABLE if missing else ExitCode.SUCCESS

    if json_output:
        output = {
            "tools": {
                "ffprobe": str(ffprobe_path) if ffprobe_path else None,
                "ffmpeg": str(ffmpeg_path) if ffmpeg_path else None,
            },
            "capability": snapshot.to_dict() if snapshot else None,
            "decode_mode": _decode_mode(snapshot),
        }
        click.echo(json.dumps(output, indent=2))
        ctx.exit(exit_code)

    click.echo("clipchain Tool Health Check")
    click.echo("=" * 40)
    click.echo()

    for name, path in (("ffprobe", ffprobe_path), ("ffmpeg", ffmpeg_path)):
        status = _format_status(path is not None)
        click.echo(f"  {status} {name}: {path if path else 'not found'}")
        if path is None:
            click.echo("    └─ Install ffmpeg: https://ffmpeg.org/download.html")
    click.echo()

    if snapshot is not None:
        click.echo("Hardware acceleration:")
        click.echo("-" * 20)
        click.echo(f"  {_format_status(snapshot.has_cuda_hwaccel)} cuda hwaccel")
        click.echo(f"  {_format_status(snapshot.has_nvenc_encoder)} hevc_nvenc")
        click.echo(f"  {_format_status(snapshot.has_cuvid_decoder)} cuvid decoders")
        click.echo(f"  {_format_status(snapshot.driver_present)} NVIDIA driver")
        click.echo()

    click.echo(f"Joins will use {_decode_mode(snapshot)} decoding.")
    ctx.exit(exit_code)


def _decode_mode(snapshot: CapabilitySnapshot | None) -> str:
    if snapshot is not None and snapshot.use_hardware:
        return "hardware"
    return "software"
