"""CLI probe command: show what the planner sees for one clip."""

import json
from dataclasses import asdict
from pathlib import Path

import click

from clipchain.cli.exit_codes import exit_code_for
from clipchain.cli.output import error_exit
from clipchain.config import ClipchainConfig
from clipchain.exceptions import ClipchainError
from clipchain.introspector import FFprobeIntrospector, MediaDescriptor
from clipchain.tools import require_tool


def format_human(descriptor: MediaDescriptor) -> str:
    """Format a descriptor as aligned "field: value" lines."""
    fields = asdict(descriptor)
    width = max(len(name) for name in fields)
    lines = []
    for name, value in fields.items():
        shown = "unknown" if value is None else value
        lines.append(f"{name.ljust(width)}  {shown}")
    return "\n".join(lines)


def format_json(descriptor: MediaDescriptor) -> str:
    """Format a descriptor as JSON."""
    data = asdict(descriptor)
    data["path"] = str(descriptor.path)
    data["is_10bit"] = descriptor.is_10bit
    return json.dumps(data, indent=2)


@click.command("probe")
@click.argument("file", type=click.Path(path_type=Path, dir_okay=False))
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output results as JSON.",
)
@click.pass_context
def probe_command(ctx: click.Context, file: Path, json_output: bool) -> None:
    """Probe FILE and print the fields used for planning a join."""
    config: ClipchainConfig = ctx.obj["config"]
    try:
        ffprobe_path = require_tool("ffprobe", config.tools.ffprobe)
        descriptor = FFprobeIntrospector(ffprobe_path).get_file_info(file)
    except ClipchainError as e:
        error_exit(str(e), exit_code_for(e), json_output, stage=e.stage)

    if json_output:
        click.echo(format_json(descriptor))
    else:
        click.echo(format_human(descriptor))
