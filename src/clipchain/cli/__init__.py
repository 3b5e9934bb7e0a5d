"""CLI module for clipchain."""

import logging
from pathlib import Path

import click

from clipchain.cli.exit_codes import ExitCode
from clipchain.config import get_config
from clipchain.logging import configure_logging

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(package_name="clipchain")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Config file (default: ~/.clipchain/config.toml).",
)
@click.pass_context
def main(
    ctx: click.Context,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
    config_path: Path | None,
) -> None:
    """clipchain - Join video clips with crossfade transitions into HEVC."""
    ctx.ensure_object(dict)

    # Preserve a config injected by tests
    if "config" not in ctx.obj:
        try:
            ctx.obj["config"] = get_config(
                config_path=config_path,
                log_level=log_level,
                log_file=log_file,
                log_json=log_json,
            )
        except ValueError as e:
            click.echo(f"Error: Invalid configuration: {e}", err=True)
            ctx.exit(ExitCode.CONFIG_ERROR)

    configure_logging(ctx.obj["config"].logging)


def _register_commands() -> None:
    from clipchain.cli.doctor import doctor_command
    from clipchain.cli.join import join_command
    from clipchain.cli.probe import probe_command

    main.add_command(join_command)
    main.add_command(doctor_command)
    main.add_command(probe_command)


_register_commands()
