"""Unified CLI output formatting for JSON and human-readable output."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from typing import Any, NoReturn

import click

from clipchain.cli.exit_codes import ExitCode


@dataclass
class CLIResult:
    """Result object for CLI operations."""

    success: bool
    message: str
    data: dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> str:
        """Serialize to a JSON string with status, message and data."""
        output: dict[str, Any] = {
            "status": "completed" if self.success else "failed",
            "message": self.message,
        }
        output.update(self.data)
        return json.dumps(output, indent=2, default=str)


def error_exit(
    message: str,
    code: ExitCode | int,
    json_output: bool = False,
    stage: str | None = None,
) -> NoReturn:
    """Print an error and exit.

    Args:
        message: Error message to display.
        code: Exit code to use (ExitCode enum or int).
        json_output: Whether to format output as JSON.
        stage: Stage of the run that failed, if known.
    """
    if isinstance(code, ExitCode):
        code_name = code.name
        exit_value = int(code)
    else:
        code_name = "UNKNOWN_ERROR"
        exit_value = code

    if json_output:
        error: dict[str, Any] = {"code": code_name, "message": message}
        if stage:
            error["stage"] = stage
        click.echo(json.dumps({"status": "failed", "error": error}), err=True)
    elif stage:
        click.echo(f"Error ({stage}): {message}", err=True)
    else:
        click.echo(f"Error: {message}", err=True)

    sys.exit(exit_value)


def success_output(result: CLIResult, json_output: bool = False) -> None:
    """Output a successful result in the requested format."""
    if json_output:
        click.echo(result.to_json())
    else:
        click.echo(result.message)
