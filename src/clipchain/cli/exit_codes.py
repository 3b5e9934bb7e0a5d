"""Centralized exit codes for all CLI commands.

Exit code ranges:
    0: Success
    1-9: General errors
    10-19: Validation errors (job file, config)
    20-29: Input errors
    30-39: Tool/dependency errors
    40-49: Planning and encode errors
"""

from enum import IntEnum

from clipchain.exceptions import (
    ClipchainError,
    EngineInvocationFailed,
    InsufficientInputs,
    ProbeError,
    ToolUnavailable,
    UnknownCodecMapping,
)
from clipchain.job import JobValidationError


class ExitCode(IntEnum):
    """Exit codes for clipchain CLI commands."""

    SUCCESS = 0

    GENERAL_ERROR = 1
    INTERRUPTED = 2

    JOB_VALIDATION_ERROR = 10
    CONFIG_ERROR = 11

    INSUFFICIENT_INPUTS = 20
    PROBE_ERROR = 21

    TOOL_NOT_AVAILABLE = 30

    UNKNOWN_CODEC_MAPPING = 40
    ENCODE_FAILED = 41


_ERROR_EXIT_CODES: dict[type[ClipchainError], ExitCode] = {
    JobValidationError: ExitCode.JOB_VALIDATION_ERROR,
    InsufficientInputs: ExitCode.INSUFFICIENT_INPUTS,
    ProbeError: ExitCode.PROBE_ERROR,
    ToolUnavailable: ExitCode.TOOL_NOT_AVAILABLE,
    UnknownCodecMapping: ExitCode.UNKNOWN_CODEC_MAPPING,
    EngineInvocationFailed: ExitCode.ENCODE_FAILED,
}


def exit_code_for(error: ClipchainError) -> ExitCode:
    """Map an error to its exit code (GENERAL_ERROR if unmapped)."""
    for error_type, code in _ERROR_EXIT_CODES.items():
        if isinstance(error, error_type):
            return code
    return ExitCode.GENERAL_ERROR
