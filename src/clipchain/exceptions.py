"""Custom exceptions for clipchain.

Each fatal condition of a join run has its own exception type so the CLI can
report which stage failed. Unknown clip durations are not represented here:
they are a warning condition that is logged and planned around.
"""


class ClipchainError(Exception):
    """Base class for clipchain errors."""

    stage: str = "run"


class ToolUnavailable(ClipchainError):
    """Raised when a required external binary (ffmpeg, ffprobe) is missing."""

    stage = "preflight"

    def __init__(self, tool_name: str, hint: str = "") -> None:
        self.tool_name = tool_name
        message = f"Required tool not available: {tool_name}."
        if hint:
            message = f"{message} {hint}"
        super().__init__(message)


class ProbeError(ClipchainError):
    """Raised when a file has no decodable video stream or probing failed."""

    stage = "probe"


class InsufficientInputs(ClipchainError):
    """Raised when fewer than two qualifying input clips are available."""

    stage = "discovery"

    def __init__(self, found: int, source: str | None = None) -> None:
        self.found = found
        self.source = source
        message = f"At least two input clips are required, found {found}"
        if source:
            message += f" in {source}"
        super().__init__(message)


class UnknownCodecMapping(ClipchainError):
    """Raised when a source codec has no entry in a fixed encoder table."""

    stage = "planning"

    def __init__(self, codec: str | None, kind: str = "audio") -> None:
        self.codec = codec
        self.kind = kind
        super().__init__(
            f"No {kind} encoder mapping for source codec {codec!r}; "
            "refusing to guess an output format"
        )


class EngineInvocationFailed(ClipchainError):
    """Raised when the final ffmpeg attempt exits with a non-zero status."""

    stage = "encode"

    def __init__(
        self, exit_code: int, attempt: str, stderr_tail: str | None = None
    ) -> None:
        self.exit_code = exit_code
        self.attempt = attempt
        self.stderr_tail = stderr_tail
        super().__init__(f"ffmpeg exited with code {exit_code} ({attempt} attempt)")
