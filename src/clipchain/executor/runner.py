"""Blocking ffmpeg invocation.

The engine runs to completion with no timeout; a hung ffmpeg blocks the
join until an outside supervisor kills it.
"""

import logging
import subprocess  # nosec B404 - subprocess is required for FFmpeg invocation
from collections import deque
from collections.abc import Callable, Sequence
from typing import Protocol

from clipchain.executor.types import EngineResult
from clipchain.tools.ffmpeg_progress import FFmpegProgress, parse_stderr_progress

logger = logging.getLogger(__name__)


class EngineRunner(Protocol):
    """Anything that can run an ffmpeg command and report its exit status."""

    def run(
        self,
        cmd: Sequence[str],
        description: str,
        total_duration: float | None = None,
    ) -> EngineResult:
        """Run the command and block until it exits."""
        ...


class FFmpegRunner:
    """Runs ffmpeg as a subprocess, streaming stderr for progress."""

    STDERR_TAIL_LINES = 10
    PROGRESS_LOG_STEP = 10.0  # Log every 10 percent

    def __init__(
        self,
        progress_callback: Callable[[FFmpegProgress], None] | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            progress_callback: Optional callback for progress updates.
        """
        self.progress_callback = progress_callback

    def run(
        self,
        cmd: Sequence[str],
        description: str,
        total_duration: float | None = None,
    ) -> EngineResult:
        """Run an ffmpeg command.

        Args:
            cmd: FFmpeg command arguments.
            description: Description for logging (e.g., "hardware attempt").
            total_duration: Expected output duration, for progress percent.

        Returns:
            EngineResult with the exit code and the last stderr lines.
        """
        logger.info(
            "Executing FFmpeg: %s",
            " ".join(cmd),
            extra={"command_type": description},
        )
        process = subprocess.Popen(  # nosec B603
            list(cmd),
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )

        tail: deque[str] = deque(maxlen=self.STDERR_TAIL_LINES)
        next_log = self.PROGRESS_LOG_STEP
        assert process.stderr is not None
        with process.stderr:
            for line in process.stderr:
                tail.append(line.rstrip())
                progress = parse_stderr_progress(line)
                if progress is None:
                    continue
                if self.progress_callback:
                    try:
                        self.progress_callback(progress)
                    except Exception as e:
                        logger.warning("Progress callback error: %s", e)
                percent = progress.get_percent(total_duration)
                if percent >= next_log:
                    logger.info("%s: %.0f%%", description, percent)
                    next_log = (percent // self.PROGRESS_LOG_STEP + 1) * (
                        self.PROGRESS_LOG_STEP
                    )

        returncode = process.wait()
        return EngineResult(returncode=returncode, stderr_tail="\n".join(tail))
