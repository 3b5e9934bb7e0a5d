"""External tool lookup and ffmpeg capability enumeration.

This module locates ffmpeg/ffprobe and parses the lists ffmpeg prints for
hardware acceleration methods, encoders and decoders.
"""

import logging
import re
import shutil
import subprocess  # nosec B404 - subprocess is required for tool detection
from pathlib import Path

from clipchain.exceptions import ToolUnavailable
from clipchain.tools.models import FFmpegCapabilities

logger = logging.getLogger(__name__)

# Timeout for capability detection commands (seconds)
DETECTION_TIMEOUT = 10

_INSTALL_HINTS = {
    "ffmpeg": "Install ffmpeg or set CLIPCHAIN_FFMPEG_PATH.",
    "ffprobe": "Install ffmpeg (ships ffprobe) or set CLIPCHAIN_FFPROBE_PATH.",
}


def find_tool(name: str, configured_path: Path | None = None) -> Path | None:
    """Find a tool executable.

    Args:
        name: Tool name (e.g., "ffmpeg").
        configured_path: Optional configured path override.

    Returns:
        Path to tool executable, or None if not found.
    """
    # Try configured path first
    if configured_path:
        if configured_path.is_file():
            return configured_path
        logger.warning(
            "Configured path for %s is not a file: %s", name, configured_path
        )

    # Fall back to PATH lookup
    which_result = shutil.which(name)
    if which_result:
        return Path(which_result)

    return None


def require_tool(name: str, configured_path: Path | None = None) -> Path:
    """Get path to a required tool, raising an error if not available.

    Args:
        name: Name of the tool to find.
        configured_path: Optional configured path override.

    Returns:
        Path to the tool executable.

    Raises:
        ToolUnavailable: If the tool cannot be located.
    """
    path = find_tool(name, configured_path)
    if path is None:
        raise ToolUnavailable(name, _INSTALL_HINTS.get(name, ""))
    return path


def run_command(
    args: list[str], timeout: int = DETECTION_TIMEOUT
) -> tuple[str, str, int]:
    """Run a command and capture output.

    Args:
        args: Command and arguments.
        timeout: Timeout in seconds.

    Returns:
        Tuple of (stdout, stderr, returncode). returncode is -1 if the
        command could not be run.
    """
    try:
        result = subprocess.run(  # nosec B603 - args are tool paths and fixed flags
            args,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
        )
        return result.stdout, result.stderr, result.returncode
    except subprocess.TimeoutExpired:
        logger.warning("Command timed out: %s", " ".join(args))
        return "", "timeout", -1
    except OSError as e:
        logger.warning("Command failed: %s - %s", " ".join(args), e)
        return "", str(e), -1


def _parse_ffmpeg_list(output: str, pattern: str) -> set[str]:
    """Parse ffmpeg list output.

    Args:
        output: Command output.
        pattern: Regex pattern with a single capture group for the name.

    Returns:
        Set of names (lowercase).
    """
    compiled = re.compile(pattern)
    return {
        match.group(1).casefold()
        for line in output.split("\n")
        if (match := compiled.match(line))
    }


def _parse_codec_list(output: str) -> set[str]:
    """Parse ffmpeg -encoders or -decoders output."""
    # Format: " VFXSBD codec_name    Description..."
    names = _parse_ffmpeg_list(output, r"\s+[VASFXBDI.]{6}\s+(\S+)")
    # The legend block uses the same shape (" V..... = Video")
    names.discard("=")
    return names


def _parse_hwaccel_list(output: str) -> set[str]:
    """Parse ffmpeg -hwaccels output (a header line, then one name per line)."""
    names: set[str] = set()
    for line in output.splitlines():
        line = line.strip()
        if not line or line.endswith(":"):
            continue
        names.add(line.casefold())
    return names


def detect_ffmpeg_capabilities(
    ffmpeg_path: Path,
    runner=run_command,
) -> FFmpegCapabilities:
    """Enumerate hardware acceleration methods, encoders and decoders.

    Enumeration failures are logged and leave the corresponding set empty,
    which simply steers planning to the software path.

    Args:
        ffmpeg_path: Path to ffmpeg executable.
        runner: Command runner with the signature of run_command().

    Returns:
        FFmpegCapabilities with the advertised names.
    """
    caps = FFmpegCapabilities()

    stdout, stderr, rc = runner([str(ffmpeg_path), "-hide_banner", "-hwaccels"])
    if rc == 0:
        caps.hwaccels = _parse_hwaccel_list(stdout)
    else:
        logger.warning("Failed to enumerate ffmpeg hwaccels: %s", stderr)

    stdout, stderr, rc = runner([str(ffmpeg_path), "-hide_banner", "-encoders"])
    if rc == 0:
        caps.encoders = _parse_codec_list(stdout)
    else:
        logger.warning("Failed to enumerate ffmpeg encoders: %s", stderr)

    stdout, stderr, rc = runner([str(ffmpeg_path), "-hide_banner", "-decoders"])
    if rc == 0:
        caps.decoders = _parse_codec_list(stdout)
    else:
        logger.warning("Failed to enumerate ffmpeg decoders: %s", stderr)

    return caps
