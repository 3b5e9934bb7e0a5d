"""FFprobe-based implementation of the MediaProbe protocol."""

import json
import logging
import subprocess  # nosec B404 - subprocess is required for ffprobe invocation
from pathlib import Path

from clipchain.exceptions import ProbeError
from clipchain.introspector.models import MediaDescriptor
from clipchain.introspector.parsers import parse_ffprobe_output

logger = logging.getLogger(__name__)

# Prevent hangs on corrupted files
FFPROBE_TIMEOUT = 60


class FFprobeIntrospector:
    """ffprobe-based implementation of MediaProbe.

    Extracts the first video and audio stream of a clip using ffprobe.
    """

    def __init__(self, ffprobe_path: Path) -> None:
        """Initialize the introspector.

        Args:
            ffprobe_path: Path to the ffprobe executable. Resolve it with
                clipchain.tools.require_tool() so a missing binary is
                reported before any file is probed.
        """
        self._ffprobe_path = ffprobe_path

    def get_file_info(self, path: Path) -> MediaDescriptor:
        """Extract a MediaDescriptor from a video file.

        Args:
            path: Path to the video file.

        Returns:
            MediaDescriptor for the file.

        Raises:
            ProbeError: If the file cannot be probed or has no video stream.
        """
        if not path.exists():
            raise ProbeError(f"File not found: {path}")

        try:
            ffprobe_output = self._run_ffprobe(path)
        except subprocess.TimeoutExpired as e:
            raise ProbeError(
                f"ffprobe timed out for {path} after {e.timeout}s"
            ) from e
        except subprocess.CalledProcessError as e:
            raise ProbeError(f"ffprobe failed for {path}: {e.stderr or e}") from e
        except json.JSONDecodeError as e:
            raise ProbeError(f"Invalid ffprobe output for {path}: {e}") from e
        except OSError as e:
            raise ProbeError(f"Could not run ffprobe for {path}: {e}") from e

        descriptor = parse_ffprobe_output(path, ffprobe_output)
        logger.debug(
            "Probed %s",
            path.name,
            extra={
                "resolution": descriptor.resolution,
                "fps": descriptor.fps,
                "pixel_format": descriptor.pixel_format,
                "video_codec": descriptor.video_codec,
                "has_audio": descriptor.has_audio,
                "duration_seconds": descriptor.duration_seconds,
            },
        )
        return descriptor

    def _run_ffprobe(self, path: Path) -> dict:
        """Run ffprobe and return parsed JSON output.

        Args:
            path: Path to the video file.

        Returns:
            Parsed JSON output from ffprobe.

        Raises:
            subprocess.CalledProcessError: If ffprobe returns non-zero.
            json.JSONDecodeError: If output is not valid JSON.
            ProbeError: If output contains no stream data.
        """
        result = subprocess.run(  # nosec B603 - ffprobe path is validated
            [
                str(self._ffprobe_path),
                "-v",
                "error",
                "-print_format",
                "json",
                "-show_streams",
                "-show_format",
                str(path),
            ],
            capture_output=True,
            text=True,
            errors="replace",  # Handle non-UTF8 characters by replacing them
            check=True,
            timeout=FFPROBE_TIMEOUT,
        )
        data = json.loads(result.stdout or "{}")

        if not data.get("streams"):
            raise ProbeError(
                f"ffprobe produced no stream data for {path}. "
                "File may be corrupted or not a valid media file."
            )

        return data
