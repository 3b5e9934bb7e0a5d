"""Folder-mode clip discovery.

Clips are the video files directly inside a folder, joined in name order.
"""

import logging
from pathlib import Path

from clipchain.exceptions import InsufficientInputs

logger = logging.getLogger(__name__)

VIDEO_EXTENSIONS = frozenset(
    {
        "mp4",
        "mkv",
        "mov",
        "m4v",
        "avi",
        "webm",
        "ts",
        "mts",
        "m2ts",
        "wmv",
        "flv",
        "mpg",
        "mpeg",
    }
)


def is_video_file(path: Path) -> bool:
    """True for non-hidden regular files with a known video extension."""
    if path.name.startswith("."):
        return False
    if path.suffix[1:].casefold() not in VIDEO_EXTENSIONS:
        return False
    return path.is_file()


def _same_file(a: Path, b: Path) -> bool:
    try:
        return a.resolve() == b.resolve()
    except OSError:
        return False


def discover_clips(folder: Path, output_path: Path | None = None) -> list[Path]:
    """List the clips to join from a folder.

    The folder is not searched recursively. Files are ordered by name,
    case-insensitively, with exact name as tie-breaker.

    Args:
        folder: Directory to scan.
        output_path: Output file, excluded from the inputs if it lives in
            the folder (e.g. from a previous run).

    Returns:
        Ordered clip paths (at least two).

    Raises:
        InsufficientInputs: If the folder is missing or holds fewer than
            two clips.
    """
    if not folder.is_dir():
        raise InsufficientInputs(0, source=str(folder))

    clips = []
    for path in folder.iterdir():
        if not is_video_file(path):
            continue
        if output_path is not None and _same_file(path, output_path):
            logger.debug("Skipping output file %s", path.name)
            continue
        clips.append(path)

    clips.sort(key=lambda p: (p.name.casefold(), p.name))
    logger.info(
        "Discovered %d clips in %s",
        len(clips),
        folder,
        extra={"clips": [p.name for p in clips]},
    )

    if len(clips) < 2:
        raise InsufficientInputs(len(clips), source=str(folder))
    return clips
