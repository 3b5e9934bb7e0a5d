"""Input clip discovery for folder mode."""

from clipchain.scanner.discovery import VIDEO_EXTENSIONS, discover_clips, is_video_file

__all__ = ["VIDEO_EXTENSIONS", "discover_clips", "is_video_file"]
