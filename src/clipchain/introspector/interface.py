"""MediaProbe interface for clip metadata extraction."""

from pathlib import Path
from typing import Protocol

from clipchain.introspector.models import MediaDescriptor


class MediaProbe(Protocol):
    """Protocol for media probe implementations.

    The join command probes clips through this interface.
    """

    def get_file_info(self, path: Path) -> MediaDescriptor:
        """Extract a MediaDescriptor from a video file.

        Args:
            path: Path to the video file.

        Returns:
            MediaDescriptor for the file.

        Raises:
            ProbeError: If the file has no decodable video stream.
        """
        ...
