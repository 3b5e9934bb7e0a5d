"""Hardware acceleration capability probe.

Detection runs once per join and produces an immutable CapabilitySnapshot.
A negative result is a normal outcome that selects the software path.
"""

import logging
import os
import platform
from collections.abc import Callable
from pathlib import Path

from clipchain.tools.detection import detect_ffmpeg_capabilities, run_command
from clipchain.tools.models import CapabilitySnapshot

logger = logging.getLogger(__name__)

CUDA_HWACCEL = "cuda"
NVENC_HEVC_ENCODER = "hevc_nvenc"
CUVID_SUFFIX = "_cuvid"

# Source codec (ffprobe codec_name) -> NVIDIA hardware decoder
CUVID_DECODERS: dict[str, str] = {
    "h264": "h264_cuvid",
    "hevc": "hevc_cuvid",
    "av1": "av1_cuvid",
    "vp9": "vp9_cuvid",
    "vp8": "vp8_cuvid",
    "mpeg2video": "mpeg2_cuvid",
    "mpeg4": "mpeg4_cuvid",
    "vc1": "vc1_cuvid",
    "mjpeg": "mjpeg_cuvid",
}

# The driver file check only means something on Windows
DRIVER_CHECK_PLATFORM = "Windows"
WINDOWS_DRIVER_DLL = "nvcuda.dll"


def get_hw_decoder(codec: str | None, decoders: frozenset[str]) -> str | None:
    """Look up the hardware decoder for a source codec.

    Args:
        codec: Source video codec name from the probe.
        decoders: Decoder names advertised by ffmpeg.

    Returns:
        Decoder name, or None if the codec has no entry or ffmpeg does not
        advertise the decoder.
    """
    if not codec:
        return None
    decoder = CUVID_DECODERS.get(codec.casefold())
    if decoder is None or decoder not in decoders:
        return None
    return decoder


def _windows_driver_present() -> bool:
    """Check for the NVIDIA CUDA driver library in System32."""
    system_root = os.environ.get("SystemRoot", r"C:\Windows")
    return (Path(system_root) / "System32" / WINDOWS_DRIVER_DLL).is_file()


class CapabilityProbe:
    """Queries ffmpeg and the platform for NVIDIA hardware support."""

    def __init__(
        self,
        ffmpeg_path: Path,
        runner: Callable[[list[str]], tuple[str, str, int]] = run_command,
        platform_name: str | None = None,
        driver_check: Callable[[], bool] = _windows_driver_present,
    ) -> None:
        """Initialize the probe.

        Args:
            ffmpeg_path: Path to ffmpeg executable.
            runner: Command runner returning (stdout, stderr, returncode).
            platform_name: Override of platform.system() (for tests).
            driver_check: Platform driver-presence check.
        """
        self._ffmpeg_path = ffmpeg_path
        self._runner = runner
        self._platform_name = platform_name or platform.system()
        self._driver_check = driver_check

    def detect(self) -> CapabilitySnapshot:
        """Detect hardware acceleration support.

        Returns:
            CapabilitySnapshot with the detected flags.
        """
        caps = detect_ffmpeg_capabilities(self._ffmpeg_path, runner=self._runner)

        has_cuda = caps.has_hwaccel(CUDA_HWACCEL)
        has_nvenc = caps.has_encoder(NVENC_HEVC_ENCODER)
        has_cuvid = any(name.endswith(CUVID_SUFFIX) for name in caps.decoders)

        # Driver check only after the engine-level checks passed
        driver_present = False
        if has_cuda and has_nvenc and has_cuvid:
            if self._platform_name == DRIVER_CHECK_PLATFORM:
                driver_present = self._driver_check()
                if not driver_present:
                    logger.info(
                        "ffmpeg advertises CUDA support but %s was not found",
                        WINDOWS_DRIVER_DLL,
                    )
            else:
                driver_present = True

        snapshot = CapabilitySnapshot(
            has_cuda_hwaccel=has_cuda,
            has_nvenc_encoder=has_nvenc,
            has_cuvid_decoder=has_cuvid,
            driver_present=driver_present,
            decoders=frozenset(caps.decoders),
        )
        logger.info(
            "Hardware acceleration: %s",
            "available" if snapshot.use_hardware else "not available",
            extra=snapshot.to_dict(),
        )
        return snapshot
