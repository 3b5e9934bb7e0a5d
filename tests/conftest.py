"""Shared test fixtures for clipchain."""

from pathlib import Path
from typing import Any

import pytest

from clipchain.introspector.models import MediaDescriptor
from clipchain.tools.models import CapabilitySnapshot


def make_video_stream(**overrides: Any) -> dict[str, Any]:
    """Build an ffprobe video stream dict (1080p H.264 at 30 fps)."""
    stream: dict[str, Any] = {
        "index": 0,
        "codec_type": "video",
        "codec_name": "h264",
        "profile": "High",
        "width": 1920,
        "height": 1080,
        "pix_fmt": "yuv420p",
        "level": 41,
        "avg_frame_rate": "30/1",
        "r_frame_rate": "30/1",
        "bit_rate": "4000000",
        "duration": "10.000000",
        "disposition": {"default": 1, "attached_pic": 0},
    }
    stream.update(overrides)
    return {k: v for k, v in stream.items() if v is not None}


def make_audio_stream(**overrides: Any) -> dict[str, Any]:
    """Build an ffprobe audio stream dict (stereo AAC at 48 kHz)."""
    stream: dict[str, Any] = {
        "index": 1,
        "codec_type": "audio",
        "codec_name": "aac",
        "sample_rate": "48000",
        "channels": 2,
        "channel_layout": "stereo",
        "bit_rate": "192000",
    }
    stream.update(overrides)
    return {k: v for k, v in stream.items() if v is not None}


def make_ffprobe_data(
    video: dict[str, Any] | None = None,
    audio: dict[str, Any] | None = None,
    format_duration: str | None = "10.000000",
) -> dict[str, Any]:
    """Build a complete ffprobe JSON document."""
    streams = []
    if video is not None:
        streams.append(video)
    if audio is not None:
        streams.append(audio)
    format_info: dict[str, Any] = {"format_name": "mov,mp4,m4a,3gp,3g2,mj2"}
    if format_duration is not None:
        format_info["duration"] = format_duration
    return {"streams": streams, "format": format_info}


@pytest.fixture
def make_descriptor():
    """Factory for MediaDescriptor objects with sensible defaults."""

    def _make(name: str = "clip.mp4", **overrides: Any) -> MediaDescriptor:
        fields: dict[str, Any] = {
            "path": Path("/clips") / name,
            "width": 1920,
            "height": 1080,
            "video_codec": "h264",
            "pixel_format": "yuv420p",
            "fps": 30.0,
            "frame_rate": "30",
            "duration_seconds": 10.0,
            "has_audio": True,
            "audio_codec": "aac",
            "audio_sample_rate": 48000,
            "audio_channels": 2,
        }
        fields.update(overrides)
        return MediaDescriptor(**fields)

    return _make


@pytest.fixture
def hardware_capability() -> CapabilitySnapshot:
    """Snapshot of a machine with a working NVIDIA setup."""
    return CapabilitySnapshot(
        has_cuda_hwaccel=True,
        has_nvenc_encoder=True,
        has_cuvid_decoder=True,
        driver_present=True,
        decoders=frozenset({"h264", "hevc", "h264_cuvid", "hevc_cuvid"}),
    )


@pytest.fixture
def software_capability() -> CapabilitySnapshot:
    """Snapshot of a machine without hardware support."""
    return CapabilitySnapshot.software_only()


@pytest.fixture
def video_stream():
    """Builder for ffprobe video stream dicts."""
    return make_video_stream


@pytest.fixture
def audio_stream():
    """Builder for ffprobe audio stream dicts."""
    return make_audio_stream


@pytest.fixture
def ffprobe_data():
    """Builder for complete ffprobe JSON documents."""
    return make_ffprobe_data
