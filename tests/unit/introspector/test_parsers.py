"""Unit tests for ffprobe output parsing."""

from pathlib import Path

import pytest

from clipchain.exceptions import ProbeError
from clipchain.introspector.models import DEFAULT_FPS
from clipchain.introspector.parsers import (
    parse_duration,
    parse_ffprobe_output,
    parse_frame_rate,
    select_frame_rate,
    validate_positive_int,
)

CLIP = Path("/clips/a.mp4")


class TestParseDuration:
    """Tests for parse_duration function."""

    def test_none_returns_none(self):
        """Test that None input returns None."""
        assert parse_duration(None) is None

    def test_valid_float_string(self):
        """Test parsing valid float strings."""
        assert parse_duration("3600.500") == 3600.5

    def test_invalid_string_returns_none(self):
        """Test that invalid strings return None."""
        assert parse_duration("N/A") is None
        assert parse_duration("") is None

    def test_negative_duration_is_unknown(self):
        """Negative durations are treated as unknown."""
        assert parse_duration("-10.5") is None


class TestParseFrameRate:
    """Tests for parse_frame_rate function."""

    def test_integer_fraction(self):
        assert parse_frame_rate("30/1") == 30.0

    def test_ntsc_fraction(self):
        assert parse_frame_rate("30000/1001") == pytest.approx(29.97002997)

    def test_zero_over_zero(self):
        """ffprobe reports 0/0 when the rate is unknown."""
        assert parse_frame_rate("0/0") is None

    def test_garbage(self):
        assert parse_frame_rate("fast") is None
        assert parse_frame_rate(None) is None

    def test_non_positive(self):
        assert parse_frame_rate("0/1") is None
        assert parse_frame_rate("-25/1") is None


class TestSelectFrameRate:
    """Tests for select_frame_rate function."""

    def test_prefers_average_rate(self):
        fps, raw = select_frame_rate(
            {"avg_frame_rate": "24000/1001", "r_frame_rate": "24/1"}
        )
        assert raw == "24000/1001"
        assert fps == pytest.approx(23.976, abs=1e-3)

    def test_falls_back_to_nominal_rate(self):
        fps, raw = select_frame_rate({"avg_frame_rate": "0/0", "r_frame_rate": "25/1"})
        assert fps == 25.0
        assert raw == "25"

    def test_default_when_neither_usable(self):
        fps, raw = select_frame_rate({"avg_frame_rate": "0/0"})
        assert fps == DEFAULT_FPS
        assert raw is None


class TestValidatePositiveInt:
    """Tests for validate_positive_int function."""

    def test_numeric_string(self):
        assert validate_positive_int("4000000", "bit_rate") == 4_000_000

    def test_not_available_string(self):
        assert validate_positive_int("N/A", "bit_rate") is None

    def test_bool_rejected(self):
        assert validate_positive_int(True, "width") is None

    def test_negative_rejected(self):
        assert validate_positive_int(-1, "width") is None
class TestParseFfprobeOutput:
    """Tests for parse_ffprobe_output function."""

    def test_full_clip(self, video_stream, audio_stream, ffprobe_data):
        """All carried-over fields are extracted."""
        data = ffprobe_data(
            video=video_stream(
                color_primaries="bt709",
                color_transfer="bt709",
                color_space="bt709",
            ),
            audio=audio_stream(),
        )
        descriptor = parse_ffprobe_output(CLIP, data)

        assert descriptor.width == 1920
        assert descriptor.height == 1080
        assert descriptor.video_codec == "h264"
        assert descriptor.pixel_format == "yuv420p"
        assert descriptor.fps == 30.0
        assert descriptor.frame_rate == "30"
        assert descriptor.video_bitrate == 4_000_000
        assert descriptor.profile == "High"
        assert descriptor.level == "41"
        assert descriptor.color_primaries == "bt709"
        assert descriptor.duration_seconds == 10.0
        assert descriptor.has_audio is True
        assert descriptor.audio_codec == "aac"
        assert descriptor.audio_bitrate == 192_000
        assert descriptor.audio_sample_rate == 48000
        assert descriptor.audio_channels == 2

    def test_no_audio(self, video_stream, ffprobe_data):
        descriptor = parse_ffprobe_output(CLIP, ffprobe_data(video=video_stream()))
        assert descriptor.has_audio is False
        assert descriptor.audio_codec is None

    def test_no_video_stream_raises(self, audio_stream, ffprobe_data):
        with pytest.raises(ProbeError, match="No video stream"):
            parse_ffprobe_output(CLIP, ffprobe_data(audio=audio_stream()))

    def test_cover_art_is_not_the_video_stream(self, video_stream):
        """Attached pictures are skipped when picking the video stream."""
        cover = video_stream(
            codec_name="mjpeg", width=600, height=600, disposition={"attached_pic": 1}
        )
        data = {"streams": [cover, video_stream(index=1)], "format": {}}
        descriptor = parse_ffprobe_output(CLIP, data)
        assert descriptor.video_codec == "h264"
        assert descriptor.width == 1920

    def test_missing_resolution_raises(self, video_stream, ffprobe_data):
        data = ffprobe_data(video=video_stream(width=None))
        with pytest.raises(ProbeError, match="resolution"):
            parse_ffprobe_output(CLIP, data)

    def test_duration_falls_back_to_container(self, video_stream, ffprobe_data):
        data = ffprobe_data(video=video_stream(duration=None), format_duration="12.5")
        assert parse_ffprobe_output(CLIP, data).duration_seconds == 12.5

    def test_duration_unknown(self, video_stream, ffprobe_data):
        data = ffprobe_data(video=video_stream(duration=None), format_duration=None)
        descriptor = parse_ffprobe_output(CLIP, data)
        assert descriptor.duration_seconds is None
        assert descriptor.known_duration == 0.0

    def test_unparseable_frame_rate_uses_default(
        self, caplog, video_stream, ffprobe_data
    ):
        data = ffprobe_data(
            video=video_stream(avg_frame_rate="0/0", r_frame_rate="0/0")
        )
        descriptor = parse_ffprobe_output(CLIP, data)
        assert descriptor.fps == DEFAULT_FPS
        assert descriptor.frame_rate_known is False
        assert "Could not parse frame rate" in caplog.text

    def test_placeholder_color_tags_are_absent(self, video_stream, ffprobe_data):
        data = ffprobe_data(
            video=video_stream(color_primaries="unknown", color_space="reserved")
        )
        descriptor = parse_ffprobe_output(CLIP, data)
        assert descriptor.color_primaries is None
        assert descriptor.color_space is None

    def test_zero_rates_are_absent(self, video_stream, audio_stream, ffprobe_data):
        data = ffprobe_data(
            video_stream(bit_rate="0"), audio_stream(bit_rate="0", sample_rate="0")
        )
        descriptor = parse_ffprobe_output(CLIP, data)

        assert descriptor.video_bitrate is None
        assert descriptor.audio_bitrate is None
        assert descriptor.audio_sample_rate is None
        assert descriptor.audio_channels == 2

    def test_unknown_level_is_absent(self, video_stream, ffprobe_data):
        data = ffprobe_data(video=video_stream(level=-99))
        assert parse_ffprobe_output(CLIP, data).level is None

    def test_ten_bit_detection(self, video_stream, ffprobe_data):
        data = ffprobe_data(video=video_stream(pix_fmt="yuv420p10le"))
        assert parse_ffprobe_output(CLIP, data).is_10bit is True
