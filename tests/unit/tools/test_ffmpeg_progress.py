"""Unit tests for ffmpeg stderr progress parsing."""

import pytest

from clipchain.tools.ffmpeg_progress import FFmpegProgress, parse_stderr_progress


class TestParseStderrProgress:
    """Tests for parse_stderr_progress."""

    def test_progress_line(self):
        line = (
            "frame= 1234 fps= 60 q=28.0 size=   10240kB time=00:01:23.45 "
            "bitrate=1005.2kbits/s speed=2.01x"
        )
        progress = parse_stderr_progress(line)

        assert progress is not None
        assert progress.frame == 1234
        assert progress.fps == 60.0
        assert progress.bitrate == "1005.2kbits/s"
        assert progress.speed == "2.01x"
        assert progress.out_time_seconds == pytest.approx(83.45)

    def test_non_progress_line(self):
        assert parse_stderr_progress("Stream mapping:") is None

    def test_not_available_values(self):
        progress = parse_stderr_progress("frame=    0 fps=0.0 bitrate=N/A speed=N/A")
        assert progress is not None
        assert progress.bitrate is None
        assert progress.out_time_us is None


class TestGetPercent:
    """Tests for FFmpegProgress.get_percent."""

    def test_half_way(self):
        progress = FFmpegProgress(out_time_us=5_000_000)
        assert progress.get_percent(10.0) == 50.0

    def test_capped(self):
        progress = FFmpegProgress(out_time_us=20_000_000)
        assert progress.get_percent(10.0) == 100.0

    def test_unknown_duration(self):
        progress = FFmpegProgress(out_time_us=5_000_000)
        assert progress.get_percent(None) == 0.0
        assert progress.get_percent(0.0) == 0.0
