"""Unit tests for FFmpegRunner."""

import io
import logging
from unittest.mock import MagicMock, patch

from clipchain.executor.runner import FFmpegRunner

STDERR = """Input #0, mov,mp4,m4a,3gp,3g2,mj2, from 'a.mp4':
frame=  150 fps= 60 time=00:00:05.00 bitrate=1677.7kbits/s speed=2x
frame=  300 fps= 60 time=00:00:10.00 bitrate=1677.7kbits/s speed=2x
"""


def fake_process(stderr: str, returncode: int) -> MagicMock:
    process = MagicMock()
    process.stderr = io.StringIO(stderr)
    process.wait.return_value = returncode
    return process


class TestFFmpegRunner:
    """Tests for FFmpegRunner.run."""

    def test_success(self):
        with patch(
            "clipchain.executor.runner.subprocess.Popen",
            return_value=fake_process(STDERR, 0),
        ) as mock_popen:
            result = FFmpegRunner().run(["ffmpeg", "-i", "a.mp4"], "software attempt")

        assert result.success
        assert mock_popen.call_args.args[0] == ["ffmpeg", "-i", "a.mp4"]

    def test_failure_keeps_stderr_tail(self):
        lines = "\n".join(f"line {i}" for i in range(25)) + "\n"
        with patch(
            "clipchain.executor.runner.subprocess.Popen",
            return_value=fake_process(lines, 1),
        ):
            result = FFmpegRunner().run(["ffmpeg"], "hardware attempt")

        assert not result.success
        assert result.returncode == 1
        tail = result.stderr_tail.splitlines()
        assert len(tail) == FFmpegRunner.STDERR_TAIL_LINES
        assert tail[-1] == "line 24"

    def test_progress_callback_and_logging(self, caplog):
        updates = []
        with patch(
            "clipchain.executor.runner.subprocess.Popen",
            return_value=fake_process(STDERR, 0),
        ):
            with caplog.at_level(logging.INFO, logger="clipchain.executor.runner"):
                FFmpegRunner(progress_callback=updates.append).run(
                    ["ffmpeg"], "software attempt", total_duration=10.0
                )

        assert [u.frame for u in updates] == [150, 300]
        assert "software attempt: 50%" in caplog.text
        assert "software attempt: 100%" in caplog.text

    def test_callback_errors_do_not_abort(self):
        def broken(_progress):
            raise RuntimeError("display gone")

        with patch(
            "clipchain.executor.runner.subprocess.Popen",
            return_value=fake_process(STDERR, 0),
        ):
            result = FFmpegRunner(progress_callback=broken).run(["ffmpeg"], "x")

        assert result.success
