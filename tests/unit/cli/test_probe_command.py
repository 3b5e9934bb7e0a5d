"""Unit tests for the probe command."""

import json
from pathlib import Path
from unittest.mock import patch

from clipchain.cli import main
from clipchain.cli.exit_codes import ExitCode
from clipchain.cli.probe import format_human
from clipchain.exceptions import ProbeError, ToolUnavailable


class TestFormatHuman:
    """Tests for format_human."""

    def test_unknown_values(self, make_descriptor):
        text = format_human(make_descriptor(profile=None))
        lines = {line.split()[0]: line.split(None, 1)[1] for line in text.splitlines()}

        assert lines["profile"] == "unknown"
        assert lines["width"] == "1920"


class TestProbeCommand:
    """Tests for `clipchain probe`."""

    def test_json_output(self, cli_runner, cli_obj, make_descriptor):
        descriptor = make_descriptor("a.mp4", pixel_format="yuv420p10le")
        with (
            patch(
                "clipchain.cli.probe.require_tool",
                return_value=Path("/usr/bin/ffprobe"),
            ),
            patch("clipchain.cli.probe.FFprobeIntrospector") as mock_cls,
        ):
            mock_cls.return_value.get_file_info.return_value = descriptor
            result = cli_runner.invoke(
                main, ["probe", "a.mp4", "--json"], obj=cli_obj
            )

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["path"] == "/clips/a.mp4"
        assert data["is_10bit"] is True
        assert data["video_bitrate"] is None

    def test_probe_error(self, cli_runner, cli_obj):
        with (
            patch(
                "clipchain.cli.probe.require_tool",
                return_value=Path("/usr/bin/ffprobe"),
            ),
            patch("clipchain.cli.probe.FFprobeIntrospector") as mock_cls,
        ):
            mock_cls.return_value.get_file_info.side_effect = ProbeError(
                "No video stream in a.mp4"
            )
            result = cli_runner.invoke(main, ["probe", "a.mp4"], obj=cli_obj)

        assert result.exit_code == ExitCode.PROBE_ERROR
        assert "Error (probe): No video stream in a.mp4" in result.output

    def test_missing_ffprobe(self, cli_runner, cli_obj):
        with patch(
            "clipchain.cli.probe.require_tool", side_effect=ToolUnavailable("ffprobe")
        ):
            result = cli_runner.invoke(main, ["probe", "a.mp4"], obj=cli_obj)

        assert result.exit_code == ExitCode.TOOL_NOT_AVAILABLE
