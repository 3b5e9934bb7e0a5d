"""Unit tests for YAML job file loading."""

from pathlib import Path

import pytest

from clipchain.job.loader import JobValidationError, load_job, load_job_from_dict
from clipchain.planner.types import TransitionKind


def write_job(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "job.yaml"
    path.write_text(content)
    return path


class TestLoadJob:
    """Tests for load_job."""

    def test_inputs_job(self, tmp_path):
        path = write_job(
            tmp_path,
            """
inputs:
  - intro.mp4
  - /abs/main.mkv
output: out/joined.mp4
transition: Dissolve
transition_duration: 0.5
quality: 20
audio_bitrate: 256k
""",
        )
        job = load_job(path)

        assert job.inputs == (tmp_path / "intro.mp4", Path("/abs/main.mkv"))
        assert job.output == tmp_path / "out" / "joined.mp4"
        assert job.folder is None
        assert job.transition is TransitionKind.DISSOLVE
        assert job.transition_duration == 0.5
        assert job.quality == 20
        assert job.audio_bitrate == "256k"

    def test_folder_job(self, tmp_path):
        job = load_job(write_job(tmp_path, "folder: clips\noutput: joined.mkv\n"))
        assert job.folder == tmp_path / "clips"
        assert job.inputs == ()
        assert job.transition is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(JobValidationError, match="not found"):
            load_job(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(JobValidationError, match="Invalid YAML"):
            load_job(write_job(tmp_path, "inputs: [a.mp4\n"))

    def test_empty_file(self, tmp_path):
        with pytest.raises(JobValidationError, match="empty"):
            load_job(write_job(tmp_path, ""))

    def test_not_a_mapping(self, tmp_path):
        with pytest.raises(JobValidationError, match="mapping"):
            load_job(write_job(tmp_path, "- a.mp4\n- b.mp4\n"))


class TestJobValidation:
    """Tests for job field validation."""

    def test_unknown_field(self):
        with pytest.raises(JobValidationError) as exc_info:
            load_job_from_dict({"folder": "x", "output": "o.mp4", "speed": 2})
        assert exc_info.value.field == "speed"
        assert exc_info.value.stage == "job"

    def test_output_required(self):
        with pytest.raises(JobValidationError, match="output"):
            load_job_from_dict({"folder": "x"})

    def test_requires_a_source(self):
        with pytest.raises(JobValidationError, match="'inputs' or 'folder'"):
            load_job_from_dict({"output": "o.mp4"})

    def test_sources_mutually_exclusive(self):
        with pytest.raises(JobValidationError, match="mutually exclusive"):
            load_job_from_dict(
                {"inputs": ["a.mp4", "b.mp4"], "folder": "x", "output": "o.mp4"}
            )

    def test_at_least_two_inputs(self):
        with pytest.raises(JobValidationError, match="at least two"):
            load_job_from_dict({"inputs": ["a.mp4"], "output": "o.mp4"})

    def test_unknown_transition(self):
        with pytest.raises(JobValidationError, match="unknown transition"):
            load_job_from_dict({"folder": "x", "output": "o.mp4", "transition": "spin"})

    @pytest.mark.parametrize("duration", [0, -1])
    def test_transition_duration_positive(self, duration):
        with pytest.raises(JobValidationError, match="transition_duration"):
            load_job_from_dict(
                {"folder": "x", "output": "o.mp4", "transition_duration": duration}
            )

    @pytest.mark.parametrize("quality", [-1, 52])
    def test_quality_range(self, quality):
        with pytest.raises(JobValidationError, match="quality"):
            load_job_from_dict({"folder": "x", "output": "o.mp4", "quality": quality})

    def test_audio_bitrate_integer_accepted(self):
        job = load_job_from_dict(
            {"folder": "x", "output": "o.mp4", "audio_bitrate": 192000}
        )
        assert job.audio_bitrate == "192000"

    def test_audio_bitrate_invalid(self):
        with pytest.raises(JobValidationError, match="audio_bitrate"):
            load_job_from_dict({"folder": "x", "output": "o.mp4", "audio_bitrate": "x"})

    def test_relative_paths_without_base_dir(self):
        job = load_job_from_dict({"inputs": ["a.mp4", "b.mp4"], "output": "o.mp4"})
        assert job.inputs == (Path("a.mp4"), Path("b.mp4"))
