"""Unit tests for folder-mode clip discovery."""

from pathlib import Path

import pytest

from clipchain.exceptions import InsufficientInputs
from clipchain.scanner.discovery import discover_clips, is_video_file


@pytest.fixture
def clip_dir(tmp_path: Path) -> Path:
    folder = tmp_path / "clips"
    folder.mkdir()
    for name in ["b.mp4", "A.mkv", "c.MOV", "notes.txt", ".hidden.mp4"]:
        (folder / name).write_bytes(b"\x00")
    nested = folder / "nested"
    nested.mkdir()
    (nested / "deep.mp4").write_bytes(b"\x00")
    return folder


class TestDiscoverClips:
    """Tests for discover_clips."""

    def test_sorted_case_insensitively(self, clip_dir):
        clips = discover_clips(clip_dir)
        assert [p.name for p in clips] == ["A.mkv", "b.mp4", "c.MOV"]

    def test_not_recursive(self, clip_dir):
        assert all(p.parent == clip_dir for p in discover_clips(clip_dir))

    def test_hidden_and_non_video_skipped(self, clip_dir):
        names = {p.name for p in discover_clips(clip_dir)}
        assert ".hidden.mp4" not in names
        assert "notes.txt" not in names

    def test_output_excluded(self, clip_dir):
        clips = discover_clips(clip_dir, output_path=clip_dir / "b.mp4")
        assert [p.name for p in clips] == ["A.mkv", "c.MOV"]

    def test_exact_name_breaks_ties(self, tmp_path):
        for name in ["clip.mp4", "Clip.mp4"]:
            (tmp_path / name).write_bytes(b"\x00")
        if len(list(tmp_path.iterdir())) < 2:
            pytest.skip("case-insensitive filesystem")
        assert [p.name for p in discover_clips(tmp_path)] == ["Clip.mp4", "clip.mp4"]

    def test_fewer_than_two(self, tmp_path):
        (tmp_path / "only.mp4").write_bytes(b"\x00")
        with pytest.raises(InsufficientInputs) as exc_info:
            discover_clips(tmp_path)
        assert exc_info.value.found == 1
        assert exc_info.value.stage == "discovery"

    def test_missing_folder(self, tmp_path):
        with pytest.raises(InsufficientInputs):
            discover_clips(tmp_path / "missing")


class TestIsVideoFile:
    """Tests for is_video_file."""

    @pytest.mark.parametrize("name", ["a.ts", "a.m2ts", "a.MPEG", "a.webm"])
    def test_video_extensions(self, tmp_path, name):
        path = tmp_path / name
        path.write_bytes(b"\x00")
        assert is_video_file(path)

    def test_directory_with_video_suffix(self, tmp_path):
        folder = tmp_path / "folder.mp4"
        folder.mkdir()
        assert not is_video_file(folder)
