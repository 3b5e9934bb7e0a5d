"""Unit tests for transition offset planning."""

import logging

import pytest

from clipchain.planner.offsets import (
    plan_frame_accurate_offset,
    plan_offsets,
    plan_transitions,
)


class TestPlanOffsets:
    """Tests for the cumulative offset recurrence."""

    def test_two_clips(self):
        plan = plan_offsets([10.0, 8.0], 1.0)
        assert plan.offsets == [9.0]
        assert len(plan) == 1

    def test_three_clips(self):
        # o1 = 10 - 1 = 9, o2 = (10 + 8 - 1) - 1 = 16
        plan = plan_offsets([10.0, 8.0, 6.0], 1.0)
        assert plan.offsets == [9.0, 16.0]

    def test_recurrence_holds_for_long_chain(self):
        durations = [5.5, 7.25, 3.0, 12.125, 4.0, 9.5]
        t = 0.75
        offsets = plan_offsets(durations, t).offsets

        cumulative = durations[0]
        for i, offset in enumerate(offsets):
            assert offset == pytest.approx(max(0.0, cumulative - t), abs=1e-6)
            cumulative += durations[i + 1] - t

    def test_every_segment_has_transition_duration(self):
        plan = plan_offsets([4.0, 4.0, 4.0], 0.5)
        assert all(s.duration_seconds == 0.5 for s in plan.segments)

    def test_offsets_rounded_to_microseconds(self):
        plan = plan_offsets([1.0 / 3.0, 1.0], 0.1)
        assert plan.offsets == [0.233333]

    def test_short_clip_clamps_to_zero(self):
        plan = plan_offsets([0.5, 10.0], 1.0)
        assert plan.offsets == [0.0]

    def test_zero_duration_clip(self):
        """An unknown (zero) duration starts the transition immediately."""
        plan = plan_offsets([0.0, 10.0, 10.0], 1.0)
        assert plan.offsets[0] == 0.0

    def test_rejects_single_clip(self):
        with pytest.raises(ValueError, match="two clips"):
            plan_offsets([10.0], 1.0)

    def test_rejects_negative_duration(self):
        with pytest.raises(ValueError, match=">= 0"):
            plan_offsets([10.0, -1.0], 1.0)

    @pytest.mark.parametrize("t", [0.0, -1.0])
    def test_rejects_non_positive_transition(self, t):
        with pytest.raises(ValueError, match="> 0"):
            plan_offsets([10.0, 10.0], t)


class TestFrameAccurateOffset:
    """Tests for plan_frame_accurate_offset."""

    def test_ten_seconds_at_thirty_fps(self):
        assert plan_frame_accurate_offset(10.0, 30.0, 1.0) == 9.0

    def test_result_is_on_frame_boundary(self):
        fps = 30000 / 1001
        offset = plan_frame_accurate_offset(10.0, fps, 1.0)
        frames = offset * fps
        assert frames == pytest.approx(round(frames), abs=1e-9)

    def test_clip_shorter_than_transition(self):
        assert plan_frame_accurate_offset(0.5, 30.0, 1.0) == 0.0


class TestPlanTransitions:
    """Tests for plan_transitions."""

    def test_two_clips_use_frame_accurate_offset(self, make_descriptor):
        first = make_descriptor(
            "a.mp4", duration_seconds=10.01, fps=30000 / 1001, frame_rate="30000/1001"
        )
        second = make_descriptor("b.mp4")
        plan = plan_transitions([first, second], 1.0)

        expected = plan_frame_accurate_offset(10.01, 30000 / 1001, 1.0)
        assert plan.offsets == [round(expected, 6)]

    def test_two_clips_unknown_frame_rate_use_recurrence(self, make_descriptor):
        first = make_descriptor("a.mp4", duration_seconds=10.01, frame_rate=None)
        plan = plan_transitions([first, make_descriptor("b.mp4")], 1.0)
        assert plan.offsets == [9.01]

    def test_unknown_duration_logs_warning(self, make_descriptor, caplog):
        clips = [
            make_descriptor("a.mp4", duration_seconds=None),
            make_descriptor("b.mp4"),
            make_descriptor("c.mp4"),
        ]
        with caplog.at_level(logging.WARNING):
            plan = plan_transitions(clips, 1.0)

        assert plan.offsets[0] == 0.0
        records = [r for r in caplog.records if "Duration unknown" in r.message]
        assert len(records) == 1
        assert records[0].condition == "DurationUnknown"

    def test_transition_plan_offsets_non_negative(self, make_descriptor):
        clips = [make_descriptor(f"{i}.mp4", duration_seconds=0.2) for i in range(4)]
        plan = plan_transitions(clips, 1.0)
        assert all(o >= 0 for o in plan.offsets)
