from schedsim.models import ExecutionSegment, TickEvent
from schedsim.timeline import build_timeline, coalesce, segments_from_ticks, with_idle_gaps


def _spans(segments):
    return [(s.pid, s.start, s.end) for s in segments]


def test_consecutive_ticks_merge():
    ticks = [TickEvent("A", 0), TickEvent("A", 1), TickEvent("B", 2), TickEvent("A", 3)]
    assert _spans(segments_from_ticks(ticks)) == [("A", 0, 2), ("B", 2, 3), ("A", 3, 4)]


def test_ticks_split_across_idle_gap():
    ticks = [TickEvent("A", 0), TickEvent("A", 1), TickEvent("A", 4)]
    assert _spans(segments_from_ticks(ticks)) == [("A", 0, 2), ("A", 4, 5)]


def test_coalesce_merges_only_touching_slices():
    segments = [
        ExecutionSegment("A", 0, 2),
        ExecutionSegment("A", 2, 4),
        ExecutionSegment("A", 6, 7),
    ]
    assert _spans(coalesce(segments)) == [("A", 0, 4), ("A", 6, 7)]


def test_idle_gaps_are_explicit():
    segments = [ExecutionSegment("A", 2, 4), ExecutionSegment("B", 4, 5), ExecutionSegment("A", 8, 9)]
    assert _spans(with_idle_gaps(segments)) == [
        (None, 0, 2),
        ("A", 2, 4),
        ("B", 4, 5),
        (None, 5, 8),
        ("A", 8, 9),
    ]


def test_build_timeline_sorts_and_coalesces():
    segments = [ExecutionSegment("B", 3, 4), ExecutionSegment("A", 0, 1), ExecutionSegment("A", 1, 3)]
    timeline = build_timeline(segments)
    assert _spans(timeline) == [("A", 0, 3), ("B", 3, 4)]
    assert timeline[0].duration == 3
    assert not timeline[0].is_idle


def test_empty_input():
    assert build_timeline([]) == []
    assert segments_from_ticks([]) == []
