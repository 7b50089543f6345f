import pytest

from schedsim.algorithms import (
    schedule_fcfs,
    schedule_priority,
    schedule_rr,
    schedule_sjf,
    schedule_srtf,
    simulate_srtf,
)
from schedsim.engine import run
from schedsim.errors import SchedulingError
from schedsim.models import ExecutionSegment, Process, TickEvent


def _procs():
    return [
        Process("P1", arrival_time=0, burst_time=5, priority=2),
        Process("P2", arrival_time=1, burst_time=3, priority=1),
        Process("P3", arrival_time=2, burst_time=8, priority=3),
    ]


def _spans(segments):
    return [(s.pid, s.start, s.end) for s in segments]


def test_fcfs_order():
    res = run("fcfs", _procs())
    assert _spans(res.timeline) == [("P1", 0, 5), ("P2", 5, 8), ("P3", 8, 16)]
    assert res.record_for("P1").waiting_time == 0
    assert res.record_for("P2").waiting_time == 4
    assert res.record_for("P3").waiting_time == 6


def test_fcfs_reference_example():
    procs = [
        Process("A", arrival_time=0, burst_time=4),
        Process("B", arrival_time=1, burst_time=3),
        Process("C", arrival_time=2, burst_time=1),
    ]
    res = run("fcfs", procs)
    assert _spans(res.timeline) == [("A", 0, 4), ("B", 4, 7), ("C", 7, 8)]
    assert [r.waiting_time for r in res.records] == [0, 3, 5]
    assert f"{float(res.summary.average_waiting_time):.2f}" == "2.67"


def test_fcfs_ties_keep_registry_order():
    x = Process("X", arrival_time=0, burst_time=1)
    y = Process("Y", arrival_time=0, burst_time=1)
    assert [s.pid for s in schedule_fcfs([x, y])] == ["X", "Y"]
    assert [s.pid for s in schedule_fcfs([y, x])] == ["Y", "X"]


def test_fcfs_idle_until_next_arrival():
    procs = [Process("A", 0, 2), Process("B", 5, 1)]
    assert _spans(schedule_fcfs(procs)) == [("A", 0, 2), ("B", 5, 6)]


def test_sjf_is_a_static_ordering():
    # Textbook SJF would start P1 at 0; the static ordering puts P2 first
    # and leaves the CPU idle until it arrives.
    res = run("sjf", _procs())
    assert _spans(res.timeline) == [(None, 0, 1), ("P2", 1, 4), ("P1", 4, 9), ("P3", 9, 17)]


def test_sjf_ties_break_on_arrival():
    procs = [Process("late", 3, 2), Process("early", 0, 2)]
    assert [s.pid for s in schedule_sjf(procs)] == ["early", "late"]


def test_priority_static():
    segments = schedule_priority(_procs())
    assert _spans(segments) == [("P2", 1, 4), ("P1", 4, 9), ("P3", 9, 17)]


def test_priority_missing_sorts_last():
    procs = [
        Process("none", arrival_time=0, burst_time=2),
        Process("low", arrival_time=0, burst_time=2, priority=9),
        Process("zero", arrival_time=1, burst_time=2, priority=0),
    ]
    assert [s.pid for s in schedule_priority(procs)] == ["zero", "low", "none"]


def test_srtf_preempts_for_shorter_job():
    procs = [Process("P1", 0, 8), Process("P2", 1, 4)]
    res = run("srtf", procs)
    assert _spans(res.timeline) == [("P1", 0, 1), ("P2", 1, 5), ("P1", 5, 12)]
    assert res.record_for("P1").completion_time == 12
    assert res.record_for("P2").waiting_time == 0


def test_srtf_emits_one_event_per_tick():
    events = simulate_srtf([Process("P1", 0, 2), Process("P2", 4, 1)])
    assert events == [TickEvent("P1", 0), TickEvent("P1", 1), TickEvent("P2", 4)]


def test_srtf_tie_goes_to_first_in_registry_order():
    procs = [Process("P1", 0, 2), Process("P2", 1, 1)]
    # At t=1 both have one unit left; P1 was found first.
    assert _spans(schedule_srtf(procs)) == [("P1", 0, 2), ("P2", 2, 3)]


def test_srtf_does_not_stretch_over_idle_gap():
    procs = [Process("P1", 0, 2), Process("P2", 5, 1)]
    res = run("srtf", procs)
    assert _spans(res.timeline) == [("P1", 0, 2), (None, 2, 5), ("P2", 5, 6)]


def test_rr_reference_example():
    procs = [Process("P1", 0, 5), Process("P2", 1, 3)]
    res = run("rr", procs, quantum=2)
    assert _spans(res.timeline) == [
        ("P1", 0, 2),
        ("P2", 2, 4),
        ("P1", 4, 6),
        ("P2", 6, 7),
        ("P1", 7, 8),
    ]
    assert [r.pid for r in res.records] == ["P2", "P1"]
    assert res.record_for("P1").turnaround_time == 8
    assert res.record_for("P1").waiting_time == 3
    assert res.record_for("P2").turnaround_time == 6
    assert res.record_for("P2").waiting_time == 3


def test_rr_emits_one_segment_per_slice():
    segments = schedule_rr([Process("P1", 0, 5)], quantum=2)
    assert segments == [
        ExecutionSegment("P1", 0, 2),
        ExecutionSegment("P1", 2, 4),
        ExecutionSegment("P1", 4, 5),
    ]


def test_rr_single_process_timeline_is_coalesced():
    res = run("rr", [Process("P1", 0, 5)], quantum=2)
    assert _spans(res.timeline) == [("P1", 0, 5)]
    assert len(res.records) == 1


def test_rr_quantum_2():
    res = run("rr", _procs(), quantum=2)
    assert {s.pid for s in res.busy_segments()} == {"P1", "P2", "P3"}
    assert sum(p.burst_time for p in _procs()) == res.system.cpu_busy_time


@pytest.mark.parametrize("quantum", [None, 0, -1, "2", 1.5])
def test_rr_rejects_bad_quantum(quantum):
    with pytest.raises(SchedulingError):
        schedule_rr(_procs(), quantum=quantum)
    with pytest.raises(SchedulingError):
        run("rr", _procs(), quantum=quantum)


def test_priority_ties_break_on_arrival():
    procs = [
        Process("late", arrival_time=3, burst_time=1, priority=1),
        Process("early", arrival_time=0, burst_time=1, priority=1),
    ]
    assert [s.pid for s in schedule_priority(procs)] == ["early", "late"]


def test_priority_full_ties_keep_registry_order():
    procs = [
        Process("second", arrival_time=0, burst_time=1, priority=4),
        Process("first", arrival_time=0, burst_time=1, priority=4),
    ]
    assert [s.pid for s in schedule_priority(procs)] == ["second", "first"]


def test_srtf_skips_long_idle_stretch():
    procs = [Process("P1", 0, 1), Process("P2", 10**9, 2)]
    events = simulate_srtf(procs)
    assert events == [TickEvent("P1", 0), TickEvent("P2", 10**9), TickEvent("P2", 10**9 + 1)]
