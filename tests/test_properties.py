import pytest

from schedsim.engine import run
from schedsim.models import Process

ALGS = [("fcfs", None), ("sjf", None), ("srtf", None), ("rr", 2), ("rr", 3), ("priority", None)]


def _workload():
    return [
        Process("A", arrival_time=0, burst_time=6, priority=3),
        Process("B", arrival_time=2, burst_time=2),
        Process("C", arrival_time=3, burst_time=4, priority=1),
        Process("D", arrival_time=20, burst_time=3, priority=2),
        Process("E", arrival_time=21, burst_time=1, priority=1),
    ]


@pytest.mark.parametrize("alg,quantum", ALGS)
def test_every_process_runs_for_its_burst(alg, quantum):
    res = run(alg, _workload(), quantum=quantum)
    for p in _workload():
        assert sum(s.duration for s in res.segments_for(p.pid)) == p.burst_time


@pytest.mark.parametrize("alg,quantum", ALGS)
def test_record_identities(alg, quantum):
    res = run(alg, _workload(), quantum=quantum)
    assert sorted(r.pid for r in res.records) == ["A", "B", "C", "D", "E"]
    for r in res.records:
        assert r.turnaround_time == r.completion_time - r.arrival_time
        assert r.waiting_time == r.turnaround_time - r.burst_time
        assert r.waiting_time >= 0


@pytest.mark.parametrize("alg,quantum", ALGS)
def test_timeline_is_ordered_and_non_overlapping(alg, quantum):
    res = run(alg, _workload(), quantum=quantum)
    timeline = list(res.timeline)
    assert timeline[0].start == 0
    for prev, nxt in zip(timeline, timeline[1:]):
        assert prev.end == nxt.start
        assert prev.pid != nxt.pid
    assert any(seg.is_idle for seg in timeline)
    assert timeline[-1].end == res.system.makespan


@pytest.mark.parametrize("alg,quantum", ALGS)
def test_runs_are_deterministic(alg, quantum):
    assert run(alg, _workload(), quantum=quantum) == run(alg, _workload(), quantum=quantum)
