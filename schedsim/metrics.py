from __future__ import annotations

from fractions import Fraction
from typing import Dict, List, Sequence

from .errors import SchedulingError
from .models import ExecutionSegment, Process, RunSummary, ScheduleRecord, SystemMetrics


def build_records(processes: Sequence[Process], segments: Sequence[ExecutionSegment]) -> List[ScheduleRecord]:
    """
    Derive one ScheduleRecord per process from its execution segments.

    Completion time is the end of the process's last segment, no matter how
    many slices it was split into. Records are returned in completion order.
    """
    first_start: Dict[str, int] = {}
    completion: Dict[str, int] = {}

    for seg in segments:
        if seg.is_idle:
            continue
        first_start[seg.pid] = min(first_start.get(seg.pid, seg.start), seg.start)
        completion[seg.pid] = max(completion.get(seg.pid, seg.end), seg.end)

    records: List[ScheduleRecord] = []
    for p in processes:
        if p.pid not in completion:
            raise SchedulingError(f"Process '{p.pid}' never ran")

        turnaround_time = completion[p.pid] - p.arrival_time
        records.append(
            ScheduleRecord(
                pid=p.pid,
                arrival_time=p.arrival_time,
                burst_time=p.burst_time,
                first_start=first_start[p.pid],
                completion_time=completion[p.pid],
                turnaround_time=turnaround_time,
                waiting_time=turnaround_time - p.burst_time,
                response_time=first_start[p.pid] - p.arrival_time,
                priority=p.priority,
            )
        )

    # sorted() is stable, so equal completion times keep input order.
    return sorted(records, key=lambda r: r.completion_time)


def summarize(records: Sequence[ScheduleRecord]) -> RunSummary:
    """
    Exact averages over the records (one per process).
    """
    if not records:
        zero = Fraction(0)
        return RunSummary(zero, zero, zero)

    n = len(records)
    return RunSummary(
        average_waiting_time=Fraction(sum(r.waiting_time for r in records), n),
        average_turnaround_time=Fraction(sum(r.turnaround_time for r in records), n),
        average_response_time=Fraction(sum(r.response_time for r in records), n),
    )


def compute_system_metrics(records: Sequence[ScheduleRecord], timeline: Sequence[ExecutionSegment]) -> SystemMetrics:
    """
    Compute throughput and CPU utilization given the per-process records and
    the timeline segments.
    """
    if not records:
        return SystemMetrics(makespan=0, cpu_busy_time=0, idle_time=0, throughput=0.0, cpu_utilization=0.0)

    makespan = max(r.completion_time for r in records)
    cpu_busy_time = sum(seg.duration for seg in timeline if not seg.is_idle)

    return SystemMetrics(
        makespan=makespan,
        cpu_busy_time=cpu_busy_time,
        idle_time=makespan - cpu_busy_time,
        throughput=len(records) / makespan if makespan > 0 else 0.0,
        cpu_utilization=cpu_busy_time / makespan if makespan > 0 else 0.0,
    )


def check_invariants(
    processes: Sequence[Process],
    records: Sequence[ScheduleRecord],
    segments: Sequence[ExecutionSegment],
) -> None:
    """
    Raise SchedulingError if a schedule breaks the single-CPU rules: every
    process runs for exactly its burst, records are unique, no waiting time
    is negative and no two segments overlap.
    """
    executed: Dict[str, int] = {}
    for seg in segments:
        if seg.end <= seg.start:
            raise SchedulingError(f"Empty or reversed segment {seg}")
        if not seg.is_idle:
            executed[seg.pid] = executed.get(seg.pid, 0) + seg.duration

    for p in processes:
        if executed.get(p.pid, 0) != p.burst_time:
            raise SchedulingError(
                f"Process '{p.pid}' ran for {executed.get(p.pid, 0)} units, expected {p.burst_time}"
            )

    pids = [r.pid for r in records]
    if len(pids) != len(set(pids)) or set(pids) != {p.pid for p in processes}:
        raise SchedulingError("Expected exactly one schedule record per process")

    for r in records:
        if r.waiting_time < 0:
            raise SchedulingError(f"Negative waiting time for '{r.pid}'")

    ordered = sorted(segments, key=lambda s: s.start)
    for prev, nxt in zip(ordered, ordered[1:]):
        if nxt.start < prev.end:
            raise SchedulingError(f"Segments overlap: {prev} and {nxt}")


def format_average(value: Fraction) -> str:
    """Round to two fractional digits for display; 8/3 -> '2.67'."""
    return f"{float(value):.2f}"
