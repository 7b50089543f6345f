from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from .errors import SchedulingError
from .models import ExecutionSegment, Process, TickEvent
from .timeline import segments_from_ticks

logger = logging.getLogger(__name__)


def _run_in_order(ordered: Iterable[Process]) -> List[ExecutionSegment]:
    """
    Run each process to completion in the given order, never starting one
    before it has arrived.
    """
    clock = 0
    segments: List[ExecutionSegment] = []

    for p in ordered:
        start = max(clock, p.arrival_time)
        end = start + p.burst_time
        segments.append(ExecutionSegment(pid=p.pid, start=start, end=end))
        clock = end

    return segments


def schedule_fcfs(processes: Sequence[Process], quantum: Optional[int] = None) -> List[ExecutionSegment]:
    """
    First-Come First-Serve (non-preemptive).

    Ties on arrival time keep registry order.
    """
    return _run_in_order(sorted(processes, key=lambda p: p.arrival_time))


def schedule_sjf(processes: Sequence[Process], quantum: Optional[int] = None) -> List[ExecutionSegment]:
    """
    Shortest Job First, as a static ordering.

    The whole input is sorted once by (burst_time, arrival_time) and then run
    like FCFS. There is no re-evaluation when the CPU frees up, so a short job
    that arrives after a longer one has been placed ahead of it still waits,
    and the CPU can sit idle waiting for a job sorted earlier that has not
    arrived yet. This differs from textbook non-preemptive SJF.
    """
    return _run_in_order(sorted(processes, key=lambda p: (p.burst_time, p.arrival_time)))


def schedule_priority(processes: Sequence[Process], quantum: Optional[int] = None) -> List[ExecutionSegment]:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority. A missing priority
    sorts after every explicit one. Ties are broken by arrival time, then
    registry order.
    """

    def priority_key(p: Process):
        return (p.priority is None, p.priority or 0, p.arrival_time)

    return _run_in_order(sorted(processes, key=priority_key))


def simulate_srtf(processes: Sequence[Process]) -> List[TickEvent]:
    """
    Shortest Remaining Time First, one tick at a time.

    Returns the raw tick events; idle ticks are not emitted. On equal
    remaining time the process found first in registry order wins.
    """
    remaining: Dict[str, int] = {p.pid: p.burst_time for p in processes}
    completed: set[str] = set()
    events: List[TickEvent] = []

    clock = 0
    last_pid: Optional[str] = None

    while len(completed) < len(processes):
        ready = [p for p in processes if p.arrival_time <= clock and p.pid not in completed]
        if not ready:
            # Idle ticks emit no events, so skip straight to the next arrival.
            clock = min(p.arrival_time for p in processes if p.pid not in completed)
            continue

        current = min(ready, key=lambda p: remaining[p.pid])
        if last_pid is not None and last_pid != current.pid and last_pid not in completed:
            logger.debug(
                "t=%d: %s preempts %s (remaining %d < %d)",
                clock,
                current.pid,
                last_pid,
                remaining[current.pid],
                remaining[last_pid],
            )

        events.append(TickEvent(pid=current.pid, tick=clock))
        remaining[current.pid] -= 1
        clock += 1
        last_pid = current.pid

        if remaining[current.pid] == 0:
            completed.add(current.pid)
            logger.debug("t=%d: %s completed", clock, current.pid)

    return events


def schedule_srtf(processes: Sequence[Process], quantum: Optional[int] = None) -> List[ExecutionSegment]:
    """
    Shortest Remaining Time First (preemptive SJF).
    """
    return segments_from_ticks(simulate_srtf(processes))


def validate_quantum(quantum) -> int:
    if isinstance(quantum, bool) or not isinstance(quantum, int):
        raise SchedulingError(f"Round Robin requires an integer quantum, got {quantum!r}")
    if quantum <= 0:
        raise SchedulingError(f"Round Robin requires a positive quantum, got {quantum}")
    return quantum


def schedule_rr(processes: Sequence[Process], quantum: Optional[int] = None) -> List[ExecutionSegment]:
    """
    Round Robin scheduling with a fixed time quantum.

    The queue is seeded with every process in arrival order. A slice starts at
    max(clock, ready_time), where ready_time is the arrival time for the first
    slice and the clock at re-enqueue for later ones. Each slice yields one
    segment.
    """
    quantum = validate_quantum(quantum)

    # (process, remaining burst, ready time)
    queue = deque((p, p.burst_time, p.arrival_time) for p in sorted(processes, key=lambda p: p.arrival_time))

    clock = 0
    segments: List[ExecutionSegment] = []

    while queue:
        p, remaining, ready_time = queue.popleft()
        run_time = min(remaining, quantum)
        start = max(clock, ready_time)
        end = start + run_time
        segments.append(ExecutionSegment(pid=p.pid, start=start, end=end))

        clock = end
        remaining -= run_time

        if remaining > 0:
            queue.append((p, remaining, clock))
            logger.debug("t=%d: %s re-enqueued with %d remaining", clock, p.pid, remaining)

    return segments


Scheduler = Callable[..., List[ExecutionSegment]]

ALGORITHMS: Dict[str, Scheduler] = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "srtf": schedule_srtf,
    "rr": schedule_rr,
    "priority": schedule_priority,
}

LABELS: Dict[str, str] = {
    "fcfs": "FCFS",
    "sjf": "SJF (static ordering)",
    "srtf": "SRTF",
    "rr": "Round Robin",
    "priority": "Priority (non-preemptive)",
}

ALIASES: Dict[str, str] = {
    "round-robin": "rr",
    "round_robin": "rr",
}


def resolve_algorithm(name: str) -> str:
    """
    Normalize an algorithm name to its key in ALGORITHMS.
    """
    if not isinstance(name, str):
        raise SchedulingError(f"Unknown algorithm {name!r}")
    key = name.strip().lower()
    key = ALIASES.get(key, key)
    if key not in ALGORITHMS:
        raise SchedulingError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")
    return key
