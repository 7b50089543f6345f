from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class Process:
    pid: str
    arrival_time: int
    burst_time: int
    priority: Optional[int] = None


@dataclass(frozen=True)
class ExecutionSegment:
    """
    One contiguous interval of the timeline. ``pid`` is None for an idle gap.
    """

    pid: Optional[str]
    start: int
    end: int

    @property
    def duration(self) -> int:
        return self.end - self.start

    @property
    def is_idle(self) -> bool:
        return self.pid is None


@dataclass(frozen=True)
class TickEvent:
    """A single time unit of CPU granted to ``pid`` starting at ``tick``."""

    pid: str
    tick: int


@dataclass(frozen=True)
class ScheduleRecord:
    pid: str
    arrival_time: int
    burst_time: int
    first_start: int
    completion_time: int
    turnaround_time: int
    waiting_time: int
    response_time: int
    priority: Optional[int] = None


@dataclass(frozen=True)
class RunSummary:
    average_waiting_time: Fraction
    average_turnaround_time: Fraction
    average_response_time: Fraction


@dataclass(frozen=True)
class SystemMetrics:
    makespan: int
    cpu_busy_time: int
    idle_time: int
    throughput: float
    cpu_utilization: float


@dataclass(frozen=True)
class RunResult:
    algorithm: str
    label: str
    quantum: Optional[int]
    timeline: Tuple[ExecutionSegment, ...]
    records: Tuple[ScheduleRecord, ...]
    summary: RunSummary
    system: SystemMetrics
    processes: Tuple[Process, ...] = field(default=(), repr=False)

    def busy_segments(self) -> List[ExecutionSegment]:
        return [seg for seg in self.timeline if not seg.is_idle]

    def segments_for(self, pid: str) -> List[ExecutionSegment]:
        return [seg for seg in self.timeline if seg.pid == pid]

    def record_for(self, pid: str) -> ScheduleRecord:
        for record in self.records:
            if record.pid == pid:
                return record
        raise KeyError(pid)
