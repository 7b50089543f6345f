"""
schedsim package.

A CPU scheduling simulation engine (FCFS, SJF, SRTF, RR, Priority) with a
command-line front end for running workloads and comparing the results.
"""

from .engine import Simulator, run
from .errors import NotFoundError, SchedsimError, SchedulingError, ValidationError
from .models import ExecutionSegment, Process, RunResult, ScheduleRecord
from .registry import ProcessRegistry, make_process

__all__ = [
    "ExecutionSegment",
    "NotFoundError",
    "Process",
    "ProcessRegistry",
    "RunResult",
    "ScheduleRecord",
    "SchedsimError",
    "SchedulingError",
    "Simulator",
    "ValidationError",
    "make_process",
    "run",
]
