"""
Engine facade: the surface the presentation layer talks to.

``Simulator`` owns a ProcessRegistry and runs any of the five algorithms on a
snapshot of it. Every run returns a fresh, immutable RunResult.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .algorithms import ALGORITHMS, LABELS, resolve_algorithm, validate_quantum
from .errors import SchedulingError
from .metrics import build_records, check_invariants, compute_system_metrics, summarize
from .models import Process, RunResult
from .registry import ProcessRegistry, freeze
from .timeline import build_timeline

logger = logging.getLogger(__name__)


def run(algorithm: str, processes: Iterable[Process], quantum: Optional[int] = None) -> RunResult:
    """
    Run one scheduling algorithm over a fixed set of processes.

    All input errors are raised before any simulation starts: an unknown
    algorithm, an empty process set or a bad Round Robin quantum raise
    SchedulingError, malformed or duplicate descriptors raise ValidationError.
    The quantum is ignored by every algorithm except Round Robin.
    """
    key = resolve_algorithm(algorithm)

    snapshot = freeze(processes)
    if not snapshot:
        raise SchedulingError("Add at least one process before running a schedule")

    if key == "rr":
        quantum = validate_quantum(quantum)
    else:
        quantum = None

    raw = ALGORITHMS[key](snapshot, quantum=quantum)

    records = build_records(snapshot, raw)
    timeline = build_timeline(raw)
    check_invariants(snapshot, records, timeline)

    result = RunResult(
        algorithm=key,
        label=LABELS[key],
        quantum=quantum,
        timeline=tuple(timeline),
        records=tuple(records),
        summary=summarize(records),
        system=compute_system_metrics(records, timeline),
        processes=snapshot,
    )
    logger.info(
        "%s finished %d processes at t=%d (avg waiting %.2f)",
        result.label,
        len(records),
        result.system.makespan,
        float(result.summary.average_waiting_time),
    )
    return result


class Simulator:
    """
    Holds the process set being edited and runs simulations on snapshots.
    """

    def __init__(self, registry: Optional[ProcessRegistry] = None) -> None:
        self.registry = registry if registry is not None else ProcessRegistry()

    def add_process(self, process: Process) -> None:
        self.registry.add(process)

    def update_process(self, pid: str, process: Process) -> None:
        self.registry.update(pid, process)

    def remove_process(self, pid: str) -> None:
        self.registry.remove(pid)

    def run(self, algorithm: str, quantum: Optional[int] = None) -> RunResult:
        return run(algorithm, self.registry.snapshot(), quantum=quantum)
