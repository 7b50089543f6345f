from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional, Tuple

from .errors import NotFoundError, ValidationError
from .models import Process

logger = logging.getLogger(__name__)


def _parse_int(value, field_name: str) -> int:
    # bool is an int subclass; "True" as an arrival time is a caller bug.
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ValidationError(f"{field_name} must be an integer, got {value!r}")


def make_process(pid, arrival_time, burst_time, priority=None) -> Process:
    """
    Build a validated Process from raw field values.

    Integer fields may be given as ints or as strings of digits (form and
    CSV input). An empty or missing priority means "lowest priority".
    """
    pid = "" if pid is None else str(pid).strip()
    if not pid:
        raise ValidationError("Process id must not be empty")

    arrival = _parse_int(arrival_time, "arrival_time")
    if arrival < 0:
        raise ValidationError(f"arrival_time must be >= 0 for '{pid}', got {arrival}")

    burst = _parse_int(burst_time, "burst_time")
    if burst <= 0:
        raise ValidationError(f"burst_time must be > 0 for '{pid}', got {burst}")

    prio: Optional[int] = None
    if priority is not None and not (isinstance(priority, str) and not priority.strip()):
        prio = _parse_int(priority, "priority")

    return Process(pid=pid, arrival_time=arrival, burst_time=burst, priority=prio)


def _validated(process: Process) -> Process:
    return make_process(process.pid, process.arrival_time, process.burst_time, process.priority)


class ProcessRegistry:
    """
    Ordered set of process descriptors, unique by pid.

    Simulations never see the live list: they get a tuple from snapshot().
    remove() and update() raise NotFoundError for unknown ids.
    """

    def __init__(self, processes: Iterable[Process] = ()) -> None:
        self._processes: List[Process] = []
        self.extend(processes)

    def __len__(self) -> int:
        return len(self._processes)

    def __iter__(self) -> Iterator[Process]:
        return iter(self.snapshot())

    def __contains__(self, pid: object) -> bool:
        return self._index_of(pid) is not None

    def _index_of(self, pid) -> Optional[int]:
        for idx, p in enumerate(self._processes):
            if p.pid == pid:
                return idx
        return None

    def add(self, process: Process) -> None:
        process = _validated(process)
        if process.pid in self:
            raise ValidationError(f"Process id '{process.pid}' already exists")
        self._processes.append(process)
        logger.info("Added process %s", process.pid)

    def extend(self, processes: Iterable[Process]) -> None:
        """
        Add several processes at once. Either all of them are added or, on
        the first invalid or duplicate entry, none are.
        """
        current = len(self._processes)
        combined = freeze(self.snapshot() + tuple(processes))
        self._processes = list(combined)
        for process in combined[current:]:
            logger.info("Added process %s", process.pid)

    def update(self, pid: str, process: Process) -> None:
        idx = self._index_of(pid)
        if idx is None:
            raise NotFoundError(pid)

        process = _validated(process)
        other = self._index_of(process.pid)
        if other is not None and other != idx:
            raise ValidationError(f"Process id '{process.pid}' already exists")

        self._processes[idx] = process
        logger.info("Updated process %s", pid if pid == process.pid else f"{pid} -> {process.pid}")

    def remove(self, pid: str) -> None:
        idx = self._index_of(pid)
        if idx is None:
            raise NotFoundError(pid)
        del self._processes[idx]
        logger.info("Removed process %s", pid)

    def get(self, pid: str) -> Process:
        idx = self._index_of(pid)
        if idx is None:
            raise NotFoundError(pid)
        return self._processes[idx]

    def clear(self) -> None:
        self._processes.clear()
        logger.info("Cleared all processes")

    def snapshot(self) -> Tuple[Process, ...]:
        return tuple(self._processes)


def freeze(processes: Iterable[Process]) -> Tuple[Process, ...]:
    """
    Validate a caller-held list of processes and return it as a snapshot.
    Raises ValidationError on malformed entries or duplicate ids.
    """
    frozen: List[Process] = []
    seen: set[str] = set()
    for process in processes:
        process = _validated(process)
        if process.pid in seen:
            raise ValidationError(f"Process id '{process.pid}' already exists")
        seen.add(process.pid)
        frozen.append(process)
    return tuple(frozen)
