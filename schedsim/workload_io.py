from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import List, Mapping

from .errors import ValidationError
from .models import Process
from .registry import ProcessRegistry, make_process

logger = logging.getLogger(__name__)


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        processes = _load_json(path)
    elif suffix == ".csv":
        processes = _load_csv(path)
    else:
        raise ValidationError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    logger.info("Loaded %d processes from %s", len(processes), path)
    return processes


def load_registry(path: str | Path) -> ProcessRegistry:
    """
    Load a workload file into a fresh registry, rejecting duplicate ids.
    """
    return ProcessRegistry(load_workload(path))


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ValidationError(f"{path}: invalid JSON ({exc})") from exc

    if not isinstance(raw, list):
        raise ValidationError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        try:
            rows = list(csv.DictReader(f))
        except (UnicodeDecodeError, csv.Error) as exc:
            raise ValidationError(f"{path}: unreadable CSV ({exc})") from exc
    for row in rows:
        processes.append(_process_from_mapping(row))
    return processes


def _process_from_mapping(mapping) -> Process:
    if not isinstance(mapping, Mapping):
        raise ValidationError(f"Invalid process entry: {mapping!r}")

    try:
        return make_process(
            mapping.get("pid"),
            mapping.get("arrival_time"),
            mapping.get("burst_time"),
            mapping.get("priority"),
        )
    except ValidationError as exc:
        raise ValidationError(f"Invalid process entry {dict(mapping)!r}: {exc}") from exc
