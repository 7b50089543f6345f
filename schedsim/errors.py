from __future__ import annotations


class SchedsimError(Exception):
    """Base class for every error raised by the simulation engine."""


class ValidationError(SchedsimError, ValueError):
    """A process descriptor is malformed or collides with an existing one."""


class NotFoundError(SchedsimError, LookupError):
    """No process with the given id is registered."""

    def __init__(self, pid: str) -> None:
        super().__init__(f"No process with id '{pid}'")
        self.pid = pid


class SchedulingError(SchedsimError, ValueError):
    """
    A run cannot start: empty process set, unknown algorithm, or a missing
    or non-positive quantum for Round Robin.
    """
