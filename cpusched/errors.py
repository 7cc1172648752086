from __future__ import annotations


class SchedulingError(ValueError):
    """Base class for every error raised by the simulator."""


class InvalidWorkload(SchedulingError):
    """The process set cannot be simulated (empty, bad burst/arrival, duplicate pid)."""


class InvalidQuantum(SchedulingError):
    """A preemptive policy was given a missing or non-positive quantum."""


class MetricsUndefined(SchedulingError):
    """Aggregate metrics would divide by zero or use unfinished records."""
