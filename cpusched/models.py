from __future__ import annotations

from copy import copy
from dataclasses import dataclass, field
from typing import List, Optional

from .errors import SchedulingError


@dataclass
class Process:
    """
    Timing state of one job during a single simulation run.

    ``pid``, ``arrival_time``, ``burst_time`` and ``priority`` describe the
    job; everything else is filled in by the scheduler. ``response_time`` stays
    ``None`` until the first dispatch and the terminal fields stay ``None``
    until :meth:`finish`.
    """

    pid: int
    arrival_time: float
    burst_time: float
    priority: int = 0
    remaining_time: float = field(init=False)
    completion_time: Optional[float] = field(default=None, init=False)
    waiting_time: Optional[float] = field(default=None, init=False)
    turnaround_time: Optional[float] = field(default=None, init=False)
    response_time: Optional[float] = field(default=None, init=False)
    admitted: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.remaining_time = self.burst_time

    def clone(self) -> "Process":
        """Return an independent copy carrying the same timing state."""
        return copy(self)

    @property
    def is_complete(self) -> bool:
        return self.completion_time is not None

    def dispatch(self, now: float) -> None:
        if self.response_time is None:
            self.response_time = now - self.arrival_time

    def run_for(self, duration: float) -> None:
        if self.is_complete:
            raise SchedulingError(f"process {self.pid} already completed")
        self.remaining_time = max(self.remaining_time - duration, 0)

    def finish(self, now: float) -> None:
        if self.is_complete:
            raise SchedulingError(f"process {self.pid} already completed")
        self.remaining_time = 0
        self.completion_time = now
        self.turnaround_time = now - self.arrival_time
        # Total time spent not running, preemptions included.
        self.waiting_time = self.turnaround_time - self.burst_time


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    pid: int
    start_time: float
    end_time: float
    level: int = 0


@dataclass(frozen=True)
class Metrics:
    name: str
    avg_waiting_time: float
    avg_turnaround_time: float
    cpu_utilization_percent: float
    throughput: float
    avg_response_time: float


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[float]
    processes: List[Process] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    metrics: Optional[Metrics] = None
