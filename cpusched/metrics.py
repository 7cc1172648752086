from __future__ import annotations

from typing import Sequence

from .errors import MetricsUndefined
from .models import Metrics, Process


def elapsed_time(completed: Sequence[Process]) -> float:
    """
    Total simulated time of a run: the latest completion time.
    """
    if not completed:
        raise MetricsUndefined("no completed processes")
    return max(_terminal(p).completion_time for p in completed)


def compute_metrics(completed: Sequence[Process], total_elapsed_time: float, name: str) -> Metrics:
    """
    Aggregate a completed sequence into one metrics record.

    CPU utilization is the summed burst time over the elapsed time, as a
    percentage; throughput is processes per time unit.
    """
    if not completed:
        raise MetricsUndefined(f"{name}: cannot aggregate an empty completed sequence")
    if total_elapsed_time <= 0:
        raise MetricsUndefined(f"{name}: total elapsed time must be positive, got {total_elapsed_time!r}")

    processes = [_terminal(p) for p in completed]
    n = len(processes)
    return Metrics(
        name=name,
        avg_waiting_time=sum(p.waiting_time for p in processes) / n,
        avg_turnaround_time=sum(p.turnaround_time for p in processes) / n,
        cpu_utilization_percent=sum(p.burst_time for p in processes) / total_elapsed_time * 100,
        throughput=n / total_elapsed_time,
        avg_response_time=sum(p.response_time for p in processes) / n,
    )


def _terminal(process: Process) -> Process:
    if not process.is_complete or process.response_time is None:
        raise MetricsUndefined(f"process {process.pid} has not completed")
    return process
