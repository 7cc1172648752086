"""
CPU scheduling simulator.

Runs FCFS, SJF, Round Robin, Priority, SRTF and MLFQ over the same workload
and compares waiting, turnaround and response times, CPU utilization and
throughput.
"""

from .algorithms import ALGORITHMS, run_algorithm
from .errors import InvalidQuantum, InvalidWorkload, MetricsUndefined, SchedulingError
from .metrics import compute_metrics
from .models import Metrics, Process, ScheduleResult

__all__ = [
    "ALGORITHMS",
    "run_algorithm",
    "compute_metrics",
    "Metrics",
    "Process",
    "ScheduleResult",
    "SchedulingError",
    "InvalidWorkload",
    "InvalidQuantum",
    "MetricsUndefined",
    "cli",
]
