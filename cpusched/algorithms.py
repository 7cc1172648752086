from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from .config import MLFQ_DEFAULT_QUANTUM, MLFQ_LEVELS
from .errors import InvalidQuantum, InvalidWorkload
from .metrics import compute_metrics, elapsed_time
from .models import Metrics, Process, ScheduleResult
from .ready_queue import (
    FifoReadyQueue,
    LeveledReadyQueue,
    OrderedReadyQueue,
    ReadyQueue,
    SliceRule,
    simulate,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Policy:
    """
    One scheduling discipline.

    ``make_queue`` builds a fresh ready structure per run and ``slice_rule``
    turns the effective quantum into the run-length rule for each dispatch.
    """

    key: str
    name: str
    make_queue: Callable[[Optional[float]], ReadyQueue]
    slice_rule: Callable[[Optional[float]], SliceRule]
    uses_quantum: bool = False
    default_quantum: Optional[float] = None

    def effective_quantum(self, quantum: Optional[float]) -> Optional[float]:
        if not self.uses_quantum:
            return None
        if quantum is None:
            quantum = self.default_quantum
        if quantum is None:
            raise InvalidQuantum(f"{self.name} requires a quantum")
        if math.isnan(quantum) or quantum <= 0:
            raise InvalidQuantum(f"{self.name} quantum must be positive, got {quantum!r}")
        return quantum

    def schedule(self, processes: Sequence[Process], quantum: Optional[float] = None) -> ScheduleResult:
        """
        Simulate ``processes`` and return the completed, fully timed sequence.

        The caller's records are left untouched; the run works on clones.
        """
        validate_workload(processes)
        q = self.effective_quantum(quantum)
        completed, timeline = simulate(processes, self.make_queue(q), self.slice_rule(q))
        logger.info("%s: %d processes completed at t=%s", self.name, len(completed), timeline[-1].end_time)
        return ScheduleResult(algorithm=self.name, quantum=q, processes=completed, timeline=timeline)

    def compute_metrics(self, completed: Sequence[Process], total_elapsed_time: float) -> Metrics:
        return compute_metrics(completed, total_elapsed_time, self.name)


def validate_workload(processes: Sequence[Process]) -> None:
    if not processes:
        raise InvalidWorkload("workload is empty")
    seen = set()
    for p in processes:
        if not (math.isfinite(p.arrival_time) and math.isfinite(p.burst_time)):
            raise InvalidWorkload(f"process {p.pid}: arrival and burst times must be finite numbers")
        if p.burst_time <= 0:
            raise InvalidWorkload(f"process {p.pid}: burst time must be positive, got {p.burst_time!r}")
        if p.arrival_time < 0:
            raise InvalidWorkload(f"process {p.pid}: arrival time cannot be negative, got {p.arrival_time!r}")
        if p.pid in seen:
            raise InvalidWorkload(f"duplicate process id {p.pid}")
        seen.add(p.pid)


def _run_to_completion(quantum: Optional[float]) -> SliceRule:
    return lambda process, level, horizon: process.remaining_time


def _fixed_quantum(quantum: Optional[float]) -> SliceRule:
    return lambda process, level, horizon: min(quantum, process.remaining_time)


def _unit_step(quantum: Optional[float]) -> SliceRule:
    return lambda process, level, horizon: min(1, process.remaining_time)


def _until_next_arrival(quantum: Optional[float]) -> SliceRule:
    def rule(process: Process, level: int, horizon: Optional[float]) -> float:
        if horizon is None:
            return process.remaining_time
        return min(horizon, process.remaining_time)

    return rule


def _mlfq_quanta(quantum: float) -> List[float]:
    # Q, 2Q, ... and an unbounded last level.
    return [quantum * 2 ** level for level in range(MLFQ_LEVELS - 1)] + [float("inf")]


def _leveled_quantum(quantum: Optional[float]) -> SliceRule:
    quanta = _mlfq_quanta(quantum)
    return lambda process, level, horizon: min(quanta[level], process.remaining_time)


FCFS = Policy(
    key="fcfs",
    name="First Come, First Served",
    make_queue=lambda q: FifoReadyQueue(),
    slice_rule=_run_to_completion,
)

SJF = Policy(
    key="sjf",
    name="Shortest Job First",
    make_queue=lambda q: OrderedReadyQueue(key=lambda p: (p.burst_time, p.arrival_time)),
    slice_rule=_run_to_completion,
)

ROUND_ROBIN = Policy(
    key="rr",
    name="Round Robin",
    make_queue=lambda q: FifoReadyQueue(),
    slice_rule=_fixed_quantum,
    uses_quantum=True,
)

PRIORITY = Policy(
    key="priority",
    name="Priority Scheduling",
    make_queue=lambda q: OrderedReadyQueue(key=lambda p: (p.priority, p.arrival_time)),
    slice_rule=_run_to_completion,
)

SRTF = Policy(
    key="srtf",
    name="Shortest Remaining Time First",
    make_queue=lambda q: OrderedReadyQueue(key=lambda p: p.remaining_time),
    slice_rule=_unit_step,
)

SRTF_EVENT = Policy(
    key="srtf-event",
    name="Shortest Remaining Time First (event-driven)",
    make_queue=lambda q: OrderedReadyQueue(key=lambda p: p.remaining_time),
    slice_rule=_until_next_arrival,
)

MLFQ = Policy(
    key="mlfq",
    name="Multi-Level Feedback Queue",
    make_queue=lambda q: LeveledReadyQueue(MLFQ_LEVELS),
    slice_rule=_leveled_quantum,
    uses_quantum=True,
    default_quantum=MLFQ_DEFAULT_QUANTUM,
)


def schedule_fcfs(processes: Sequence[Process], quantum: Optional[float] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive).
    """
    return FCFS.schedule(processes, quantum)


def schedule_sjf(processes: Sequence[Process], quantum: Optional[float] = None) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive).

    Among arrived processes, choose the smallest burst time; ties go to the
    earlier arrival.
    """
    return SJF.schedule(processes, quantum)


def schedule_rr(processes: Sequence[Process], quantum: Optional[float] = None) -> ScheduleResult:
    """
    Round Robin with a fixed quantum. A preempted process goes to the back
    of the queue, ahead of anything that arrived during its slice.
    """
    return ROUND_ROBIN.schedule(processes, quantum)


def schedule_priority(processes: Sequence[Process], quantum: Optional[float] = None) -> ScheduleResult:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority; ties go to the
    earlier arrival.
    """
    return PRIORITY.schedule(processes, quantum)


def schedule_srtf(
    processes: Sequence[Process],
    quantum: Optional[float] = None,
    event_driven: bool = False,
) -> ScheduleResult:
    """
    Shortest Remaining Time First (preemptive SJF).

    By default the choice is re-made after every time unit. With
    ``event_driven`` the running process keeps the CPU until it finishes or
    the next process arrives.
    """
    policy = SRTF_EVENT if event_driven else SRTF
    return policy.schedule(processes, quantum)


def schedule_mlfq(processes: Sequence[Process], quantum: Optional[float] = None) -> ScheduleResult:
    """
    Multi-Level Feedback Queue with 3 levels and quanta Q, 2Q and unbounded.

    - New arrivals enter the highest-priority queue (level 0).
    - The highest non-empty level is always served first.
    - A process that uses up its quantum without finishing drops one level.
    - Nothing is ever promoted, so long jobs can starve under steady arrivals.
    """
    return MLFQ.schedule(processes, quantum)


ALGORITHMS: Dict[str, Policy] = {
    policy.key: policy for policy in (FCFS, SJF, ROUND_ROBIN, PRIORITY, SRTF, SRTF_EVENT, MLFQ)
}


def get_policy(name: str) -> Policy:
    key = name.lower()
    if key not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")
    return ALGORITHMS[key]


def run_algorithm(name: str, processes: Sequence[Process], quantum: Optional[float] = None) -> ScheduleResult:
    """
    Schedule ``processes`` with the named algorithm and attach its metrics.
    """
    policy = get_policy(name)
    result = policy.schedule(processes, quantum)
    result.metrics = policy.compute_metrics(result.processes, elapsed_time(result.processes))
    return result
