from __future__ import annotations

import heapq
import logging
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Iterable, List, Optional, Tuple

from .models import Process, ScheduledSlice

logger = logging.getLogger(__name__)

# (process, level, horizon) -> how long the dispatched process runs.
# ``horizon`` is the time left until the next pending arrival, None if none.
SliceRule = Callable[[Process, int, Optional[float]], float]


class ReadyQueue(ABC):
    """Ready structure holding admitted, unfinished processes."""

    @abstractmethod
    def admit(self, process: Process) -> None:
        """Add a newly arrived process."""

    @abstractmethod
    def select(self) -> Tuple[Process, int]:
        """Remove and return the next process to dispatch and its level."""

    @abstractmethod
    def __len__(self) -> int:
        ...

    def requeue(self, process: Process, level: int) -> None:
        """Put back a process that was preempted before finishing."""
        self.admit(process)


class FifoReadyQueue(ReadyQueue):
    """Strict first-in first-out queue."""

    def __init__(self) -> None:
        self._queue: Deque[Process] = deque()

    def admit(self, process: Process) -> None:
        self._queue.append(process)

    def select(self) -> Tuple[Process, int]:
        return self._queue.popleft(), 0

    def __len__(self) -> int:
        return len(self._queue)


@dataclass(order=True)
class _HeapItem:
    key: Any
    seq: int
    process: Process = field(compare=False)


class OrderedReadyQueue(ReadyQueue):
    """
    Min-heap ordered by ``key(process)``.

    Keys are taken when a process is admitted or requeued. Equal keys fall
    back to insertion order, so a requeued process goes behind its peers.
    """

    def __init__(self, key: Callable[[Process], Any]) -> None:
        self._key = key
        self._heap: List[_HeapItem] = []
        self._seq = 0

    def admit(self, process: Process) -> None:
        heapq.heappush(self._heap, _HeapItem(self._key(process), self._seq, process))
        self._seq += 1

    def select(self) -> Tuple[Process, int]:
        return heapq.heappop(self._heap).process, 0

    def __len__(self) -> int:
        return len(self._heap)


class LeveledReadyQueue(ReadyQueue):
    """
    FIFO queues per level; the lowest-numbered non-empty level is always served.

    New arrivals enter level 0. A requeued process moves one level down and
    stays on the last level once it gets there. There is no promotion.
    """

    def __init__(self, levels: int) -> None:
        if levels < 1:
            raise ValueError("a leveled queue needs at least one level")
        self._queues: List[Deque[Process]] = [deque() for _ in range(levels)]

    @property
    def levels(self) -> int:
        return len(self._queues)

    def admit(self, process: Process) -> None:
        self._queues[0].append(process)

    def requeue(self, process: Process, level: int) -> None:
        next_level = min(level + 1, self.levels - 1)
        if next_level != level:
            logger.debug("demoting P%s from level %d to %d", process.pid, level, next_level)
        self._queues[next_level].append(process)

    def select(self) -> Tuple[Process, int]:
        for level, queue in enumerate(self._queues):
            if queue:
                return queue.popleft(), level
        raise IndexError("select from an empty ready queue")

    def __len__(self) -> int:
        return sum(len(q) for q in self._queues)


def simulate(
    processes: Iterable[Process],
    ready: ReadyQueue,
    slice_rule: SliceRule,
) -> Tuple[List[Process], List[ScheduledSlice]]:
    """
    Run the admission/dispatch loop shared by every policy.

    The input records are cloned first; the caller's objects are never
    touched. Returns the completed processes in completion order and the
    execution timeline.
    """
    # Stable sort keeps input order for identical arrivals.
    pending: Deque[Process] = deque(sorted((p.clone() for p in processes), key=lambda p: p.arrival_time))

    clock: float = 0
    completed: List[Process] = []
    timeline: List[ScheduledSlice] = []

    while True:
        while pending and pending[0].arrival_time <= clock:
            arrival = pending.popleft()
            arrival.admitted = True
            ready.admit(arrival)

        if not ready:
            if not pending:
                break
            # CPU idle until the next arrival.
            clock = pending[0].arrival_time
            continue

        process, level = ready.select()
        process.dispatch(clock)

        horizon = pending[0].arrival_time - clock if pending else None
        run_time = slice_rule(process, level, horizon)
        if run_time <= 0:
            raise ValueError(f"slice rule returned non-positive run time {run_time!r}")

        start_time = clock
        clock += run_time
        process.run_for(run_time)
        timeline.append(ScheduledSlice(pid=process.pid, start_time=start_time, end_time=clock, level=level))
        logger.debug("t=%s: P%s ran %s (level %d)", start_time, process.pid, run_time, level)

        if process.remaining_time <= 0:
            process.finish(clock)
            completed.append(process)
        else:
            ready.requeue(process, level)

    return completed, timeline
