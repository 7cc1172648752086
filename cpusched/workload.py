from __future__ import annotations

from random import Random
from typing import Callable, Dict, List, Tuple

from .models import Process

WorkloadFactory = Callable[[int, Random], List[Process]]


def random_workload(count: int, rng: Random) -> List[Process]:
    """Arrivals in [0, 100], bursts in [1, 20], priorities in [1, 10]."""
    processes = [
        Process(
            pid=i,
            arrival_time=rng.randint(0, 100),
            burst_time=rng.randint(1, 20),
            priority=rng.randint(1, 10),
        )
        for i in range(1, count + 1)
    ]
    return _by_arrival(processes)


def identical_workload(count: int, rng: Random) -> List[Process]:
    """Everything arrives at t=0 with a burst of 10; only priorities differ."""
    return [Process(pid=i, arrival_time=0, burst_time=10, priority=rng.randint(1, 10)) for i in range(1, count + 1)]


def bimodal_workload(count: int, rng: Random) -> List[Process]:
    """Each burst is either short (1-5) or long (50-100) with equal odds."""
    processes: List[Process] = []
    for i in range(1, count + 1):
        arrival = rng.randint(0, 50)
        if rng.random() < 0.5:
            burst = rng.randint(1, 5)
        else:
            burst = rng.randint(50, 100)
        processes.append(Process(pid=i, arrival_time=arrival, burst_time=burst, priority=rng.randint(1, 10)))
    return _by_arrival(processes)


def wide_priority_workload(count: int, rng: Random) -> List[Process]:
    """Priorities spread over [1, 100]."""
    processes = [
        Process(
            pid=i,
            arrival_time=rng.randint(0, 50),
            burst_time=rng.randint(1, 20),
            priority=rng.randint(1, 100),
        )
        for i in range(1, count + 1)
    ]
    return _by_arrival(processes)


# name -> (generator, process count used by the bench command)
SCENARIOS: Dict[str, Tuple[WorkloadFactory, int]] = {
    "large-scale": (random_workload, 50),
    "identical-arrivals": (identical_workload, 10),
    "bimodal-bursts": (bimodal_workload, 20),
    "wide-priorities": (wide_priority_workload, 20),
}


def _by_arrival(processes: List[Process]) -> List[Process]:
    return sorted(processes, key=lambda p: p.arrival_time)
