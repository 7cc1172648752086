from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .algorithms import get_policy
from .errors import SchedulingError
from .metrics import elapsed_time
from .models import Metrics, Process, ScheduleResult

logger = logging.getLogger(__name__)


@dataclass
class RunOutcome:
    key: str
    name: str
    result: Optional[ScheduleResult] = None
    error: Optional[SchedulingError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def metrics(self) -> Optional[Metrics]:
        return self.result.metrics if self.result is not None else None


def run_one(key: str, processes: Sequence[Process], quantum: Optional[float] = None) -> RunOutcome:
    """
    Schedule and aggregate one algorithm. A SchedulingError is recorded on the
    outcome instead of propagating.
    """
    policy = get_policy(key)
    try:
        result = policy.schedule(processes, quantum)
        result.metrics = policy.compute_metrics(result.processes, elapsed_time(result.processes))
    except SchedulingError as exc:
        logger.warning("%s failed: %s", policy.name, exc)
        return RunOutcome(key=policy.key, name=policy.name, error=exc)
    return RunOutcome(key=policy.key, name=policy.name, result=result)


def run_suite(
    keys: Sequence[str],
    processes: Sequence[Process],
    quantum: Optional[float] = None,
    *,
    parallel: bool = False,
    max_workers: Optional[int] = None,
) -> List[RunOutcome]:
    """
    Run every algorithm in ``keys`` on the same workload.

    Outcomes come back in ``keys`` order, also when ``parallel`` is set.
    Unknown keys raise ValueError before anything runs.
    """
    for key in keys:
        get_policy(key)

    if not parallel:
        return [run_one(key, processes, quantum) for key in keys]

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(lambda key: run_one(key, processes, quantum), keys))


def successful_metrics(outcomes: Sequence[RunOutcome]) -> List[Metrics]:
    return [o.metrics for o in outcomes if o.ok]
