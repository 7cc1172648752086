from __future__ import annotations

from dataclasses import dataclass
from statistics import mean, pstdev, pvariance
from typing import Dict, List, Sequence

from .models import Metrics

# attribute name -> short label used in reports
_TRACKED = {"avg_waiting_time": "AWT", "avg_turnaround_time": "ATT"}


@dataclass(frozen=True)
class Anomaly:
    name: str
    metric: str
    value: float
    mean: float


def spread(metrics: Sequence[Metrics]) -> Dict[str, float]:
    """Population variance of AWT and ATT across algorithms."""
    if not metrics:
        return {label: 0.0 for label in _TRACKED.values()}
    return {label: pvariance([getattr(m, attr) for m in metrics]) for attr, label in _TRACKED.items()}


def find_anomalies(metrics: Sequence[Metrics], threshold: float = 2.0) -> List[Anomaly]:
    """
    Flag records whose AWT or ATT lies more than ``threshold`` standard
    deviations away from the cross-algorithm mean.
    """
    if not metrics:
        return []

    anomalies: List[Anomaly] = []
    for attr, label in _TRACKED.items():
        values = [getattr(m, attr) for m in metrics]
        centre = mean(values)
        limit = threshold * pstdev(values)
        for m, value in zip(metrics, values):
            if abs(value - centre) > limit:
                anomalies.append(Anomaly(name=m.name, metric=label, value=value, mean=centre))
    return anomalies
