from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable

from .models import Metrics

HEADER = ["Algorithm", "AWT", "ATT", "CpuUtil", "Throughput", "ResponseTime"]


def write_metrics_csv(metrics: Iterable[Metrics], path: str | Path) -> Path:
    """
    Write one row per metrics record. Times and utilization use two decimals,
    throughput four.
    """
    path = Path(path)
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(HEADER)
        for m in metrics:
            writer.writerow(
                [
                    m.name,
                    f"{m.avg_waiting_time:.2f}",
                    f"{m.avg_turnaround_time:.2f}",
                    f"{m.cpu_utilization_percent:.2f}",
                    f"{m.throughput:.4f}",
                    f"{m.avg_response_time:.2f}",
                ]
            )
    return path
