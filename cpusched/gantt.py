from __future__ import annotations

from typing import Dict, List

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice


def _merge(slices: List[ScheduledSlice]) -> List[ScheduledSlice]:
    """
    Sort slices and join back-to-back slices of the same process.

    SRTF dispatches one time unit at a time; without merging its chart would
    be a column of one-character cells.
    """
    merged: List[ScheduledSlice] = []
    for sl in sorted(slices, key=lambda s: (s.start_time, s.end_time)):
        last = merged[-1] if merged else None
        if last is not None and last.pid == sl.pid and last.end_time == sl.start_time and last.level == sl.level:
            merged[-1] = ScheduledSlice(pid=last.pid, start_time=last.start_time, end_time=sl.end_time, level=last.level)
        else:
            merged.append(sl)
    return merged


def _width(start: float, end: float) -> int:
    return max(1, round(end - start))


def _mark(t: float) -> str:
    return f"{int(t)}" if float(t).is_integer() else f"{t:.1f}"


def render_gantt(slices: List[ScheduledSlice]) -> str:
    """
    Plain-text Gantt chart, one character per time unit.
    """
    if not slices:
        return "(no execution)"

    line = "|"
    labels = ""
    time_marks = "0"
    last_time: float = 0

    for sl in _merge(slices):
        idle_gap = _width(last_time, sl.start_time) if sl.start_time > last_time else 0
        if idle_gap > 0:
            line += "." * idle_gap
            labels += " " * idle_gap
            last_time = sl.start_time
            time_marks += f"{_mark(last_time):>4}"

        width = _width(sl.start_time, sl.end_time)
        line += "=" * width
        labels += f"P{sl.pid}"[:width].ljust(width)
        last_time = sl.end_time
        time_marks += f"{_mark(last_time):>4}"

    line += "|"

    return "\n".join(
        [
            "Gantt Chart:",
            line,
            labels,
            time_marks,
        ]
    )


def build_rich_gantt(slices: List[ScheduledSlice]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not slices:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    colors = ["red", "green", "yellow", "blue", "magenta", "cyan"]
    pid_to_color: Dict[int, str] = {}

    def pid_color(pid: int) -> str:
        if pid not in pid_to_color:
            idx = len(pid_to_color) % len(colors)
            pid_to_color[pid] = colors[idx]
        return pid_to_color[pid]

    timeline = Text()
    labels = Text()
    time_marks = "0"
    last_time: float = 0

    for sl in _merge(slices):
        if sl.start_time > last_time:
            idle_gap = _width(last_time, sl.start_time)
            timeline.append(" " * idle_gap)
            labels.append(" " * idle_gap)
            last_time = sl.start_time
            time_marks += f"{_mark(last_time):>4}"

        width = _width(sl.start_time, sl.end_time)
        color = pid_color(sl.pid)

        timeline.append(" " * width, style=f"on {color}")
        labels.append(f"P{sl.pid}"[:width].ljust(width), style="bold")

        last_time = sl.end_time
        time_marks += f"{_mark(last_time):>4}"

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks
