from __future__ import annotations

import logging

from rich.logging import RichHandler

DEFAULT_QUANTUM = 4
MLFQ_DEFAULT_QUANTUM = 8
MLFQ_LEVELS = 3
DEFAULT_SEED = 42

DEFAULT_ALGORITHMS = ["fcfs", "sjf", "rr", "priority", "srtf", "mlfq"]


def configure_logging(verbosity: int = 0) -> None:
    """
    Route the package loggers through rich.

    0 shows warnings only, 1 adds info, 2 or more adds per-dispatch debug output.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
