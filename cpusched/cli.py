from __future__ import annotations

import argparse
import logging
from pathlib import Path
from random import Random
from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from . import analysis
from .algorithms import ALGORITHMS, run_algorithm
from .config import DEFAULT_ALGORITHMS, DEFAULT_QUANTUM, DEFAULT_SEED, configure_logging
from .export import write_metrics_csv
from .gantt import build_rich_gantt
from .models import Process, ScheduleResult
from .runner import RunOutcome, run_suite, successful_metrics
from .workload import SCENARIOS
from .workload_io import load_workload

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cpusched",
        description="CPU scheduling simulator (FCFS, SJF, RR, Priority, SRTF, MLFQ).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Increase log output (-v info, -vv per-dispatch debug).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help=f"Algorithm to use ({', '.join(ALGORITHMS)}).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=float,
        default=None,
        help="Time quantum for round-robin / MLFQ (ignored by the others; MLFQ defaults to 8).",
    )
    run_parser.add_argument(
        "--event-driven",
        action="store_true",
        help="With srtf, re-select only on completion or arrival instead of every time unit.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=DEFAULT_ALGORITHMS,
        help=f"Algorithms to compare (default: {' '.join(DEFAULT_ALGORITHMS)}).",
    )
    _add_batch_options(compare_parser)
    compare_parser.add_argument(
        "--export",
        "-o",
        default=None,
        help="Write the comparison to this CSV file.",
    )

    bench_parser = subparsers.add_parser(
        "bench",
        help="Compare every algorithm on generated workloads (random, identical, bimodal, wide priorities).",
    )
    bench_parser.add_argument("--seed", type=int, default=DEFAULT_SEED, help=f"Random seed (default: {DEFAULT_SEED}).")
    bench_parser.add_argument(
        "--count",
        "-n",
        type=int,
        default=None,
        help="Processes per scenario (default: per-scenario size).",
    )
    _add_batch_options(bench_parser)
    bench_parser.add_argument(
        "--export-dir",
        default=None,
        help="Write one <scenario>_metrics.csv per scenario into this directory.",
    )

    return parser


def _add_batch_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--quantum",
        "-q",
        type=float,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for RR/MLFQ when included (default: {DEFAULT_QUANTUM}).",
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="Run the algorithms on a thread pool.",
    )


def _fmt(value: Optional[float]) -> str:
    if value is None:
        return ""
    return str(int(value)) if float(value).is_integer() else f"{value:.2f}"


def _print_result(result: ScheduleResult, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {_fmt(result.quantum)}")

    console.print()

    panel, time_marks = build_rich_gantt(result.timeline)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = [
        "PID",
        "Arrive",
        "Burst",
        "Priority",
        "Complete",
        "Wait",
        "Turnaround",
        "Response",
    ]

    proc_table = Table(title="Per-process metrics (completion order)", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for p in result.processes:
        proc_table.add_row(
            f"P{p.pid}",
            _fmt(p.arrival_time),
            _fmt(p.burst_time),
            str(p.priority),
            _fmt(p.completion_time),
            _fmt(p.waiting_time),
            _fmt(p.turnaround_time),
            _fmt(p.response_time),
        )

    console.print(proc_table)
    console.print()

    if result.metrics:
        m = result.metrics
        sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
        sys_table.add_column("Metric")
        sys_table.add_column("Value", justify="right")

        sys_table.add_row("Avg waiting", f"{m.avg_waiting_time:.2f}")
        sys_table.add_row("Avg turnaround", f"{m.avg_turnaround_time:.2f}")
        sys_table.add_row("Avg response", f"{m.avg_response_time:.2f}")
        sys_table.add_row("Throughput (proc/time)", f"{m.throughput:.4f}")
        sys_table.add_row("CPU utilization", f"{m.cpu_utilization_percent:.2f}%")

        console.print(sys_table)


def _print_comparison(title: str, outcomes: List[RunOutcome], console: Console) -> None:
    summary_table = Table(title=title, box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("CPU util", justify="right")
    summary_table.add_column("Throughput", justify="right")
    summary_table.add_column("Avg response", justify="right")

    for outcome in outcomes:
        if not outcome.ok:
            summary_table.add_row(outcome.name, "", f"[red]failed: {outcome.error}[/red]", "", "", "", "")
            continue
        m = outcome.metrics
        summary_table.add_row(
            m.name,
            _fmt(outcome.result.quantum),
            f"{m.avg_waiting_time:.2f}",
            f"{m.avg_turnaround_time:.2f}",
            f"{m.cpu_utilization_percent:.2f}%",
            f"{m.throughput:.4f}",
            f"{m.avg_response_time:.2f}",
        )

    console.print(summary_table)

    metrics = successful_metrics(outcomes)
    variances = analysis.spread(metrics)
    console.print(f"AWT variance: {variances['AWT']:.2f}   ATT variance: {variances['ATT']:.2f}")
    for anomaly in analysis.find_anomalies(metrics):
        console.print(
            f"[yellow]Anomaly:[/yellow] {anomaly.name} has unusually high/low {anomaly.metric} "
            f"({anomaly.value:.2f}, mean {anomaly.mean:.2f})"
        )


def _compare(
    title: str,
    processes: Sequence[Process],
    keys: Sequence[str],
    quantum: float,
    parallel: bool,
    export: Optional[Path],
    console: Console,
) -> List[RunOutcome]:
    outcomes = run_suite(keys, processes, quantum, parallel=parallel)
    _print_comparison(title, outcomes, console)
    if export is not None:
        write_metrics_csv(successful_metrics(outcomes), export)
        console.print(f"[dim]Saved {export}[/dim]")
    return outcomes


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    console = Console()

    try:
        if args.command == "run":
            algorithm = args.algorithm.lower()
            if args.event_driven:
                if algorithm != "srtf":
                    raise ValueError("--event-driven only applies to srtf")
                algorithm = "srtf-event"
            processes = load_workload(Path(args.workload))
            result = run_algorithm(algorithm, processes, quantum=args.quantum)
            _print_result(result, console)
            return 0

        if args.command == "compare":
            processes = load_workload(Path(args.workload))
            export = Path(args.export) if args.export else None
            outcomes = _compare(
                f"Algorithm comparison: {args.workload}",
                processes,
                args.algorithms,
                args.quantum,
                args.parallel,
                export,
                console,
            )
            return 0 if all(o.ok for o in outcomes) else 1

        if args.command == "bench":
            rng = Random(args.seed)
            export_dir = Path(args.export_dir) if args.export_dir else None
            if export_dir is not None:
                export_dir.mkdir(parents=True, exist_ok=True)
            failed = False
            for scenario, (factory, default_count) in SCENARIOS.items():
                count = args.count or default_count
                processes = factory(count, rng)
                logger.info("scenario %s: %d processes", scenario, count)
                export = export_dir / f"{scenario}_metrics.csv" if export_dir else None
                outcomes = _compare(
                    f"{scenario} ({count} processes)",
                    processes,
                    DEFAULT_ALGORITHMS,
                    args.quantum,
                    args.parallel,
                    export,
                    console,
                )
                failed = failed or not all(o.ok for o in outcomes)
                console.print()
            return 1 if failed else 0
    except (ValueError, OSError) as exc:
        console.print(f"[red]Error: {exc}[/red]")
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
