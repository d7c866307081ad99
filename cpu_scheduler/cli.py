"""
Command-line launcher.

Without ``--headless`` this starts the desktop front end. With it, one
schedule (or, with ``--compare``, every algorithm) is computed for the
``--process`` list and printed to stdout.

Usage:
    python -m cpu_scheduler [--appearance dark] [--quantum 2]
    python -m cpu_scheduler --headless RR --quantum 4 -p P1:0:5 -p P2:1:3
"""

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from . import config
from .engine import ALGORITHM_LABELS, Algorithm, schedule
from .errors import SchedulingError
from .metrics import compare, process_stats
from .models import Process, ProcessCollection

logger = logging.getLogger(__name__)


def parse_process(text: str) -> Process:
    """Parse ``PID:ARRIVAL:BURST[:PRIORITY]`` into a Process."""
    parts = text.split(":")
    if len(parts) not in (3, 4):
        raise argparse.ArgumentTypeError(
            f"expected PID:ARRIVAL:BURST[:PRIORITY], got {text!r}"
        )
    try:
        numbers = [int(part) for part in parts[1:]]
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"arrival, burst and priority must be integers in {text!r}"
        ) from None
    return Process(parts[0], *numbers)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cpu-scheduler",
        description="Simulate classic CPU scheduling algorithms.",
    )
    parser.add_argument(
        "--appearance",
        choices=["dark", "light", "system"],
        default=config.APPEARANCE_MODE,
        help="customtkinter appearance mode (default: %(default)s)",
    )
    parser.add_argument(
        "--theme",
        default=config.COLOR_THEME,
        help="customtkinter color theme (default: %(default)s)",
    )
    parser.add_argument(
        "--quantum",
        type=int,
        default=None,
        help=f"Round Robin time quantum (GUI default: {config.DEFAULT_QUANTUM})",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=config.LOG_LEVELS,
        default=config.LOG_LEVEL,
        help="logging level (default: %(default)s)",
    )
    parser.add_argument(
        "--headless",
        metavar="ALGORITHM",
        choices=[algorithm.value for algorithm in Algorithm],
        help="run one algorithm without the GUI and print the result",
    )
    parser.add_argument(
        "--compare",
        action="store_true",
        help="with --headless, also print a comparison of every algorithm",
    )
    parser.add_argument(
        "-p",
        "--process",
        dest="processes",
        action="append",
        type=parse_process,
        default=[],
        metavar="PID:ARRIVAL:BURST[:PRIORITY]",
        help="process for --headless runs (repeatable)",
    )
    return parser


def _print_run(processes: List[Process], algorithm: Algorithm, quantum: Optional[int]) -> None:
    segments = schedule(processes, algorithm, quantum)

    print(ALGORITHM_LABELS[algorithm])
    print("Segments:")
    for segment in segments:
        print(f"  {segment.pid:>6}  {segment.start:>6} - {segment.end:<6}")

    print(f"  {'PID':>6} {'Arrival':>8} {'Burst':>6} {'Prio':>5} {'Done':>6} {'TAT':>6} {'Wait':>6}")
    for row in process_stats(processes, segments):
        print(
            f"  {row['pid']:>6} {row['arrival_time']:>8} {row['burst_time']:>6} "
            f"{row['priority']:>5} {row['completion_time']:>6} "
            f"{row['turnaround_time']:>6} {row['waiting_time']:>6}"
        )

    print(f"Average Turnaround Time: {segments.average_turnaround_time:.2f}")
    print(f"Average Waiting Time: {segments.average_waiting_time:.2f}")


def _print_comparison(processes: List[Process], quantum: Optional[int]) -> None:
    print("Comparison:")
    for row in compare(processes, quantum):
        print(
            f"  {row['algorithm'].value:<20} "
            f"wait {row['avg_waiting']:>8.2f}  "
            f"tat {row['avg_turnaround']:>8.2f}  "
            f"util {row['cpu_utilization'] * 100:>6.2f}%  "
            f"thr {row['throughput']:.3f}"
        )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config.configure_logging(args.log_level)

    if args.headless is None:
        # Imported lazily so headless runs never need a display.
        from .app import CPUSchedulerApp

        quantum = args.quantum if args.quantum is not None else config.DEFAULT_QUANTUM
        CPUSchedulerApp(appearance=args.appearance, theme=args.theme, quantum=quantum).run()
        return 0

    processes: ProcessCollection[Process] = ProcessCollection(args.processes)
    try:
        _print_run(processes, Algorithm(args.headless), args.quantum)
        if args.compare:
            _print_comparison(processes, args.quantum)
    except SchedulingError as exc:
        logger.debug("Headless run rejected", exc_info=True)
        parser.error(str(exc))
    return 0


if __name__ == "__main__":
    sys.exit(main())
