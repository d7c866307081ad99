"""
Scheduling engine
=================

Simulates the classic CPU scheduling algorithms studied in an operating
systems course:

- First-Come, First-Served (FCFS)
- Shortest Job First (SJF), non-preemptive and preemptive (SRTF)
- Priority Scheduling, non-preemptive and preemptive
  (lower number = higher priority)
- Round Robin (with a configurable time quantum)

``schedule`` is the single entry point. It never touches the caller's
processes: every run works on a private clone and returns a new
``ProcessCollection`` of ``ExecutionSegment`` entries, with the average
turnaround and waiting times filled in.

Time is an integer logical clock. Instead of stepping one unit at a time,
the simulation jumps straight to the next interesting instant (an arrival,
a completion, or the end of a time slice); the segment boundaries are the
same as those of a unit-by-unit simulation.
"""

import heapq
import logging
from collections import deque
from enum import Enum
from typing import Callable, Deque, Dict, List, Optional, Sequence, Tuple, Union

from .errors import InvalidInput, UnsupportedAlgorithm
from .models import ExecutionSegment, Process, ProcessCollection

logger = logging.getLogger(__name__)


class Algorithm(str, Enum):
    """Fixed set of supported algorithms, keyed by their short names."""

    FCFS = "FCFS"
    SJF_PREEMPTIVE = "SJF_PREEMPTIVE"
    SJF = "SJF"
    PRIORITY_PREEMPTIVE = "PRIORITY_PREEMPTIVE"
    PRIORITY = "PRIORITY"
    RR = "RR"

    @property
    def label(self) -> str:
        return ALGORITHM_LABELS[self]

    @property
    def preemptive(self) -> bool:
        return self in (
            Algorithm.SJF_PREEMPTIVE,
            Algorithm.PRIORITY_PREEMPTIVE,
            Algorithm.RR,
        )


# Human-readable labels, in display order.
ALGORITHM_LABELS: Dict[Algorithm, str] = {
    Algorithm.FCFS: "First-Come, First-Served (FCFS)",
    Algorithm.SJF: "Shortest Job First (SJF, non-preemptive)",
    Algorithm.SJF_PREEMPTIVE: "Shortest Remaining Time First (SJF, preemptive)",
    Algorithm.PRIORITY: "Priority Scheduling (non-preemptive)",
    Algorithm.PRIORITY_PREEMPTIVE: "Priority Scheduling (preemptive)",
    Algorithm.RR: "Round Robin (RR)",
}

ProcessKey = Callable[[Process], int]

# Ready-set heap entry: (key, arrival_time, input_index, process).
_ReadyEntry = Tuple[int, int, int, Process]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def schedule(
    processes: Sequence[Process],
    algorithm: Union[Algorithm, str],
    quantum: Optional[int] = None,
) -> ProcessCollection[ExecutionSegment]:
    """
    Run one scheduling algorithm over ``processes``.

    Args:
        processes: The process set, in input order. Never modified.
        algorithm: An ``Algorithm`` member or its key (e.g. ``"RR"``).
        quantum:   Time slice for Round Robin; ignored by the other algorithms.

    Returns:
        A new collection of execution segments in execution order, with
        ``average_turnaround_time`` and ``average_waiting_time`` set.

    Raises:
        UnsupportedAlgorithm: ``algorithm`` is not one of the six policies.
        InvalidInput: the process set or quantum cannot be simulated.
    """
    algorithm = resolve_algorithm(algorithm)
    validate(processes, algorithm, quantum)

    working: ProcessCollection[Process] = ProcessCollection(processes).clone()
    for process in working:
        process.remaining_time = process.burst_time

    logger.debug("Running %s over %d processes", algorithm.value, len(working))

    if algorithm is Algorithm.FCFS:
        segments = _fcfs(working)
    elif algorithm is Algorithm.SJF:
        segments = _run_by_key(working, _remaining, preemptive=False)
    elif algorithm is Algorithm.SJF_PREEMPTIVE:
        segments = _run_by_key(working, _remaining, preemptive=True)
    elif algorithm is Algorithm.PRIORITY:
        segments = _run_by_key(working, _priority, preemptive=False)
    elif algorithm is Algorithm.PRIORITY_PREEMPTIVE:
        segments = _run_by_key(working, _priority, preemptive=True)
    else:
        segments = _round_robin(working, quantum)

    result: ProcessCollection[ExecutionSegment] = ProcessCollection(segments)
    _calculate_averages(result, working)

    logger.info(
        "%s: %d processes, %d segments, avg turnaround %.2f, avg waiting %.2f",
        algorithm.value,
        len(working),
        len(result),
        result.average_turnaround_time,
        result.average_waiting_time,
    )
    return result


def resolve_algorithm(algorithm: Union[Algorithm, str]) -> Algorithm:
    """Map an algorithm key to its ``Algorithm`` member."""
    if isinstance(algorithm, Algorithm):
        return algorithm
    try:
        return Algorithm(algorithm)
    except ValueError:
        raise UnsupportedAlgorithm(f"Unsupported algorithm key: {algorithm}") from None


def validate(
    processes: Sequence[Process],
    algorithm: Algorithm,
    quantum: Optional[int] = None,
) -> None:
    """Reject input that cannot be simulated (see ``InvalidInput``)."""
    if not processes:
        raise InvalidInput("At least one process is required.")

    seen = set()
    for p in processes:
        if not all(_is_int(v) for v in (p.arrival_time, p.burst_time, p.priority)):
            raise InvalidInput(
                f"{p.pid}: arrival, burst and priority must be integers."
            )
        if p.arrival_time < 0:
            raise InvalidInput(f"{p.pid}: arrival time must be >= 0.")
        if p.burst_time <= 0:
            raise InvalidInput(f"{p.pid}: burst time must be > 0.")
        if p.pid in seen:
            raise InvalidInput(f"Duplicate process identifier: {p.pid}")
        seen.add(p.pid)

    if algorithm is Algorithm.RR:
        if quantum is None:
            raise InvalidInput("Time quantum is required for Round Robin.")
        if not _is_int(quantum) or quantum <= 0:
            raise InvalidInput("Time quantum must be a positive integer.")


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def completion_time(processes: Sequence[Process], index: int) -> int:
    """
    Completion time of ``processes[index]`` under strictly sequential,
    non-preemptive execution in the given order.

    The clock starts at the first process's arrival. A process that has not
    arrived yet makes the clock jump forward to its arrival (idle gap);
    otherwise its full burst is added and the walk moves on.

    For a list sorted by arrival, ``completion_time(ps, len(ps) - 1)`` is the
    moment any work-conserving algorithm finishes the whole set.
    """
    clock = processes[0].arrival_time
    i = 0
    while i <= index:
        arrival = processes[i].arrival_time
        if arrival > clock:
            clock = arrival
        else:
            clock += processes[i].burst_time
            i += 1
    return clock


def completion_times(segments: Sequence[ExecutionSegment]) -> Dict[str, int]:
    """Map each pid to the end of its last execution segment."""
    result: Dict[str, int] = {}
    for segment in segments:
        result[segment.pid] = max(result.get(segment.pid, 0), segment.end)
    return result


# ---------------------------------------------------------------------------
# Scheduling algorithms
# ---------------------------------------------------------------------------


def _remaining(p: Process) -> int:
    return p.remaining_time


def _priority(p: Process) -> int:
    return p.priority


def _fcfs(processes: ProcessCollection[Process]) -> List[ExecutionSegment]:
    """
    First-Come, First-Served (FCFS) scheduling.

    Processes run to completion in arrival order (input order breaks ties).
    If the CPU becomes idle, time jumps forward to the next arrival.
    """
    ordered = processes.sorted_by(lambda p: p.arrival_time)

    current_time = ordered[0].arrival_time
    segments: List[ExecutionSegment] = []

    for p in ordered:
        if current_time < p.arrival_time:
            current_time = p.arrival_time
        segments.append(ExecutionSegment(p.pid, current_time, p.burst_time))
        current_time += p.burst_time
        p.remaining_time = 0

    return segments


def _run_by_key(
    processes: ProcessCollection[Process],
    key: ProcessKey,
    preemptive: bool,
) -> List[ExecutionSegment]:
    """
    Shared simulation for SJF, SRTF and both Priority variants.

    Among the arrived, unfinished processes the one with the smallest
    ``key`` runs (ties: earlier arrival, then input order). Non-preemptive
    runs keep the CPU until the process finishes. Preemptive runs are
    re-evaluated at every arrival: a ready process with a strictly smaller
    key takes the CPU, an equal key does not.
    """
    input_index = {p.pid: i for i, p in enumerate(processes)}
    ordered = processes.sorted_by(lambda p: (p.arrival_time, key(p)))
    horizon = completion_time(ordered, len(ordered) - 1)

    pending: Deque[Process] = deque(ordered)
    ready: List[_ReadyEntry] = []

    def admit(now: int) -> None:
        while pending and pending[0].arrival_time <= now:
            p = pending.popleft()
            heapq.heappush(ready, (key(p), p.arrival_time, input_index[p.pid], p))

    segments: List[ExecutionSegment] = []
    current: Optional[Process] = None
    current_time = ordered[0].arrival_time
    start = current_time

    while current_time < horizon:
        admit(current_time)

        if current is None:
            if not ready:
                # CPU idle until the next arrival.
                current_time = pending[0].arrival_time
                continue
            current = heapq.heappop(ready)[-1]
            start = current_time
            logger.debug("t=%d: dispatch %s", current_time, current.pid)

        run_until = current_time + current.remaining_time
        if preemptive and pending and pending[0].arrival_time < run_until:
            run_until = pending[0].arrival_time

        current.remaining_time -= run_until - current_time
        current_time = run_until

        if current.finished:
            logger.debug("t=%d: %s finished", current_time, current.pid)
            segments.append(ExecutionSegment(current.pid, start, current_time - start))
            current = None
            continue

        admit(current_time)
        if ready and ready[0][0] < key(current):
            logger.debug(
                "t=%d: %s preempted by %s", current_time, current.pid, ready[0][-1].pid
            )
            segments.append(ExecutionSegment(current.pid, start, current_time - start))
            heapq.heappush(
                ready,
                (key(current), current.arrival_time, input_index[current.pid], current),
            )
            current = None

    return segments


def _round_robin(
    processes: ProcessCollection[Process], quantum: int
) -> List[ExecutionSegment]:
    """
    Round Robin (RR) scheduling with a given time quantum.

    Concept:
        - Each process runs for at most ``quantum`` time units per turn.
        - Processes that arrive while the CPU is busy join the ready queue
          as soon as they arrive, ahead of the process whose slice just
          ended.
        - An unfinished process goes back to the tail of the queue; every
          new occupant starts with a full quantum.
        - When the ready queue is empty, the CPU is idle until the next
          process arrives.
    """
    ordered = processes.sorted_by(lambda p: p.arrival_time)
    horizon = completion_time(ordered, len(ordered) - 1)

    pending: Deque[Process] = deque(ordered)
    ready_queue: Deque[Process] = deque()

    def admit(now: int) -> None:
        while pending and pending[0].arrival_time <= now:
            ready_queue.append(pending.popleft())

    segments: List[ExecutionSegment] = []
    current_time = ordered[0].arrival_time

    while current_time < horizon:
        admit(current_time)

        if not ready_queue:
            current_time = pending[0].arrival_time
            continue

        current = ready_queue.popleft()
        run_time = min(quantum, current.remaining_time)
        segments.append(ExecutionSegment(current.pid, current_time, run_time))

        current_time += run_time
        current.remaining_time -= run_time

        # Arrivals during this slice queue up before the preempted process.
        admit(current_time)

        if current.finished:
            logger.debug("t=%d: %s finished", current_time, current.pid)
        else:
            ready_queue.append(current)

    return segments


# ---------------------------------------------------------------------------
# Averaging
# ---------------------------------------------------------------------------


def _calculate_averages(
    segments: ProcessCollection[ExecutionSegment],
    processes: Sequence[Process],
) -> None:
    """
    Fill in the average turnaround and waiting times of ``segments``.

    A preempted process counts once, using the end of its last segment.
    """
    ct = completion_times(segments)
    total_turnaround = 0
    total_waiting = 0
    for p in processes:
        turnaround = ct[p.pid] - p.arrival_time
        total_turnaround += turnaround
        total_waiting += turnaround - p.burst_time

    segments.average_turnaround_time = total_turnaround / len(processes)
    segments.average_waiting_time = total_waiting / len(processes)
