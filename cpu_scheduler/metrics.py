"""
Per-process metrics, aggregate statistics and algorithm comparison built on
top of the segments returned by ``cpu_scheduler.engine.schedule``.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from .engine import ALGORITHM_LABELS, Algorithm, completion_times, schedule
from .models import ExecutionSegment, Process

logger = logging.getLogger(__name__)

# Each timeline entry is one contiguous interval of the Gantt chart.
TimelineEntry = Dict[str, Any]  # keys: "pid" (None when idle), "start", "end"


def process_stats(
    processes: Sequence[Process], segments: Sequence[ExecutionSegment]
) -> List[Dict[str, Any]]:
    """
    Per-process metrics for one run.

    Returns:
        One dictionary per process, sorted by PID, with keys:
        pid, arrival_time, burst_time, priority,
        completion_time, turnaround_time, waiting_time.
    """
    ct_by_pid = completion_times(segments)

    stats: List[Dict[str, Any]] = []
    for p in sorted(processes, key=lambda p: p.pid):
        ct = ct_by_pid[p.pid]
        tat = ct - p.arrival_time
        wt = tat - p.burst_time
        stats.append(
            {
                "pid": p.pid,
                "arrival_time": p.arrival_time,
                "burst_time": p.burst_time,
                "priority": p.priority,
                "completion_time": ct,
                "turnaround_time": tat,
                "waiting_time": wt,
            }
        )
    return stats


def aggregates(
    processes: Sequence[Process], segments: Sequence[ExecutionSegment]
) -> Dict[str, float]:
    """Compute aggregate metrics from a schedule and its process set."""
    stats = process_stats(processes, segments)
    if stats:
        total_waiting = sum(p["waiting_time"] for p in stats)
        total_turnaround = sum(p["turnaround_time"] for p in stats)
        avg_waiting = total_waiting / len(stats)
        avg_turnaround = total_turnaround / len(stats)
        min_waiting = min(p["waiting_time"] for p in stats)
        max_waiting = max(p["waiting_time"] for p in stats)
    else:
        avg_waiting = 0.0
        avg_turnaround = 0.0
        min_waiting = 0.0
        max_waiting = 0.0

    if segments:
        total_time = max(s.end for s in segments)
        busy_time = sum(s.duration for s in segments)
        cpu_utilization = (busy_time / total_time) if total_time > 0 else 0.0
        throughput = (len(stats) / total_time) if total_time > 0 else 0.0
    else:
        cpu_utilization = 0.0
        throughput = 0.0

    return {
        "avg_waiting": avg_waiting,
        "avg_turnaround": avg_turnaround,
        "min_waiting": min_waiting,
        "max_waiting": max_waiting,
        "cpu_utilization": cpu_utilization,
        "throughput": throughput,
    }


def timeline(segments: Sequence[ExecutionSegment]) -> List[TimelineEntry]:
    """
    Segments in start order as ``{"pid", "start", "end"}`` entries. Idle time
    from t = 0 onwards is filled by entries whose pid is ``None``.
    """
    entries: List[TimelineEntry] = []
    current_time = 0
    for segment in sorted(segments, key=lambda s: s.start):
        if current_time < segment.start:
            entries.append({"pid": None, "start": current_time, "end": segment.start})
        entries.append({"pid": segment.pid, "start": segment.start, "end": segment.end})
        current_time = segment.end
    return entries


def compare(
    processes: Sequence[Process], quantum: Optional[int] = None
) -> List[Dict[str, Any]]:
    """
    Run every algorithm on the same process set.

    Round Robin is skipped when no quantum is given. Each row holds the
    algorithm, its label and the ``aggregates`` of its run.
    """
    rows: List[Dict[str, Any]] = []
    for algorithm, label in ALGORITHM_LABELS.items():
        if algorithm is Algorithm.RR and quantum is None:
            logger.debug("Skipping Round Robin: no time quantum given")
            continue
        segments = schedule(processes, algorithm, quantum)
        row: Dict[str, Any] = {"algorithm": algorithm, "label": label}
        row.update(aggregates(processes, segments))
        rows.append(row)
    return rows
