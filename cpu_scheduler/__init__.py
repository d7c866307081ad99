"""CPU scheduling simulator: FCFS, SJF, SRTF, Priority and Round Robin."""

from .engine import ALGORITHM_LABELS, Algorithm, completion_time, schedule
from .errors import InvalidInput, SchedulingError, UnsupportedAlgorithm
from .models import ExecutionSegment, Process, ProcessCollection

__all__ = [
    "ALGORITHM_LABELS",
    "Algorithm",
    "ExecutionSegment",
    "InvalidInput",
    "Process",
    "ProcessCollection",
    "SchedulingError",
    "UnsupportedAlgorithm",
    "completion_time",
    "schedule",
]
