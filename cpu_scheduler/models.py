"""
Process model
=============

Value types shared by the scheduling engine and its consumers:

- ``Process``: one simulated process (arrival, burst, priority).
- ``ExecutionSegment``: one contiguous CPU execution interval.
- ``ProcessCollection``: an ordered list of either of the above that also
  carries the two averages computed by a scheduling run.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional, TypeVar


T = TypeVar("T")


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class Process:
    """
    Represents a single process for CPU scheduling.

    Attributes:
        pid:            A human-readable process identifier (e.g. "P1").
        arrival_time:   The time at which the process arrives in the ready queue.
        burst_time:     The total CPU time required by the process.
        priority:       Process priority (lower number = higher priority).
        remaining_time: CPU time still owed to the process. Only the engine's
                        private working copies ever decrement it.
    """

    pid: str
    arrival_time: int
    burst_time: int
    priority: int = 0
    remaining_time: int = field(init=False)

    def __post_init__(self) -> None:
        self.remaining_time = self.burst_time

    @property
    def finished(self) -> bool:
        return self.remaining_time <= 0


@dataclass(frozen=True)
class ExecutionSegment:
    """``pid`` occupied the CPU for ``duration`` time units from ``start``."""

    pid: str
    start: int
    duration: int

    @property
    def end(self) -> int:
        return self.start + self.duration


class ProcessCollection(List[T]):
    """
    Ordered list of processes (input) or execution segments (output).

    The two averages are only meaningful on a collection returned by
    ``cpu_scheduler.engine.schedule``; everywhere else they stay at 0.0.
    """

    def __init__(self, items: Iterable[T] = ()) -> None:
        super().__init__(items)
        self.average_turnaround_time: float = 0.0
        self.average_waiting_time: float = 0.0

    def clone(self) -> "ProcessCollection[T]":
        """Return an independent deep copy, safe for destructive simulation."""
        return copy.deepcopy(self)

    def sorted_by(self, key: Callable[[T], Any]) -> "ProcessCollection[T]":
        """Return a new collection ordered by ``key`` (stable for ties)."""
        return ProcessCollection(sorted(self, key=key))

    def find(self, predicate: Callable[[T], bool]) -> Optional[T]:
        return next((item for item in self if predicate(item)), None)

    def find_all(self, predicate: Callable[[T], bool]) -> "ProcessCollection[T]":
        return ProcessCollection(item for item in self if predicate(item))

    def find_last(self, predicate: Callable[[T], bool]) -> Optional[T]:
        return next((item for item in reversed(self) if predicate(item)), None)

    def __repr__(self) -> str:
        return (
            f"ProcessCollection({list.__repr__(self)}, "
            f"average_turnaround_time={self.average_turnaround_time}, "
            f"average_waiting_time={self.average_waiting_time})"
        )
