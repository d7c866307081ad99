import random
from typing import List, Tuple

from cpu_scheduler.models import ExecutionSegment, Process, ProcessCollection


def make_processes(*specs: Tuple) -> ProcessCollection:
    """Build processes from (pid, arrival, burst[, priority]) tuples."""
    return ProcessCollection(Process(*spec) for spec in specs)


def as_tuples(segments: List[ExecutionSegment]) -> List[Tuple[str, int, int]]:
    """(pid, start, end) triples for compact assertions."""
    return [(s.pid, s.start, s.end) for s in segments]


def random_workload(seed: int, count: int = 25) -> ProcessCollection:
    rng = random.Random(seed)
    return make_processes(
        *[
            (f"P{i + 1}", rng.randint(0, 40), rng.randint(1, 12), rng.randint(0, 5))
            for i in range(count)
        ]
    )


WORKLOADS = {
    "single": make_processes(("P1", 3, 4, 1)),
    "textbook": make_processes(
        ("P1", 0, 8, 3), ("P2", 1, 4, 1), ("P3", 2, 9, 4), ("P4", 3, 5, 2)
    ),
    "idle_gaps": make_processes(
        ("P1", 2, 3, 2), ("P2", 10, 2, 1), ("P3", 11, 6, 0), ("P4", 30, 1, 5)
    ),
    "same_arrival": make_processes(
        ("A", 0, 3, 1), ("B", 0, 3, 1), ("C", 0, 1, 1), ("D", 0, 7, 1)
    ),
    "random_1": random_workload(1),
    "random_2": random_workload(2),
    "random_3": random_workload(3, count=60),
}
