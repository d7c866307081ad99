"""
Tests for the scheduling engine.

Each algorithm is checked against hand-worked schedules, then every
algorithm is run over a set of workloads to check the properties that hold
for any correct schedule (burst conservation, completion bounds, input
left untouched, ...).
"""

import pytest

from cpu_scheduler.engine import Algorithm, completion_time, schedule
from cpu_scheduler.errors import InvalidInput, SchedulingError, UnsupportedAlgorithm
from cpu_scheduler.models import Process, ProcessCollection

from .helpers import WORKLOADS, as_tuples, make_processes

QUANTUM = 3


class TestFCFS:
    def test_runs_in_arrival_order(self, scenario_a: ProcessCollection) -> None:
        result = schedule(scenario_a, Algorithm.FCFS)
        assert as_tuples(result) == [("P1", 0, 5), ("P2", 5, 8)]
        assert result.average_turnaround_time == 6
        assert result.average_waiting_time == 2

    def test_ties_keep_input_order(self) -> None:
        processes = make_processes(("B", 0, 2), ("A", 0, 1), ("C", 0, 3))
        assert [s.pid for s in schedule(processes, "FCFS")] == ["B", "A", "C"]

    def test_idle_gap_jumps_to_next_arrival(self) -> None:
        processes = make_processes(("P1", 0, 2), ("P2", 5, 3))
        assert as_tuples(schedule(processes, Algorithm.FCFS)) == [
            ("P1", 0, 2),
            ("P2", 5, 8),
        ]

    def test_clock_starts_at_first_arrival(self) -> None:
        result = schedule(make_processes(("P1", 3, 2)), Algorithm.FCFS)
        assert as_tuples(result) == [("P1", 3, 5)]
        assert result.average_turnaround_time == 2
        assert result.average_waiting_time == 0


class TestSJF:
    def test_picks_shortest_ready_job(self, scenario_b: ProcessCollection) -> None:
        result = schedule(scenario_b, Algorithm.SJF)
        assert as_tuples(result) == [
            ("P1", 0, 8),
            ("P2", 8, 12),
            ("P4", 12, 17),
            ("P3", 17, 26),
        ]
        assert result.average_turnaround_time == 14.25
        assert result.average_waiting_time == 7.75

    def test_equal_bursts_prefer_earlier_arrival(self) -> None:
        processes = make_processes(("A", 0, 4), ("B", 2, 3), ("C", 1, 3))
        assert as_tuples(schedule(processes, Algorithm.SJF)) == [
            ("A", 0, 4),
            ("C", 4, 7),
            ("B", 7, 10),
        ]

    def test_full_tie_keeps_input_order(self) -> None:
        processes = make_processes(("A", 0, 2), ("C", 1, 3), ("B", 1, 3))
        assert [s.pid for s in schedule(processes, Algorithm.SJF)] == ["A", "C", "B"]

    def test_idle_gap(self) -> None:
        processes = make_processes(("P1", 0, 2), ("P2", 6, 1), ("P3", 6, 4))
        assert as_tuples(schedule(processes, Algorithm.SJF)) == [
            ("P1", 0, 2),
            ("P2", 6, 7),
            ("P3", 7, 11),
        ]


class TestSJFPreemptive:
    def test_shorter_arrival_preempts(self, scenario_b: ProcessCollection) -> None:
        result = schedule(scenario_b, Algorithm.SJF_PREEMPTIVE)
        assert as_tuples(result) == [
            ("P1", 0, 1),
            ("P2", 1, 5),
            ("P4", 5, 10),
            ("P1", 10, 17),
            ("P3", 17, 26),
        ]
        assert result.average_turnaround_time == 13
        assert result.average_waiting_time == 6.5

    def test_equal_remaining_time_does_not_preempt(self) -> None:
        processes = make_processes(("P1", 0, 4), ("P2", 1, 3))
        assert as_tuples(schedule(processes, Algorithm.SJF_PREEMPTIVE)) == [
            ("P1", 0, 4),
            ("P2", 4, 7),
        ]

    def test_idle_gap_then_resume(self) -> None:
        processes = make_processes(("P1", 1, 3), ("P2", 8, 5), ("P3", 9, 1))
        assert as_tuples(schedule(processes, Algorithm.SJF_PREEMPTIVE)) == [
            ("P1", 1, 4),
            ("P2", 8, 9),
            ("P3", 9, 10),
            ("P2", 10, 14),
        ]


class TestPriority:
    def test_lower_number_runs_first(self) -> None:
        processes = make_processes(("P1", 0, 4, 3), ("P2", 1, 3, 1), ("P3", 2, 2, 2))
        result = schedule(processes, Algorithm.PRIORITY)
        assert as_tuples(result) == [("P1", 0, 4), ("P2", 4, 7), ("P3", 7, 9)]

    def test_never_preempts(self, scenario_d: ProcessCollection) -> None:
        assert as_tuples(schedule(scenario_d, Algorithm.PRIORITY)) == [
            ("P1", 0, 4),
            ("P2", 4, 6),
        ]


class TestPriorityPreemptive:
    def test_higher_priority_arrival_preempts(self, scenario_d: ProcessCollection) -> None:
        result = schedule(scenario_d, Algorithm.PRIORITY_PREEMPTIVE)
        assert as_tuples(result) == [("P1", 0, 2), ("P2", 2, 4), ("P1", 4, 6)]
        assert result.average_turnaround_time == 4
        assert result.average_waiting_time == 1

    def test_equal_priority_does_not_preempt(self) -> None:
        processes = make_processes(("P1", 0, 3, 1), ("P2", 1, 2, 1))
        assert as_tuples(schedule(processes, Algorithm.PRIORITY_PREEMPTIVE)) == [
            ("P1", 0, 3),
            ("P2", 3, 5),
        ]

    def test_preempting_process_is_the_best_ready_one(self) -> None:
        processes = make_processes(("P1", 0, 5, 3), ("P2", 1, 2, 2), ("P3", 1, 2, 1))
        assert as_tuples(schedule(processes, Algorithm.PRIORITY_PREEMPTIVE)) == [
            ("P1", 0, 1),
            ("P3", 1, 3),
            ("P2", 3, 5),
            ("P1", 5, 9),
        ]


class TestRoundRobin:
    def test_quantum_expiry_requeues(self, scenario_a: ProcessCollection) -> None:
        result = schedule(scenario_a, Algorithm.RR, quantum=4)
        assert as_tuples(result) == [("P1", 0, 4), ("P2", 4, 7), ("P1", 7, 8)]
        assert result.average_turnaround_time == 7
        assert result.average_waiting_time == 3

    def test_arrival_queues_ahead_of_preempted_process(self) -> None:
        processes = make_processes(("P1", 0, 4), ("P2", 2, 2))
        assert as_tuples(schedule(processes, "RR", quantum=2)) == [
            ("P1", 0, 2),
            ("P2", 2, 4),
            ("P1", 4, 6),
        ]

    def test_simultaneous_arrivals_alternate(self) -> None:
        processes = make_processes(("P1", 0, 3), ("P2", 0, 3))
        assert as_tuples(schedule(processes, Algorithm.RR, quantum=2)) == [
            ("P1", 0, 2),
            ("P2", 2, 4),
            ("P1", 4, 5),
            ("P2", 5, 6),
        ]

    def test_segments_are_not_merged(self) -> None:
        """A lone process still gets one segment per quantum."""
        processes = make_processes(("P1", 0, 2), ("P2", 5, 3))
        assert as_tuples(schedule(processes, Algorithm.RR, quantum=2)) == [
            ("P1", 0, 2),
            ("P2", 5, 7),
            ("P2", 7, 8),
        ]

    def test_fresh_quantum_after_early_finish(self) -> None:
        processes = make_processes(("P1", 0, 1), ("P2", 0, 5))
        assert as_tuples(schedule(processes, Algorithm.RR, quantum=3)) == [
            ("P1", 0, 1),
            ("P2", 1, 4),
            ("P2", 4, 6),
        ]


class TestCompletionTime:
    def test_sequential_completion(self) -> None:
        processes = make_processes(("P1", 1, 3), ("P2", 2, 2))
        assert completion_time(processes, 0) == 4
        assert completion_time(processes, 1) == 6

    def test_idle_gap_jumps_clock(self) -> None:
        processes = make_processes(("P1", 0, 2), ("P2", 5, 3))
        assert completion_time(processes, 0) == 2
        assert completion_time(processes, 1) == 8

    @pytest.mark.parametrize("algorithm", list(Algorithm))
    @pytest.mark.parametrize("name", sorted(WORKLOADS))
    def test_matches_end_of_every_schedule(self, algorithm: Algorithm, name: str) -> None:
        """Every algorithm keeps the CPU busy whenever work is ready."""
        processes = WORKLOADS[name]
        ordered = processes.sorted_by(lambda p: (p.arrival_time, p.burst_time))
        result = schedule(processes, algorithm, QUANTUM)
        assert max(s.end for s in result) == completion_time(ordered, len(ordered) - 1)


class TestValidation:
    def test_unknown_algorithm(self, scenario_a: ProcessCollection) -> None:
        with pytest.raises(UnsupportedAlgorithm, match="LOTTERY"):
            schedule(scenario_a, "LOTTERY")

    def test_errors_are_value_errors(self) -> None:
        assert issubclass(UnsupportedAlgorithm, SchedulingError)
        assert issubclass(InvalidInput, ValueError)

    @pytest.mark.parametrize(
        "processes",
        [
            [],
            [Process("P1", 0, 0)],
            [Process("P1", 0, -2)],
            [Process("P1", -1, 2)],
            [Process("P1", 0, 2), Process("P1", 1, 2)],
            [Process("P1", 0, 2.5)],
            [Process("P1", 0, True)],
            [Process("P1", False, 2)],
            [Process("P1", 0, 2, priority=True)],
        ],
        ids=[
            "empty",
            "zero-burst",
            "negative-burst",
            "negative-arrival",
            "duplicate-pid",
            "float-burst",
            "bool-burst",
            "bool-arrival",
            "bool-priority",
        ],
    )
    def test_invalid_processes(self, processes) -> None:
        with pytest.raises(InvalidInput):
            schedule(processes, Algorithm.FCFS)

    @pytest.mark.parametrize("quantum", [None, 0, -3, 1.5, True])
    def test_round_robin_needs_positive_quantum(
        self, scenario_a: ProcessCollection, quantum
    ) -> None:
        with pytest.raises(InvalidInput):
            schedule(scenario_a, Algorithm.RR, quantum)

    def test_quantum_ignored_by_other_algorithms(self, scenario_a: ProcessCollection) -> None:
        assert as_tuples(schedule(scenario_a, Algorithm.FCFS, quantum=0)) == [
            ("P1", 0, 5),
            ("P2", 5, 8),
        ]


@pytest.mark.parametrize("algorithm", list(Algorithm))
@pytest.mark.parametrize("name", sorted(WORKLOADS))
class TestScheduleProperties:
    def test_segments_cover_each_burst_exactly(self, algorithm: Algorithm, name: str) -> None:
        processes = WORKLOADS[name]
        result = schedule(processes, algorithm, QUANTUM)
        for p in processes:
            ran = sum(s.duration for s in result.find_all(lambda s: s.pid == p.pid))
            assert ran == p.burst_time

    def test_segments_never_overlap(self, algorithm: Algorithm, name: str) -> None:
        result = schedule(WORKLOADS[name], algorithm, QUANTUM)
        for before, after in zip(result, result[1:]):
            assert before.end <= after.start
        assert all(s.duration > 0 for s in result)

    def test_no_segment_before_arrival(self, algorithm: Algorithm, name: str) -> None:
        processes = WORKLOADS[name]
        arrival = {p.pid: p.arrival_time for p in processes}
        result = schedule(processes, algorithm, QUANTUM)
        assert all(s.start >= arrival[s.pid] for s in result)

    def test_completion_and_waiting_bounds(self, algorithm: Algorithm, name: str) -> None:
        processes = WORKLOADS[name]
        result = schedule(processes, algorithm, QUANTUM)
        for p in processes:
            last = result.find_last(lambda s: s.pid == p.pid)
            assert last.end >= p.arrival_time + p.burst_time
        assert result.average_waiting_time >= 0
        assert result.average_turnaround_time >= result.average_waiting_time

    def test_non_preemptive_runs_once_per_process(
        self, algorithm: Algorithm, name: str
    ) -> None:
        processes = WORKLOADS[name]
        result = schedule(processes, algorithm, QUANTUM)
        if not algorithm.preemptive:
            assert len(result) == len(processes)
            assert sorted(s.pid for s in result) == sorted(p.pid for p in processes)

    def test_round_robin_respects_quantum(self, algorithm: Algorithm, name: str) -> None:
        result = schedule(WORKLOADS[name], algorithm, QUANTUM)
        if algorithm is Algorithm.RR:
            assert all(s.duration <= QUANTUM for s in result)

    def test_idempotent_and_input_untouched(self, algorithm: Algorithm, name: str) -> None:
        processes = WORKLOADS[name]
        snapshot = processes.clone()

        first = schedule(processes, algorithm, QUANTUM)
        second = schedule(processes, algorithm, QUANTUM)

        assert list(first) == list(second)
        assert first.average_turnaround_time == second.average_turnaround_time
        assert first.average_waiting_time == second.average_waiting_time
        assert processes == snapshot
        assert all(p.remaining_time == p.burst_time for p in processes)
