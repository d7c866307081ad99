import pytest

from cpu_scheduler.models import ProcessCollection

from .helpers import make_processes


@pytest.fixture
def scenario_a() -> ProcessCollection:
    return make_processes(("P1", 0, 5), ("P2", 1, 3))


@pytest.fixture
def scenario_b() -> ProcessCollection:
    return make_processes(("P1", 0, 8), ("P2", 1, 4), ("P3", 2, 9), ("P4", 3, 5))


@pytest.fixture
def scenario_d() -> ProcessCollection:
    return make_processes(("P1", 0, 4, 2), ("P2", 2, 2, 1))
