"""Exceptions raised by the scheduling engine."""


class SchedulingError(ValueError):
    """Base class for every error the engine raises."""


class UnsupportedAlgorithm(SchedulingError):
    """The algorithm selector is not one of the six supported policies."""


class InvalidInput(SchedulingError):
    """
    The process set (or the Round Robin quantum) cannot be simulated.

    Raised before any simulation state is built, e.g. for an empty process
    list, a non-positive burst time or a duplicate process identifier.
    """
