#!/usr/bin/env python3
"""
Exception types raised by the Gravity Lab core.

Every error derives from SimulationError so a front-end can catch the whole
family in one place. Each one also derives from the closest built-in
exception, so callers that only know about ValueError or IndexError keep
working.

Validation always runs before any state is touched: when one of these is
raised, the simulation is exactly as it was before the call.
"""


class SimulationError(Exception):
    """Base class for all simulation errors."""


class InvalidConfigError(SimulationError, ValueError):
    """Too few bodies, a non-positive mass, or another rejected parameter."""


class IndexOutOfRangeError(SimulationError, IndexError):
    """A body index outside the current body set."""

    def __init__(self, index: int, count: int):
        super().__init__(f"body index {index} out of range for {count} bodies")
        self.index = index
        self.count = count


class UnknownBodyError(SimulationError, KeyError):
    """A rotation-composite body id that does not exist."""

    def __str__(self) -> str:
        return f"unknown body id: {self.args[0]!r}"


class SimulationStateError(SimulationError, RuntimeError):
    """An operation that is not valid in the controller's current state."""
