"""Settle/edge protocols and the clock interface.

Every simulated module supports two operations per cycle:
- settle(): combinational pass. Reads inputs, drives outputs and the
  staged inputs of registers.
- clock_edge(): synchronous commit. Copies every register's staged input
  into its committed value.

The kernel never calls either on its own; the driver decides when.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable


@runtime_checkable
class Combinational(Protocol):
    """Anything with a combinational settle pass."""

    def settle(self) -> None:
        """Compute outputs from the current inputs."""
        ...


@runtime_checkable
class Clocked(Protocol):
    """Anything that commits state on a clock edge."""

    def clock_edge(self) -> None:
        """Commit staged values. Must not depend on sibling commit order."""
        ...


class IClock(ABC):
    """Clock interface used by the simulation engine."""

    @property
    @abstractmethod
    def cycle_count(self) -> int:
        """Total number of edges delivered so far."""
        ...

    @abstractmethod
    def subscribe(self, subscriber: Clocked) -> None:
        """Deliver future edges to subscriber."""
        ...

    @abstractmethod
    def unsubscribe(self, subscriber: Clocked) -> None:
        """Stop delivering edges to subscriber."""
        ...

    @abstractmethod
    def tick(self, cycles: int = 1) -> None:
        """Deliver cycles edges to every subscriber."""
        ...

    @abstractmethod
    def reset(self) -> None:
        """Reset cycle count to zero."""
        ...
