"""Cycle counter delivering clock edges to subscribers."""

from __future__ import annotations

from typing import List

from rtlsim.interfaces.clock import Clocked, IClock


class Clock(IClock):
    """Simple pub/sub clock that commits every subscriber on tick().

    The cycle count is the only notion of time in the simulator. There is
    no frequency and no delay model.
    """

    def __init__(self):
        self._cycle_count = 0
        self._subscribers: List[Clocked] = []

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    @property
    def subscribers(self) -> tuple[Clocked, ...]:
        return tuple(self._subscribers)

    def subscribe(self, subscriber: Clocked) -> None:
        if not callable(getattr(subscriber, "clock_edge", None)):
            raise TypeError(f"{subscriber!r} does not implement clock_edge()")
        if subscriber not in self._subscribers:
            self._subscribers.append(subscriber)

    def unsubscribe(self, subscriber: Clocked) -> None:
        if subscriber in self._subscribers:
            self._subscribers.remove(subscriber)

    def _validate_cycles(self, cycles: int) -> None:
        if cycles < 0:
            raise ValueError("cycles must be >= 0")

    def tick(self, cycles: int = 1) -> None:
        """Deliver cycles edges, one full subscriber pass per edge.

        The count only advances for edges every subscriber committed.
        """
        self._validate_cycles(cycles)

        for _ in range(cycles):
            for subscriber in list(self._subscribers):
                subscriber.clock_edge()
            self._cycle_count += 1

    def reset(self) -> None:
        self._cycle_count = 0
