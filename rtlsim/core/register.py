"""Clocked storage cells.

A Register separates what the current cycle computes from what the rest of
the circuit can see. Combinational logic stages a next value with drive();
every reader keeps seeing the committed value until clock_edge() copies the
staged value across. This is non-blocking assignment: nothing computed in a
cycle is visible in that same cycle.
"""

from __future__ import annotations

from typing import Any, Generic, Optional, TypeVar

from rtlsim.core.exceptions import SignalTypeError
from rtlsim.core.result import Ok, SampleResult
from rtlsim.core.signal import Signal, type_matches

T = TypeVar("T")


class Register(Generic[T]):
    """Storage cell with a staged input wire and a committed value.

    Unlike a Signal, a Register is never unset: it is built with an explicit
    initial value, which reset() also restores.
    """

    __slots__ = ("_input", "_data", "reset_value", "name")

    def __init__(self, reset_value: T, dtype: Any = None, name: Optional[str] = None):
        """Initialize a register.

        Args:
            reset_value: Committed value before the first edge and after reset()
            dtype: Optional value type enforced on the staged input
            name: Label used in error messages
        """
        if not type_matches(reset_value, dtype):
            raise SignalTypeError(name, dtype, reset_value)
        self.name = name
        self.reset_value = reset_value
        self._input: Signal[T] = Signal(dtype, name=f"{name}.d" if name else None)
        self._data = reset_value

    @property
    def dtype(self) -> Any:
        return self._input.dtype

    def sample(self) -> T:
        """Return the committed value. Never fails."""
        return self._data

    def drive(self, value: T) -> None:
        """Stage value for the next clock edge. sample() is unaffected."""
        self._input.drive(value)

    def has_staged(self) -> bool:
        return self._input.has_value()

    def settle(self) -> None:
        """A register has no combinational logic of its own."""

    def clock_edge(self) -> None:
        """Commit the staged value.

        The staged input is not cleared, so an edge with no new drive commits
        the previous staged value again.

        Raises:
            UnsetSignalError: If nothing was ever staged. The committed
                value is left unchanged.
        """
        self._data = self._input.sample()

    def try_clock_edge(self) -> SampleResult[T]:
        """Commit like clock_edge(), returning Ok(new value) or Err."""
        staged = self._input.try_sample()
        if isinstance(staged, Ok):
            self._data = staged.value
            return Ok(self._data)
        return staged

    def reset(self) -> None:
        """Restore the initial value and forget any staged input."""
        self._input.reset()
        self._data = self.reset_value

    def __repr__(self) -> str:
        label = f" {self.name}" if self.name else ""
        return f"<Register{label} q={self._data!r} d={self._input!r}>"
