"""Explicit success/failure results for wire reads.

``Signal.sample()`` raises on an unset wire. Drivers that would rather
branch on the outcome than catch an exception use ``try_sample()`` /
``try_clock_edge()``, which return one of the two types below.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from rtlsim.core.exceptions import UnsetSignalError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful read carrying the sampled value."""

    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """A failed read carrying the error that ``sample()`` would have raised."""

    error: UnsetSignalError

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self):
        raise self.error


SampleResult = Union[Ok[T], Err]
