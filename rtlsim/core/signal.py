"""Wires: typed nets that hold at most one value.

A Signal is created unset. Driving it stores a value (overwriting whatever
was there); sampling it returns that value. Sampling an unset Signal is a
wiring or ordering bug and raises UnsetSignalError instead of returning a
default, since digital logic values are never implicitly zero.
"""

from __future__ import annotations

from typing import Any, Generic, Iterable, Iterator, Optional, TypeVar

from rtlsim.core.exceptions import SignalTypeError, UnsetSignalError
from rtlsim.core.result import Err, Ok, SampleResult

T = TypeVar("T")

_UNSET = object()


def is_checkable_type(dtype: Any) -> bool:
    """Only plain classes are enforced; TypeVars, Any and aliases are not."""
    return isinstance(dtype, type) and dtype is not object


def type_matches(value: Any, dtype: Any) -> bool:
    """True if value may be driven onto a wire of dtype.

    bool is an int subclass but is not accepted where int is declared.
    """
    if not is_checkable_type(dtype):
        return True
    if isinstance(value, bool) and dtype is not bool:
        return not issubclass(dtype, int) and isinstance(value, dtype)
    return isinstance(value, dtype)


class Signal(Generic[T]):
    """A single wire holding ``unset`` or one value of type T.

    Args:
        dtype: Optional value type. When it is a concrete class, drive()
            rejects values of any other type.
        name: Label used in error messages.
    """

    __slots__ = ("_value", "dtype", "name")

    def __init__(self, dtype: Any = None, name: Optional[str] = None):
        self._value: Any = _UNSET
        self.dtype = dtype
        self.name = name

    def has_value(self) -> bool:
        return self._value is not _UNSET

    def drive(self, value: T) -> None:
        """Store value, replacing any previous one."""
        if not type_matches(value, self.dtype):
            raise SignalTypeError(self.name, self.dtype, value)
        self._value = value

    def sample(self) -> T:
        """Return the held value.

        Raises:
            UnsetSignalError: If nothing was driven since construction or reset
        """
        if self._value is _UNSET:
            raise UnsetSignalError(self.name)
        return self._value

    def try_sample(self) -> SampleResult[T]:
        """Like sample(), but report an unset wire as Err instead of raising."""
        if self._value is _UNSET:
            return Err(UnsetSignalError(self.name))
        return Ok(self._value)

    def reset(self) -> None:
        """Return the wire to the unset state."""
        self._value = _UNSET

    def __repr__(self) -> str:
        shown = "unset" if self._value is _UNSET else repr(self._value)
        label = f" {self.name}" if self.name else ""
        return f"<Signal{label} {shown}>"


class VecSignal(Generic[T]):
    """A fixed-width bus of independent wires.

    Each element follows the Signal contract on its own; the bus adds
    indexed access and whole-bus drive/sample and nothing else.
    """

    __slots__ = ("_elements", "dtype", "name")

    def __init__(self, width: int, dtype: Any = None, name: Optional[str] = None):
        if width <= 0:
            raise ValueError("VecSignal width must be positive")
        self.dtype = dtype
        self.name = name
        self._elements = tuple(
            Signal(dtype, name=f"{name}[{i}]" if name else None) for i in range(width)
        )

    @property
    def width(self) -> int:
        return len(self._elements)

    def __len__(self) -> int:
        return len(self._elements)

    def __getitem__(self, index: int) -> Signal[T]:
        return self._elements[index]

    def __iter__(self) -> Iterator[Signal[T]]:
        return iter(self._elements)

    def has_value(self) -> bool:
        return all(element.has_value() for element in self._elements)

    def drive(self, values: Iterable[T]) -> None:
        """Drive every element; values must match the bus width."""
        values = tuple(values)
        if len(values) != len(self._elements):
            raise ValueError(
                f"Bus {self.name or '<anonymous>'} is {len(self._elements)} wide, "
                f"got {len(values)} values"
            )
        for element, value in zip(self._elements, values):
            if not type_matches(value, self.dtype):
                raise SignalTypeError(element.name, self.dtype, value)
        for element, value in zip(self._elements, values):
            element.drive(value)

    def sample(self) -> tuple[T, ...]:
        """Sample every element; the first unset element raises."""
        return tuple(element.sample() for element in self._elements)

    def try_sample(self) -> SampleResult[tuple[T, ...]]:
        for element in self._elements:
            if not element.has_value():
                return Err(UnsetSignalError(element.name))
        return Ok(self.sample())

    def reset(self) -> None:
        for element in self._elements:
            element.reset()

    def __repr__(self) -> str:
        label = f" {self.name}" if self.name else ""
        return f"<VecSignal{label} {list(self._elements)!r}>"
