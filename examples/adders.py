"""Adder modules used by the example runners.

- Adder: purely combinational, sum = x + y
- RegisteredAdder: x + y goes through a register, so out lags by one edge
- ParamAdder: same as Adder for any value type supporting +
"""

from __future__ import annotations

from typing import Generic, TypeVar

from rtlsim import Field, Module, Register, Role, Signal, module

T = TypeVar("T")


@module(register="adder")
class Adder(Module):
    fields = (
        Field("x", Role.INPUT, Signal[int]),
        Field("y", Role.INPUT, Signal[int]),
        Field("sum", Role.OUTPUT, Signal[int]),
    )

    def settle(self) -> None:
        self.sum.drive(self.x.sample() + self.y.sample())


@module(register="registered_adder")
class RegisteredAdder(Module):
    fields = (
        Field("x", Role.INPUT, Signal[int]),
        Field("y", Role.INPUT, Signal[int]),
        Field("s", Role.CLOCKED, Register[int], reset=0),
        Field("out", Role.OUTPUT, Signal[int]),
    )

    def settle(self) -> None:
        self.s.drive(self.x.sample() + self.y.sample())
        self.out.drive(self.s.sample())


@module(register="param_adder")
class ParamAdder(Module, Generic[T]):
    fields = (
        Field("x", Role.INPUT, Signal[T]),
        Field("y", Role.INPUT, Signal[T]),
        Field("sum", Role.OUTPUT, Signal[T]),
    )

    def settle(self) -> None:
        self.sum.drive(self.x.sample() + self.y.sample())
