"""Cycle-based RTL simulation kernel.

Hardware modules are built from typed wires (Signal) and clocked storage
cells (Register). Each simulated cycle has two phases:
- settle(): combinational logic reads inputs and drives outputs and the
  staged inputs of registers
- clock_edge(): every register commits its staged value at once

Register updates are never visible before the edge that commits them.

Getting started:
    from rtlsim import Field, Module, Role, Signal, module

    @module
    class Adder(Module):
        fields = (
            Field("x", Role.INPUT, Signal[int]),
            Field("y", Role.INPUT, Signal[int]),
            Field("sum", Role.OUTPUT, Signal[int]),
        )

        def settle(self):
            self.sum.drive(self.x.sample() + self.y.sample())

    adder = Adder()
    adder.drive_x(1)
    adder.drive_y(2)
    adder.settle()
    assert adder.sample_sum() == 3
"""

from rtlsim.core.clock import Clock
from rtlsim.core.exceptions import (
    ConfigurationError,
    SchemaError,
    SignalTypeError,
    SimulatorError,
    UnknownPortError,
    UnsetSignalError,
)
from rtlsim.core.register import Register
from rtlsim.core.registry import create_module, list_available_modules, register_module
from rtlsim.core.result import Err, Ok
from rtlsim.core.schema import Field, Module, ModuleSchema, Role, compile_schema, module
from rtlsim.core.signal import Signal, VecSignal
from rtlsim.core.simulation_engine import SimulationEngine
from rtlsim.interfaces.clock import Clocked, Combinational
from rtlsim.utils.config_loader import load_testbench

__all__ = [
    # Primitives
    "Signal",
    "VecSignal",
    "Register",
    "Ok",
    "Err",
    # Protocols
    "Clocked",
    "Combinational",
    # Modules
    "Module",
    "module",
    "compile_schema",
    "Field",
    "ModuleSchema",
    "Role",
    # Simulation
    "Clock",
    "SimulationEngine",
    "load_testbench",
    # Registry
    "register_module",
    "create_module",
    "list_available_modules",
    # Errors
    "SimulatorError",
    "ConfigurationError",
    "SchemaError",
    "SignalTypeError",
    "UnknownPortError",
    "UnsetSignalError",
]
