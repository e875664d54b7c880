"""Core modules for the simulator.

- signal: wires (Signal) and wide buses (VecSignal)
- register: clocked storage cells
- result: Ok/Err results for non-raising reads
- schema: Module base class and the field schema compiler
- clock: cycle counter delivering clock edges
- simulation_engine: cycle driver and testbench runner
- registry: module registry and factory
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
from rtlsim.core.registry import (
    ModuleRegistry,
    create_module,
    get_module,
    list_available_modules,
    register_module,
    unregister_module,
)
from rtlsim.core.result import Err, Ok, SampleResult
from rtlsim.core.schema import Field, FieldSpec, Module, ModuleSchema, Role, compile_schema, module
from rtlsim.core.signal import Signal, VecSignal
from rtlsim.core.simulation_engine import CycleRecord, Mismatch, SimulationEngine, TestbenchReport

__all__ = [
    # Wires and storage
    "Signal",
    "VecSignal",
    "Register",
    "Ok",
    "Err",
    "SampleResult",
    # Schema compiler
    "Module",
    "module",
    "compile_schema",
    "Field",
    "FieldSpec",
    "ModuleSchema",
    "Role",
    # Clock / engine
    "Clock",
    "SimulationEngine",
    "CycleRecord",
    "Mismatch",
    "TestbenchReport",
    # Registry
    "ModuleRegistry",
    "register_module",
    "unregister_module",
    "get_module",
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
