"""Simulation engine for driving modules cycle by cycle.

The engine is an ordinary driver built on the generated module surface:
drive_<input>() accessors, settle(), sample_<output>() accessors and
clock_edge(). It adds no dependency analysis and never re-runs settle to
reach a fixed point; modules that feed each other must be stepped by the
caller in dependency order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional

from rtlsim.core.clock import Clock
from rtlsim.core.exceptions import SimulatorError, UnknownPortError
from rtlsim.core.registry import create_module

if TYPE_CHECKING:
    from rtlsim.core.schema import Module
    from rtlsim.utils.config_loader import TestbenchConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CycleRecord:
    """Inputs driven and outputs observed in one simulated cycle."""

    cycle: int
    inputs: dict[str, Any]
    outputs: dict[str, Any]


@dataclass(frozen=True)
class Mismatch:
    cycle: int
    port: str
    expected: Any
    actual: Any


@dataclass
class TestbenchReport:
    """Result of running a testbench against a module."""

    __test__ = False  # not a pytest test class

    module: str
    records: list[CycleRecord] = field(default_factory=list)
    mismatches: list[Mismatch] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.mismatches


class SimulationEngine:
    """Minimal cycle driver.

    Each step drives the given inputs, settles the module and samples its
    outputs. With clock=True the step then commits an edge through the
    engine's Clock and settles once more, so outputs computed from register
    state show the committed values.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or Clock()

    @property
    def cycle_count(self) -> int:
        return self.clock.cycle_count

    def settle(self, module: "Module") -> None:
        """Run the module's combinational pass once."""
        module.settle()

    def attach(self, module: "Module") -> None:
        """Put module on the engine clock so every edge commits it."""
        self.clock.subscribe(module)

    def detach(self, module: "Module") -> None:
        self.clock.unsubscribe(module)

    def tick(self, cycles: int = 1) -> None:
        """Commit cycles edges on every attached module."""
        self.clock.tick(cycles)

    def clock_edge(self, module: "Module") -> None:
        """Commit one clock edge on module and advance the cycle count.

        Attached modules share the clock and are committed on the same edge.
        """
        if module in self.clock.subscribers:
            self.clock.tick()
            return

        self.clock.subscribe(module)
        try:
            self.clock.tick()
        finally:
            self.clock.unsubscribe(module)

    def drive(self, module: "Module", inputs: Mapping[str, Any]) -> None:
        """Drive each named input through its generated accessor."""
        schema = type(module).__schema__
        for port, value in inputs.items():
            if port not in schema.inputs:
                raise UnknownPortError(schema.module, port, "input")
            getattr(module, f"drive_{port}")(value)

    def sample(self, module: "Module") -> dict[str, Any]:
        """Sample every output through its generated accessor."""
        schema = type(module).__schema__
        return {port: getattr(module, f"sample_{port}")() for port in schema.outputs}

    def step(
        self,
        module: "Module",
        inputs: Optional[Mapping[str, Any]] = None,
        clock: bool = True,
        resettle: bool = True,
    ) -> CycleRecord:
        """Advance the module by one cycle.

        With resettle=False settle runs exactly once and registered outputs
        lag the edge by one cycle, as when driving the module by hand.

        Raises:
            UnsetSignalError: If settle reads an undriven wire, an output is
                never driven, or a register commits with nothing staged
        """
        cycle = self.clock.cycle_count
        inputs = dict(inputs or {})
        try:
            self.drive(module, inputs)
            self.settle(module)
            if clock:
                self.clock_edge(module)
                if resettle:
                    self.settle(module)
            outputs = self.sample(module)
        except SimulatorError as exc:
            logger.error(f"Cycle {cycle} of {type(module).__name__} failed: {exc}")
            raise

        logger.debug(f"Cycle {cycle}: inputs={inputs} outputs={outputs}")
        return CycleRecord(cycle=cycle, inputs=inputs, outputs=outputs)

    def run(
        self,
        module: "Module",
        stimulus: Iterable[Mapping[str, Any]],
        clock: bool = True,
        resettle: bool = True,
    ) -> list[CycleRecord]:
        """Step once per stimulus mapping."""
        return [self.step(module, inputs, clock=clock, resettle=resettle) for inputs in stimulus]

    def run_testbench(self, config: "TestbenchConfig") -> TestbenchReport:
        """Instantiate the configured module and check every expected output."""
        module = create_module(config.module, **config.params)
        schema = type(module).__schema__
        report = TestbenchReport(module=config.module)

        for cycle_cfg in config.cycles:
            for port in cycle_cfg.expect:
                if port not in schema.outputs:
                    raise UnknownPortError(schema.module, port, "output")

            record = self.step(module, cycle_cfg.inputs, clock=config.clock)
            report.records.append(record)
            for port, expected in cycle_cfg.expect.items():
                actual = record.outputs[port]
                if actual != expected:
                    logger.warning(
                        f"Cycle {record.cycle}: {port} expected {expected!r}, got {actual!r}"
                    )
                    report.mismatches.append(
                        Mismatch(cycle=record.cycle, port=port, expected=expected, actual=actual)
                    )

        return report

    def reset(self, module: "Module") -> None:
        """Reset the module's wires and registers and the cycle count."""
        module.reset()
        self.clock.reset()
