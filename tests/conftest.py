"""
Pytest configuration and shared fixtures for the rtlsim test suite.
"""

import sys
import tempfile
from pathlib import Path

import pytest
import yaml

# Ensure project root is on PYTHONPATH so 'rtlsim' can be imported
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from rtlsim import Field, Module, Register, Role, Signal, VecSignal, module  # noqa: E402
from rtlsim.core.registry import ModuleRegistry  # noqa: E402


@module
class CombAdder(Module):
    fields = (
        Field("x", Role.INPUT, Signal[int]),
        Field("y", Role.INPUT, Signal[int]),
        Field("sum", Role.OUTPUT, Signal[int]),
    )

    def settle(self) -> None:
        self.sum.drive(self.x.sample() + self.y.sample())


@module
class RegAdder(Module):
    fields = (
        Field("x", Role.INPUT, Signal[int]),
        Field("y", Role.INPUT, Signal[int]),
        Field("s", Role.CLOCKED, Register[int], reset=0),
        Field("out", Role.OUTPUT, Signal[int]),
    )

    def settle(self) -> None:
        self.s.drive(self.x.sample() + self.y.sample())
        self.out.drive(self.s.sample())


@module
class Counter(Module):
    """Counts edges while enable is high."""

    fields = (
        Field("enable", Role.INPUT, Signal[bool]),
        Field("count", Role.CLOCKED, Register[int], reset=0),
        Field("value", Role.OUTPUT, Signal[int]),
    )

    def settle(self) -> None:
        current = self.count.sample()
        self.count.drive(current + 1 if self.enable.sample() else current)
        self.value.drive(current)


@module
class CounterPair(Module):
    """Two counters: one nested as a clocked field, one as a bare submodule."""

    fields = (
        Field("enable", Role.INPUT, Signal[bool]),
        Field("ticked", Role.CLOCKED, Counter),
        Field("parked", Role.SUBMODULE, Counter),
        Field("total", Role.OUTPUT, Signal[int]),
    )

    def settle(self) -> None:
        enable = self.enable.sample()
        for child in (self.ticked, self.parked):
            child.drive_enable(enable)
            child.settle()
        self.total.drive(self.ticked.sample_value() + self.parked.sample_value())


@module
class ByteSwap(Module):
    """Reverses the order of a four-lane bus."""

    fields = (
        Field("lanes", Role.INPUT, VecSignal[int], width=4),
        Field("swapped", Role.OUTPUT, VecSignal[int], width=4),
    )

    def settle(self) -> None:
        self.swapped.drive(reversed(self.lanes.sample()))


@pytest.fixture
def registry(monkeypatch):
    """Fresh global module registry holding the sample modules."""
    fresh = ModuleRegistry()
    monkeypatch.setattr("rtlsim.core.registry._REGISTRY", fresh)
    fresh.register("comb_adder", CombAdder)
    fresh.register("reg_adder", RegAdder)
    fresh.register("counter", Counter)
    fresh.register("byte_swap", ByteSwap)
    return fresh


@pytest.fixture
def comb_adder():
    return CombAdder()


@pytest.fixture
def reg_adder():
    return RegAdder()


@pytest.fixture
def counter():
    return Counter()


@pytest.fixture
def counter_pair():
    return CounterPair()


@pytest.fixture
def byte_swap():
    return ByteSwap()


@pytest.fixture
def temp_yaml_file():
    """
    Fixture that provides a temporary YAML file.

    Yields:
        Path: Path to the temporary YAML file
    """
    with tempfile.NamedTemporaryFile(
        mode="w",
        suffix=".yaml",
        delete=False,
    ) as f:
        temp_path = Path(f.name)

    yield temp_path

    # Cleanup
    if temp_path.exists():
        temp_path.unlink()


@pytest.fixture
def valid_testbench_dict():
    """
    Fixture providing a complete valid testbench dictionary.
    """
    return {
        "name": "registered adder",
        "module": "reg_adder",
        "params": {"s": 0},
        "clock": True,
        "cycles": [
            {"inputs": {"x": 1, "y": 0}, "expect": {"out": 1}},
            {"inputs": {"x": 1, "y": 1}, "expect": {"out": 2}},
            {"inputs": {"x": 1, "y": 2}, "expect": {"out": 3}},
        ],
    }


@pytest.fixture
def temp_testbench_yaml_file(temp_yaml_file, valid_testbench_dict):
    """
    Fixture that writes the valid testbench to a temporary YAML file.
    """
    with temp_yaml_file.open("w", encoding="utf-8") as fh:
        yaml.safe_dump(valid_testbench_dict, fh)
    return temp_yaml_file


def pytest_configure(config):
    """
    Hook for initial pytest configuration.

    Used to add custom markers and configuration.
    """
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests",
    )
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
