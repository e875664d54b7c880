import sys
from pathlib import Path

import pytest

from rtlsim import SimulationEngine, load_testbench
from rtlsim.core.registry import ModuleRegistry

EXAMPLES_DIR = Path(__file__).resolve().parent.parent / "examples"


@pytest.fixture
def example_modules(monkeypatch):
    """Import examples/adders.py against a fresh registry."""
    monkeypatch.setattr("rtlsim.core.registry._REGISTRY", ModuleRegistry())
    monkeypatch.syspath_prepend(str(EXAMPLES_DIR))
    monkeypatch.delitem(sys.modules, "adders", raising=False)
    import adders

    yield adders
    sys.modules.pop("adders", None)


@pytest.mark.integration
@pytest.mark.parametrize("bench", ["adder.yaml", "registered_adder.yaml"])
def test_example_testbenches_pass(example_modules, bench):
    config = load_testbench(EXAMPLES_DIR / "testbenches" / bench)
    report = SimulationEngine().run_testbench(config)
    assert report.passed, report.mismatches


@pytest.mark.integration
def test_run_testbench_cli(example_modules, monkeypatch, capsys):
    monkeypatch.syspath_prepend(str(EXAMPLES_DIR))
    monkeypatch.delitem(sys.modules, "run_testbench", raising=False)
    import run_testbench

    bench = str(EXAMPLES_DIR / "testbenches" / "registered_adder.yaml")
    monkeypatch.setattr(sys, "argv", ["run_testbench.py", bench, "--log-level", "WARNING"])
    assert run_testbench.main() == 0
    assert "PASS" in capsys.readouterr().out


def test_param_adder_accepts_any_addable(example_modules):
    adder = example_modules.ParamAdder()
    adder.drive_x(1.5)
    adder.drive_y(2.0)
    adder.settle()
    assert adder.sample_sum() == 3.5
