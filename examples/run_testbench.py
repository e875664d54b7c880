import argparse
import importlib
import logging
import sys
from pathlib import Path

# Ensure local repo package is used even if another "rtlsim" is on PYTHONPATH.
HERE = Path(__file__).resolve().parent
ROOT = HERE.parent
for path in (ROOT, HERE):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from rtlsim import SimulationEngine, SimulatorError, list_available_modules, load_testbench  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a YAML testbench against a registered module.")
    parser.add_argument(
        "testbench",
        nargs="?",
        default=str(HERE / "testbenches" / "registered_adder.yaml"),
        help="Path to the testbench YAML file",
    )
    parser.add_argument(
        "--import",
        dest="imports",
        action="append",
        default=None,
        help="Python module defining the modules under test (repeatable, default: adders)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    for name in args.imports or ["adders"]:
        importlib.import_module(name)

    try:
        config = load_testbench(args.testbench)
        report = SimulationEngine().run_testbench(config)
    except (SimulatorError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        print(f"registered modules: {list_available_modules()}", file=sys.stderr)
        return 2

    for record in report.records:
        print(f"cycle {record.cycle}: in={record.inputs} out={record.outputs}")
    for mismatch in report.mismatches:
        print(
            f"MISMATCH cycle {mismatch.cycle}: {mismatch.port} "
            f"expected {mismatch.expected!r}, got {mismatch.actual!r}"
        )
    print(f"{config.name or config.module}: {'PASS' if report.passed else 'FAIL'}")
    return 0 if report.passed else 1


if __name__ == "__main__":
    sys.exit(main())
