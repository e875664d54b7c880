#!/usr/bin/env python
"""Run the formatters, linters and test suite the way CI does.

Usage:
    python run_quality_checks.py                 # Check everything
    python run_quality_checks.py --fix           # Let black and isort rewrite files
    python run_quality_checks.py --skip type     # Leave out mypy
"""

import argparse
import subprocess
import sys
from typing import Callable, Optional

PACKAGE_DIR = "rtlsim"
TESTS_DIR = "tests"
EXAMPLES_DIR = "examples"
SOURCE_DIRS = [PACKAGE_DIR, TESTS_DIR, EXAMPLES_DIR]

CHECK_KEYS = ("formatting", "imports", "lint", "type", "tests")


class CheckRunner:
    """Runs each tool as a subprocess and records pass or fail by key."""

    def __init__(self, fix: bool = False, verbose: bool = False, skip_checks: Optional[list[str]] = None):
        self.fix = fix
        self.verbose = verbose
        self.skip_checks = set(skip_checks or [])
        self.failed_checks: list[str] = []
        self.passed_checks: list[str] = []

    def run_command(self, key: str, cmd: list[str], name: str) -> bool:
        """Run cmd and record the outcome under name.

        Output is captured unless verbose is set, and only shown on failure.
        """
        if key in self.skip_checks:
            print(f"-- skipping {name}")
            return True

        print(f"\n{'=' * 70}\n>> {name}: {' '.join(cmd)}\n{'=' * 70}")

        try:
            result = subprocess.run(cmd, check=False, capture_output=not self.verbose, text=True)
        except FileNotFoundError as exc:
            print(f"FAILED {name}: {exc}")
            print("   install the tooling with: pip install -e .[dev]")
            self.failed_checks.append(name)
            return False

        if result.returncode == 0:
            print(f"ok {name}")
            self.passed_checks.append(name)
            return True

        if not self.verbose:
            print(result.stdout)
            print(result.stderr)
        print(f"FAILED {name}")
        self.failed_checks.append(name)
        return False

    def check_black_formatting(self) -> bool:
        cmd = ["black", *SOURCE_DIRS] if self.fix else ["black", "--check", *SOURCE_DIRS]
        return self.run_command("formatting", cmd, "black")

    def check_isort_imports(self) -> bool:
        cmd = ["isort", *SOURCE_DIRS] if self.fix else ["isort", "--check-only", *SOURCE_DIRS]
        return self.run_command("imports", cmd, "isort")

    def check_pylint(self) -> bool:
        return self.run_command("lint", ["pylint", PACKAGE_DIR], "pylint")

    def check_mypy(self) -> bool:
        return self.run_command("type", ["mypy", PACKAGE_DIR], "mypy")

    def run_tests(self) -> bool:
        return self.run_command(
            "tests",
            ["pytest", f"--cov={PACKAGE_DIR}", "--cov-report=term-missing", TESTS_DIR],
            "pytest",
        )

    def print_summary(self) -> None:
        print(f"\n{'=' * 70}\nSUMMARY\n{'=' * 70}")
        for check in self.passed_checks:
            print(f"   passed  {check}")
        for check in self.failed_checks:
            print(f"   FAILED  {check}")
        if not self.failed_checks:
            print("\nAll checks passed.")

    def run_all(self) -> int:
        """Run every check in order and return the process exit code."""
        checks: list[Callable[[], bool]] = [
            self.check_black_formatting,
            self.check_isort_imports,
            self.check_pylint,
            self.check_mypy,
            self.run_tests,
        ]
        for check in checks:
            check()

        self.print_summary()
        return 1 if self.failed_checks else 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Run local quality checks and tests")
    parser.add_argument("--fix", action="store_true", help="Apply black and isort fixes in place")
    parser.add_argument("--verbose", "-v", action="store_true", help="Stream tool output as it runs")
    parser.add_argument(
        "--skip",
        nargs="+",
        default=[],
        choices=CHECK_KEYS,
        help="Checks to leave out",
    )
    args = parser.parse_args()

    return CheckRunner(fix=args.fix, verbose=args.verbose, skip_checks=args.skip).run_all()


if __name__ == "__main__":
    sys.exit(main())
