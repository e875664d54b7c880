import argparse
import logging
import sys
from pathlib import Path

# Ensure local repo package is used even if another "rtlsim" is on PYTHONPATH.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from adders import Adder, ParamAdder, RegisteredAdder  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Drive the example adders by hand.")
    parser.add_argument(
        "--cycles",
        type=int,
        default=4,
        help="Number of cycles to simulate per adder",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (DEBUG shows schema compilation)",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=args.log_level.upper())

    adder = Adder()
    for i in range(args.cycles):
        adder.drive_x(1)
        adder.drive_y(i)
        adder.settle()
        print(adder.sample_sum(), adder)

    reg_adder = RegisteredAdder()
    for i in range(args.cycles):
        reg_adder.drive_x(1)
        reg_adder.drive_y(i)
        reg_adder.settle()
        reg_adder.clock_edge()
        # out was driven before the edge, so it shows the previous cycle's sum
        print(reg_adder.sample_out(), reg_adder)

    float_adder = ParamAdder()
    float_adder.drive_x(0.5)
    float_adder.drive_y(0.25)
    float_adder.settle()
    print(float_adder.sample_sum(), float_adder)


if __name__ == "__main__":
    main()
