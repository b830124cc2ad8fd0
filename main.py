"""
EqSolver — Entry point.

Solve a comma-separated system given on the command line, e.g.::

    python main.py "x + y = 3, x - y = 1"
"""

import argparse
import sys

from eqsolver.config import load_settings
from eqsolver.loader import solve_text
from eqsolver.log import configure_logging


def _print_result(result: dict) -> None:
    for step in result["steps"]:
        print(f"  {step['step_number']}. {step['description']}")
        for line in step["expression"].split("\n"):
            print(f"       {line}")
    print(f"\n  => {result['final_answer']}")
    for step in result["verification_steps"][1:]:
        print(f"     {step['expression']}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Solve a square system of linear equations exactly.")
    parser.add_argument("system", help='equations, e.g. "x + y = 3, x - y = 1"')
    parser.add_argument("--settings", help="path to a JSON settings file")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="log elimination details")
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.settings)
        configure_logging("DEBUG" if args.verbose else settings["log_level"])
        result = solve_text(args.system, settings)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    _print_result(result)
    return 0 if result["summary"]["status"] == "SOLVED" else 1


if __name__ == "__main__":
    sys.exit(main())
