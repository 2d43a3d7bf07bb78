"""Command-line front end: solve one board and print it.

Finds a configuration with N queens on an NxN chessboard such that no queen is
endangered, using simulated annealing. Argument validation and rendering live
here so that the solver modules stay free of I/O.
"""
from __future__ import annotations

import argparse
import math
import random
from typing import List, Optional

from .simulated_annealing import sa_nqueens
from .utils import render_board


DEFAULT_TEMPERATURE = 1000.0


def build_arg_parser() -> argparse.ArgumentParser:
    """Construct the argument parser for the solve entry point."""
    parser = argparse.ArgumentParser(
        description=(
            "Find a configuration with N queens on an NxN chessboard such that "
            "no queen is endangered, using simulated annealing."
        )
    )
    parser.add_argument("n", type=int, help="Number of queens on the chessboard.")
    parser.add_argument("iterations", type=int, help="Number of iterations.")
    parser.add_argument(
        "--temperature",
        "-t",
        type=float,
        default=DEFAULT_TEMPERATURE,
        help=f"Initial temperature (default: {DEFAULT_TEMPERATURE:g}).",
    )
    parser.add_argument("--seed", "-s", type=int, default=None, help="Random seed for reproducibility.")
    parser.add_argument("--stats", action="store_true", help="Print conflicts, iterations and time after the board.")
    return parser


def validate_arguments(args: argparse.Namespace) -> Optional[str]:
    """Return an error message for unusable arguments, or None."""
    if args.n < 4:
        return "Please specify a number of queens greater than 4."
    if args.iterations <= 0:
        return "Please specify a number of iterations greater than 0."
    if not args.temperature > 0:
        return "Please specify a temperature greater than 0."
    if math.isinf(args.temperature):
        return "Please specify a finite temperature."
    return None


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point: parse, validate, solve and render."""
    args = build_arg_parser().parse_args(argv)

    error = validate_arguments(args)
    if error:
        print(error)
        raise SystemExit(1)

    rng = random.Random(args.seed)
    solution, (success, iterations, elapsed, final_conflicts, _, _) = sa_nqueens(
        args.n, args.iterations, initial_temperature=args.temperature, rng=rng
    )

    print(render_board(solution, args.n))

    if args.stats:
        status = "solved" if success else "not solved"
        print(f"\n{status}: {final_conflicts} conflicts after {iterations:,} iterations in {elapsed:.4f}s")


if __name__ == "__main__":
    main()
