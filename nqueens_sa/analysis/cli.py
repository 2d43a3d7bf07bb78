"""Command-line interface and high-level pipelines for annealing experiments.

This module wires together configuration loading and the execution of
experiment suites (sequential or parallel across worker processes), followed
by CSV export and chart generation. It isolates I/O, argument parsing and
progress reporting from the solver modules so that the rest of the codebase
remains easy to test programmatically.
"""
from __future__ import annotations

import argparse
import os
import random
import tempfile
from pathlib import Path
from time import perf_counter
from typing import List, Optional

from . import settings
from .experiments import run_sa_experiments, run_sa_experiments_parallel, success_rates
from .plots import plot_and_save
from .reporting import save_raw_data_to_csv, save_results_to_csv
from .stats import ExperimentResults
from config_manager import ConfigManager
from nqueens_sa.board import Board
from nqueens_sa.queen import Queen
from nqueens_sa.simulated_annealing import sa_nqueens
from nqueens_sa.utils import is_valid_placement


# ------------- Utils --------------------------------------------------------

def parse_sizes(size_args: Optional[List[str]]) -> Optional[List[int]]:
    """Normalize board size CLI inputs into a sorted list of unique ints.

    Accepts repeated flags (e.g., ``--sizes 8 --sizes 16``) and
    comma-separated lists (e.g., ``--sizes 8,16``). Returns ``None`` when no
    size is provided so that callers can fall back to ``settings.N_VALUES``.
    """
    if not size_args:
        return None
    selected: List[int] = []
    for entry in size_args:
        for token in entry.split(","):
            token = token.strip()
            if not token:
                continue
            try:
                value = int(token)
            except ValueError as exc:
                raise ValueError(f"Invalid board size '{token}': expected an integer") from exc
            if value < 4:
                raise ValueError(f"Invalid board size {value}: expected N >= 4")
            selected.append(value)
    return sorted(set(selected)) or None


def apply_configuration(config_path: str) -> ConfigManager:
    """Load configuration and push its values into ``settings``.

    This function updates the global ``settings`` module in-place to reflect
    values from ``config.json`` (or a user-specified path).
    """
    config_mgr = ConfigManager(config_path)

    experiment_settings = config_mgr.get_experiment_settings()
    if experiment_settings:
        settings.N_VALUES = [int(n) for n in experiment_settings.get("N_values", settings.N_VALUES)]
        settings.RUNS_SA_FINAL = int(experiment_settings.get("runs_sa_final", settings.RUNS_SA_FINAL))
        seed = experiment_settings.get("seed", settings.SEED)
        settings.SEED = None if seed is None else int(seed)

    annealing_settings = config_mgr.get_annealing_settings()
    if annealing_settings:
        settings.set_annealing(
            initial_temperature=annealing_settings.get("initial_temperature"),
            iterations_base=annealing_settings.get("iterations_base"),
            iterations_per_n=annealing_settings.get("iterations_per_n"),
        )

    output_settings = config_mgr.get_output_settings()
    if output_settings:
        settings.OUT_DIR = output_settings.get("output_dir", settings.OUT_DIR)
        settings.RUN_TAG = output_settings.get("run_tag", settings.RUN_TAG)
        settings.DATE_IN_FILENAMES = bool(output_settings.get("date_in_filenames", settings.DATE_IN_FILENAMES))

    if any(n <= 0 for n in settings.N_VALUES):
        raise ValueError(f"Board sizes must be positive, got {settings.N_VALUES}")
    if settings.RUNS_SA_FINAL <= 0:
        raise ValueError(f"runs_sa_final must be positive, got {settings.RUNS_SA_FINAL}")
    return config_mgr


# ------------- Pipeline ----------------------------------------------------

def run_pipeline(mode: str = "parallel", validate: bool = False, plots: bool = True) -> ExperimentResults:
    """Run the experiments for ``settings.N_VALUES`` and export the results.

    ``mode`` is ``"sequential"`` or ``"parallel"``; both produce identical
    records for the same seed.
    """
    os.makedirs(settings.OUT_DIR, exist_ok=True)
    N_values = list(settings.N_VALUES)

    print("\n============================================")
    print(f"{mode.upper()} SIMULATED ANNEALING PIPELINE")
    print("============================================")
    print(f"Board sizes: {N_values}")
    print(f"Runs per size: {settings.RUNS_SA_FINAL}")
    print(f"Initial temperature: {settings.INITIAL_TEMPERATURE:g}")
    print(f"Seed: {settings.SEED if settings.SEED is not None else 'unseeded'}")
    if mode == "parallel":
        print(f"Worker processes: {settings.NUM_PROCESSES} (available CPU cores: {os.cpu_count()})")

    start_total = perf_counter()
    runner = run_sa_experiments_parallel if mode == "parallel" else run_sa_experiments
    results = runner(
        N_values,
        settings.RUNS_SA_FINAL,
        initial_temperature=settings.INITIAL_TEMPERATURE,
        seed=settings.SEED,
        progress_label="Experiments SA",
        validate=validate,
    )

    save_results_to_csv(results, N_values, settings.OUT_DIR)
    save_raw_data_to_csv(results, N_values, settings.OUT_DIR)
    if plots:
        plot_and_save(results, N_values, settings.OUT_DIR)

    print("\nSuccess rate per N:")
    for N, rate in success_rates(results).items():
        print(f"  N={N}: {rate:.2f}")

    total_time = perf_counter() - start_total
    print(f"\n{mode.capitalize()} pipeline completed in {total_time:.1f}s")
    return results


# ------------- Quick regression -------------------------------------------

def run_quick_regression_tests() -> None:
    """Execute a fast, deterministic smoke test of the annealer.

    Verifies that:
    - The objective reproduces known conflict counts.
    - Seeded runs at N=4 and N=8 return valid placements within budget and
      are reproducible.
    - The experiment pipeline produces a non-empty CSV in a temporary folder.
    """
    print("Running quick regression tests (N=4, N=8)...")

    board = Board(4)
    fixtures = [
        ([Queen(0, 0), Queen(2, 0), Queen(1, 1), Queen(0, 2)], -6),
        ([Queen(1, 0), Queen(3, 0), Queen(0, 2), Queen(2, 3)], -1),
    ]
    for state, expected in fixtures:
        if board.objective(state) != expected:
            raise AssertionError(f"Objective returned {board.objective(state)} for {state}, expected {expected}.")
    print("  Objective fixtures: ok")

    for N, budget in ((4, 2000), (8, 20000)):
        placement, (success, steps, elapsed, final_conflicts, _, _) = sa_nqueens(N, budget, rng=random.Random(42))
        if not is_valid_placement(placement, N):
            raise AssertionError(f"Simulated Annealing returned an invalid placement for N={N}: {placement}.")
        if steps > budget or success != (final_conflicts == 0):
            raise AssertionError(f"Inconsistent SA result for N={N}: steps={steps}, conflicts={final_conflicts}.")
        again, _ = sa_nqueens(N, budget, rng=random.Random(42))
        if again != placement:
            raise AssertionError(f"Seeded Simulated Annealing is not reproducible for N={N}.")
        print(f"  Simulated Annealing N={N}: {final_conflicts} conflicts after {steps} iterations in {elapsed:.4f}s")

    results = run_sa_experiments([4], runs=3, seed=42, progress_label="Quick regression experiments", validate=True)

    with tempfile.TemporaryDirectory() as tmpdir:
        csv_path = Path(save_results_to_csv(results, [4], tmpdir))
        if not csv_path.exists() or csv_path.stat().st_size == 0:
            raise AssertionError("Results CSV was not generated successfully during quick tests.")

    print("Quick regression tests passed.")


# ------------- CLI wiring --------------------------------------------------

def build_arg_parser() -> argparse.ArgumentParser:
    """Construct the argument parser for the experiment entry point."""
    parser = argparse.ArgumentParser(description="Run N-Queens simulated annealing experiment pipelines.")
    parser.add_argument(
        "--mode",
        choices=["sequential", "parallel"],
        default="parallel",
        help="Execution mode: sequential runs or a process pool (default).",
    )
    parser.add_argument("--config", default=None, help="Path to a JSON configuration file (default: built-in settings).")
    parser.add_argument(
        "--sizes",
        "-n",
        action="append",
        help="Board sizes to evaluate (comma-separated or multiple flags). Overrides the configuration.",
    )
    parser.add_argument("--runs", "-r", type=int, default=None, help="Independent runs per board size.")
    parser.add_argument("--seed", "-s", type=int, default=None, help="Base random seed.")
    parser.add_argument("--out", "-o", default=None, help="Output directory for CSV files and charts.")
    parser.add_argument("--no-plots", action="store_true", help="Skip chart generation.")
    parser.add_argument("--quick-test", action="store_true", help="Run quick regression tests and exit.")
    parser.add_argument("--validate", action="store_true", help="Validate placements and run consistency checks on results.")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point: parse arguments and dispatch to the pipeline."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.quick_test:
        run_quick_regression_tests()
        return

    try:
        if args.config:
            apply_configuration(args.config)
        sizes = parse_sizes(args.sizes)
        if sizes:
            settings.N_VALUES = sizes
        if args.runs is not None:
            if args.runs <= 0:
                raise ValueError(f"--runs must be positive, got {args.runs}")
            settings.RUNS_SA_FINAL = args.runs
        if args.seed is not None:
            settings.SEED = args.seed
        if args.out:
            settings.OUT_DIR = args.out
    except FileNotFoundError as exc:
        print(f"Configuration file not found: {exc}")
        raise SystemExit(1) from exc
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        raise SystemExit(1) from exc

    try:
        run_pipeline(args.mode, validate=args.validate, plots=not args.no_plots)
    except KeyboardInterrupt:
        print("\nExecution interrupted by user. Cleaning up workers...")
        raise SystemExit(130) from None


if __name__ == "__main__":
    main()
