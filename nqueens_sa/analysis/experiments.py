"""Experiment runners for Simulated Annealing (sequential and parallel).

These routines execute repeatable batches of independent annealing runs for a
set of board sizes. Each run owns a ``random.Random`` seeded from the base
seed, the board size and the run index, so the sequential and the parallel
runner produce identical records for the same inputs.

Outputs are structured dictionaries suitable for CSV export and plotting.
Validation hooks optionally check placement invariants and the consistency of
reported metrics.
"""
from __future__ import annotations

import random
from concurrent.futures import ProcessPoolExecutor
from typing import Any, Dict, List, Optional, Tuple

from . import settings
from .stats import (
    ExperimentResults,
    SARecord,
    SAResultEntry,
    compute_grouped_statistics,
    ProgressPrinter,
)
from nqueens_sa.simulated_annealing import SAResult, sa_nqueens
from nqueens_sa.utils import conflicts, from_coordinates, is_valid_placement, to_coordinates


Coordinates = List[Tuple[int, int]]


def run_seed(seed: Optional[int], N: int, run: int) -> Optional[int]:
    """Derive the seed of one run; None keeps the run unseeded."""
    if seed is None:
        return None
    return seed * 1_000_003 + N * 1_009 + run


# Reusable workers -----------------------------------------------------------

def run_single_sa_experiment(params: Tuple[int, int, float, Optional[int]]) -> Tuple[SAResult, Coordinates]:
    """Worker wrapper to invoke a single SA run (for parallel mapping).

    Returns the run summary and the final placement as plain coordinates so
    the result pickles cheaply across processes.
    """
    N, num_iterations, T0, seed = params
    placement, result = sa_nqueens(N, num_iterations, initial_temperature=T0, rng=random.Random(seed))
    return result, to_coordinates(placement)


def _to_record(seed: Optional[int], result: SAResult) -> SARecord:
    success, steps, elapsed, final_conflicts, best_conflicts, evals = result
    return {
        "seed": seed,
        "success": success,
        "steps": steps,
        "time": elapsed,
        "final_conflicts": final_conflicts,
        "best_conflicts": best_conflicts,
        "evals": evals,
    }


def _validate_run(N: int, index: int, num_iterations: int, record: SARecord, coordinates: Coordinates) -> None:
    placement = from_coordinates(coordinates)
    if not is_valid_placement(placement, N) or len(set(coordinates)) != N:
        raise AssertionError(f"Invalid SA placement for N={N}, run {index}: {coordinates}")
    if conflicts(placement) != record["final_conflicts"]:
        raise AssertionError(
            f"SA validation failed for N={N}, run {index}: reported {record['final_conflicts']} conflicts, "
            f"placement has {conflicts(placement)}"
        )
    if record["success"] != (record["final_conflicts"] == 0):
        raise AssertionError(
            f"SA validation failed for N={N}, run {index}: success={record['success']} "
            f"but final_conflicts={record['final_conflicts']}"
        )
    if record["steps"] > num_iterations or record["best_conflicts"] > record["final_conflicts"]:
        raise AssertionError(
            f"SA validation failed for N={N}, run {index}: steps={record['steps']} (budget {num_iterations}), "
            f"best_conflicts={record['best_conflicts']}, final_conflicts={record['final_conflicts']}"
        )


def _summarize(runs: List[SARecord], num_iterations: int, T0: float) -> SAResultEntry:
    stats = compute_grouped_statistics(list(runs), "success")
    entry: Any = {key: value for key, value in stats.items()}
    entry["num_iterations"] = num_iterations
    entry["initial_temperature"] = T0
    entry["raw_runs"] = list(runs)
    return entry


def _job_params(
    N: int, runs: int, T0: float, seed: Optional[int]
) -> Tuple[int, List[Tuple[int, int, float, Optional[int]]]]:
    num_iterations = settings.iteration_budget(N)
    return num_iterations, [(N, num_iterations, T0, run_seed(seed, N, run)) for run in range(runs)]


# Sequential runner ----------------------------------------------------------

def run_sa_experiments(
    N_values: List[int],
    runs: int,
    initial_temperature: Optional[float] = None,
    seed: Optional[int] = None,
    progress_label: Optional[str] = None,
    validate: bool = False,
) -> ExperimentResults:
    """Run ``runs`` independent SA searches for every N in ``N_values``.

    The iteration budget per N comes from ``settings.iteration_budget``;
    ``initial_temperature`` defaults to ``settings.INITIAL_TEMPERATURE``.
    """
    T0 = settings.INITIAL_TEMPERATURE if initial_temperature is None else initial_temperature
    results: ExperimentResults = {"SA": {}}
    progress = ProgressPrinter(len(N_values), progress_label) if progress_label else None

    for index, N in enumerate(N_values, start=1):
        if progress:
            progress.update(index, f"N={N}")
        num_iterations, jobs = _job_params(N, runs, T0, seed)
        print(f"=== N = {N}: {runs} SA runs, {num_iterations} iterations, T0 = {T0:g} ===")

        sa_runs: List[SARecord] = []
        for run_index, params in enumerate(jobs):
            result, coordinates = run_single_sa_experiment(params)
            record = _to_record(params[3], result)
            if validate:
                _validate_run(N, run_index, num_iterations, record, coordinates)
            sa_runs.append(record)

        results["SA"][N] = _summarize(sa_runs, num_iterations, T0)

    return results


# Parallel runner ------------------------------------------------------------

def run_sa_experiments_parallel(
    N_values: List[int],
    runs: int,
    initial_temperature: Optional[float] = None,
    seed: Optional[int] = None,
    progress_label: Optional[str] = None,
    validate: bool = False,
    max_workers: Optional[int] = None,
) -> ExperimentResults:
    """Parallel version of ``run_sa_experiments`` using a process pool.

    Runs are distributed across ``max_workers`` processes (default
    ``settings.NUM_PROCESSES``); each run is still a single-threaded search.
    """
    T0 = settings.INITIAL_TEMPERATURE if initial_temperature is None else initial_temperature
    results: ExperimentResults = {"SA": {}}
    progress = ProgressPrinter(len(N_values), progress_label) if progress_label else None
    workers = max_workers or settings.NUM_PROCESSES

    with ProcessPoolExecutor(max_workers=workers) as executor:
        for index, N in enumerate(N_values, start=1):
            if progress:
                progress.update(index, f"N={N}")
            num_iterations, jobs = _job_params(N, runs, T0, seed)
            print(f"=== (Parallel) N = {N}: {runs} SA runs on {workers} workers, {num_iterations} iterations ===")

            raw_results = list(executor.map(run_single_sa_experiment, jobs))

            sa_runs: List[SARecord] = []
            for run_index, (params, (result, coordinates)) in enumerate(zip(jobs, raw_results)):
                record = _to_record(params[3], result)
                if validate:
                    _validate_run(N, run_index, num_iterations, record, coordinates)
                sa_runs.append(record)

            results["SA"][N] = _summarize(sa_runs, num_iterations, T0)

    return results


def success_rates(results: ExperimentResults) -> Dict[int, float]:
    """Return the SA success rate per board size."""
    return {N: entry.get("success_rate", 0.0) for N, entry in results["SA"].items()}
