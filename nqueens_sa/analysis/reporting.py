"""CSV export utilities for experiment outputs (aggregates and raw runs).

These helpers materialize concise CSV summaries as well as full per-run raw
data for downstream analysis or spreadsheet inspection.
"""
from __future__ import annotations

import csv
import os
from typing import Any, Dict, List, Optional

from . import settings
from .stats import ExperimentResults


def build_suffix() -> str:
    """Build an optional filename suffix from ``RUN_TAG`` and ``RUN_ID``.

    Returns an empty string if no suffixing is configured.
    """
    parts: List[str] = []
    run_tag = getattr(settings, "RUN_TAG", None)
    if run_tag:
        parts.append(str(run_tag))
    if getattr(settings, "DATE_IN_FILENAMES", False):
        run_id = getattr(settings, "RUN_ID", None)
        if run_id:
            parts.append(str(run_id))
    return ("_" + "_".join(parts)) if parts else ""


def _stat(summary: Dict[str, Any], key: str) -> Optional[float]:
    return summary.get(key) if summary else None


def save_results_to_csv(results: ExperimentResults, N_values: List[int], out_dir: str) -> str:
    """Write compact per-N aggregate metrics to CSV and return the path.

    Column names follow lowercase snake_case with the ``sa_`` prefix.
    """
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"results_SA{build_suffix()}.csv")

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "n",
            "sa_num_iterations",
            "sa_initial_temperature",
            "sa_success_rate",
            "sa_failure_rate",
            "sa_total_runs",
            "sa_successes",
            "sa_failures",
            "sa_success_steps_mean",
            "sa_success_steps_median",
            "sa_success_evals_mean",
            "sa_success_time_mean",
            "sa_success_time_median",
            "sa_failure_final_conflicts_mean",
            "sa_failure_best_conflicts_mean",
            "sa_all_time_mean",
        ])

        for N in N_values:
            sa = results["SA"][N]
            writer.writerow([
                N,
                sa.get("num_iterations"),
                sa.get("initial_temperature"),
                sa.get("success_rate", 0.0),
                sa.get("failure_rate", 0.0),
                sa.get("total_runs", 0),
                sa.get("successes", 0),
                sa.get("failures", 0),
                _stat(sa.get("success_steps", {}), "mean"),
                _stat(sa.get("success_steps", {}), "median"),
                _stat(sa.get("success_evals", {}), "mean"),
                _stat(sa.get("success_time", {}), "mean"),
                _stat(sa.get("success_time", {}), "median"),
                _stat(sa.get("failure_final_conflicts", {}), "mean"),
                _stat(sa.get("failure_best_conflicts", {}), "mean"),
                _stat(sa.get("all_time", {}), "mean"),
            ])

    print(f"Saved aggregate results: {filename}")
    return filename


def save_raw_data_to_csv(results: ExperimentResults, N_values: List[int], out_dir: str) -> str:
    """Write one row per SA run to CSV and return the path."""
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"raw_SA{build_suffix()}.csv")

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "n",
            "run",
            "seed",
            "success",
            "steps",
            "time_seconds",
            "evals",
            "final_conflicts",
            "best_conflicts",
        ])
        for N in N_values:
            for run, record in enumerate(results["SA"][N].get("raw_runs", [])):
                writer.writerow([
                    N,
                    run,
                    "" if record["seed"] is None else record["seed"],
                    int(record["success"]),
                    record["steps"],
                    record["time"],
                    record["evals"],
                    record["final_conflicts"],
                    record["best_conflicts"],
                ])

    print(f"Saved raw run data: {filename}")
    return filename
