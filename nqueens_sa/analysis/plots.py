"""Visualization utilities for annealing experiment outputs.

Overview
--------
This module generates PNG charts from the aggregated results produced by
``nqueens_sa.analysis.experiments``. The primary input is an
``ExperimentResults`` mapping (``results["SA"][N]``) together with an ordered
list of ``N_values`` that determines the x-axis.

Chart map (filenames → content)
-------------------------------
- 01_success_rate_vs_N.png: Success rate vs N
    - X: N (board size). Y: successes / total_runs in [0, 1].
- 02_iterations_vs_N_log_scale.png: Mean iterations of successful runs vs N
    - Hardware-independent effort proxy. Y on a log scale.
- 03_failure_quality_vs_N.png: Mean final and best conflicts of failed runs
    - Proximity to the optimum when the budget runs out (0 is optimal).
- 04_iterations_boxplot.png: Distribution of iterations per N (all runs)
    - seaborn boxplot over a pandas DataFrame of the raw runs.
- 05_iterations_vs_time.png: Iterations vs wall time (all runs)
    - Scatter with a least-squares linear trend; linearity indicates that
      the per-iteration cost (one objective evaluation) dominates.

Outputs and naming
------------------
Charts are written into ``out_dir`` with the suffix from
``reporting.build_suffix``. Functions return the list of written paths.
"""
from __future__ import annotations

import os
from typing import List

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

from .reporting import build_suffix
from .stats import ExperimentResults


def raw_runs_frame(results: ExperimentResults, N_values: List[int]) -> pd.DataFrame:
    """Flatten the raw SA runs into a DataFrame with an ``n`` column."""
    rows = []
    for N in N_values:
        for record in results["SA"][N].get("raw_runs", []):
            rows.append({"n": N, **record})
    columns = ["n", "seed", "success", "steps", "time", "final_conflicts", "best_conflicts", "evals"]
    return pd.DataFrame(rows, columns=columns)


def _mean(results: ExperimentResults, N: int, key: str) -> float:
    """Mean of a grouped summary, or NaN when the group has no runs."""
    mean = results["SA"][N].get(key, {}).get("mean")
    return np.nan if mean is None else float(mean)


def _save(fname: str, what: str) -> str:
    plt.savefig(fname, bbox_inches="tight", dpi=150)
    plt.close()
    print(f"Saved {what} chart: {fname}")
    return fname


def plot_success_rate(results: ExperimentResults, N_values: List[int], out_dir: str) -> str:
    suffix = build_suffix()
    sr = [float(results["SA"][N].get("success_rate", 0.0)) for N in N_values]

    plt.figure(figsize=(12, 8))
    plt.plot(N_values, sr, marker="s", linewidth=2, markersize=8, label="Simulated Annealing")
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("Success rate", fontsize=12)
    plt.title("Success Rate vs Problem Size\n(Reliability within the iteration budget)", fontsize=14)
    plt.ylim(-0.05, 1.05)
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.7)
    plt.xticks(N_values)
    for n, rate in zip(N_values, sr):
        plt.annotate(f"{rate:.2f}", (n, rate), textcoords="offset points", xytext=(0, 5), ha="center", fontsize=9)

    return _save(os.path.join(out_dir, f"01_success_rate_vs_N{suffix}.png"), "success-rate")


def plot_iterations(results: ExperimentResults, N_values: List[int], out_dir: str) -> str:
    suffix = build_suffix()
    steps = np.maximum([_mean(results, N, "success_steps") for N in N_values], 1)

    plt.figure(figsize=(12, 8))
    plt.semilogy(N_values, steps, marker="s", linewidth=2, markersize=8, label="SA: Average iterations (successes)")
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("Iterations (log scale)", fontsize=12)
    plt.title("Logical Cost vs Problem Size\n(Hardware-independent scalability)", fontsize=14)
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.7)
    plt.xticks(N_values)

    return _save(os.path.join(out_dir, f"02_iterations_vs_N_log_scale{suffix}.png"), "logical-cost")


def plot_failure_quality(results: ExperimentResults, N_values: List[int], out_dir: str) -> str:
    suffix = build_suffix()
    final = [_mean(results, N, "failure_final_conflicts") for N in N_values]
    best = [_mean(results, N, "failure_best_conflicts") for N in N_values]

    plt.figure(figsize=(12, 8))
    plt.plot(N_values, final, marker="o", linewidth=2, markersize=8, label="Final conflicts")
    plt.plot(N_values, best, marker="^", linewidth=2, markersize=8, linestyle="--", label="Best conflicts seen")
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("Average conflicts (failed runs)", fontsize=12)
    plt.title("Failure Quality vs Problem Size\n(0 conflicts is optimal)", fontsize=14)
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.7)
    plt.xticks(N_values)

    return _save(os.path.join(out_dir, f"03_failure_quality_vs_N{suffix}.png"), "failure-quality")


def plot_iterations_distribution(results: ExperimentResults, N_values: List[int], out_dir: str) -> str:
    suffix = build_suffix()
    frame = raw_runs_frame(results, N_values)

    plt.figure(figsize=(12, 8))
    sns.boxplot(data=frame, x="n", y="steps", hue="success", order=N_values)
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("Iterations", fontsize=12)
    plt.title("Iteration Distribution per Board Size\n(split by outcome)", fontsize=14)
    plt.grid(True, axis="y", alpha=0.7)

    return _save(os.path.join(out_dir, f"04_iterations_boxplot{suffix}.png"), "iteration-distribution")


def plot_iterations_vs_time(results: ExperimentResults, N_values: List[int], out_dir: str) -> str:
    suffix = build_suffix()
    frame = raw_runs_frame(results, N_values)
    steps = frame["steps"].to_numpy(dtype=float)
    times = frame["time"].to_numpy(dtype=float)

    plt.figure(figsize=(12, 8))
    plt.scatter(steps, times, alpha=0.6, s=30, label="SA runs")
    if len(np.unique(steps)) > 1:
        z = np.polyfit(steps, times, 1)
        p = np.poly1d(z)
        x_trend = np.linspace(steps.min(), steps.max(), 100)
        plt.plot(x_trend, p(x_trend), "r--", linewidth=2, label=f"Trend: {z[0]:.2e}s per iteration")
    plt.xlabel("Iterations", fontsize=12)
    plt.ylabel("Time [s]", fontsize=12)
    plt.title("Logical vs Practical Cost\n(one objective evaluation per iteration)", fontsize=14)
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.7)

    return _save(os.path.join(out_dir, f"05_iterations_vs_time{suffix}.png"), "cost-correlation")


def plot_and_save(results: ExperimentResults, N_values: List[int], out_dir: str) -> List[str]:
    """Generate the full chart set and return the written paths."""
    os.makedirs(out_dir, exist_ok=True)
    return [
        plot_success_rate(results, N_values, out_dir),
        plot_iterations(results, N_values, out_dir),
        plot_failure_quality(results, N_values, out_dir),
        plot_iterations_distribution(results, N_values, out_dir),
        plot_iterations_vs_time(results, N_values, out_dir),
    ]
