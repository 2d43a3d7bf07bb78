"""Global settings for the N-Queens annealing analysis pipeline.

This module centralizes tunable constants used across the orchestration code.
Values can be overridden at runtime via the configuration loader in
`nqueens_sa.analysis.cli.apply_configuration`.
"""
from __future__ import annotations

import math
import multiprocessing
from datetime import datetime
from typing import List, Optional

# Board sizes to evaluate (in ascending order) for scalability analysis
N_VALUES: List[int] = [8, 12, 16, 24, 32]

# Number of independent SA runs per board size
RUNS_SA_FINAL: int = 40

# Starting temperature T0 of the inverse-time schedule T = T0 / (i + 1)
INITIAL_TEMPERATURE: float = 1000.0

# Iteration budget per run: ITERATIONS_BASE + ITERATIONS_PER_N * N
ITERATIONS_BASE: int = 5000
ITERATIONS_PER_N: int = 1000

# Base seed from which every run seed is derived (None = unseeded runs)
SEED: Optional[int] = 42

# Output directory for CSV and charts
OUT_DIR: str = "results_nqueens_sa"

# Number of worker processes to use (leave one core for the OS)
NUM_PROCESSES: int = max(1, multiprocessing.cpu_count() - 1)

# Output naming policy --------------------------------------------------------

# When True, results and plots include a datestamp suffix (e.g., _20251113-142530)
DATE_IN_FILENAMES: bool = True

# Unique run identifier used for filename stamping; set once at import time.
RUN_ID: str = datetime.now().strftime("%Y%m%d-%H%M%S")

# Optional run label appended to filenames to avoid overwriting outputs
RUN_TAG: Optional[str] = None


def iteration_budget(N: int) -> int:
    """Return the iteration budget used for board size ``N``."""
    return ITERATIONS_BASE + ITERATIONS_PER_N * N


def set_annealing(
        initial_temperature: Optional[float] = None,
        iterations_base: Optional[int] = None,
        iterations_per_n: Optional[int] = None,
) -> None:
        """Configure the annealing parameters used by the experiment runners.

        Parameters left as None keep their current value.

        Side effects
        - Updates module-level globals and prints a concise summary to stdout to
            make the active parameters explicit at run start.
        """
        global INITIAL_TEMPERATURE, ITERATIONS_BASE, ITERATIONS_PER_N
        if initial_temperature is not None and (not initial_temperature > 0 or math.isinf(initial_temperature)):
                raise ValueError(f"initial_temperature must be a positive finite number, got {initial_temperature}")
        for name, value in (("iterations_base", iterations_base), ("iterations_per_n", iterations_per_n)):
                if value is not None and int(value) < 0:
                        raise ValueError(f"{name} must not be negative, got {value}")

        if initial_temperature is not None:
                INITIAL_TEMPERATURE = float(initial_temperature)
        if iterations_base is not None:
                ITERATIONS_BASE = int(iterations_base)
        if iterations_per_n is not None:
                ITERATIONS_PER_N = int(iterations_per_n)

        print("Annealing settings configured:")
        print(f"   - T0: {INITIAL_TEMPERATURE:g}")
        print(f"   - Iterations: {ITERATIONS_BASE} + {ITERATIONS_PER_N} * N")
