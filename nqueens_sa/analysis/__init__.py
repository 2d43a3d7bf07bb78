"""
Analysis and orchestration package for N-Queens annealing experiments.

This package contains:
- settings: global knobs (sizes, runs, temperature, iteration budget)
- stats: typed summaries and aggregation helpers
- experiments: sequential and parallel SA runners with result shaping
- reporting: CSV exports of aggregates and raw runs
- plots: visualization utilities
- cli: top-level pipeline entry point and argument parser
"""

from . import settings as settings  # re-export for convenience
from .stats import (
    StatsSummary,
    SARecord,
    SAResultEntry,
    ExperimentResults,
    compute_detailed_statistics,
    compute_grouped_statistics,
    ProgressPrinter,
)

__all__ = [
    # types
    "StatsSummary",
    "SARecord",
    "SAResultEntry",
    "ExperimentResults",
    # utils
    "compute_detailed_statistics",
    "compute_grouped_statistics",
    "ProgressPrinter",
    # settings module
    "settings",
]
