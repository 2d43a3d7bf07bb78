"""Tests for the experiment runners, statistics, reporting, plots and config."""

from contextlib import redirect_stdout
import csv
import io
import json
import math
import os
from pathlib import Path
import sys
import tempfile
import unittest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config_manager import ConfigManager
from nqueens_sa.analysis import cli, settings
from nqueens_sa.analysis.experiments import (
    run_sa_experiments,
    run_sa_experiments_parallel,
    run_seed,
    run_single_sa_experiment,
)
from nqueens_sa.analysis.plots import _mean, plot_and_save, plot_failure_quality, raw_runs_frame
from nqueens_sa.analysis.reporting import build_suffix, save_raw_data_to_csv, save_results_to_csv
from nqueens_sa.analysis.stats import compute_detailed_statistics, compute_grouped_statistics
from nqueens_sa.utils import from_coordinates, is_valid_placement

SETTING_NAMES = [
    "N_VALUES",
    "RUNS_SA_FINAL",
    "INITIAL_TEMPERATURE",
    "ITERATIONS_BASE",
    "ITERATIONS_PER_N",
    "SEED",
    "OUT_DIR",
    "DATE_IN_FILENAMES",
    "RUN_TAG",
]


class SettingsIsolation(unittest.TestCase):
    """Restore module-level settings and keep the experiments small."""

    def setUp(self):
        self._saved = {name: getattr(settings, name) for name in SETTING_NAMES}
        settings.ITERATIONS_BASE = 300
        settings.ITERATIONS_PER_N = 50
        settings.DATE_IN_FILENAMES = False
        settings.RUN_TAG = None
        self._stdout = redirect_stdout(io.StringIO())
        self._stdout.__enter__()

    def tearDown(self):
        self._stdout.__exit__(None, None, None)
        for name, value in self._saved.items():
            setattr(settings, name, value)


class StatisticsTests(unittest.TestCase):

    def test_detailed_statistics(self):
        summary = compute_detailed_statistics([4, 1, 3, 2])
        self.assertEqual(summary["count"], 4)
        self.assertEqual(summary["mean"], 2.5)
        self.assertEqual(summary["median"], 2.5)
        self.assertEqual(summary["min"], 1)
        self.assertEqual(summary["max"], 4)
        self.assertEqual(summary["range"], 3)
        self.assertEqual(summary["q25"], 2)
        self.assertEqual(summary["q75"], 4)
        self.assertAlmostEqual(summary["std"], 1.118033988749895)

    def test_empty_statistics(self):
        summary = compute_detailed_statistics([])
        self.assertEqual(summary["count"], 0)
        self.assertIsNone(summary["mean"])

    def test_grouped_statistics(self):
        records = [
            {"success": True, "steps": 10, "final_conflicts": 0},
            {"success": True, "steps": 30, "final_conflicts": 0},
            {"success": False, "steps": 100, "final_conflicts": 2},
        ]
        stats = compute_grouped_statistics(records)
        self.assertEqual(stats["total_runs"], 3)
        self.assertEqual(stats["successes"], 2)
        self.assertEqual(stats["failures"], 1)
        self.assertAlmostEqual(stats["success_rate"], 2 / 3)
        self.assertEqual(stats["success_steps"]["mean"], 20)
        self.assertEqual(stats["failure_final_conflicts"]["mean"], 2)
        self.assertEqual(stats["all_steps"]["count"], 3)
        self.assertNotIn("all_time", stats)

    def test_grouped_statistics_without_runs(self):
        stats = compute_grouped_statistics([])
        self.assertEqual(stats["total_runs"], 0)
        self.assertEqual(stats["success_rate"], 0)


class ExperimentTests(SettingsIsolation):

    def test_run_seed(self):
        self.assertIsNone(run_seed(None, 8, 0))
        self.assertNotEqual(run_seed(1, 8, 0), run_seed(1, 8, 1))
        self.assertNotEqual(run_seed(1, 8, 0), run_seed(1, 9, 0))

    def test_single_worker_returns_placement_coordinates(self):
        result, coordinates = run_single_sa_experiment((6, 200, 1000.0, 5))
        self.assertEqual(len(result), 6)
        self.assertTrue(is_valid_placement(from_coordinates(coordinates), 6))

    def test_sequential_runner_shapes_results(self):
        results = run_sa_experiments([4, 5], runs=3, seed=1, progress_label="test", validate=True)
        self.assertEqual(sorted(results["SA"]), [4, 5])
        entry = results["SA"][4]
        self.assertEqual(entry["total_runs"], 3)
        self.assertEqual(len(entry["raw_runs"]), 3)
        self.assertEqual(entry["num_iterations"], settings.iteration_budget(4))
        self.assertEqual(entry["initial_temperature"], settings.INITIAL_TEMPERATURE)
        self.assertEqual(entry["successes"] + entry["failures"], 3)
        for record in entry["raw_runs"]:
            self.assertLessEqual(record["steps"], entry["num_iterations"])

    def test_sequential_runner_is_reproducible(self):
        first = run_sa_experiments([5], runs=2, seed=3)
        second = run_sa_experiments([5], runs=2, seed=3)
        strip = lambda res: [{k: v for k, v in r.items() if k != "time"} for r in res["SA"][5]["raw_runs"]]
        self.assertEqual(strip(first), strip(second))

    def test_parallel_matches_sequential(self):
        sequential = run_sa_experiments([4], runs=4, seed=11)
        parallel = run_sa_experiments_parallel([4], runs=4, seed=11, validate=True, max_workers=2)
        strip = lambda res: [{k: v for k, v in r.items() if k != "time"} for r in res["SA"][4]["raw_runs"]]
        self.assertEqual(strip(sequential), strip(parallel))


class ReportingTests(SettingsIsolation):

    def setUp(self):
        super().setUp()
        self.results = run_sa_experiments([4, 5], runs=2, seed=7)

    def test_suffix(self):
        self.assertEqual(build_suffix(), "")
        settings.RUN_TAG = "smoke"
        self.assertEqual(build_suffix(), "_smoke")
        settings.DATE_IN_FILENAMES = True
        self.assertEqual(build_suffix(), f"_smoke_{settings.RUN_ID}")

    def test_results_csv(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = save_results_to_csv(self.results, [4, 5], tmpdir)
            self.assertEqual(os.path.basename(path), "results_SA.csv")
            with open(path, newline="") as f:
                rows = list(csv.DictReader(f))
        self.assertEqual([row["n"] for row in rows], ["4", "5"])
        self.assertEqual(rows[0]["sa_total_runs"], "2")

    def test_raw_csv(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = save_raw_data_to_csv(self.results, [4, 5], tmpdir)
            with open(path, newline="") as f:
                rows = list(csv.DictReader(f))
        self.assertEqual(len(rows), 4)
        self.assertEqual(rows[0]["seed"], str(run_seed(7, 4, 0)))
        self.assertIn(rows[0]["success"], {"0", "1"})

    def test_raw_runs_frame(self):
        frame = raw_runs_frame(self.results, [4, 5])
        self.assertEqual(len(frame), 4)
        self.assertEqual(sorted(frame["n"].unique().tolist()), [4, 5])

    def test_plots_are_written(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            paths = plot_and_save(self.results, [4, 5], tmpdir)
            self.assertEqual(len(paths), 5)
            for path in paths:
                self.assertTrue(os.path.exists(path))
                self.assertGreater(os.path.getsize(path), 0)

    def test_empty_failure_group_is_not_plotted_as_zero(self):
        results = {"SA": {
            4: {"successes": 2, "failures": 0, "success_steps": {"mean": 12.0}},
            5: {"successes": 1, "failures": 1, "failure_final_conflicts": {"mean": 2.0},
                "failure_best_conflicts": {"mean": 1.0}},
        }}
        self.assertTrue(math.isnan(_mean(results, 4, "failure_final_conflicts")))
        self.assertEqual(_mean(results, 5, "failure_final_conflicts"), 2.0)
        self.assertTrue(math.isnan(_mean(results, 5, "success_steps")))
        with tempfile.TemporaryDirectory() as tmpdir:
            path = plot_failure_quality(results, [4, 5], tmpdir)
            self.assertTrue(os.path.exists(path))


class ConfigurationTests(SettingsIsolation):

    def _write_config(self, tmpdir, payload):
        path = os.path.join(tmpdir, "config.json")
        with open(path, "w") as f:
            json.dump(payload, f)
        return path

    def test_config_manager_round_trip(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = self._write_config(tmpdir, {"experiment_settings": {"N_values": [8]}})
            mgr = ConfigManager(path)
            self.assertEqual(mgr.get_experiment_settings(), {"N_values": [8]})
            self.assertEqual(mgr.get_annealing_settings(), {})
            mgr.update_setting("annealing_settings", "initial_temperature", 50.0)
            self.assertEqual(ConfigManager(path).get_annealing_settings(), {"initial_temperature": 50.0})

    def test_missing_config(self):
        with self.assertRaises(FileNotFoundError):
            ConfigManager("/nonexistent/config.json")

    def test_apply_configuration(self):
        payload = {
            "experiment_settings": {"N_values": ["6", 10], "runs_sa_final": 3, "seed": 9},
            "annealing_settings": {"initial_temperature": 25.0, "iterations_base": 100, "iterations_per_n": 10},
            "output_settings": {"output_dir": "out_dir", "run_tag": "tag", "date_in_filenames": False},
        }
        with tempfile.TemporaryDirectory() as tmpdir:
            cli.apply_configuration(self._write_config(tmpdir, payload))
        self.assertEqual(settings.N_VALUES, [6, 10])
        self.assertEqual(settings.RUNS_SA_FINAL, 3)
        self.assertEqual(settings.SEED, 9)
        self.assertEqual(settings.INITIAL_TEMPERATURE, 25.0)
        self.assertEqual(settings.iteration_budget(10), 200)
        self.assertEqual(settings.OUT_DIR, "out_dir")
        self.assertEqual(settings.RUN_TAG, "tag")

    def test_invalid_temperature_in_config(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = self._write_config(tmpdir, {"annealing_settings": {"initial_temperature": 0}})
            with self.assertRaises(ValueError):
                cli.apply_configuration(path)

    def test_infinite_temperature_in_config(self):
        with self.assertRaises(ValueError):
            settings.set_annealing(initial_temperature=float("inf"))
        self.assertEqual(settings.INITIAL_TEMPERATURE, self._saved["INITIAL_TEMPERATURE"])

    def test_repository_template_loads(self):
        mgr = ConfigManager(ROOT / "config.json")
        self.assertIn("N_values", mgr.get_experiment_settings())

    def test_parse_sizes(self):
        self.assertIsNone(cli.parse_sizes(None))
        self.assertEqual(cli.parse_sizes(["16,8", "8"]), [8, 16])
        with self.assertRaises(ValueError):
            cli.parse_sizes(["eight"])
        with self.assertRaises(ValueError):
            cli.parse_sizes(["3"])


class ExperimentCliTests(SettingsIsolation):

    def _main(self, *argv):
        try:
            cli.main(list(argv))
        except SystemExit as exc:
            return exc.code
        return 0

    def test_sequential_pipeline_writes_csv(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            code = self._main("--mode", "sequential", "--sizes", "4,5", "--runs", "2", "--seed", "1",
                              "--out", tmpdir, "--no-plots", "--validate")
            self.assertEqual(code, 0)
            self.assertTrue(os.path.exists(os.path.join(tmpdir, "results_SA.csv")))
            self.assertTrue(os.path.exists(os.path.join(tmpdir, "raw_SA.csv")))

    def test_missing_config_exits(self):
        self.assertEqual(self._main("--config", "/nonexistent/config.json"), 1)

    def test_bad_runs_exits(self):
        self.assertEqual(self._main("--runs", "0"), 1)

    def test_bad_sizes_exit(self):
        self.assertEqual(self._main("--sizes", "2"), 1)


if __name__ == "__main__":
    unittest.main()
