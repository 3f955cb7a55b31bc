from __future__ import annotations

import json
from pathlib import Path

from gnss_outlier import SimConfig, simulate_round
from gnss_outlier.logger import OBSERVATION_CSV_COLUMNS, round_summary, sanitize_json, save_observations_csv


def test_observations_csv_has_one_row_per_satellite(tmp_path: Path) -> None:
    round_ = simulate_round(SimConfig(rng_seed=1, satellite_count=7))
    round_.estimate()
    path = tmp_path / "out" / "observations.csv"
    save_observations_csv(path, round_)

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0].split(",") == OBSERVATION_CSV_COLUMNS
    assert len(lines) == 8
    assert all(line.split(",")[7] != "" for line in lines[1:])


def test_csv_leaves_residual_blank_before_estimate(tmp_path: Path) -> None:
    round_ = simulate_round(SimConfig(rng_seed=1, satellite_count=5))
    path = tmp_path / "observations.csv"
    save_observations_csv(path, round_)
    rows = path.read_text(encoding="utf-8").splitlines()[1:]
    assert all(row.split(",")[7] == "" for row in rows)


def test_round_summary_is_json_ready() -> None:
    round_ = simulate_round(SimConfig(rng_seed=2, satellite_count=10, outlier_probability=0.2))
    before = round_summary(round_)
    assert "estimated_pos_m" not in before

    round_.estimate()
    summary = round_summary(round_)
    json.dumps(summary, allow_nan=False)
    assert summary["outlier_ids"] == sorted(round_.outlier_ids)
    assert summary["status"] in {"converged", "max_iterations", "singular_matrix"}
    assert len(summary["estimated_pos_m"]) == 3
    assert summary["estimated_clock_bias_m"] is None


def test_sanitize_json_clears_non_finite_values_in_nested_containers() -> None:
    summary = {
        "error_m": float("nan"),
        "rows": [{"pdop": float("inf")}, 1.5],
        "pair": (float("-inf"), 2.0),
    }
    assert sanitize_json(summary) == {
        "error_m": None,
        "rows": [{"pdop": None}, 1.5],
        "pair": [None, 2.0],
    }
