"""Monte Carlo robustness sweep over seeded rounds.

Runs the same configuration many times with different RNG seeds and writes
one row per round plus an aggregate summary.

Usage:
  python -m sim.monte_carlo --preset medium --n 200
"""

from __future__ import annotations

import argparse
import csv
import json
from dataclasses import replace
from pathlib import Path
from typing import Any

import numpy as np

from gnss_outlier.config import SimConfig
from gnss_outlier.errors import InsufficientObservationsError
from gnss_outlier.logger import sanitize_json
from gnss_outlier.round import simulate_round
from gnss_outlier.sat import LookAngleGeometryProvider
from gnss_outlier.utils.logging import get_logger

logger = get_logger("sim.monte_carlo")


def run_monte_carlo(
    cfg: SimConfig,
    *,
    n: int,
    seed_start: int | None = None,
    out_dir: Path | None = None,
) -> dict[str, Any]:
    """Run ``n`` rounds with consecutive seeds and summarize solver robustness."""

    if n <= 0:
        raise ValueError("n must be > 0")
    first_seed = int(cfg.rng_seed if seed_start is None else seed_start)
    provider = LookAngleGeometryProvider()
    rows: list[dict[str, Any]] = []
    for seed in range(first_seed, first_seed + n):
        round_cfg = replace(cfg, rng_seed=seed)
        round_ = simulate_round(round_cfg, provider, rng=np.random.default_rng(seed))
        try:
            estimate = round_.estimate()
        except InsufficientObservationsError as exc:
            logger.warning("Seed %d skipped: %s", seed, exc)
            continue
        outlier_abs = [abs(o.residual_m) for o in round_.observations if o.is_outlier]
        clean_abs = [abs(o.residual_m) for o in round_.observations if not o.is_outlier]
        rows.append(
            {
                "seed": seed,
                "converged": int(estimate.converged),
                "status": estimate.status.value,
                "iterations": estimate.iterations,
                "num_outliers": len(outlier_abs),
                "pos_err_m": round_.position_error_m(),
                "outlier_abs_residual_mean_m": _safe_mean(outlier_abs),
                "clean_abs_residual_mean_m": _safe_mean(clean_abs),
            }
        )

    summary = {
        "n": n,
        "n_solved": len(rows),
        "seed_start": first_seed,
        "satellite_count": cfg.satellite_count,
        "outlier_probability": cfg.outlier_probability,
        "include_clock_bias": cfg.include_clock_bias,
        "weighting": cfg.weighting,
        "convergence_rate": _safe_mean([r["converged"] for r in rows]),
        "pos_err_rms_m": _rms([r["pos_err_m"] for r in rows]),
        "pos_err_max_m": _safe_max([r["pos_err_m"] for r in rows]),
        "outlier_abs_residual_mean_m": _safe_mean([r["outlier_abs_residual_mean_m"] for r in rows]),
        "clean_abs_residual_mean_m": _safe_mean([r["clean_abs_residual_mean_m"] for r in rows]),
    }
    if out_dir is not None:
        out_dir.mkdir(parents=True, exist_ok=True)
        _write_rows(out_dir / "mc_runs.csv", rows)
        (out_dir / "mc_summary.json").write_text(
            json.dumps(sanitize_json(summary), indent=2, allow_nan=False),
            encoding="utf-8",
        )
        logger.info("Wrote Monte Carlo outputs to %s", out_dir)
    return summary


def _write_rows(path: Path, rows: list[dict[str, Any]]) -> None:
    if not rows:
        path.write_text("", encoding="utf-8")
        return
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=list(rows[0].keys()))
        writer.writeheader()
        writer.writerows(rows)


def _finite(values: list[float]) -> np.ndarray:
    arr = np.array(values, dtype=float)
    return arr[np.isfinite(arr)]


def _safe_mean(values: list[float]) -> float:
    arr = _finite(values)
    return float(np.mean(arr)) if arr.size else float("nan")


def _safe_max(values: list[float]) -> float:
    arr = _finite(values)
    return float(np.max(arr)) if arr.size else float("nan")


def _rms(values: list[float]) -> float:
    arr = _finite(values)
    return float(np.sqrt(np.mean(arr**2))) if arr.size else float("nan")


def main() -> None:
    parser = argparse.ArgumentParser(description="Monte Carlo robustness sweep.")
    parser.add_argument("--preset", type=str, default="easy", help="easy|medium|hard")
    parser.add_argument("--n", type=int, default=100, help="Number of rounds.")
    parser.add_argument("--seed-start", type=int, default=0, help="First seed.")
    parser.add_argument("--out-dir", type=str, default="runs/mc", help="Output folder.")
    args = parser.parse_args()
    summary = run_monte_carlo(
        SimConfig.from_preset(args.preset),
        n=args.n,
        seed_start=args.seed_start,
        out_dir=Path(args.out_dir),
    )
    print(json.dumps(sanitize_json(summary), indent=2))


if __name__ == "__main__":
    main()
