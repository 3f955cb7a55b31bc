"""Run a single headless simulate-then-estimate round."""

from __future__ import annotations

import argparse
import json
from datetime import datetime, timezone
from pathlib import Path

import numpy as np

from gnss_outlier.config import CLOCK_BIAS_DEFAULT_M, SimConfig
from gnss_outlier.logger import round_summary, save_observations_csv
from gnss_outlier.models import GeometryProvider, ReceiverTruth
from gnss_outlier.round import Round, simulate_round
from gnss_outlier.sat import ConstellationGeometryProvider, LookAngleGeometryProvider
from gnss_outlier.utils.logging import get_logger
from gnss_outlier.utils.wgs84 import lla_to_ecef

logger = get_logger("sim.run_round")


def build_round(
    cfg: SimConfig,
    *,
    geometry: str = "look-angle",
    rx_lla: tuple[float, float, float] | None = None,
) -> Round:
    """Wire a geometry provider and receiver truth for ``cfg`` and simulate a round."""

    provider: GeometryProvider
    truth: ReceiverTruth | None = None
    if geometry == "constellation":
        provider = ConstellationGeometryProvider()
        lat_deg, lon_deg, alt_m = rx_lla if rx_lla is not None else (36.597383, -121.874300, 14.0)
        truth = ReceiverTruth(pos_m=lla_to_ecef(lat_deg, lon_deg, alt_m), clock_bias_m=cfg.true_clock_bias_m)
    elif geometry == "look-angle":
        provider = LookAngleGeometryProvider()
    else:
        raise ValueError(f"Unknown geometry source '{geometry}'; expected look-angle|constellation")
    return simulate_round(cfg, provider, rng=np.random.default_rng(cfg.rng_seed), truth=truth)


def run_round(
    cfg: SimConfig,
    run_dir: Path,
    *,
    geometry: str = "look-angle",
    rx_lla: tuple[float, float, float] | None = None,
    verbose: bool = False,
) -> Path:
    """Simulate and estimate one round, writing ``observations.csv`` and ``summary.json``.

    Returns the path of the observations CSV.
    """

    run_dir.mkdir(parents=True, exist_ok=True)
    round_ = build_round(cfg, geometry=geometry, rx_lla=rx_lla)
    round_.estimate()
    if verbose:
        print("Per-satellite residuals:")
        for obs in round_.observations:
            flag = "*" if obs.is_outlier else " "
            print(
                f"  {flag} sat {obs.sat_id:2d} az={obs.az_deg:6.1f} el={obs.elev_deg:5.1f} "
                f"residual={obs.residual_m:+8.3f} m bias={obs.bias_m:6.2f} m"
            )
    csv_path = run_dir / "observations.csv"
    save_observations_csv(csv_path, round_)
    (run_dir / "summary.json").write_text(
        json.dumps(round_summary(round_), indent=2, allow_nan=False),
        encoding="utf-8",
    )
    logger.info("Wrote round outputs to %s", run_dir)
    return csv_path


def main() -> None:
    parser = argparse.ArgumentParser(description="Run one outlier simulation round.")
    parser.add_argument("--out-dir", type=str, default="runs", help="Root folder for outputs.")
    parser.add_argument("--run-name", type=str, default=None, help="Run folder name (default: UTC timestamp).")
    parser.add_argument("--rng-seed", type=int, default=42, help="Seed for the round.")
    parser.add_argument("--clock-bias", action="store_true", help="Simulate and estimate a clock bias.")
    parser.add_argument("--verbose", action="store_true", help="Print per-satellite residuals.")
    args = parser.parse_args()
    cfg = SimConfig(
        rng_seed=args.rng_seed,
        include_clock_bias=args.clock_bias,
        true_clock_bias_m=CLOCK_BIAS_DEFAULT_M if args.clock_bias else 0.0,
    )
    run_name = args.run_name or datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    csv_path = run_round(cfg, Path(args.out_dir) / run_name, verbose=args.verbose)
    print(f"Saved outputs to {csv_path.parent}")


if __name__ == "__main__":
    main()
