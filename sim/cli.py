"""Unified CLI entrypoint.

Two run modes:
  1) round        one simulate-then-estimate round (CSV + JSON summary)
  2) monte-carlo  many seeded rounds, aggregate robustness summary
"""

from __future__ import annotations

import argparse
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from gnss_outlier.config import CLOCK_BIAS_DEFAULT_M, DIFFICULTY_PRESETS, SimConfig, WeightingPolicy
from sim.scenario import build_sim_config, load_scenario


def _config_from_args(args: argparse.Namespace) -> SimConfig:
    overrides: dict[str, Any] = {}
    if args.rng_seed is not None:
        overrides["rng_seed"] = args.rng_seed
    if args.clock_bias is not None:
        overrides["include_clock_bias"] = True
        overrides["true_clock_bias_m"] = float(args.clock_bias)
    if args.weighting is not None:
        overrides["weighting"] = args.weighting
    if args.scenario:
        scenario = load_scenario(Path(args.scenario))
        return build_sim_config(scenario, **overrides)
    return SimConfig.from_preset(args.preset, **overrides)


def _cmd_round(args: argparse.Namespace) -> None:
    from sim.run_round import run_round

    cfg = _config_from_args(args)
    run_name = args.run_name or datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    csv_path = run_round(
        cfg,
        Path(args.out_dir) / run_name,
        geometry=args.geometry,
        verbose=args.verbose,
    )
    print(f"Saved outputs to {csv_path.parent}")


def _cmd_monte_carlo(args: argparse.Namespace) -> None:
    from sim.monte_carlo import run_monte_carlo

    cfg = _config_from_args(args)
    summary = run_monte_carlo(cfg, n=args.n, out_dir=Path(args.out_dir))
    print(json.dumps(summary, indent=2))


def _add_config_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--preset",
        choices=sorted(DIFFICULTY_PRESETS),
        default="easy",
        help="Satellite count / outlier probability preset",
    )
    parser.add_argument("--scenario", type=str, default=None, help="Scenario JSON with SimConfig overrides")
    parser.add_argument("--rng-seed", type=int, default=None, help="Seed (first seed for monte-carlo)")
    parser.add_argument(
        "--clock-bias",
        type=float,
        nargs="?",
        const=CLOCK_BIAS_DEFAULT_M,
        default=None,
        help=f"Simulate and estimate a clock bias in meters (default {CLOCK_BIAS_DEFAULT_M})",
    )
    parser.add_argument(
        "--weighting",
        choices=[policy.value for policy in WeightingPolicy],
        default=None,
        help="Observation weighting policy",
    )
    parser.add_argument("--out-dir", type=str, default="runs", help="Root folder for outputs")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gnss-outlier", description="Pseudorange outlier simulation runner")
    sub = parser.add_subparsers(dest="cmd", required=True)

    rnd = sub.add_parser("round", help="Run one round and save per-satellite residuals")
    _add_config_args(rnd)
    rnd.add_argument("--run-name", type=str, default=None, help="Run folder name (default: UTC timestamp)")
    rnd.add_argument(
        "--geometry",
        choices=["look-angle", "constellation"],
        default="look-angle",
        help="Satellite geometry source",
    )
    rnd.add_argument("--verbose", action="store_true", help="Print per-satellite residuals")
    rnd.set_defaults(func=_cmd_round)

    mc = sub.add_parser("monte-carlo", help="Run many seeded rounds (headless)")
    _add_config_args(mc)
    mc.add_argument("--n", type=int, default=100, help="Number of rounds")
    mc.set_defaults(func=_cmd_monte_carlo)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        args.func(args)
    except ValueError as exc:
        raise SystemExit(f"error: {exc}") from exc


if __name__ == "__main__":
    main()
