"""Round exports for downstream presentation and scoring."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any

from gnss_outlier.models import SatelliteObservation
from gnss_outlier.round import Round

OBSERVATION_CSV_COLUMNS = [
    "sat_id",
    "az_deg",
    "elev_deg",
    "pos_x_m",
    "pos_y_m",
    "pos_z_m",
    "measurement_m",
    "residual_m",
    "bias_m",
    "is_outlier",
]
_CSV_HEADER = ",".join(OBSERVATION_CSV_COLUMNS) + "\n"


def save_observations_csv(path: str | Path, round_: Round) -> None:
    """Write one row per satellite of the round."""

    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        handle.write(_CSV_HEADER)
        for obs in round_.observations:
            handle.write(_observation_to_csv_line(obs))


def round_summary(round_: Round) -> dict[str, Any]:
    """JSON-ready summary of a round; solution fields are empty until estimated."""

    estimate = round_.estimated
    summary: dict[str, Any] = {
        "satellite_count": len(round_.raw_observations),
        "outlier_ids": sorted(round_.outlier_ids),
        "true_pos_m": [float(v) for v in round_.truth.pos_m],
        "true_clock_bias_m": float(round_.truth.clock_bias_m),
        "include_clock_bias": bool(round_.config.include_clock_bias),
        "weighting": round_.config.weighting,
    }
    if estimate is None:
        return summary
    stats = round_.residual_stats()
    summary.update(
        {
            "estimated_pos_m": [float(v) for v in estimate.pos_m],
            "estimated_clock_bias_m": estimate.clock_bias_m,
            "converged": estimate.converged,
            "status": estimate.status.value,
            "iterations": estimate.iterations,
            "position_error_m": round_.position_error_m(),
            "pdop": estimate.dop.pdop if estimate.dop is not None else None,
            "residual_rms_m": stats.rms_m,
            "residual_max_abs_m": stats.max_abs_m,
            "chi_square": stats.chi_square,
            "p_value": stats.p_value,
        }
    )
    return sanitize_json(summary)


def _observation_to_csv_line(obs: SatelliteObservation) -> str:
    row = [
        obs.sat_id,
        _format_value(obs.az_deg),
        _format_value(obs.elev_deg),
        _format_value(float(obs.pos_m[0])),
        _format_value(float(obs.pos_m[1])),
        _format_value(float(obs.pos_m[2])),
        _format_value(obs.measurement_m),
        _format_value(obs.residual_m),
        _format_value(obs.bias_m),
        _format_value(obs.is_outlier),
    ]
    return ",".join(str(value) for value in row) + "\n"


def _format_value(value: float | int | bool | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    return repr(float(value)) if isinstance(value, float) else str(value)


def sanitize_json(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {k: sanitize_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [sanitize_json(v) for v in value]
    return value
