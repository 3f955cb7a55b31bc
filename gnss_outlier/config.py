"""Configuration objects for outlier simulation rounds."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

CLOCK_BIAS_DEFAULT_M = 5.0


class WeightingPolicy(str, Enum):
    """Observation weighting used by the WLS solver."""

    ROBUST = "robust"
    UNIFORM = "uniform"


DIFFICULTY_PRESETS: dict[str, dict[str, float | int]] = {
    "easy": {"satellite_count": 10, "outlier_probability": 0.1},
    "medium": {"satellite_count": 15, "outlier_probability": 0.2},
    "hard": {"satellite_count": 20, "outlier_probability": 0.3},
}


@dataclass(frozen=True)
class SimConfig:
    """Round configuration defaults."""

    rng_seed: int = 42
    satellite_count: int = 10
    outlier_probability: float = 0.1
    include_clock_bias: bool = False
    true_clock_bias_m: float = 0.0
    bias_range_m: tuple[float, float] = (10.0, 20.0)
    noise_half_width_m: float = 0.5
    true_pos_m: tuple[float, float, float] = (1000.0, 1000.0, 1000.0)
    initial_guess_offset_m: float = -100.0
    max_iterations: int = 10
    tolerance: float = 1e-6
    regularization: float = 1e-6
    weight_epsilon: float = 0.1
    weighting: str = WeightingPolicy.ROBUST.value

    def __post_init__(self) -> None:
        if int(self.satellite_count) <= 0:
            raise ValueError("satellite_count must be > 0")
        if not 0.0 <= float(self.outlier_probability) <= 1.0:
            raise ValueError("outlier_probability must be within [0, 1]")
        lo, hi = self.bias_range_m
        if float(hi) < float(lo):
            raise ValueError("bias_range_m must be (low, high) with low <= high")
        if float(self.noise_half_width_m) < 0.0:
            raise ValueError("noise_half_width_m must be >= 0")
        if int(self.max_iterations) <= 0:
            raise ValueError("max_iterations must be > 0")
        if float(self.tolerance) <= 0.0:
            raise ValueError("tolerance must be > 0")
        if float(self.regularization) < 0.0:
            raise ValueError("regularization must be >= 0")
        if float(self.weight_epsilon) <= 0.0:
            raise ValueError("weight_epsilon must be > 0")
        # Raises ValueError for unknown policy names.
        WeightingPolicy(self.weighting)

    @property
    def weighting_policy(self) -> WeightingPolicy:
        return WeightingPolicy(self.weighting)

    @classmethod
    def from_preset(cls, name: str, **overrides: object) -> SimConfig:
        """Build a config from a named difficulty preset plus overrides."""

        try:
            preset = DIFFICULTY_PRESETS[name.lower()]
        except KeyError as exc:
            raise ValueError(
                f"Unknown preset '{name}'; expected one of {sorted(DIFFICULTY_PRESETS)}"
            ) from exc
        return cls(**{**preset, **overrides})
