"""Range noise models."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class UniformNoiseModel:
    """Zero-mean noise uniform on ``[-half_width_m, half_width_m)``."""

    half_width_m: float = 0.5

    @property
    def sigma_m(self) -> float:
        return float(self.half_width_m / np.sqrt(3.0))

    def sample(self, rng: np.random.Generator) -> float:
        return float(rng.uniform(-self.half_width_m, self.half_width_m))


@dataclass(frozen=True)
class GaussianNoiseModel:
    """Zero-mean Gaussian noise."""

    sigma_m: float = 0.3

    def sample(self, rng: np.random.Generator) -> float:
        return float(rng.normal(0.0, self.sigma_m))
