"""A round: one simulate-then-estimate cycle over a fixed satellite set."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from gnss_outlier.config import SimConfig
from gnss_outlier.meas.noise import UniformNoiseModel
from gnss_outlier.meas.simulator import simulate
from gnss_outlier.models import (
    EstimatedPosition,
    GeometryProvider,
    ReceiverTruth,
    ResidualStats,
    SatelliteObservation,
)
from gnss_outlier.receiver.residuals import evaluate, summarize_residuals
from gnss_outlier.receiver.wls import solve
from gnss_outlier.sat.look_angle import LookAngleGeometryProvider

logger = logging.getLogger(__name__)


@dataclass
class Round:
    """Observations, truth and (once estimated) the solution of one round.

    Rounds share nothing with each other; build a new one with
    ``simulate_round`` instead of reusing an old one.
    """

    config: SimConfig
    truth: ReceiverTruth
    raw_observations: tuple[SatelliteObservation, ...]
    _estimate: EstimatedPosition | None = field(default=None, init=False, repr=False)
    _evaluated: tuple[SatelliteObservation, ...] | None = field(default=None, init=False, repr=False)
    _initial_guess: np.ndarray | None = field(default=None, init=False, repr=False)

    @property
    def observations(self) -> list[SatelliteObservation]:
        """Observations with residuals once estimated, raw ones before."""

        if self._evaluated is not None:
            return list(self._evaluated)
        return list(self.raw_observations)

    @property
    def outlier_ids(self) -> frozenset[int]:
        return frozenset(obs.sat_id for obs in self.raw_observations if obs.is_outlier)

    @property
    def bias_by_id(self) -> dict[int, float]:
        return {obs.sat_id: obs.bias_m for obs in self.raw_observations}

    @property
    def estimated(self) -> EstimatedPosition | None:
        return self._estimate

    @property
    def num_params(self) -> int:
        return 4 if self.config.include_clock_bias else 3

    def default_initial_guess(self) -> np.ndarray:
        return np.asarray(self.truth.pos_m, dtype=float) + self.config.initial_guess_offset_m

    def estimate(self, initial_guess: np.ndarray | None = None) -> EstimatedPosition:
        """Run the solver and residual evaluation once.

        Later calls return the cached result. Passing an initial guess that
        differs from the one the round was solved from raises ``ValueError``;
        simulate a new round to solve again.
        """

        if self._estimate is not None:
            if initial_guess is not None and not np.array_equal(
                np.asarray(initial_guess, dtype=float), self._initial_guess
            ):
                raise ValueError("Round already estimated from a different initial guess")
            return self._estimate
        cfg = self.config
        guess = self.default_initial_guess() if initial_guess is None else np.asarray(initial_guess, dtype=float)
        estimate = solve(
            self.raw_observations,
            guess,
            cfg.include_clock_bias,
            max_iterations=cfg.max_iterations,
            tolerance=cfg.tolerance,
            regularization=cfg.regularization,
            weighting=cfg.weighting_policy,
            weight_epsilon=cfg.weight_epsilon,
        )
        self._estimate = estimate
        self._initial_guess = guess
        self._evaluated = tuple(evaluate(self.raw_observations, estimate))
        logger.info(
            "Round solved: status=%s iterations=%d error=%.3f m",
            estimate.status.value,
            estimate.iterations,
            self.position_error_m(),
        )
        return estimate

    def position_error_m(self) -> float:
        if self._estimate is None:
            return float("nan")
        return float(np.linalg.norm(self._estimate.pos_m - np.asarray(self.truth.pos_m, dtype=float)))

    def residual_stats(self) -> ResidualStats:
        sigma_m = UniformNoiseModel(self.config.noise_half_width_m).sigma_m
        return summarize_residuals(self.observations, self.num_params, sigma_m)


def simulate_round(
    config: SimConfig,
    geometry_source: GeometryProvider | None = None,
    rng: np.random.Generator | None = None,
    truth: ReceiverTruth | None = None,
) -> Round:
    """Generate geometry and simulated ranges for a fresh round.

    ``rng`` defaults to a generator seeded with ``config.rng_seed``.
    """

    generator = rng if rng is not None else np.random.default_rng(config.rng_seed)
    provider = geometry_source if geometry_source is not None else LookAngleGeometryProvider()
    if truth is None:
        truth = ReceiverTruth(
            pos_m=np.asarray(config.true_pos_m, dtype=float),
            clock_bias_m=float(config.true_clock_bias_m),
        )
    geometries = provider.get_geometries(int(config.satellite_count), truth.pos_m, generator)
    observations = simulate(
        geometries,
        truth.pos_m,
        truth.clock_bias_m,
        float(config.outlier_probability),
        bias_range_m=(float(config.bias_range_m[0]), float(config.bias_range_m[1])),
        noise_model=UniformNoiseModel(float(config.noise_half_width_m)),
        rng=generator,
    )
    return Round(config=config, truth=truth, raw_observations=tuple(observations))
