import numpy as np
import pytest

from gnss_outlier.meas import UniformNoiseModel, simulate
from gnss_outlier.models import EstimatedPosition, SolverStatus
from gnss_outlier.receiver import evaluate, solve, summarize_residuals
from gnss_outlier.sat import LookAngleGeometryProvider

TRUTH = np.array([1000.0, 1000.0, 1000.0])


def _noise_free_observations(count: int = 10, seed: int = 2, clock_bias_m: float = 0.0):
    rng = np.random.default_rng(seed)
    geometries = LookAngleGeometryProvider().get_geometries(count, TRUTH, rng)
    return simulate(geometries, TRUTH, clock_bias_m, 0.0, noise_model=UniformNoiseModel(0.0), rng=rng)


def _estimate_at(pos_m: np.ndarray, clock_bias_m: float | None = None) -> EstimatedPosition:
    return EstimatedPosition(
        pos_m=pos_m,
        clock_bias_m=clock_bias_m,
        converged=True,
        iterations=1,
        status=SolverStatus.CONVERGED,
    )


def test_perfect_guess_gives_zero_residuals() -> None:
    observations = _noise_free_observations()
    estimate = solve(observations, TRUTH.copy(), include_clock_bias=False)
    assert estimate.converged
    evaluated = evaluate(observations, estimate)
    assert all(abs(obs.residual_m) < 1e-6 for obs in evaluated)
    assert all(obs.bias_m == 0.0 for obs in evaluated)


def test_evaluate_is_idempotent_and_does_not_mutate() -> None:
    rng = np.random.default_rng(9)
    geometries = LookAngleGeometryProvider().get_geometries(12, TRUTH, rng)
    observations = simulate(geometries, TRUTH, 0.0, 0.3, rng=rng)
    estimate = solve(observations, TRUTH - 100.0, include_clock_bias=False)
    first = evaluate(observations, estimate)
    second = evaluate(observations, estimate)
    assert [o.residual_m for o in first] == [o.residual_m for o in second]
    assert all(obs.residual_m is None for obs in observations)


def test_residual_sign_and_clock_bias() -> None:
    observations = _noise_free_observations(count=6, clock_bias_m=5.0)
    without_clock = evaluate(observations, _estimate_at(TRUTH))
    assert all(obs.residual_m == pytest.approx(5.0, abs=1e-6) for obs in without_clock)
    with_clock = evaluate(observations, _estimate_at(TRUTH, clock_bias_m=5.0))
    assert all(obs.residual_m == pytest.approx(0.0, abs=1e-6) for obs in with_clock)


def test_outlier_residual_tracks_injected_bias() -> None:
    rng = np.random.default_rng(21)
    geometries = LookAngleGeometryProvider().get_geometries(10, TRUTH, rng)
    observations = simulate(
        geometries,
        TRUTH,
        0.0,
        1.0,
        bias_range_m=(40.0, 50.0),
        noise_model=UniformNoiseModel(0.0),
        rng=rng,
    )
    evaluated = evaluate(observations, _estimate_at(TRUTH))
    for obs in evaluated:
        assert obs.residual_m == pytest.approx(obs.bias_m, abs=1e-6)


def test_summarize_residuals() -> None:
    observations = _noise_free_observations(count=8)
    evaluated = evaluate(observations, _estimate_at(TRUTH + np.array([0.0, 0.0, 0.3])))
    stats = summarize_residuals(evaluated, num_params=3, sigma_m=0.3)
    assert stats.dof == 5
    assert stats.rms_m > 0.0
    assert stats.max_abs_m >= abs(stats.mean_m)
    assert 0.0 <= stats.p_value <= 1.0

    empty = summarize_residuals(observations, num_params=3, sigma_m=0.3)
    assert empty.dof == 0
    assert np.isnan(empty.rms_m)
