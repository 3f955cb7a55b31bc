import pytest

from gnss_outlier.config import DIFFICULTY_PRESETS, SimConfig, WeightingPolicy


def test_simconfig_defaults() -> None:
    cfg = SimConfig()

    assert cfg.satellite_count == 10
    assert cfg.outlier_probability == 0.1
    assert cfg.include_clock_bias is False
    assert cfg.bias_range_m == (10.0, 20.0)
    assert cfg.true_pos_m == (1000.0, 1000.0, 1000.0)
    assert cfg.max_iterations == 10
    assert cfg.tolerance == 1e-6
    assert cfg.regularization == 1e-6
    assert cfg.weighting_policy is WeightingPolicy.ROBUST


def test_presets() -> None:
    assert set(DIFFICULTY_PRESETS) == {"easy", "medium", "hard"}
    hard = SimConfig.from_preset("HARD", rng_seed=7)
    assert hard.satellite_count == 20
    assert hard.outlier_probability == 0.3
    assert hard.rng_seed == 7
    with pytest.raises(ValueError):
        SimConfig.from_preset("impossible")


@pytest.mark.parametrize(
    "overrides",
    [
        {"satellite_count": 0},
        {"outlier_probability": 1.2},
        {"bias_range_m": (20.0, 10.0)},
        {"max_iterations": 0},
        {"tolerance": 0.0},
        {"regularization": -1.0},
        {"weighting": "median"},
    ],
)
def test_invalid_config_raises(overrides: dict) -> None:
    with pytest.raises(ValueError):
        SimConfig(**overrides)
