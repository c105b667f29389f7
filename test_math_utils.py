#!/usr/bin/env python3
"""
可信區間工具與殘差評分測試
"""

import numpy as np
import pytest

from skill_scores.rmse_score import (
    analyze_residuals, calculate_mse, calculate_rmse, calculate_rmse_skill_score
)
from utils.math_utils import credible_interval, hdi_interval, interval_width, relative_width


def test_credible_interval_is_5th_and_95th_quantile():
    samples = np.arange(1, 101, dtype=float)

    lower, upper = credible_interval(samples, 0.9)

    assert lower == pytest.approx(np.quantile(samples, 0.05))
    assert upper == pytest.approx(np.quantile(samples, 0.95))


@pytest.mark.parametrize("seed", range(5))
def test_lower_le_median_le_upper(seed):
    rng = np.random.default_rng(seed)
    samples = rng.standard_t(df=2, size=rng.integers(1, 500))

    lower, upper = credible_interval(samples, 0.9)

    assert lower <= np.median(samples) <= upper


def test_single_sample_interval_collapses():
    assert credible_interval([3.5]) == (3.5, 3.5)


@pytest.mark.parametrize("mass", [0.0, 1.0, -0.1, 1.5])
def test_invalid_mass_rejected(mass):
    with pytest.raises(ValueError):
        credible_interval([1.0, 2.0], mass)


def test_empty_samples_rejected():
    with pytest.raises(ValueError):
        credible_interval([])


def test_hdi_not_wider_than_equal_tailed_for_skewed_samples():
    samples = np.random.default_rng(3).exponential(1.0, size=5000)

    hdi = hdi_interval(samples, 0.9)
    equal_tailed = credible_interval(samples, 0.9)

    assert interval_width(hdi) <= interval_width(equal_tailed)
    assert hdi[0] == pytest.approx(samples.min(), abs=0.01)


def test_relative_width():
    assert relative_width((9.0, 11.0), 10.0) == pytest.approx(0.2)
    assert relative_width((-1.0, 1.0), -4.0) == pytest.approx(0.5)
    assert relative_width((-1.0, 1.0), 0.0) == float('inf')


def test_mse_and_rmse():
    obs = np.array([1.0, 2.0, 3.0])
    pred = np.array([1.0, 2.0, 5.0])

    assert calculate_mse(obs, pred) == pytest.approx(4.0 / 3.0)
    assert calculate_rmse(obs, pred) == pytest.approx(np.sqrt(4.0 / 3.0))


def test_rmse_skill_score_against_baseline():
    obs = np.array([0.0, 0.0, 0.0, 0.0])
    model = np.full(4, 1.0)
    baseline = np.full(4, 4.0)

    assert calculate_rmse_skill_score(obs, model, baseline) == pytest.approx(0.75)
    assert calculate_rmse_skill_score(obs, obs, obs) == float('inf')


def test_analyze_residuals():
    result = analyze_residuals([2.0, 4.0], [1.0, 3.0])

    assert result['bias'] == pytest.approx(1.0)
    assert result['scatter'] == pytest.approx(0.0)
    assert result['n_samples'] == 2
