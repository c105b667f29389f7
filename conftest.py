"""
Shared pytest fixtures
共用測試資料與採樣結果
"""

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from config.model_configs import MCMCConfig, QuadraticModelConfig
from data_processing.co2_data_loader import CO2Dataset

TRUE_PARAMS = {'a': 1.3, 'b': 331.0, 'c': 0.012}


@pytest.fixture(scope="session")
def synthetic_dataset():
    """Quadratic trend 1974-2020 with unit noise, weekly-ish spacing"""
    rng = np.random.default_rng(1974)
    x = np.linspace(1974.4, 2020.0, 300)
    t = x - 1974.0
    y = TRUE_PARAMS['a'] * t + TRUE_PARAMS['b'] + TRUE_PARAMS['c'] * t ** 2
    y = y + rng.normal(0.0, 1.0, size=x.size)
    return CO2Dataset(x, y, source="synthetic")


@pytest.fixture(scope="session")
def model_config():
    return QuadraticModelConfig()


@pytest.fixture(scope="session")
def small_mcmc_config():
    return MCMCConfig(draws=400, tune=400, chains=2, cores=1, random_seed=7)


@pytest.fixture(scope="session")
def sampled_sets(synthetic_dataset, model_config, small_mcmc_config):
    """(prior, posterior) SampleSets from one NUTS run each"""
    from bayesian.mcmc_sampler import MCMCSampler

    sampler = MCMCSampler(small_mcmc_config, verbose=False)
    prior = sampler.sample_prior(model_config)
    posterior = sampler.sample_posterior(model_config, synthetic_dataset)
    return prior, posterior


def make_sample_set(kind, means, sds, n=2000, seed=0):
    """SampleSet from independent normal draws, no trace attached"""
    from bayesian.mcmc_sampler import SampleSet

    rng = np.random.default_rng(seed)
    draws = {name: rng.normal(means[name], sds[name], size=n) for name in ('a', 'b', 'c')}
    return SampleSet(kind=kind, draws=draws)


@pytest.fixture
def fake_prior():
    return make_sample_set('prior', {'a': 1.0, 'b': 330.0, 'c': 0.0},
                           {'a': 1.0, 'b': 10.0, 'c': 0.1}, seed=1)


@pytest.fixture
def fake_posterior():
    return make_sample_set('posterior', TRUE_PARAMS,
                           {'a': 0.01, 'b': 0.1, 'c': 0.0002}, seed=2)
