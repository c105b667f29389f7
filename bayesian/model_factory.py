"""
Model Factory for the CO2 quadratic trend
模型工廠 - 建立先驗與後驗 PyMC 模型

mu(x) = a * (x - 1974) + b + c * (x - 1974)^2
"""

import numpy as np
import pymc as pm

from config.model_configs import QuadraticModelConfig
from config.settings import CENTER_YEAR, PARAMETER_NAMES
from data_processing.co2_data_loader import CO2Dataset


def quadratic_mean(a, b, c, x, center_year: float = CENTER_YEAR):
    """
    Evaluate the quadratic mean function.

    Scalars and equal-shape arrays broadcast as usual. Passing draw vectors
    with shape (n_draws, 1) against years of shape (n_years,) gives one curve
    per draw.
    """
    t = np.asarray(x, dtype=float) - center_year
    return a * t + b + c * t ** 2


class ModelFactory:
    """Factory for creating PyMC models"""

    @staticmethod
    def _add_priors(config: QuadraticModelConfig):
        """Independent normal priors on a, b, c (inside a model context)"""
        return tuple(
            pm.Normal(name, mu=config.priors[name].mu, sigma=config.priors[name].sigma)
            for name in PARAMETER_NAMES
        )

    @classmethod
    def create_prior_model(cls, config: QuadraticModelConfig) -> pm.Model:
        """Create the prior-only model (no observed data)"""
        config.validate()

        with pm.Model() as model:
            cls._add_priors(config)

        return model

    @classmethod
    def create_posterior_model(cls, config: QuadraticModelConfig, dataset: CO2Dataset) -> pm.Model:
        """Create the model conditioned on observed concentrations"""
        config.validate()
        if dataset.n_observations == 0:
            raise ValueError("Cannot condition the model on an empty dataset")

        t = dataset.x - config.center_year

        with pm.Model(coords={'obs_id': np.arange(dataset.n_observations)}) as model:
            a, b, c = cls._add_priors(config)

            # Quadratic mean centred on center_year
            mu = a * t + b + c * t ** 2

            # Normal likelihood, fixed noise scale
            pm.Normal('y_obs', mu=mu, sigma=config.noise_sigma,
                      observed=dataset.y, dims='obs_id')

        return model

    @classmethod
    def create_model(cls, config: QuadraticModelConfig, dataset: CO2Dataset = None) -> pm.Model:
        """Create the posterior model when data is given, the prior model otherwise"""
        if dataset is None:
            return cls.create_prior_model(config)
        return cls.create_posterior_model(config, dataset)
