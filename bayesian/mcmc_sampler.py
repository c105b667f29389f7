"""
MCMC Sampler Module
MCMC 採樣模組

Draws prior and posterior samples of (a, b, c) with PyMC's NUTS sampler.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import arviz as az
import numpy as np
import pymc as pm

from config.model_configs import MCMCConfig, QuadraticModelConfig
from config.settings import PARAMETER_NAMES
from data_processing.co2_data_loader import CO2Dataset
from .model_factory import ModelFactory

logger = logging.getLogger(__name__)

RHAT_THRESHOLD = 1.01


@dataclass(frozen=True)
class SampleSet:
    """
    Ordered, immutable parameter-vector draws.

    Draws are flattened chain-major (chain 0 first) and stored as read-only
    arrays keyed by parameter name.
    """
    kind: str
    draws: Dict[str, np.ndarray]
    trace: Optional[az.InferenceData] = None
    diagnostics: Dict[str, float] = field(default_factory=dict)
    elapsed: float = 0.0

    def __post_init__(self):
        if self.kind not in ('prior', 'posterior'):
            raise ValueError(f"kind must be 'prior' or 'posterior', got {self.kind!r}")

        frozen = {}
        lengths = set()
        for name in PARAMETER_NAMES:
            if name not in self.draws:
                raise ValueError(f"Missing draws for parameter '{name}'")
            values = np.array(self.draws[name], dtype=float).ravel()
            values.setflags(write=False)
            frozen[name] = values
            lengths.add(len(values))

        if len(lengths) != 1:
            raise ValueError(f"Parameters have different draw counts: {sorted(lengths)}")
        if 0 in lengths:
            raise ValueError("SampleSet needs at least one draw")

        object.__setattr__(self, 'draws', frozen)
        object.__setattr__(self, 'diagnostics', dict(self.diagnostics))

    @classmethod
    def from_inference_data(cls, trace: az.InferenceData, kind: str,
                            elapsed: float = 0.0) -> 'SampleSet':
        draws = {
            name: trace.posterior[name].values.reshape(-1)
            for name in PARAMETER_NAMES
        }
        return cls(kind=kind, draws=draws, trace=trace,
                   diagnostics=compute_diagnostics(trace), elapsed=elapsed)

    def __getitem__(self, name: str) -> np.ndarray:
        return self.draws[name]

    @property
    def parameter_names(self) -> Tuple[str, ...]:
        return PARAMETER_NAMES

    @property
    def n_draws(self) -> int:
        return len(self.draws[PARAMETER_NAMES[0]])

    def as_matrix(self) -> np.ndarray:
        """(n_draws, 3) array in (a, b, c) column order"""
        return np.column_stack([self.draws[name] for name in PARAMETER_NAMES])

    def mean_vector(self) -> Tuple[float, float, float]:
        return tuple(float(np.mean(self.draws[name])) for name in PARAMETER_NAMES)


def compute_diagnostics(trace: az.InferenceData) -> Dict[str, float]:
    """Divergences, worst R-hat and smallest bulk ESS over a, b, c"""
    summary = az.summary(trace, var_names=list(PARAMETER_NAMES), kind='diagnostics')

    divergences = 0
    if hasattr(trace, 'sample_stats') and 'diverging' in trace.sample_stats:
        divergences = int(trace.sample_stats.diverging.sum().item())

    return {
        'divergences': divergences,
        'max_r_hat': float(summary['r_hat'].max()),
        'min_ess_bulk': float(summary['ess_bulk'].min()),
        'n_chains': int(trace.posterior.sizes['chain']),
        'n_draws_per_chain': int(trace.posterior.sizes['draw'])
    }


class MCMCSampler:
    """NUTS sampling of the prior and posterior quadratic models"""

    def __init__(self, config: Optional[MCMCConfig] = None, verbose: bool = True):
        """
        Initialize MCMC Sampler

        Args:
            config: Draws, tuning steps, chains and seed
            verbose: Print progress lines
        """
        self.config = config or MCMCConfig()
        self.config.validate()
        self.verbose = verbose
        self.results = {}

    def _sample(self, model: pm.Model, kind: str) -> SampleSet:
        cfg = self.config
        if self.verbose:
            print(f"\n🔥 MCMC sampling: {kind}")
            print(f"   Chains: {cfg.chains}, Draws: {cfg.draws}, Tune: {cfg.tune}")

        start_time = time.time()

        with model:
            trace = pm.sample(
                draws=cfg.draws,
                tune=cfg.tune,
                chains=cfg.chains,
                cores=cfg.cores,
                target_accept=cfg.target_accept,
                random_seed=cfg.random_seed,
                progressbar=cfg.progressbar,
                return_inferencedata=True
            )

        elapsed = time.time() - start_time
        sample_set = SampleSet.from_inference_data(trace, kind=kind, elapsed=elapsed)
        self._check_diagnostics(sample_set)
        self.results[kind] = sample_set

        if self.verbose:
            diag = sample_set.diagnostics
            print(f"   ✅ Complete in {elapsed:.1f} s ({sample_set.n_draws} draws)")
            print(f"      Divergences: {diag['divergences']}")
            print(f"      Max R̂: {diag['max_r_hat']:.3f}")
            print(f"      Min ESS: {diag['min_ess_bulk']:.0f}")

        return sample_set

    def _check_diagnostics(self, sample_set: SampleSet):
        diag = sample_set.diagnostics
        if diag['divergences'] > 0:
            logger.warning("%s sampling produced %d divergent transitions",
                           sample_set.kind, diag['divergences'])
        if np.isfinite(diag['max_r_hat']) and diag['max_r_hat'] > RHAT_THRESHOLD:
            logger.warning("%s chains may not have converged (max R-hat %.3f)",
                           sample_set.kind, diag['max_r_hat'])

    def sample_prior(self, model_config: QuadraticModelConfig) -> SampleSet:
        """Sample (a, b, c) from the prior, no data involved"""
        model = ModelFactory.create_prior_model(model_config)
        return self._sample(model, kind='prior')

    def sample_posterior(self, model_config: QuadraticModelConfig,
                         dataset: CO2Dataset) -> SampleSet:
        """Sample (a, b, c) conditioned on the full dataset"""
        model = ModelFactory.create_posterior_model(model_config, dataset)
        logger.info("Conditioning on %d observations", dataset.n_observations)
        return self._sample(model, kind='posterior')
