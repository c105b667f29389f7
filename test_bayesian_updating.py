#!/usr/bin/env python3
"""
先驗 → 後驗 更新測試 (NUTS 小規模採樣)
"""

import os
from pathlib import Path

import numpy as np
import pytest

from bayesian.co2_analysis import run_analysis
from bayesian.mcmc_sampler import MCMCSampler, SampleSet
from bayesian.results_analyzer import (
    ResultsAnalyzer, compare_curve_fits, compare_prior_posterior, curve_band,
    mean_curve, predict_concentration, summarize_samples
)
from config.model_configs import MCMCConfig, create_default_config, create_quick_test_config
from data_processing.co2_data_loader import load_co2_dataset

TRUE_PARAMS = {'a': 1.3, 'b': 331.0, 'c': 0.012}
MLO_PATH = Path(os.environ.get('CO2_WEEKLY_MLO', Path(__file__).parent / 'data' / 'co2_weekly_mlo.txt'))


def test_sample_sets_have_requested_draws(sampled_sets, small_mcmc_config):
    prior, posterior = sampled_sets

    assert prior.kind == 'prior'
    assert posterior.kind == 'posterior'
    assert prior.n_draws == small_mcmc_config.total_draws
    assert posterior.n_draws == small_mcmc_config.total_draws


def test_sample_set_is_immutable(sampled_sets):
    _, posterior = sampled_sets

    with pytest.raises(ValueError):
        posterior['a'][0] = 0.0
    with pytest.raises(AttributeError):
        posterior.kind = 'prior'


def test_draws_are_chain_major(sampled_sets, small_mcmc_config):
    _, posterior = sampled_sets
    chains = posterior.trace.posterior['b'].values

    np.testing.assert_array_equal(posterior['b'][:small_mcmc_config.draws], chains[0])
    np.testing.assert_array_equal(posterior['b'][small_mcmc_config.draws:], chains[1])


def test_diagnostics_recorded(sampled_sets):
    _, posterior = sampled_sets

    for key in ('divergences', 'max_r_hat', 'min_ess_bulk', 'n_chains'):
        assert key in posterior.diagnostics
    assert posterior.diagnostics['n_chains'] == 2
    assert posterior.elapsed > 0


def test_prior_draws_follow_prior(sampled_sets, model_config):
    prior, _ = sampled_sets

    for name, spec in model_config.priors.items():
        assert np.mean(prior[name]) == pytest.approx(spec.mu, abs=0.3 * spec.sigma)
        assert np.std(prior[name]) == pytest.approx(spec.sigma, rel=0.25)


def test_posterior_intervals_narrower_than_prior(sampled_sets):
    prior, posterior = sampled_sets

    comparison = compare_prior_posterior(prior, posterior, mass=0.9)

    assert comparison['narrowed'].all()
    assert (comparison['posterior_width'] < comparison['prior_width']).all()
    assert (comparison['width_ratio'] < 0.5).all()


def test_posterior_recovers_trend(sampled_sets):
    _, posterior = sampled_sets

    summary = summarize_samples(posterior)

    assert summary.loc['a', 'mean'] == pytest.approx(TRUE_PARAMS['a'], abs=0.1)
    assert summary.loc['b', 'mean'] == pytest.approx(TRUE_PARAMS['b'], abs=1.0)
    assert summary.loc['c', 'mean'] == pytest.approx(TRUE_PARAMS['c'], abs=0.002)


def test_summary_ordering(sampled_sets):
    for sample_set in sampled_sets:
        summary = summarize_samples(sample_set)

        assert (summary['lower'] <= summary['median']).all()
        assert (summary['median'] <= summary['upper']).all()
        np.testing.assert_allclose(summary['width'], summary['upper'] - summary['lower'])


def test_summary_interval_uses_5_and_95_quantiles(sampled_sets):
    _, posterior = sampled_sets

    summary = summarize_samples(posterior, mass=0.9)

    assert summary.loc['c', 'lower'] == pytest.approx(np.quantile(posterior['c'], 0.05))
    assert summary.loc['c', 'upper'] == pytest.approx(np.quantile(posterior['c'], 0.95))


def test_posterior_curve_fits_better_than_prior(sampled_sets, synthetic_dataset):
    prior, posterior = sampled_sets

    metrics = compare_curve_fits(prior, posterior, synthetic_dataset)

    assert metrics['posterior_mse'] < metrics['prior_mse']
    assert metrics['posterior_rmse'] == pytest.approx(1.0, abs=0.3)
    assert 0 < metrics['rmse_skill_score'] <= 1


def test_curve_band_brackets_mean(sampled_sets, synthetic_dataset):
    _, posterior = sampled_sets

    band = curve_band(posterior, synthetic_dataset.x[::10])

    assert (band['lower'] <= band['mean']).all()
    assert (band['mean'] <= band['upper']).all()
    np.testing.assert_allclose(band['mean'], mean_curve(posterior, band['x']), rtol=1e-4)


def test_predict_concentration_widens_with_extrapolation(sampled_sets):
    _, posterior = sampled_sets

    predictions = predict_concentration(posterior, [2000.0, 2050.0])
    widths = predictions['upper'] - predictions['lower']

    assert predictions['year'].tolist() == [2000.0, 2050.0]
    assert widths.iloc[1] > widths.iloc[0]


def test_results_analyzer_writes_artifacts(sampled_sets, synthetic_dataset, tmp_path):
    prior, posterior = sampled_sets
    analyzer = ResultsAnalyzer(credible_mass=0.9)

    analyzer.analyze(prior, posterior, synthetic_dataset, predict_years=[2030.0])
    written = analyzer.save_tables(tmp_path)
    report = analyzer.generate_report(tmp_path)
    trace_path = analyzer.save_trace(tmp_path)

    for name in ('parameter_summary', 'prior_posterior_comparison',
                 'curve_fit_metrics', 'diagnostics', 'predictions'):
        assert written[name].exists()
    assert (tmp_path / 'analysis_report.txt').read_text() == report
    assert "Prior vs Posterior" in report
    assert trace_path.exists()


def test_results_analyzer_requires_analyze(tmp_path):
    with pytest.raises(RuntimeError):
        ResultsAnalyzer().save_tables(tmp_path)


def test_sampler_rejects_invalid_config():
    config = create_default_config().mcmc
    config.draws = 0

    with pytest.raises(ValueError):
        MCMCSampler(config)


def test_run_analysis_end_to_end(synthetic_dataset, tmp_path):
    config = create_quick_test_config()
    config.mcmc.draws = 200
    config.mcmc.tune = 300
    config.summary.n_curves = 10
    config.verbose = False

    results = run_analysis(config, dataset=synthetic_dataset, output_dir=tmp_path, make_plots=True)

    assert isinstance(results.posterior, SampleSet)
    assert results.comparison['narrowed'].all()
    assert results.curve_metrics['posterior_mse'] < results.curve_metrics['prior_mse']
    assert results.predictions is not None
    for name in ('report', 'curve_fits', 'histograms', 'residuals', 'trace'):
        assert results.artifacts[name].exists()


def test_run_analysis_needs_data():
    with pytest.raises(ValueError):
        run_analysis(create_quick_test_config())


@pytest.mark.skipif(not MLO_PATH.exists(), reason="co2_weekly_mlo.txt not available")
def test_published_weekly_table_reproduces_summary():
    dataset = load_co2_dataset(MLO_PATH)
    config = create_default_config()
    config.verbose = False

    sampler = MCMCSampler(config.mcmc, verbose=False)
    posterior = sampler.sample_posterior(config.model, dataset)
    summary = summarize_samples(posterior, config.summary.credible_mass)

    assert dataset.n_observations > 2000
    assert posterior.n_draws >= 1000
    assert (summary['relative_width'] < 0.05).all()


def test_quiet_analyzer_prints_nothing(sampled_sets, synthetic_dataset, tmp_path, capsys):
    prior, posterior = sampled_sets
    analyzer = ResultsAnalyzer(verbose=False)

    analyzer.analyze(prior, posterior, synthetic_dataset)
    analyzer.generate_report(tmp_path)

    assert capsys.readouterr().out == ""


def test_single_chain_diagnostics_render(synthetic_dataset, model_config, caplog):
    config = MCMCConfig(draws=200, tune=300, chains=1, cores=1, random_seed=11)
    sampler = MCMCSampler(config, verbose=True)

    with caplog.at_level("WARNING", logger="bayesian.mcmc_sampler"):
        prior = sampler.sample_prior(model_config)
        posterior = sampler.sample_posterior(model_config, synthetic_dataset)

    for sample_set in (prior, posterior):
        diag = sample_set.diagnostics
        assert diag['n_chains'] == 1
        assert diag['n_draws_per_chain'] == 200
        assert np.isnan(diag['max_r_hat'])
        assert np.isfinite(diag['min_ess_bulk'])
    assert "R-hat" not in caplog.text

    analyzer = ResultsAnalyzer(verbose=False)
    analyzer.analyze(prior, posterior, synthetic_dataset)
    report = analyzer.generate_report()

    assert "max R-hat=nan" in report
