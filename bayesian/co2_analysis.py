"""
CO2 Quadratic Trend Analysis Pipeline
CO2 二次趨勢分析流程

load data → sample prior → sample posterior → summarize
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Union

import matplotlib.pyplot as plt
import pandas as pd

from config.model_configs import CO2AnalysisConfig, create_default_config
from data_processing.co2_data_loader import CO2Dataset, CO2DataLoader
from .mcmc_sampler import MCMCSampler, SampleSet
from .results_analyzer import ResultsAnalyzer

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResults:
    """Everything one run produces"""
    config: CO2AnalysisConfig
    dataset: CO2Dataset
    prior: SampleSet
    posterior: SampleSet
    parameter_summary: pd.DataFrame
    comparison: pd.DataFrame
    curve_metrics: Dict[str, float]
    predictions: Optional[pd.DataFrame] = None
    report: str = ""
    artifacts: Dict[str, Path] = field(default_factory=dict)


def run_analysis(config: Optional[CO2AnalysisConfig] = None,
                 data_path: Union[str, Path, None] = None,
                 output_dir: Union[str, Path, None] = None,
                 dataset: Optional[CO2Dataset] = None,
                 make_plots: Optional[bool] = None) -> AnalysisResults:
    """
    Run the full report

    Args:
        config: Analysis configuration (defaults to create_default_config())
        data_path: Weekly CO2 table, ignored when dataset is given
        output_dir: Where tables, report, trace and figures go; nothing is
            written when None
        dataset: Pre-loaded observations
        make_plots: Override config.summary.generate_plots

    Returns:
        AnalysisResults
    """
    config = (config or create_default_config()).validate()
    _, config_warnings = config.validate_configuration()
    for message in config_warnings:
        logger.warning(message)

    if make_plots is None:
        make_plots = config.summary.generate_plots

    # 1. 載入資料
    if dataset is None:
        if data_path is None:
            raise ValueError("Either data_path or dataset must be given")
        dataset = CO2DataLoader(data_path).load()

    # 2-5. 先驗與後驗採樣
    sampler = MCMCSampler(config.mcmc, verbose=config.verbose)
    prior = sampler.sample_prior(config.model)
    posterior = sampler.sample_posterior(config.model, dataset)

    # 6. 摘要
    analyzer = ResultsAnalyzer(credible_mass=config.summary.credible_mass,
                               center_year=config.model.center_year,
                               verbose=config.verbose)
    analyzer.analyze(prior, posterior, dataset, predict_years=config.summary.predict_years)

    artifacts = {}
    report = analyzer.generate_report(output_dir)

    if output_dir is not None:
        output_dir = Path(output_dir)
        artifacts.update(analyzer.save_tables(output_dir))
        artifacts['report'] = output_dir / 'analysis_report.txt'

        if config.summary.save_trace:
            artifacts['trace'] = analyzer.save_trace(output_dir)

        if make_plots:
            artifacts.update(_make_figures(config, dataset, prior, posterior, output_dir))

    return AnalysisResults(
        config=config,
        dataset=dataset,
        prior=prior,
        posterior=posterior,
        parameter_summary=analyzer.parameter_summary,
        comparison=analyzer.comparison,
        curve_metrics=analyzer.curve_metrics,
        predictions=analyzer.predictions,
        report=report,
        artifacts=artifacts
    )


def _make_figures(config: CO2AnalysisConfig, dataset: CO2Dataset, prior: SampleSet,
                  posterior: SampleSet, output_dir: Path) -> Dict[str, Path]:
    from visualization.co2_visualization import CO2Visualization

    viz = CO2Visualization(credible_mass=config.summary.credible_mass,
                           center_year=config.model.center_year)
    paths = {
        'histograms': output_dir / 'prior_posterior_histograms.png',
        'curve_fits': output_dir / 'curve_fits.png',
        'residuals': output_dir / 'posterior_residuals.png',
        'trace': output_dir / 'posterior_trace.png'
    }

    figures = [
        viz.plot_parameter_histograms(prior, posterior, prior_specs=config.model.priors,
                                      save_path=paths['histograms']),
        viz.plot_curve_fits(dataset, prior, posterior, n_curves=config.summary.n_curves,
                            save_path=paths['curve_fits']),
        viz.plot_residuals(dataset, posterior, save_path=paths['residuals']),
        viz.plot_trace(posterior, save_path=paths['trace'])
    ]
    for fig in figures:
        plt.close(fig)

    return paths
