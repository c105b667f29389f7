"""
Bayesian CO2 Trend Framework
貝氏 CO2 趨勢分析框架

Core Modules:
=============

1. model_factory.py - 先驗與後驗 PyMC 模型 (二次均值函數，中心年 1974)
2. mcmc_sampler.py - NUTS 採樣與 SampleSet (不可變、依鏈排序)
3. results_analyzer.py - 可信區間、均值曲線與報告輸出
4. co2_analysis.py - 完整流程 (載入 → 先驗 → 後驗 → 摘要)

Usage Examples:
===============

from config import create_default_config
from bayesian import run_analysis
results = run_analysis(create_default_config(), data_path="data/co2_weekly_mlo.txt")
print(results.parameter_summary)
"""

from .model_factory import ModelFactory, quadratic_mean
from .mcmc_sampler import MCMCSampler, SampleSet, compute_diagnostics
from .results_analyzer import (
    ResultsAnalyzer,
    summarize_samples,
    compare_prior_posterior,
    compare_curve_fits,
    mean_curve,
    curve_draws,
    curve_band,
    predict_concentration,
    diagnostics_table
)
from .co2_analysis import AnalysisResults, run_analysis

__all__ = [
    'ModelFactory',
    'quadratic_mean',
    'MCMCSampler',
    'SampleSet',
    'compute_diagnostics',
    'ResultsAnalyzer',
    'summarize_samples',
    'compare_prior_posterior',
    'compare_curve_fits',
    'mean_curve',
    'curve_draws',
    'curve_band',
    'predict_concentration',
    'diagnostics_table',
    'AnalysisResults',
    'run_analysis'
]
