"""
Results Analyzer Module
結果分析模組

Descriptive statistics of prior and posterior draws: point estimates,
credible intervals, mean curves and curve-fit errors.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, Optional

import numpy as np
import pandas as pd

from config.settings import CENTER_YEAR, PARAMETER_NAMES
from data_processing.co2_data_loader import CO2Dataset
from skill_scores.rmse_score import calculate_mse, calculate_rmse, calculate_rmse_skill_score
from utils.math_utils import credible_interval, interval_width, relative_width
from .mcmc_sampler import SampleSet
from .model_factory import quadratic_mean

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = ['mean', 'median', 'lower', 'upper', 'width', 'relative_width']


def summarize_samples(sample_set: SampleSet, mass: float = 0.9) -> pd.DataFrame:
    """
    Mean, median and equal-tailed credible interval per parameter

    Args:
        sample_set: Prior or posterior draws
        mass: Credible mass (0.9 gives [q(0.05), q(0.95)])

    Returns:
        DataFrame indexed by parameter name
    """
    rows = []
    for name in PARAMETER_NAMES:
        samples = sample_set[name]
        mean = float(np.mean(samples))
        interval = credible_interval(samples, mass)
        rows.append({
            'parameter': name,
            'mean': mean,
            'median': float(np.median(samples)),
            'lower': interval[0],
            'upper': interval[1],
            'width': interval_width(interval),
            'relative_width': relative_width(interval, mean)
        })

    return pd.DataFrame(rows).set_index('parameter')[SUMMARY_COLUMNS]


def compare_prior_posterior(prior: SampleSet, posterior: SampleSet,
                            mass: float = 0.9) -> pd.DataFrame:
    """Prior and posterior summaries side by side with the width ratio"""
    prior_summary = summarize_samples(prior, mass).add_prefix('prior_')
    posterior_summary = summarize_samples(posterior, mass).add_prefix('posterior_')

    comparison = prior_summary.join(posterior_summary)
    comparison['width_ratio'] = comparison['posterior_width'] / comparison['prior_width']
    comparison['narrowed'] = comparison['posterior_width'] < comparison['prior_width']

    if not comparison['narrowed'].all():
        wider = list(comparison.index[~comparison['narrowed']])
        logger.warning("Posterior interval not narrower than prior for: %s", wider)

    return comparison


def mean_curve(sample_set: SampleSet, x, center_year: float = CENTER_YEAR) -> np.ndarray:
    """Quadratic mean function at the mean parameter vector"""
    a, b, c = sample_set.mean_vector()
    return quadratic_mean(a, b, c, x, center_year)


def curve_draws(sample_set: SampleSet, x, n_curves: Optional[int] = None,
                center_year: float = CENTER_YEAR) -> np.ndarray:
    """
    One mean-function curve per draw, shape (n_curves, len(x)).

    Draws are thinned evenly when n_curves is smaller than the sample size.
    """
    x = np.asarray(x, dtype=float)
    matrix = sample_set.as_matrix()
    if n_curves is not None and n_curves < len(matrix):
        index = np.linspace(0, len(matrix) - 1, n_curves).astype(int)
        matrix = matrix[index]

    a, b, c = (matrix[:, [i]] for i in range(3))
    return quadratic_mean(a, b, c, x[np.newaxis, :], center_year)


def curve_band(sample_set: SampleSet, x, mass: float = 0.9, max_draws: int = 1000,
               center_year: float = CENTER_YEAR) -> pd.DataFrame:
    """Pointwise credible band of the mean function"""
    x = np.asarray(x, dtype=float)
    curves = curve_draws(sample_set, x, n_curves=max_draws, center_year=center_year)

    tail = (1.0 - mass) / 2.0
    lower, upper = np.quantile(curves, [tail, 1.0 - tail], axis=0)

    return pd.DataFrame({
        'x': x,
        'mean': curves.mean(axis=0),
        'lower': lower,
        'upper': upper
    })


def predict_concentration(sample_set: SampleSet, years: Iterable[float], mass: float = 0.9,
                          center_year: float = CENTER_YEAR) -> pd.DataFrame:
    """Mean-function value at arbitrary years (e.g. extrapolation to 2050)"""
    years = np.atleast_1d(np.asarray(list(years), dtype=float))
    curves = curve_draws(sample_set, years, center_year=center_year)

    rows = []
    for j, year in enumerate(years):
        values = curves[:, j]
        lower, upper = credible_interval(values, mass)
        rows.append({
            'year': year,
            'mean': float(values.mean()),
            'median': float(np.median(values)),
            'lower': lower,
            'upper': upper
        })

    return pd.DataFrame(rows)


def compare_curve_fits(prior: SampleSet, posterior: SampleSet, dataset: CO2Dataset,
                       center_year: float = CENTER_YEAR) -> Dict[str, float]:
    """Residual errors of the prior and posterior mean curves at the observed years"""
    prior_curve = mean_curve(prior, dataset.x, center_year)
    posterior_curve = mean_curve(posterior, dataset.x, center_year)

    metrics = {
        'prior_mse': calculate_mse(dataset.y, prior_curve),
        'posterior_mse': calculate_mse(dataset.y, posterior_curve),
        'prior_rmse': calculate_rmse(dataset.y, prior_curve),
        'posterior_rmse': calculate_rmse(dataset.y, posterior_curve),
        'rmse_skill_score': calculate_rmse_skill_score(dataset.y, posterior_curve, prior_curve),
        'n_observations': dataset.n_observations
    }

    if metrics['posterior_mse'] >= metrics['prior_mse']:
        logger.warning("Posterior mean curve does not improve on the prior mean curve")

    return metrics


def diagnostics_table(*sample_sets: SampleSet) -> pd.DataFrame:
    rows = []
    for sample_set in sample_sets:
        row = {'kind': sample_set.kind, 'n_draws': sample_set.n_draws,
               'elapsed_s': sample_set.elapsed}
        row.update(sample_set.diagnostics)
        rows.append(row)
    return pd.DataFrame(rows).set_index('kind')


class ResultsAnalyzer:
    """Summarize prior/posterior draws and write report artifacts"""

    def __init__(self, credible_mass: float = 0.9, center_year: float = CENTER_YEAR,
                 verbose: bool = True):
        """
        Initialize Results Analyzer

        Args:
            credible_mass: Probability mass of reported intervals
            center_year: Year the mean function is centred on
            verbose: Print summary tables
        """
        self.credible_mass = credible_mass
        self.center_year = center_year
        self.verbose = verbose
        self.prior = None
        self.posterior = None
        self.dataset = None
        self.parameter_summary = None
        self.comparison = None
        self.curve_metrics = None
        self.predictions = None
        self.diagnostics = None

    def analyze(self, prior: SampleSet, posterior: SampleSet, dataset: CO2Dataset,
                predict_years: Iterable[float] = ()) -> pd.DataFrame:
        """
        Run every summary and keep the results on the analyzer

        Returns:
            Posterior parameter summary
        """
        self.prior = prior
        self.posterior = posterior
        self.dataset = dataset

        self.parameter_summary = summarize_samples(posterior, self.credible_mass)
        self.comparison = compare_prior_posterior(prior, posterior, self.credible_mass)
        self.curve_metrics = compare_curve_fits(prior, posterior, dataset, self.center_year)
        self.diagnostics = diagnostics_table(prior, posterior)

        predict_years = list(predict_years)
        if predict_years:
            self.predictions = predict_concentration(
                posterior, predict_years, self.credible_mass, self.center_year
            )

        if self.verbose:
            self._print_summary()

        return self.parameter_summary

    def _print_summary(self):
        print("\n📊 Posterior Summary:")
        print(self.parameter_summary.to_string(float_format=lambda v: f"{v:.6g}"))
        print("\n🔄 Prior vs Posterior interval width:")
        print(self.comparison[['prior_width', 'posterior_width', 'width_ratio']].to_string())
        print(f"\n📈 Mean curve MSE: prior {self.curve_metrics['prior_mse']:.2f}, "
              f"posterior {self.curve_metrics['posterior_mse']:.2f}")

    def _require_results(self):
        if self.parameter_summary is None:
            raise RuntimeError("analyze() must be called before saving results")

    def save_tables(self, save_path: Path) -> Dict[str, Path]:
        """Write CSV tables, return {name: path}"""
        self._require_results()
        save_path = Path(save_path)
        save_path.mkdir(parents=True, exist_ok=True)

        tables = {
            'parameter_summary': self.parameter_summary,
            'prior_posterior_comparison': self.comparison,
            'curve_fit_metrics': pd.Series(self.curve_metrics, name='value').to_frame(),
            'diagnostics': self.diagnostics
        }
        if self.predictions is not None:
            tables['predictions'] = self.predictions.set_index('year')

        written = {}
        for name, table in tables.items():
            path = save_path / f'{name}.csv'
            table.to_csv(path)
            written[name] = path

        return written

    def save_trace(self, save_path: Path) -> Path:
        """Write the posterior InferenceData as NetCDF"""
        self._require_results()
        if self.posterior.trace is None:
            raise ValueError("Posterior sample set carries no trace to save")
        save_path = Path(save_path)
        save_path.mkdir(parents=True, exist_ok=True)
        path = save_path / 'posterior_trace.nc'
        self.posterior.trace.to_netcdf(str(path))
        return path

    def generate_report(self, save_path: Optional[Path] = None) -> str:
        """
        Generate plain-text report

        Args:
            save_path: Directory for analysis_report.txt, nothing written if None

        Returns:
            Report text
        """
        self._require_results()
        pct = int(round(self.credible_mass * 100))

        report = []
        report.append("=" * 60)
        report.append("Mauna Loa CO2 Bayesian Quadratic Trend Report")
        report.append("=" * 60)
        report.append(f"mu(x) = a*(x - {self.center_year:g}) + b + c*(x - {self.center_year:g})^2")

        low, high = self.dataset.year_range
        report.append("\n## Data")
        report.append(f"Observations: {self.dataset.n_observations} ({low:.2f} to {high:.2f})")

        report.append(f"\n## Posterior ({self.posterior.n_draws} draws, {pct}% intervals)")
        for name, row in self.parameter_summary.iterrows():
            report.append(
                f"{name}: mean={row['mean']:.6g} median={row['median']:.6g} "
                f"[{row['lower']:.6g}, {row['upper']:.6g}] "
                f"(width {row['relative_width']:.2%} of mean)"
            )

        report.append("\n## Prior vs Posterior")
        for name, row in self.comparison.iterrows():
            report.append(
                f"{name}: prior width={row['prior_width']:.6g} "
                f"posterior width={row['posterior_width']:.6g} "
                f"ratio={row['width_ratio']:.3g}"
            )

        report.append("\n## Curve fit")
        report.append(f"Prior mean curve MSE: {self.curve_metrics['prior_mse']:.4f}")
        report.append(f"Posterior mean curve MSE: {self.curve_metrics['posterior_mse']:.4f}")
        report.append(f"RMSE skill score vs prior: {self.curve_metrics['rmse_skill_score']:.4f}")

        if self.predictions is not None:
            report.append("\n## Mean-function predictions")
            for _, row in self.predictions.iterrows():
                report.append(
                    f"{row['year']:.0f}: {row['mean']:.2f} ppm "
                    f"[{row['lower']:.2f}, {row['upper']:.2f}]"
                )

        report.append("\n## Sampler diagnostics")
        for kind, row in self.diagnostics.iterrows():
            report.append(
                f"{kind}: divergences={int(row['divergences'])} "
                f"max R-hat={row['max_r_hat']:.3f} min ESS={row['min_ess_bulk']:.0f}"
            )

        report_text = "\n".join(report)

        if save_path is not None:
            save_path = Path(save_path)
            save_path.mkdir(parents=True, exist_ok=True)
            with open(save_path / 'analysis_report.txt', 'w') as f:
                f.write(report_text)
            if self.verbose:
                print("\n📄 Report saved to", save_path / 'analysis_report.txt')

        return report_text
