"""
CO2 Report Visualization Module
CO2 報告視覺化模組

Prior vs posterior histograms, curve fits over the observed series,
trace plots and residuals.
"""

from typing import Dict, Optional, Tuple

import arviz as az
import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns
from scipy import stats

from bayesian.mcmc_sampler import SampleSet
from bayesian.results_analyzer import curve_band, curve_draws, mean_curve
from config.model_configs import PriorSpec
from config.settings import CENTER_YEAR, MATPLOTLIB_CONFIG, PARAMETER_LABELS, PARAMETER_NAMES, REPORT_COLORS
from data_processing.co2_data_loader import CO2Dataset
from utils.math_utils import credible_interval


class CO2Visualization:
    """
    CO2 Analysis Visualizer

    Every plot method returns the Figure and saves it when save_path is given.
    """

    def __init__(self, style: str = "whitegrid", figsize: Tuple[int, int] = (12, 8),
                 credible_mass: float = 0.9, center_year: float = CENTER_YEAR):
        """
        Initialize visualizer

        Parameters:
        -----------
        style : str
            Seaborn style
        figsize : Tuple[int, int]
            Default figure size
        credible_mass : float
            Mass of the intervals drawn on the plots
        center_year : float
            Year the mean function is centred on
        """
        self.style = style
        self.default_figsize = figsize
        self.credible_mass = credible_mass
        self.center_year = center_year

        plt.style.use('default')
        sns.set_style(style)
        plt.rcParams.update(MATPLOTLIB_CONFIG)

        self.colors = REPORT_COLORS

    def _save(self, fig: plt.Figure, save_path: Optional[str]):
        if save_path:
            fig.savefig(save_path, dpi=150, bbox_inches='tight')
            print(f"📊 圖表已保存至: {save_path}")

    def plot_parameter_histograms(self,
                                  prior: SampleSet,
                                  posterior: SampleSet,
                                  prior_specs: Optional[Dict[str, PriorSpec]] = None,
                                  bins: int = 50,
                                  save_path: str = None,
                                  figsize: Tuple[int, int] = None) -> plt.Figure:
        """
        Prior and posterior histograms for a, b, c

        The posterior is usually orders of magnitude narrower than the prior,
        so each parameter gets two panels: the prior (top) with the posterior
        interval marked, and the posterior alone (bottom).

        Parameters:
        -----------
        prior, posterior : SampleSet
            Draws to compare
        prior_specs : Dict[str, PriorSpec], optional
            Overlay the analytic prior density when given
        """
        figsize = figsize or self.default_figsize
        fig, axes = plt.subplots(2, len(PARAMETER_NAMES), figsize=figsize)
        pct = int(round(self.credible_mass * 100))

        for j, name in enumerate(PARAMETER_NAMES):
            ax_prior, ax_post = axes[0, j], axes[1, j]
            post_lower, post_upper = credible_interval(posterior[name], self.credible_mass)
            prior_lower, prior_upper = credible_interval(prior[name], self.credible_mass)

            ax_prior.hist(prior[name], bins=bins, density=True, alpha=0.6,
                          color=self.colors['prior'], edgecolor='white', linewidth=0.5,
                          label='prior draws')
            if prior_specs is not None and name in prior_specs:
                spec = prior_specs[name]
                grid = np.linspace(spec.mu - 4 * spec.sigma, spec.mu + 4 * spec.sigma, 300)
                ax_prior.plot(grid, stats.norm.pdf(grid, spec.mu, spec.sigma),
                              color=self.colors['prior'], linewidth=2, label='prior density')
            ax_prior.axvspan(post_lower, post_upper, color=self.colors['posterior'],
                             alpha=0.4, label=f'posterior {pct}% CI')
            for bound in (prior_lower, prior_upper):
                ax_prior.axvline(bound, color=self.colors['interval'], linestyle='--', linewidth=1)
            ax_prior.set_title(f'Prior: {PARAMETER_LABELS[name]}', fontsize=10)
            ax_prior.legend(fontsize=8)

            ax_post.hist(posterior[name], bins=bins, density=True, alpha=0.7,
                         color=self.colors['posterior'], edgecolor='white', linewidth=0.5)
            for bound in (post_lower, post_upper):
                ax_post.axvline(bound, color=self.colors['interval'], linestyle='--', linewidth=1.5)
            ax_post.axvline(np.median(posterior[name]), color='black', linewidth=1.5)
            ax_post.set_title(f'Posterior: {PARAMETER_LABELS[name]}', fontsize=10)
            ax_post.set_xlabel(name)

        axes[0, 0].set_ylabel('Density')
        axes[1, 0].set_ylabel('Density')

        fig.suptitle(f'Prior vs Posterior ({pct}% intervals dashed)',
                     fontsize=14, fontweight='bold')
        fig.tight_layout()
        self._save(fig, save_path)

        return fig

    def plot_curve_fits(self,
                        dataset: CO2Dataset,
                        prior: SampleSet,
                        posterior: SampleSet,
                        n_curves: int = 100,
                        save_path: str = None,
                        figsize: Tuple[int, int] = None) -> plt.Figure:
        """
        Observed series with sampled prior/posterior mean curves

        Left panel: prior curves (wide), right panel: posterior curves and band.
        """
        figsize = figsize or self.default_figsize
        fig, (ax_prior, ax_post) = plt.subplots(1, 2, figsize=figsize, sharex=True)

        low, high = dataset.year_range
        grid = np.linspace(low, high, 300)
        pct = int(round(self.credible_mass * 100))

        for ax, sample_set, title in ((ax_prior, prior, 'Prior'), (ax_post, posterior, 'Posterior')):
            color = self.colors[sample_set.kind]
            ax.plot(dataset.x, dataset.y, '.', markersize=2, color=self.colors['observed'],
                    alpha=0.6, label='observed')
            if n_curves > 0:
                curves = curve_draws(sample_set, grid, n_curves=n_curves,
                                     center_year=self.center_year)
                for curve in curves:
                    ax.plot(grid, curve, color=color, alpha=0.08, linewidth=0.8)
            ax.plot(grid, mean_curve(sample_set, grid, self.center_year),
                    color=color, linewidth=2.5, label=f'{title.lower()} mean curve')
            ax.set_title(f'{title} curve fit', fontsize=12)
            ax.set_xlabel('Year')
            ax.legend(fontsize=9, loc='upper left')

        band = curve_band(posterior, grid, self.credible_mass, center_year=self.center_year)
        ax_post.fill_between(band['x'], band['lower'], band['upper'],
                             color=self.colors['posterior'], alpha=0.3, label=f'{pct}% band')
        ax_post.legend(fontsize=9, loc='upper left')

        ax_prior.set_ylabel('CO2 (ppm)')
        # 後驗面板只顯示觀測範圍
        margin = 0.05 * (dataset.y.max() - dataset.y.min())
        ax_post.set_ylim(dataset.y.min() - margin, dataset.y.max() + margin)

        fig.suptitle('Quadratic trend: prior vs posterior', fontsize=14, fontweight='bold')
        fig.tight_layout()
        self._save(fig, save_path)

        return fig

    def plot_trace(self, sample_set: SampleSet, save_path: str = None) -> plt.Figure:
        """ArviZ trace plot of a, b, c"""
        if sample_set.trace is None:
            raise ValueError("Sample set carries no trace to plot")

        axes = az.plot_trace(sample_set.trace, var_names=list(PARAMETER_NAMES))
        fig = np.asarray(axes).ravel()[0].figure
        fig.suptitle(f'{sample_set.kind.capitalize()} trace', fontsize=14, fontweight='bold')
        fig.tight_layout()
        self._save(fig, save_path)

        return fig

    def plot_residuals(self, dataset: CO2Dataset, posterior: SampleSet,
                       save_path: str = None, figsize: Tuple[int, int] = None) -> plt.Figure:
        """Residuals of the observed series against the posterior mean curve"""
        figsize = figsize or (self.default_figsize[0], self.default_figsize[1] // 2)
        residuals = dataset.y - mean_curve(posterior, dataset.x, self.center_year)

        fig, (ax_time, ax_hist) = plt.subplots(
            1, 2, figsize=figsize, gridspec_kw={'width_ratios': [3, 1]}
        )
        ax_time.plot(dataset.x, residuals, '.', markersize=2, color=self.colors['observed'])
        ax_time.axhline(0, color=self.colors['interval'], linestyle='--')
        ax_time.set_xlabel('Year')
        ax_time.set_ylabel('Residual (ppm)')
        ax_time.set_title('Residuals vs posterior mean curve', fontsize=12)

        sns.histplot(y=residuals, bins=40, ax=ax_hist, color=self.colors['posterior'])
        ax_hist.set_ylabel('')
        ax_hist.set_title(f'RMS {np.sqrt(np.mean(residuals ** 2)):.2f} ppm', fontsize=12)

        fig.tight_layout()
        self._save(fig, save_path)

        return fig
