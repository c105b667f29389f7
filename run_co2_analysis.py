#!/usr/bin/env python3
"""
Bayesian Quadratic Trend Analysis of Mauna Loa CO2
Mauna Loa CO2 貝氏二次趨勢分析

Loads the NOAA weekly table, samples the prior and the posterior of
mu(x) = a*(x - 1974) + b + c*(x - 1974)^2 with NUTS, and writes summary
tables, a text report and figures.

Usage:
    python run_co2_analysis.py --data-path data/co2_weekly_mlo.txt
    python run_co2_analysis.py --quick-test --no-plots
"""

import argparse
import logging
import sys

from config.model_configs import create_default_config, create_quick_test_config
from config.pymc_config import configure_pymc_environment, describe_pymc_setup
from config.settings import DEFAULT_DATA_PATH, DEFAULT_OUTPUT_DIR


def parse_arguments(argv=None):
    """Parse command-line arguments"""
    parser = argparse.ArgumentParser(
        description='Bayesian quadratic trend analysis of Mauna Loa CO2'
    )
    parser.add_argument('--data-path', type=str, default=str(DEFAULT_DATA_PATH),
                        help='Weekly CO2 table (NOAA co2_weekly_mlo.txt layout)')
    parser.add_argument('--output-dir', type=str, default=str(DEFAULT_OUTPUT_DIR),
                        help='Output directory for results')
    parser.add_argument('--draws', type=int, default=None,
                        help='Posterior draws per chain (default 1000)')
    parser.add_argument('--tune', type=int, default=None,
                        help='Tuning steps per chain')
    parser.add_argument('--chains', type=int, default=None,
                        help='Number of MCMC chains')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed')
    parser.add_argument('--noise-sigma', type=float, default=None,
                        help='Fixed observation noise in ppm')
    parser.add_argument('--credible-mass', type=float, default=None,
                        help='Probability mass of reported intervals (default 0.9)')
    parser.add_argument('--predict-years', type=float, nargs='*', default=None,
                        help='Years to evaluate the posterior mean function at')
    parser.add_argument('--quick-test', action='store_true',
                        help='Run with minimal samples for testing')
    parser.add_argument('--no-plots', action='store_true',
                        help='Skip figure generation')
    parser.add_argument('--save-trace', action='store_true',
                        help='Write the posterior trace as NetCDF')
    parser.add_argument('--no-compile', action='store_true',
                        help='Disable PyTensor C compilation')
    return parser.parse_args(argv)


def build_config(args):
    """Apply command-line overrides to a preset configuration"""
    config = create_quick_test_config() if args.quick_test else create_default_config()

    if args.draws is not None:
        config.mcmc.draws = args.draws
    if args.tune is not None:
        config.mcmc.tune = args.tune
    if args.chains is not None:
        config.mcmc.chains = args.chains
    if args.seed is not None:
        config.mcmc.random_seed = args.seed
    if args.noise_sigma is not None:
        config.model.noise_sigma = args.noise_sigma
    if args.credible_mass is not None:
        config.summary.credible_mass = args.credible_mass
    if args.predict_years is not None:
        config.summary.predict_years = tuple(args.predict_years)
    if args.no_plots:
        config.summary.generate_plots = False
    if args.save_trace:
        config.summary.save_trace = True

    return config.validate()


def main(argv=None):
    args = parse_arguments(argv)
    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')

    print("=" * 80)
    print("Bayesian Quadratic Trend Analysis of Mauna Loa CO2")
    print("Mauna Loa CO2 貝氏二次趨勢分析")
    print("=" * 80)

    try:
        config = build_config(args)
    except ValueError as e:
        print(f"❌ Invalid configuration: {e}")
        return 2

    # PyTensor flags must be set before pymc is imported
    configure_pymc_environment(use_c_compiler=not args.no_compile, verbose=config.verbose)
    from bayesian.co2_analysis import run_analysis

    versions = describe_pymc_setup()
    print("✅ " + ", ".join(f"{name} {version}" for name, version in versions.items()))

    print("\n📋 Configuration:")
    for key, value in config.summary_dict().items():
        print(f"   {key}: {value}")

    try:
        results = run_analysis(config, data_path=args.data_path, output_dir=args.output_dir)
    except FileNotFoundError as e:
        print(f"❌ {e}")
        print("   Download co2_weekly_mlo.txt from NOAA GML and pass it with --data-path")
        return 1
    except ValueError as e:
        print(f"❌ Unusable CO2 data: {e}")
        return 1

    print("\n" + results.report)
    print("\n📁 Artifacts:")
    for name, path in results.artifacts.items():
        print(f"   {name}: {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
