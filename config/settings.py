"""
Configuration settings for the Mauna Loa CO2 quadratic trend analysis
"""

from pathlib import Path

# NOAA GML weekly Mauna Loa table (co2_weekly_mlo.txt), whitespace separated
CO2_COLUMNS = [
    'year', 'month', 'day', 'decimal', 'ppm',
    'n_days', 'one_year_ago', 'ten_years_ago', 'since_1800'
]

# Column projected as x (decimal year) and y (concentration in ppm)
X_COLUMN = 'decimal'
Y_COLUMN = 'ppm'

# NOAA marks missing weeks with -999.99
MISSING_VALUE = -999.99

# Year the quadratic mean function is centred on
CENTER_YEAR = 1974.0

# Default locations
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_DATA_PATH = PROJECT_ROOT / 'data' / 'co2_weekly_mlo.txt'
DEFAULT_OUTPUT_DIR = PROJECT_ROOT / 'results' / 'co2_quadratic_analysis'

# Parameter names in sampling order
PARAMETER_NAMES = ('a', 'b', 'c')

PARAMETER_LABELS = {
    'a': 'a (slope, ppm/yr)',
    'b': 'b (intercept at 1974, ppm)',
    'c': 'c (curvature, ppm/yr²)'
}

# Matplotlib settings
MATPLOTLIB_CONFIG = {
    'figure.dpi': 100,
    'axes.titleweight': 'bold',
    'axes.grid': True,
    'grid.alpha': 0.3
}

# Colors for prior / posterior / observations
REPORT_COLORS = {
    'prior': '#F18F01',
    'posterior': '#2E86AB',
    'observed': '#333333',
    'interval': '#C73E1D'
}
