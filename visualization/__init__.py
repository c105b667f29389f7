"""
Visualization Module
視覺化模組

All plotting for the CO2 trend report is centralized here.

Modules:
- co2_visualization: prior/posterior histograms, curve fits, trace and residual plots
"""

from .co2_visualization import CO2Visualization

__all__ = [
    'CO2Visualization'
]
