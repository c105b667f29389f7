#!/usr/bin/env python3
"""
Mathematical Utilities Module
數學工具模組

提供後驗摘要使用的區間工具函數

核心功能:
- 等尾可信區間 (quantile-based credible interval)
- 最高密度區間 (HDI)
- 區間寬度與相對寬度
"""

import numpy as np
from typing import Tuple

# ========================================
# 區間工具
# ========================================

def _as_samples(samples) -> np.ndarray:
    samples = np.asarray(samples, dtype=float).ravel()
    if samples.size == 0:
        raise ValueError("Cannot compute an interval from zero samples")
    return samples

def _check_mass(mass: float):
    if not 0 < mass < 1:
        raise ValueError(f"Credible mass must lie in (0, 1), got {mass}")

def credible_interval(samples, mass: float = 0.9) -> Tuple[float, float]:
    """
    計算等尾可信區間

    [q((1 - mass) / 2), q((1 + mass) / 2)]，mass=0.9 時為 [q(0.05), q(0.95)]

    Parameters:
    -----------
    samples : array-like
        MCMC 樣本
    mass : float
        區間機率質量

    Returns:
    --------
    Tuple[float, float]
        (下界, 上界)
    """
    samples = _as_samples(samples)
    _check_mass(mass)

    tail = (1.0 - mass) / 2.0
    lower, upper = np.quantile(samples, [tail, 1.0 - tail])
    return float(lower), float(upper)

def hdi_interval(samples, mass: float = 0.9) -> Tuple[float, float]:
    """
    計算最高密度區間 (Highest Density Interval)

    Parameters:
    -----------
    samples : array-like
        樣本
    mass : float
        區間機率質量

    Returns:
    --------
    Tuple[float, float]
        (下界, 上界)
    """
    samples = _as_samples(samples)
    _check_mass(mass)

    sorted_samples = np.sort(samples)
    n = len(sorted_samples)

    interval_size = int(np.ceil(mass * n))

    if interval_size >= n:
        return float(sorted_samples[0]), float(sorted_samples[-1])

    # 所有長度為 interval_size 的視窗中最窄者
    widths = sorted_samples[interval_size - 1:] - sorted_samples[:n - interval_size + 1]
    best = int(np.argmin(widths))

    return float(sorted_samples[best]), float(sorted_samples[best + interval_size - 1])

def interval_width(interval: Tuple[float, float]) -> float:
    lower, upper = interval
    return float(upper - lower)

def relative_width(interval: Tuple[float, float], center: float) -> float:
    """區間寬度 / |中心值|，中心值為 0 時回傳 inf"""
    if center == 0:
        return float('inf')
    return interval_width(interval) / abs(center)
