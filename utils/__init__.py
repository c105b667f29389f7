#!/usr/bin/env python3
"""
Utilities Module
工具模組

主要組件:
- math_utils: 可信區間工具函數
"""

from .math_utils import (
    credible_interval,
    hdi_interval,
    interval_width,
    relative_width
)

__all__ = [
    "credible_interval",
    "hdi_interval",
    "interval_width",
    "relative_width"
]
