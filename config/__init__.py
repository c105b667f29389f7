#!/usr/bin/env python3
"""
Configuration Module
配置模組

主要組件:
- settings: 資料格式、路徑與繪圖常數
- model_configs: 模型、MCMC 與摘要配置
- pymc_config: 匯入 PyMC 前的 PyTensor 環境設置
"""

from .model_configs import (
    ModelComplexity,
    PriorSpec,
    QuadraticModelConfig,
    MCMCConfig,
    SummaryConfig,
    CO2AnalysisConfig,
    default_priors,
    create_default_config,
    create_quick_test_config,
    create_comprehensive_config
)

__all__ = [
    "ModelComplexity",
    "PriorSpec",
    "QuadraticModelConfig",
    "MCMCConfig",
    "SummaryConfig",
    "CO2AnalysisConfig",
    "default_priors",
    "create_default_config",
    "create_quick_test_config",
    "create_comprehensive_config"
]
