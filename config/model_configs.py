#!/usr/bin/env python3
"""
Model Configurations Module
模型配置模組

CO2 二次趨勢貝氏分析的統一配置管理

核心功能:
- 先驗與概似配置 (a, b, c 與固定觀測誤差)
- MCMC 採樣配置
- 摘要與輸出配置
- 預設配置和自定義配置支援
"""

from typing import Dict, List, Any, Tuple
from dataclasses import dataclass, field, asdict, replace
from enum import Enum

from .settings import CENTER_YEAR, PARAMETER_NAMES

# ========================================
# 分析複雜度
# ========================================

class ModelComplexity(Enum):
    """分析複雜度級別"""
    SIMPLE = "simple"           # 快速測試
    STANDARD = "standard"       # 標準報告
    COMPREHENSIVE = "comprehensive"  # 長鏈重現

# ========================================
# 配置結構
# ========================================

@dataclass
class PriorSpec:
    """單一參數的常態先驗 N(mu, sigma)"""
    mu: float
    sigma: float

    def validate(self, name: str):
        if not self.sigma > 0:
            raise ValueError(f"Prior scale for '{name}' must be positive, got {self.sigma}")


def default_priors() -> Dict[str, PriorSpec]:
    """a: slope (ppm/yr), b: intercept at 1974 (ppm), c: curvature (ppm/yr²)"""
    return {
        'a': PriorSpec(mu=1.0, sigma=1.0),
        'b': PriorSpec(mu=330.0, sigma=10.0),
        'c': PriorSpec(mu=0.0, sigma=0.1)
    }


@dataclass
class QuadraticModelConfig:
    """二次均值模型配置"""
    priors: Dict[str, PriorSpec] = field(default_factory=default_priors)
    noise_sigma: float = 1.0  # ppm, fixed observation noise
    center_year: float = CENTER_YEAR

    def validate(self):
        missing = [name for name in PARAMETER_NAMES if name not in self.priors]
        if missing:
            raise ValueError(f"Missing priors for parameters: {missing}")
        for name, prior in self.priors.items():
            prior.validate(name)
        if not self.noise_sigma > 0:
            raise ValueError(f"noise_sigma must be positive, got {self.noise_sigma}")


@dataclass
class MCMCConfig:
    """MCMC 採樣配置"""
    draws: int = 1000
    tune: int = 1000
    chains: int = 4
    cores: int = 1
    target_accept: float = 0.9
    random_seed: int = 42
    progressbar: bool = False

    def validate(self):
        if self.draws < 1:
            raise ValueError(f"draws must be positive, got {self.draws}")
        if self.tune < 0:
            raise ValueError(f"tune must be non-negative, got {self.tune}")
        if self.chains < 1:
            raise ValueError(f"chains must be positive, got {self.chains}")
        if not 0 < self.target_accept < 1:
            raise ValueError(f"target_accept must lie in (0, 1), got {self.target_accept}")

    @property
    def total_draws(self) -> int:
        return self.draws * self.chains


@dataclass
class SummaryConfig:
    """後驗摘要與輸出配置"""
    credible_mass: float = 0.9
    n_curves: int = 100
    generate_plots: bool = True
    save_trace: bool = False
    predict_years: Tuple[float, ...] = (2030.0, 2050.0)

    def validate(self):
        if not 0 < self.credible_mass < 1:
            raise ValueError(f"credible_mass must lie in (0, 1), got {self.credible_mass}")
        if self.n_curves < 0:
            raise ValueError(f"n_curves must be non-negative, got {self.n_curves}")


@dataclass
class CO2AnalysisConfig:
    """整合分析配置 - 載入 → 先驗 → 後驗 → 摘要"""
    complexity_level: ModelComplexity = ModelComplexity.STANDARD
    verbose: bool = True

    model: QuadraticModelConfig = field(default_factory=QuadraticModelConfig)
    mcmc: MCMCConfig = field(default_factory=MCMCConfig)
    summary: SummaryConfig = field(default_factory=SummaryConfig)

    def __post_init__(self):
        """根據複雜度級別調整配置"""
        self._adjust_for_complexity()

    def _adjust_for_complexity(self):
        # 只調整預設子配置; 呼叫者給定的配置複製後保留原值
        tune_mcmc = self.mcmc == MCMCConfig()
        tune_summary = self.summary == SummaryConfig()
        self.mcmc = replace(self.mcmc)
        self.summary = replace(self.summary)

        if self.complexity_level == ModelComplexity.SIMPLE:
            if tune_mcmc:
                self.mcmc.draws = 300
                self.mcmc.tune = 300
                self.mcmc.chains = 2
            if tune_summary:
                self.summary.n_curves = 30
        elif self.complexity_level == ModelComplexity.COMPREHENSIVE:
            if tune_mcmc:
                self.mcmc.draws = 4000
                self.mcmc.tune = 2000
            if tune_summary:
                self.summary.save_trace = True

    def validate(self) -> 'CO2AnalysisConfig':
        """Raise ValueError on inconsistent settings, return self otherwise."""
        self.model.validate()
        self.mcmc.validate()
        self.summary.validate()
        return self

    def validate_configuration(self) -> Tuple[bool, List[str]]:
        """軟性檢查，回傳 (是否無警告, 警告列表)"""
        warnings = []

        if self.mcmc.draws < 500:
            warnings.append("MCMC樣本數過少，區間端點估計不穩定")

        if self.mcmc.chains < 2:
            warnings.append("建議使用至少2條MCMC鏈進行R-hat診斷")

        if self.mcmc.tune < 500:
            warnings.append("調整步數過少，NUTS步長可能未收斂")

        is_valid = len(warnings) == 0
        return is_valid, warnings

    def summary_dict(self) -> Dict[str, Any]:
        """配置摘要"""
        priors = ", ".join(
            f"{name}~N({p.mu:g}, {p.sigma:g})" for name, p in self.model.priors.items()
        )
        return {
            "complexity": self.complexity_level.value,
            "priors": priors,
            "noise_sigma": self.model.noise_sigma,
            "center_year": self.model.center_year,
            "mcmc": f"{self.mcmc.draws} draws x {self.mcmc.chains} chains (tune {self.mcmc.tune})",
            "random_seed": self.mcmc.random_seed,
            "credible_mass": self.summary.credible_mass
        }

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['complexity_level'] = self.complexity_level.value
        data['summary']['predict_years'] = list(self.summary.predict_years)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CO2AnalysisConfig':
        model_data = dict(data.get('model', {}))
        priors = model_data.pop('priors', None)
        model = QuadraticModelConfig(**model_data)
        if priors is not None:
            model.priors = {name: PriorSpec(**spec) for name, spec in priors.items()}

        summary_data = dict(data.get('summary', {}))
        if 'predict_years' in summary_data:
            summary_data['predict_years'] = tuple(summary_data['predict_years'])

        config = cls(
            complexity_level=ModelComplexity.STANDARD,
            verbose=data.get('verbose', True),
            model=model,
            mcmc=MCMCConfig(**data.get('mcmc', {})),
            summary=SummaryConfig(**summary_data)
        )
        # 複雜度只記錄，不覆寫已明確給定的數值
        config.complexity_level = ModelComplexity(data.get('complexity_level', 'standard'))
        return config

# ========================================
# 預設配置生成器
# ========================================

def create_default_config() -> CO2AnalysisConfig:
    """創建標準報告配置 (1000 draws)"""
    return CO2AnalysisConfig(complexity_level=ModelComplexity.STANDARD)

def create_quick_test_config() -> CO2AnalysisConfig:
    """創建快速測試配置"""
    return CO2AnalysisConfig(complexity_level=ModelComplexity.SIMPLE)

def create_comprehensive_config() -> CO2AnalysisConfig:
    """創建長鏈重現配置"""
    return CO2AnalysisConfig(complexity_level=ModelComplexity.COMPREHENSIVE)
