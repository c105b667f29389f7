"""
Skill scores for curve-fit evaluation
曲線擬合評估的技能評分
"""

from .rmse_score import calculate_mse, calculate_rmse, calculate_rmse_skill_score, analyze_residuals

__all__ = [
    'calculate_mse', 'calculate_rmse', 'calculate_rmse_skill_score', 'analyze_residuals'
]
