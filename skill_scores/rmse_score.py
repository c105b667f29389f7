"""
Mean squared / root mean square error scores for curve fits
曲線擬合的均方誤差與均方根誤差評分
"""

import numpy as np
from sklearn.metrics import mean_squared_error


def calculate_mse(observations, predictions):
    """
    計算 MSE (平均平方殘差)

    Parameters:
    -----------
    observations : array-like
        觀測值 (ppm)
    predictions : array-like
        均值曲線在觀測年份的值 (ppm)

    Returns:
    --------
    float
        MSE 值
    """
    return float(mean_squared_error(observations, predictions))


def calculate_rmse(observations, predictions):
    return float(np.sqrt(calculate_mse(observations, predictions)))


def calculate_rmse_skill_score(observations, predictions, baseline_predictions=None):
    """
    計算 RMSE Skill Score (RMSE-SS)
    RMSE-SS = 1 - (RMSE_model / RMSE_baseline)

    Parameters:
    -----------
    observations : array-like
        觀測值
    predictions : array-like
        模型預測值 (後驗均值曲線)
    baseline_predictions : array-like, optional
        基準線預測值 (先驗均值曲線)，若無則使用觀測值平均

    Returns:
    --------
    float
        RMSE Skill Score (-∞ to 1, 1為完美預測)
    """

    rmse_model = calculate_rmse(observations, predictions)

    if baseline_predictions is None:
        baseline_predictions = np.full_like(np.asarray(observations, dtype=float),
                                            np.mean(observations))

    rmse_baseline = calculate_rmse(observations, baseline_predictions)

    if rmse_baseline == 0:
        return float('inf') if rmse_model == 0 else float('-inf')

    return 1 - (rmse_model / rmse_baseline)


def analyze_residuals(observations, predictions):
    """
    分析殘差的組成成分

    Returns:
    --------
    dict
        rmse, bias, scatter, n_samples
    """

    obs = np.asarray(observations, dtype=float)
    pred = np.asarray(predictions, dtype=float)
    residuals = obs - pred

    return {
        'rmse': calculate_rmse(obs, pred),
        'bias': float(np.mean(residuals)),
        'scatter': float(np.std(residuals)),
        'n_samples': len(obs)
    }
