"""
Data Processing Module
數據處理模組

co2_data_loader.py - NOAA Mauna Loa 週資料載入、過濾 (y ≥ 0) 與投影 (x, y)
"""

from .co2_data_loader import CO2DataLoader, CO2Dataset, clean_observations, load_co2_dataset

__all__ = [
    'CO2DataLoader',
    'CO2Dataset',
    'clean_observations',
    'load_co2_dataset'
]
