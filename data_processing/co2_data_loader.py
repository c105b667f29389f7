"""
CO2 Data Loader for the quadratic trend analysis
Mauna Loa CO2 數據載入器

Reads the NOAA GML weekly Mauna Loa table: '#' comment lines, whitespace
separated columns, -999.99 for missing weeks. Only the decimal year and the
ppm column are kept.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np
import pandas as pd

from config.settings import CO2_COLUMNS, MISSING_VALUE, X_COLUMN, Y_COLUMN

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CO2Dataset:
    """Filtered observations (x: decimal year, y: ppm), y >= 0 for every row"""
    x: np.ndarray
    y: np.ndarray
    source: Optional[str] = None

    def __post_init__(self):
        x = np.array(self.x, dtype=float)
        y = np.array(self.y, dtype=float)
        if x.shape != y.shape or x.ndim != 1:
            raise ValueError(f"x and y must be 1-d arrays of equal length, got {x.shape} and {y.shape}")
        if not (np.all(np.isfinite(x)) and np.all(y >= 0)):
            raise ValueError("Observations must be finite with non-negative concentration")
        x.setflags(write=False)
        y.setflags(write=False)
        object.__setattr__(self, 'x', x)
        object.__setattr__(self, 'y', y)

    @classmethod
    def from_arrays(cls, x, y, source: Optional[str] = None) -> 'CO2Dataset':
        """Build a dataset from raw arrays, dropping invalid rows first."""
        frame = clean_observations(pd.DataFrame({'x': np.asarray(x, dtype=float),
                                                 'y': np.asarray(y, dtype=float)}))
        return cls(frame['x'].to_numpy(), frame['y'].to_numpy(), source=source)

    @property
    def n_observations(self) -> int:
        return len(self.x)

    @property
    def year_range(self) -> Tuple[float, float]:
        if self.n_observations == 0:
            raise ValueError("Empty dataset has no year range")
        return float(self.x.min()), float(self.x.max())

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({'x': self.x, 'y': self.y})

    def __len__(self):
        return self.n_observations


def clean_observations(frame: pd.DataFrame, x_column: str = 'x', y_column: str = 'y') -> pd.DataFrame:
    """
    Drop missing weeks (MISSING_VALUE), non-finite rows and rows with
    negative concentration, project (x, y).

    Args:
        frame: Raw table
        x_column: Column holding the decimal year
        y_column: Column holding the concentration

    Returns:
        DataFrame with columns ``x`` and ``y`` sorted by ``x``
    """
    for column in (x_column, y_column):
        if column not in frame.columns:
            raise ValueError(f"Column '{column}' not found; available: {list(frame.columns)}")

    projected = pd.DataFrame({
        'x': pd.to_numeric(frame[x_column], errors='coerce'),
        'y': pd.to_numeric(frame[y_column], errors='coerce').replace(MISSING_VALUE, np.nan)
    })
    valid = np.isfinite(projected['x']) & np.isfinite(projected['y']) & (projected['y'] >= 0)

    return projected[valid].sort_values('x', kind='mergesort').reset_index(drop=True)


class CO2DataLoader:
    """Load and prepare the weekly CO2 table for Bayesian analysis"""

    def __init__(self, data_path: Union[str, Path],
                 x_column: str = X_COLUMN, y_column: str = Y_COLUMN):
        """
        Initialize data loader

        Args:
            data_path: Path to co2_weekly_mlo.txt (or a file in the same layout)
            x_column: Column projected as the decimal year
            y_column: Column projected as the concentration
        """
        self.data_path = Path(data_path)
        self.x_column = x_column
        self.y_column = y_column
        self.n_raw_rows = 0
        self.n_dropped_rows = 0

    def load_raw(self) -> pd.DataFrame:
        """Read every data row of the table, comments skipped."""
        if not self.data_path.exists():
            raise FileNotFoundError(f"CO2 data file not found: {self.data_path}")

        frame = pd.read_csv(
            self.data_path,
            sep=r'\s+',
            comment='#',
            header=None
        )
        if frame.empty:
            raise ValueError(f"No data rows in {self.data_path}")

        n_columns = frame.shape[1]
        names = list(CO2_COLUMNS[:n_columns])
        names += [f'extra_{i}' for i in range(len(names), n_columns)]
        frame.columns = names

        for column in (self.x_column, self.y_column):
            if column not in frame.columns:
                raise ValueError(
                    f"Column '{column}' missing from {self.data_path} "
                    f"({n_columns} columns found)"
                )

        self.n_raw_rows = len(frame)
        return frame

    def clean(self, frame: pd.DataFrame) -> pd.DataFrame:
        cleaned = clean_observations(frame, self.x_column, self.y_column)
        self.n_dropped_rows = len(frame) - len(cleaned)
        return cleaned

    def load(self) -> CO2Dataset:
        """Load, filter and project the table."""
        cleaned = self.clean(self.load_raw())
        if cleaned.empty:
            raise ValueError(f"No valid observations left in {self.data_path}")

        logger.info(
            "Loaded %d observations from %s (%d invalid rows dropped)",
            len(cleaned), self.data_path.name, self.n_dropped_rows
        )
        print(f"✅ Loaded {len(cleaned)} CO2 observations "
              f"({self.n_dropped_rows} invalid rows dropped)")

        return CO2Dataset(cleaned['x'].to_numpy(), cleaned['y'].to_numpy(),
                          source=str(self.data_path))


def load_co2_dataset(data_path: Union[str, Path]) -> CO2Dataset:
    """Convenience wrapper around CO2DataLoader(data_path).load()"""
    return CO2DataLoader(data_path).load()
