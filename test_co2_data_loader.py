#!/usr/bin/env python3
"""
CO2 數據載入器測試
"""

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from data_processing.co2_data_loader import (
    CO2DataLoader, CO2Dataset, clean_observations, load_co2_dataset
)

SAMPLE_PATH = Path(__file__).parent / 'data' / 'co2_weekly_sample.txt'


def test_sample_file_comments_and_missing_rows():
    loader = CO2DataLoader(SAMPLE_PATH)
    dataset = loader.load()

    assert loader.n_raw_rows == 12
    assert loader.n_dropped_rows == 2
    assert dataset.n_observations == 10
    assert np.all(dataset.y >= 0)
    assert dataset.x[0] == pytest.approx(1974.3795)
    assert dataset.y[0] == pytest.approx(333.37)


def test_raw_table_has_noaa_columns():
    frame = CO2DataLoader(SAMPLE_PATH).load_raw()

    assert list(frame.columns[:5]) == ['year', 'month', 'day', 'decimal', 'ppm']
    assert (frame['ppm'] == -999.99).sum() == 2


def test_clean_drops_negative_and_non_finite_and_sorts():
    frame = pd.DataFrame({
        'decimal': [2001.5, 2000.5, 2002.5, np.nan, 2003.5],
        'ppm': [370.0, 369.0, -999.99, 371.0, np.inf]
    })

    cleaned = clean_observations(frame, 'decimal', 'ppm')

    assert list(cleaned.columns) == ['x', 'y']
    assert cleaned['x'].tolist() == [2000.5, 2001.5]
    assert cleaned['y'].tolist() == [369.0, 370.0]


def test_file_with_only_leading_columns(tmp_path):
    path = tmp_path / 'short.txt'
    path.write_text("# year ppm\n1 2 3 1990.0 354.1\n1 2 3 1991.0 -999.99\n")

    dataset = load_co2_dataset(path)

    assert dataset.n_observations == 1
    assert dataset.year_range == (1990.0, 1990.0)


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        CO2DataLoader(tmp_path / 'nope.txt').load()


def test_missing_column_raises(tmp_path):
    path = tmp_path / 'narrow.txt'
    path.write_text("1974 5 19\n")

    with pytest.raises(ValueError, match="ppm|decimal"):
        CO2DataLoader(path).load()


def test_all_rows_invalid_raises(tmp_path):
    path = tmp_path / 'empty_after_filter.txt'
    path.write_text("1974 5 19 1974.38 -999.99\n1974 5 26 1974.40 -999.99\n")

    with pytest.raises(ValueError, match="No valid observations"):
        CO2DataLoader(path).load()


def test_dataset_arrays_are_read_only():
    dataset = CO2Dataset(np.array([2000.0, 2001.0]), np.array([369.0, 371.0]))

    with pytest.raises(ValueError):
        dataset.y[0] = -1.0


def test_dataset_rejects_negative_concentration():
    with pytest.raises(ValueError):
        CO2Dataset(np.array([2000.0]), np.array([-1.0]))


@pytest.mark.parametrize("x, y", [
    ([2000.0, 2001.0], [np.nan, 370.0]),
    ([2000.0, 2001.0], [369.0, np.inf]),
    ([np.nan, 2001.0], [369.0, 370.0]),
])
def test_dataset_rejects_non_finite_observations(x, y):
    with pytest.raises(ValueError):
        CO2Dataset(np.array(x), np.array(y))


def test_clean_drops_missing_value_sentinel():
    frame = pd.DataFrame({'x': [2000.0, 2001.0], 'y': ['-999.99', '370.5']})

    cleaned = clean_observations(frame)

    assert cleaned['y'].tolist() == [370.5]


def test_from_arrays_filters_invalid_rows():
    dataset = CO2Dataset.from_arrays([2002.0, 2000.0, 2001.0], [372.0, -999.99, 370.0])

    assert dataset.x.tolist() == [2001.0, 2002.0]
    assert len(dataset) == 2
    assert dataset.to_frame().shape == (2, 2)
