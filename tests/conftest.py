"""Shared test fixtures."""

import numpy as np
import pandas as pd
import pytest

from azmet_gdd.ingest.stations import StationInfo


@pytest.fixture
def sample_station() -> StationInfo:
    """A sample station for testing."""
    return StationInfo(name="Bonita", stn_no=14, start_yr=2016, end_yr=2018)


@pytest.fixture
def stations_df() -> pd.DataFrame:
    """A small station table."""
    return pd.DataFrame({
        "stn": ["Bonita", "Yuma South"],
        "stn_no": [14, 24],
        "start_yr": [2016, 2012],
        "end_yr": [2018, 2014],
    })


@pytest.fixture
def stations_csv(tmp_path, stations_df):
    path = tmp_path / "stations.csv"
    stations_df.to_csv(path, index=False)
    return path


@pytest.fixture
def make_daily():
    """Factory for gap-free daily series shaped like fetch_station_daily output."""
    def _make(start: str, end: str, tmean=None, stn_no: int = 14) -> pd.DataFrame:
        dates = pd.date_range(start, end, freq="D")
        if tmean is None:
            # Seasonal pattern: cool in Jan, hot in Jul
            tmean = 20 + 12 * np.sin((dates.dayofyear - 110) * 2 * np.pi / 365)
        elif np.isscalar(tmean):
            tmean = np.full(len(dates), tmean)
        return pd.DataFrame({
            "date": dates,
            "year": dates.year,
            "month": dates.month,
            "day": dates.day,
            "doy": dates.dayofyear,
            "stn_no": stn_no,
            "Tmean": np.asarray(tmean, dtype=float),
        })

    return _make
