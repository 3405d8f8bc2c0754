"""Station descriptor table (name, station number, first and last year)."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path

import pandas as pd

from azmet_gdd.config import STATION_LIST_CSV

logger = logging.getLogger(__name__)

STATION_COLUMNS = ["stn", "stn_no", "start_yr", "end_yr"]


@dataclass(frozen=True)
class StationInfo:
    name: str
    stn_no: int
    start_yr: int
    end_yr: int


def load_station_list(csv_path: Path = STATION_LIST_CSV) -> pd.DataFrame:
    """Load the station table from CSV.

    Expected columns: stn, stn_no, start_yr, end_yr.
    """
    df = pd.read_csv(csv_path, sep=",", skipinitialspace=True)

    missing = [c for c in STATION_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Station list {csv_path} is missing columns: {missing}")

    df = df[STATION_COLUMNS].copy()
    df["stn"] = df["stn"].astype(str).str.strip()
    for col in ["stn_no", "start_yr", "end_yr"]:
        df[col] = df[col].astype(int)

    logger.info("Loaded %d stations from %s", len(df), csv_path)
    return df


def get_station(stations: pd.DataFrame, name: str) -> StationInfo:
    """Look up one station's descriptor by name."""
    rows = stations[stations["stn"] == name]
    if rows.empty:
        raise KeyError(f"Station {name!r} not found in station list")

    row = rows.iloc[0]
    return StationInfo(
        name=str(row["stn"]),
        stn_no=int(row["stn_no"]),
        start_yr=int(row["start_yr"]),
        end_yr=int(row["end_yr"]),
    )


def station_years(station: StationInfo) -> range:
    """Years of record, inclusive of both ends."""
    return range(station.start_yr, station.end_yr + 1)
