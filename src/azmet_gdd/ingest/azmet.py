"""AZMET raw daily data fetcher.

Downloads one text file per station-year from the AZMET archive, normalises
the two historical column layouts to a single schema and returns a gap-free
daily series.
"""

from __future__ import annotations

from enum import Enum
import io
import logging

import numpy as np
import pandas as pd
import requests

from azmet_gdd.config import (
    AZMET_BASE_URL,
    AZMET_FILE_SUFFIX,
    LEGACY_COLUMN_COUNT,
    LEGACY_ERA_LAST_YEAR,
    MISSING_SENTINELS,
    RAW_COLUMNS,
    REQUEST_TIMEOUT_S,
)
from azmet_gdd.ingest.stations import StationInfo, station_years

logger = logging.getLogger(__name__)

CALENDAR_COLUMNS = ["date", "year", "month", "day", "doy", "stn_no"]
MEASUREMENT_COLUMNS = [c for c in RAW_COLUMNS if c not in ("year", "doy", "stn_no")]


class SchemaEra(Enum):
    LEGACY = "1987-2002"
    CURRENT = "2003-present"


def schema_era(year: int) -> SchemaEra:
    if year <= LEGACY_ERA_LAST_YEAR:
        return SchemaEra.LEGACY
    return SchemaEra.CURRENT


def build_year_url(stn_no: int, year: int) -> str:
    """URL of one station-year file, e.g. .../0687rd.txt for station 6, 1987."""
    return f"{AZMET_BASE_URL}{stn_no:02d}{year % 100:02d}{AZMET_FILE_SUFFIX}"


def parse_year_file(text: str, year: int) -> pd.DataFrame:
    """Parse one raw daily file into the canonical 28-column schema.

    Legacy files have their last two columns in the opposite order and lack
    the three variables added in 2003; those are swapped and padded with
    nulls. The year column is overwritten with ``year`` because source files
    report two-digit or wrong years for some rows.
    """
    era = schema_era(year)
    width = LEGACY_COLUMN_COUNT if era is SchemaEra.LEGACY else len(RAW_COLUMNS)

    df = pd.read_csv(
        io.StringIO(text),
        header=None,
        names=list(range(width)),
        skipinitialspace=True,
        skip_blank_lines=True,
        dtype=str,
    )
    df = df.apply(pd.to_numeric, errors="coerce")

    if era is SchemaEra.LEGACY:
        order = list(range(LEGACY_COLUMN_COUNT - 2)) + [
            LEGACY_COLUMN_COUNT - 1,
            LEGACY_COLUMN_COUNT - 2,
        ]
        df = df[order]
        for extra in range(LEGACY_COLUMN_COUNT, len(RAW_COLUMNS)):
            df[extra] = np.nan

    df.columns = RAW_COLUMNS
    df["year"] = year
    return df


def fetch_year(stn_no: int, year: int, session: requests.Session | None = None) -> pd.DataFrame:
    """Download and parse one station-year file.

    Network and HTTP errors propagate to the caller.
    """
    url = build_year_url(stn_no, year)
    logger.info("Downloading AZMET daily: %s", url)

    http = session if session is not None else requests
    resp = http.get(url, timeout=REQUEST_TIMEOUT_S)
    resp.raise_for_status()

    return parse_year_file(resp.text, year)


def clean_daily(raw: pd.DataFrame, stn_no: int) -> pd.DataFrame:
    """Turn concatenated raw rows into one row per calendar date.

    Returns DataFrame with columns: date, year, month, day, doy, stn_no,
    followed by the AZMET measurement columns.
    """
    df = raw.copy()

    doy_str = df["doy"].astype("Int64").astype(str).str.zfill(3)
    df["date"] = pd.to_datetime(
        df["year"].astype(int).astype(str) + doy_str,
        format="%Y%j",
        errors="coerce",
    )
    # %j accepts 366 in a non-leap year and rolls it into Jan 1 of the next
    df.loc[df["date"].dt.year != df["year"], "date"] = pd.NaT

    # Trailing "." lines parse to rows with nothing but the forced year
    source_cols = [c for c in RAW_COLUMNS if c != "year"]
    df = df.dropna(subset=source_cols, how="all")
    df = df.dropna(subset=["date"])

    value_cols = MEASUREMENT_COLUMNS + ["stn_no"]
    df[value_cols] = df[value_cols].mask(df[value_cols].isin(MISSING_SENTINELS))

    df = df.drop_duplicates()

    dupes = df["date"].duplicated()
    if dupes.any():
        logger.warning(
            "Dropping %d rows with conflicting values for an already-seen date", int(dupes.sum())
        )
        df = df[~dupes]

    if df.empty:
        raise ValueError(f"No usable daily rows for station {stn_no}")

    full_range = pd.date_range(df["date"].min(), df["date"].max(), freq="D")
    df = df.set_index("date").sort_index().reindex(full_range)
    df.index.name = "date"
    df = df.reset_index()

    df["year"] = df["date"].dt.year
    df["month"] = df["date"].dt.month
    df["day"] = df["date"].dt.day
    df["doy"] = df["date"].dt.dayofyear
    df["stn_no"] = stn_no

    return df[CALENDAR_COLUMNS + MEASUREMENT_COLUMNS].reset_index(drop=True)


def fetch_station_daily(
    station: StationInfo,
    session: requests.Session | None = None,
) -> pd.DataFrame:
    """Fetch every year of record for a station and return the cleaned series."""
    frames = [fetch_year(station.stn_no, year, session=session) for year in station_years(station)]
    raw = pd.concat(frames, ignore_index=True)

    result = clean_daily(raw, station.stn_no)
    logger.info(
        "Fetched %d daily rows for %s (%s to %s)",
        len(result), station.name, result["date"].iloc[0].date(), result["date"].iloc[-1].date(),
    )
    return result
