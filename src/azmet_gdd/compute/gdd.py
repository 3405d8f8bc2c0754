"""Growing degree-day (GDD) and cumulative GDD (CGDD) computation.

Temperature averaging method: daily GDD is the amount by which the daily mean
temperature exceeds the base temperature, zero otherwise. Missing daily means
are replaced by the station's day-of-year climatology. CGDD accumulates GDD
within each calendar year and restarts on January 1.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import logging

import numpy as np
import pandas as pd

from azmet_gdd.compute.climatology import doy_climatology
from azmet_gdd.config import DOY_START, KNOWN_DATA_GAPS, T_BASE
from azmet_gdd.ingest.stations import StationInfo

logger = logging.getLogger(__name__)

CGDD_COLUMNS = ["date", "year", "month", "day", "doy", "stn_no", "Tmean"]


@dataclass
class CgddResult:
    station: StationInfo
    data: pd.DataFrame


def trim_partial_first_year(
    df: pd.DataFrame,
    station: StationInfo,
    doy_start: int,
) -> tuple[pd.DataFrame, StationInfo]:
    """Drop the first year of record if it begins after ``doy_start``.

    Accumulation for that year would start late and be meaningless.
    Returns the trimmed frame and a descriptor whose start year is advanced.
    """
    if df.empty or int(df["doy"].iloc[0]) <= doy_start:
        return df, station

    logger.info(
        "%s: first year %d starts on doy %d (> %d), dropping it",
        station.name, station.start_yr, int(df["doy"].iloc[0]), doy_start,
    )
    trimmed = df[df["year"] > station.start_yr].reset_index(drop=True)
    return trimmed, replace(station, start_yr=station.start_yr + 1)


def compute_daily_gdd(
    df: pd.DataFrame,
    t_base: float,
    doy_start: int,
    climatology: pd.Series | None = None,
) -> pd.Series:
    """Daily GDD for each row of ``df`` (needs ``doy`` and ``Tmean``).

    Rows before ``doy_start`` get 0. Missing Tmean is replaced by the
    day-of-year climatology; if that is also missing the day gets 0.
    """
    if climatology is None:
        climatology = doy_climatology(df, "Tmean")

    tmean = df["Tmean"]
    substitute = df["doy"].map(climatology)
    filled = tmean.where(tmean.notna(), substitute)

    unfilled = filled.isna() & (df["doy"] >= doy_start)
    if unfilled.any():
        logger.warning(
            "%d days have neither Tmean nor a climatology value; GDD set to 0",
            int(unfilled.sum()),
        )

    gdd = np.where(
        (df["doy"] < doy_start) | filled.isna() | (filled < t_base),
        0.0,
        filled - t_base,
    )
    return pd.Series(gdd, index=df.index, name="GDD")


def compute_cgdd(df: pd.DataFrame) -> pd.Series:
    """Running sum of ``GDD`` within each calendar year."""
    cgdd = df.groupby("year", sort=False)["GDD"].cumsum()
    cgdd.name = "CGDD"
    return cgdd


def apply_station_patches(
    df: pd.DataFrame,
    station_name: str,
    patches: dict[str, tuple[int, int]] = KNOWN_DATA_GAPS,
) -> pd.DataFrame:
    """Remove rows invalidated by a known multi-month gap.

    For a patched station, rows of the gap year after the last good day are
    dropped; later years are untouched.
    """
    if station_name not in patches:
        return df

    year, last_good_doy = patches[station_name]
    bad = (df["year"] == year) & (df["doy"] > last_good_doy)
    if bad.any():
        logger.info(
            "%s: dropping %d rows after doy %d of %d (known data gap)",
            station_name, int(bad.sum()), last_good_doy, year,
        )
    return df[~bad].reset_index(drop=True)


def calculate_cgdd(
    daily: pd.DataFrame,
    station: StationInfo,
    t_base: float = T_BASE,
    doy_start: int = DOY_START,
) -> CgddResult:
    """Compute GDD and CGDD for one station's daily series.

    Args:
        daily: Gap-free daily series from ``fetch_station_daily``.
        station: Descriptor of the station the series belongs to.
        t_base: Base temperature in degrees C.
        doy_start: First day of year that accumulates degree-days.

    Returns:
        CgddResult with columns date, year, month, day, doy, stn_no, Tmean,
        GDD, CGDD and the (possibly advanced) station descriptor.
    """
    if not 1 <= doy_start <= 366:
        raise ValueError(f"doy_start must be between 1 and 366, got {doy_start}")

    df = daily[CGDD_COLUMNS].reset_index(drop=True)
    df, station = trim_partial_first_year(df, station, doy_start)

    climatology = doy_climatology(df, "Tmean")
    df = df.assign(GDD=compute_daily_gdd(df, t_base, doy_start, climatology))
    df = df.assign(CGDD=compute_cgdd(df))

    df = apply_station_patches(df, station.name)

    logger.info(
        "Computed CGDD for %s: %d rows, %d-%d, t_base=%.1f, doy_start=%d",
        station.name, len(df), station.start_yr, station.end_yr, t_base, doy_start,
    )
    return CgddResult(station=station, data=df)
