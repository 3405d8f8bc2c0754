"""Day-of-year climatology.

Long-run mean of a daily column for each day of year, across every year in
the series. Used for filling missing Tmean before GDD and for the CGDD
climatology trace on the charts.
"""

from __future__ import annotations

import pandas as pd

DOY_INDEX = pd.RangeIndex(1, 367, name="doy")


def doy_climatology(df: pd.DataFrame, column: str) -> pd.Series:
    """Mean of non-null ``column`` values grouped by ``doy``.

    Always returns 366 entries indexed by day of year. Days with no
    observation (e.g. day 366 in a record without leap years) are NaN.
    """
    clim = df.groupby("doy")[column].mean()
    clim = clim.reindex(DOY_INDEX)
    clim.name = column
    return clim
