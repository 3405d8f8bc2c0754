"""Per-station pipeline: download -> GDD/CGDD -> trace chart -> export.

Stations are processed one at a time. A single-station run raises on any
failure; batch runs record the failure and move on to the next station.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
import logging
from pathlib import Path

import pandas as pd
import plotly.graph_objects as go

from azmet_gdd.charts.export import publish_trace, write_trace_html
from azmet_gdd.charts.trace import build_trace_figure
from azmet_gdd.compute.gdd import calculate_cgdd
from azmet_gdd.config import DOY_START, T_BASE
from azmet_gdd.ingest.azmet import fetch_station_daily
from azmet_gdd.ingest.stations import StationInfo, get_station

logger = logging.getLogger(__name__)


@dataclass
class StationRunResult:
    station_name: str
    rows: int = 0
    figure: go.Figure | None = None
    output_path: Path | None = None
    url: str | None = None
    errors: list[str] = field(default_factory=list)


def run_station(
    stations: pd.DataFrame,
    station_name: str,
    t_base: float = T_BASE,
    doy_start: int = DOY_START,
    output_dir: Path | None = None,
    publish: bool = False,
    credentials: tuple[str | None, str | None] = (None, None),
    fetch: Callable[[StationInfo], pd.DataFrame] = fetch_station_daily,
) -> StationRunResult:
    """Run the full pipeline for one station.

    1. Download and clean the station's daily record.
    2. Compute GDD and CGDD.
    3. Build the CGDD trace chart.
    4. Optionally write it to ``output_dir`` and/or publish to Chart Studio.
    """
    station = get_station(stations, station_name)
    result = StationRunResult(station_name=station_name)

    daily = fetch(station)
    cgdd = calculate_cgdd(daily, station, t_base=t_base, doy_start=doy_start)
    result.rows = len(cgdd.data)

    fig = build_trace_figure(cgdd.data, station_name)
    result.figure = fig

    if output_dir is not None:
        result.output_path = write_trace_html(fig, station_name, output_dir)
    if publish:
        username, api_key = credentials
        result.url = publish_trace(fig, station_name, username, api_key)

    return result


def run_all_stations(
    stations: pd.DataFrame,
    t_base: float = T_BASE,
    doy_start: int = DOY_START,
    output_dir: Path | None = None,
    publish: bool = False,
    credentials: tuple[str | None, str | None] = (None, None),
    fetch: Callable[[StationInfo], pd.DataFrame] = fetch_station_daily,
) -> list[StationRunResult]:
    """Run every station in the table, in order."""
    results = []
    for station_name in stations["stn"]:
        logger.info("--- %s ---", station_name)
        try:
            r = run_station(
                stations, station_name, t_base, doy_start,
                output_dir=output_dir, publish=publish,
                credentials=credentials, fetch=fetch,
            )
            results.append(r)
        except Exception as e:
            logger.exception("Failed to process station %s", station_name)
            results.append(StationRunResult(station_name=station_name, errors=[str(e)]))

    failed = sum(1 for r in results if r.errors)
    logger.info("Processed %d stations (%d failed)", len(results), failed)
    return results
