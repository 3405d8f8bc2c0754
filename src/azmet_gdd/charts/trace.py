"""CGDD trace charts.

One line per past year, the current (most recent) year highlighted, and the
day-of-year CGDD climatology.
"""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd
import plotly.graph_objects as go

from azmet_gdd.compute.climatology import doy_climatology
from azmet_gdd.config import (
    CLIMATOLOGY_LABEL,
    COLOR_CLIMATOLOGY,
    COLOR_CURRENT_YEAR,
    COLOR_PAST_YEARS,
    MONTH_LABELS,
    MONTH_START_DOYS,
    TEXT_COLOR,
)


def build_trace_frame(cgdd: pd.DataFrame) -> pd.DataFrame:
    """Long-format frame of per-year CGDD plus the CGDD climatology.

    Columns: year (label string, or "climatology"), doy, variable, CGDD
    (rounded to whole degree-days).
    """
    years = cgdd[["year", "doy", "CGDD"]].copy()
    years["year"] = years["year"].astype(int).astype(str)

    clim = doy_climatology(cgdd, "CGDD").reset_index()
    clim["year"] = CLIMATOLOGY_LABEL

    combined = pd.concat([years, clim[["year", "doy", "CGDD"]]], ignore_index=True)
    long = combined.melt(id_vars=["year", "doy"], var_name="variable", value_name="value")
    long = long.rename(columns={"value": "CGDD"})
    long["CGDD"] = long["CGDD"].round(0)
    return long[["year", "doy", "variable", "CGDD"]]


def trace_colors(years: Iterable[int]) -> dict[str, str]:
    """Line color per trace label."""
    years = sorted({int(y) for y in years})
    current = years[-1] if years else None

    colors = {str(y): COLOR_PAST_YEARS for y in years if y != current}
    if current is not None:
        colors[str(current)] = COLOR_CURRENT_YEAR
    colors[CLIMATOLOGY_LABEL] = COLOR_CLIMATOLOGY
    return colors


def _y_dtick(max_cgdd: float) -> float | None:
    step = round(max_cgdd / 10, -2)
    return step if step > 0 else None


def build_trace_figure(cgdd: pd.DataFrame, station_name: str) -> go.Figure:
    """Plot CGDD by day of year for every year in ``cgdd``."""
    plot_df = build_trace_frame(cgdd)
    colors = trace_colors(cgdd["year"].unique())
    current = str(int(cgdd["year"].max())) if not cgdd.empty else None

    # Past years first so the climatology and current year draw on top
    labels = [lbl for lbl in colors if lbl not in (current, CLIMATOLOGY_LABEL)]
    labels.append(CLIMATOLOGY_LABEL)
    if current is not None:
        labels.append(current)

    fig = go.Figure()
    for label in labels:
        trace = plot_df[plot_df["year"] == label]
        fig.add_trace(go.Scatter(
            x=trace["doy"].tolist(),
            y=trace["CGDD"].tolist(),
            mode="lines",
            line=dict(color=colors[label], width=2 if label == current else 1),
            name=label,
            hovertemplate="%{x}  <b>%{y:.0f}</b><extra>" + label + "</extra>",
        ))

    y_min = plot_df["CGDD"].min()
    y_max = plot_df["CGDD"].max()
    yaxis = dict(
        title="CGDD",
        range=[float(y_min), float(y_max) + 1] if pd.notna(y_max) else None,
        showgrid=True, gridcolor="rgba(0,0,0,0.08)", zeroline=False,
    )
    max_cgdd = cgdd["CGDD"].max()
    if pd.notna(max_cgdd) and _y_dtick(max_cgdd) is not None:
        yaxis["dtick"] = float(_y_dtick(max_cgdd))

    fig.update_layout(
        title=dict(
            text=f"cumulative growing degree-days at the AZMET {station_name} station",
            font=dict(size=13, color=TEXT_COLOR),
        ),
        font=dict(family="monospace", size=12, color=TEXT_COLOR),
        showlegend=False,
        margin=dict(l=56, r=8, t=48, b=56),
        xaxis=dict(
            title="day of year",
            tickvals=MONTH_START_DOYS,
            ticktext=MONTH_LABELS,
            range=[int(plot_df["doy"].min()), 365],
            showgrid=True, gridcolor="rgba(0,0,0,0.08)", zeroline=False,
        ),
        yaxis=yaxis,
        plot_bgcolor="white",
        paper_bgcolor="white",
    )
    return fig
