"""Chart export: standalone HTML files and Chart Studio (hosted plotly)."""

from __future__ import annotations

import logging
from pathlib import Path

import plotly.graph_objects as go

from azmet_gdd.config import CHART_STUDIO_PREFIX

logger = logging.getLogger(__name__)


def trace_filename(station_name: str) -> str:
    """Chart Studio file name for a station, e.g. ``AZMET-GDD/traceBonita``."""
    return f"{CHART_STUDIO_PREFIX}{station_name}"


def write_trace_html(fig: go.Figure, station_name: str, output_dir: Path) -> Path:
    """Write the figure as a standalone HTML page and return its path."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    path = output_dir / f"trace{station_name.replace(' ', '')}.html"
    fig.write_html(path, include_plotlyjs="cdn")
    logger.info("Wrote %s", path)
    return path


def publish_trace(
    fig: go.Figure,
    station_name: str,
    username: str | None,
    api_key: str | None,
) -> str:
    """Upload the figure to Chart Studio, overwriting any previous version.

    Requires the optional ``chart-studio`` package. Returns the plot URL.
    """
    if not username or not api_key:
        raise ValueError("Chart Studio username and API key are required to publish")

    import chart_studio.plotly as py
    import chart_studio.session as cs_session

    # In-process only; nothing is written to ~/.plotly
    cs_session.sign_in(username, api_key)

    filename = trace_filename(station_name)
    url = py.plot(fig, filename=filename, sharing="public", auto_open=False)
    logger.info("Published %s to %s", filename, url)
    return url
