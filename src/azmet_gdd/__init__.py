"""AZMET growing degree-days - download, compute and chart CGDD traces."""

__version__ = "0.1.0"

from azmet_gdd.compute.gdd import calculate_cgdd
from azmet_gdd.ingest.azmet import fetch_station_daily
from azmet_gdd.ingest.stations import load_station_list, get_station

__all__ = ["calculate_cgdd", "fetch_station_daily", "load_station_list", "get_station"]
