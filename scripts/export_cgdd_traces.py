"""Render and export CGDD trace charts for every active AZMET station."""

import argparse
import logging
import os
import sys
from pathlib import Path

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Export CGDD trace charts")
    parser.add_argument(
        "--stations",
        default="all",
        help='Comma-separated station names, or "all" for the full station list',
    )
    parser.add_argument("--t-base", type=float, default=None, help="Base temperature (degrees C)")
    parser.add_argument("--doy-start", type=int, default=None, help="Accumulation start day of year")
    parser.add_argument("--output-dir", type=Path, default=None, help="Directory for HTML charts")
    parser.add_argument("--publish", action="store_true", help="Publish to Chart Studio")
    args = parser.parse_args()

    from azmet_gdd.config import DOY_START, OUTPUT_DIR, T_BASE
    from azmet_gdd.ingest.stations import load_station_list
    from azmet_gdd.pipeline import run_all_stations

    stations = load_station_list()
    if args.stations.lower() != "all":
        names = [s.strip() for s in args.stations.split(",")]
        stations = stations[stations["stn"].isin(names)].reset_index(drop=True)

    logger.info("Exporting traces for %d station(s)", len(stations))

    results = run_all_stations(
        stations,
        t_base=args.t_base if args.t_base is not None else T_BASE,
        doy_start=args.doy_start if args.doy_start is not None else DOY_START,
        output_dir=args.output_dir or OUTPUT_DIR,
        publish=args.publish,
        credentials=(os.environ.get("PLOTLY_USERNAME"), os.environ.get("PLOTLY_API_KEY")),
    )

    for r in results:
        if r.errors:
            logger.warning("%s: %s", r.station_name, r.errors)
        else:
            logger.info("%s: %d rows -> %s", r.station_name, r.rows, r.output_path or r.url)

    logger.info("Done.")
    if any(r.errors for r in results):
        sys.exit(1)


if __name__ == "__main__":
    main()
