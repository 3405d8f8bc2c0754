"""CLI entry point for azmet-gdd."""

import argparse
import logging
import os
import sys
from pathlib import Path

import pandas as pd

from azmet_gdd.config import DOY_START, OUTPUT_DIR, STATION_LIST_CSV, T_BASE


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="azmet-gdd",
        description="AZMET growing degree-days: download, compute and chart",
    )
    parser.add_argument(
        "--stations-csv",
        type=Path,
        default=STATION_LIST_CSV,
        help=f"Station list CSV (default: {STATION_LIST_CSV})",
    )
    subparsers = parser.add_subparsers(dest="command")

    # stations subcommand
    subparsers.add_parser("stations", help="List stations in the station table")

    # fetch subcommand
    fetch_parser = subparsers.add_parser("fetch", help="Download cleaned daily data")
    fetch_parser.add_argument("--station", required=True, help='Station name (e.g. "Bonita")')
    fetch_parser.add_argument("--output", type=Path, help="CSV file to write (default: stdout)")

    # calculate subcommand
    calc_parser = subparsers.add_parser("calculate", help="Compute daily GDD and CGDD")
    calc_parser.add_argument("--station", required=True, help="Station name")
    _add_gdd_arguments(calc_parser)
    calc_parser.add_argument("--output", type=Path, help="CSV file to write (default: stdout)")

    # plot subcommand
    plot_parser = subparsers.add_parser("plot", help="Render CGDD trace charts")
    target = plot_parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--station", help="Station name")
    target.add_argument("--all", action="store_true", help="Every station in the station table")
    _add_gdd_arguments(plot_parser)
    plot_parser.add_argument(
        "--output-dir", type=Path, default=OUTPUT_DIR,
        help=f"Directory for HTML charts (default: {OUTPUT_DIR})",
    )
    plot_parser.add_argument(
        "--publish", action="store_true",
        help="Also publish to Chart Studio (needs PLOTLY_USERNAME and PLOTLY_API_KEY)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    from azmet_gdd.ingest.stations import load_station_list

    try:
        stations = load_station_list(args.stations_csv)
        if args.command == "stations":
            _stations(stations)
        elif args.command == "fetch":
            _fetch(args, stations)
        elif args.command == "calculate":
            _calculate(args, stations)
        elif args.command == "plot":
            _plot(args, stations)
    except KeyError as e:
        print(f"Error: {e.args[0]}", file=sys.stderr)
        sys.exit(1)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ImportError as e:
        print(f"Missing dependency: {e}", file=sys.stderr)
        sys.exit(1)


def _add_gdd_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--t-base", type=float, default=T_BASE,
        help=f"Base temperature in degrees C (default: {T_BASE})",
    )
    parser.add_argument(
        "--doy-start", type=int, default=DOY_START,
        help=f"First day of year to accumulate (default: {DOY_START})",
    )


def _write_frame(df: pd.DataFrame, output: Path | None) -> None:
    if output is None:
        df.to_csv(sys.stdout, index=False)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(output, index=False)
        print(f"Wrote {len(df):,} rows to {output}")


def _stations(stations: pd.DataFrame) -> None:
    for row in stations.itertuples(index=False):
        print(f"{row.stn_no:>3}  {row.stn:<20} {row.start_yr}-{row.end_yr}")


def _fetch(args: argparse.Namespace, stations: pd.DataFrame) -> None:
    from azmet_gdd.ingest.azmet import fetch_station_daily
    from azmet_gdd.ingest.stations import get_station

    station = get_station(stations, args.station)
    _write_frame(fetch_station_daily(station), args.output)


def _calculate(args: argparse.Namespace, stations: pd.DataFrame) -> None:
    from azmet_gdd.compute.gdd import calculate_cgdd
    from azmet_gdd.ingest.azmet import fetch_station_daily
    from azmet_gdd.ingest.stations import get_station

    station = get_station(stations, args.station)
    daily = fetch_station_daily(station)
    result = calculate_cgdd(daily, station, t_base=args.t_base, doy_start=args.doy_start)
    _write_frame(result.data, args.output)


def _plot(args: argparse.Namespace, stations: pd.DataFrame) -> None:
    from azmet_gdd.pipeline import run_all_stations, run_station

    credentials = (os.environ.get("PLOTLY_USERNAME"), os.environ.get("PLOTLY_API_KEY"))
    options = dict(
        t_base=args.t_base,
        doy_start=args.doy_start,
        output_dir=args.output_dir,
        publish=args.publish,
        credentials=credentials,
    )

    if args.all:
        results = run_all_stations(stations, **options)
        failed = [r for r in results if r.errors]
        for r in failed:
            print(f"✗ {r.station_name}: {'; '.join(r.errors)}", file=sys.stderr)
        if failed:
            sys.exit(1)
    else:
        result = run_station(stations, args.station, **options)
        print(f"✓ {result.station_name}: {result.rows:,} rows -> {result.output_path}")


if __name__ == "__main__":
    main()
