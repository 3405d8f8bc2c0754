"""Tests for the AZMET raw daily fetcher."""

from datetime import date
from unittest.mock import MagicMock, patch

import numpy as np
import pandas as pd
import pytest
import requests

from azmet_gdd.compute.gdd import calculate_cgdd
from azmet_gdd.ingest.azmet import (
    SchemaEra,
    build_year_url,
    clean_daily,
    fetch_station_daily,
    fetch_year,
    parse_year_file,
    schema_era,
)
from azmet_gdd.ingest.stations import StationInfo


def _current_line(yy, doy, tmean, stn_no=14, tmax=25.0) -> str:
    """One 2003-present row: 28 comma-separated values."""
    values = [yy, doy, stn_no, tmax, 5.0, tmean] + [1.0] * 19 + [7.0, 8.0, 9.0]
    return ",".join(str(v) for v in values)


def _legacy_line(yy, doy, tmean, stn_no=14) -> str:
    """One 1987-2002 row: 25 values, last two in legacy order."""
    values = [yy, doy, stn_no, 25.0, 5.0, tmean] + [1.0] * 17 + [111, 222]
    return ",".join(str(v) for v in values)


def _raw_frame(year, rows) -> pd.DataFrame:
    return parse_year_file("\n".join(rows) + "\n", year)


class TestUrlsAndEras:
    def test_build_year_url_zero_pads(self):
        assert build_year_url(6, 1987) == "http://ag.arizona.edu/azmet/data/0687rd.txt"

    def test_build_year_url_two_digit_year(self):
        assert build_year_url(14, 2005) == "http://ag.arizona.edu/azmet/data/1405rd.txt"

    def test_schema_era_boundary(self):
        assert schema_era(2002) is SchemaEra.LEGACY
        assert schema_era(2003) is SchemaEra.CURRENT


class TestParseYearFile:
    def test_current_schema(self):
        df = _raw_frame(2010, [_current_line(2010, 1, 12.5)])

        assert len(df.columns) == 28
        row = df.iloc[0]
        assert row["doy"] == 1
        assert row["stn_no"] == 14
        assert row["Tmean"] == 12.5
        assert row["ETrefPM"] == 7.0
        assert row["DPTmean"] == 9.0

    def test_legacy_schema_swapped_and_padded(self):
        df = _raw_frame(1995, [_legacy_line(95, 1, 11.0)])

        assert len(df.columns) == 28
        row = df.iloc[0]
        assert row["Tmean"] == 11.0
        assert row["HU8555"] == 222
        assert row["ETref"] == 111
        assert np.isnan(row["ETrefPM"])
        assert np.isnan(row["AVPmean"])
        assert np.isnan(row["DPTmean"])

    def test_year_overwritten(self):
        df = _raw_frame(1999, [_legacy_line(99, 1, 11.0), _legacy_line(98, 2, 11.0)])

        assert df["year"].tolist() == [1999, 1999]

    def test_trailing_dot_line_becomes_empty_row(self):
        df = _raw_frame(2010, [_current_line(2010, 1, 12.5), "."])

        assert len(df) == 2
        assert df.iloc[1].drop("year").isna().all()


class TestCleanDaily:
    def test_reconstructs_calendar_fields(self):
        raw = _raw_frame(2012, [_current_line(2012, 60, 15.0)])

        df = clean_daily(raw, 14)

        row = df.iloc[0]
        assert row["date"].date() == date(2012, 2, 29)
        assert (row["year"], row["month"], row["day"], row["doy"]) == (2012, 2, 29, 60)

    def test_column_order(self):
        raw = _raw_frame(2012, [_current_line(2012, 1, 15.0)])

        df = clean_daily(raw, 14)

        assert list(df.columns[:7]) == ["date", "year", "month", "day", "doy", "stn_no", "Tmax"]
        assert "Tmean" in df.columns

    def test_sentinels_become_null(self):
        raw = _raw_frame(2012, [
            _current_line(2012, 1, 999),
            _current_line(2012, 2, 999.9),
            _current_line(2012, 3, 9999),
            _current_line(2012, 4, 14.0, tmax=999),
        ])

        df = clean_daily(raw, 14)

        assert df["Tmean"].isna().tolist() == [True, True, True, False]
        assert np.isnan(df.iloc[3]["Tmax"])

    def test_drops_empty_rows(self):
        raw = _raw_frame(2012, [_current_line(2012, 1, 15.0), "."])

        df = clean_daily(raw, 14)

        assert len(df) == 1

    def test_drops_duplicate_rows(self):
        line = _current_line(2012, 1, 15.0)
        raw = _raw_frame(2012, [line, line, _current_line(2012, 2, 16.0)])

        df = clean_daily(raw, 14)

        assert len(df) == 2
        assert df["date"].is_unique

    def test_conflicting_rows_for_same_date_keep_first(self):
        raw = _raw_frame(2012, [_current_line(2012, 1, 15.0), _current_line(2012, 1, 16.0)])

        df = clean_daily(raw, 14)

        assert len(df) == 1
        assert df.iloc[0]["Tmean"] == 15.0

    def test_doy_366_in_non_leap_year_dropped(self):
        raw = pd.concat([
            _raw_frame(2005, [_current_line(5, 365, 10.0), _current_line(5, 366, 99.5)]),
            _raw_frame(2006, [_current_line(6, 1, 11.0), _current_line(6, 2, 12.0)]),
        ], ignore_index=True)

        df = clean_daily(raw, 14)

        assert len(df) == 3
        jan1 = df[df["date"] == pd.Timestamp("2006-01-01")].iloc[0]
        assert jan1["Tmean"] == 11.0
        assert 99.5 not in df["Tmean"].tolist()

    def test_doy_zero_dropped(self):
        raw = _raw_frame(2012, [_current_line(12, 0, 30.0), _current_line(12, 1, 15.0)])

        df = clean_daily(raw, 14)

        assert len(df) == 1
        assert df.iloc[0]["date"].date() == date(2012, 1, 1)
        assert df.iloc[0]["Tmean"] == 15.0

    def test_reindexes_missing_dates(self):
        raw = _raw_frame(2012, [
            _current_line(2012, 1, 15.0),
            _current_line(2012, 2, 16.0),
            _current_line(2012, 5, 17.0),
        ])

        df = clean_daily(raw, 14)

        assert len(df) == 5
        assert (df["date"].diff().dropna() == pd.Timedelta(days=1)).all()
        assert df["Tmean"].isna().tolist() == [False, False, True, True, False]
        gap = df.iloc[2]
        assert (gap["year"], gap["month"], gap["day"], gap["doy"], gap["stn_no"]) == (2012, 1, 3, 3, 14)

    def test_no_usable_rows(self):
        raw = _raw_frame(2012, ["."])

        with pytest.raises(ValueError):
            clean_daily(raw, 14)


class TestFetchYear:
    @patch("azmet_gdd.ingest.azmet.requests.get")
    def test_requests_expected_url(self, mock_get):
        mock_resp = MagicMock()
        mock_resp.text = _current_line(19, 1, 12.0) + "\n"
        mock_resp.raise_for_status.return_value = None
        mock_get.return_value = mock_resp

        df = fetch_year(14, 2019)

        args, kwargs = mock_get.call_args
        assert args[0] == "http://ag.arizona.edu/azmet/data/1419rd.txt"
        assert kwargs["timeout"] > 0
        assert df.iloc[0]["year"] == 2019

    @patch("azmet_gdd.ingest.azmet.requests.get")
    def test_http_error_propagates(self, mock_get):
        mock_resp = MagicMock()
        mock_resp.raise_for_status.side_effect = requests.HTTPError("404 Not Found")
        mock_get.return_value = mock_resp

        with pytest.raises(requests.HTTPError):
            fetch_year(14, 2019)

    @patch("azmet_gdd.ingest.azmet.requests.get")
    def test_network_error_propagates(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("Network unreachable")

        with pytest.raises(requests.ConnectionError):
            fetch_year(14, 2019)

    def test_uses_session_when_given(self):
        session = MagicMock()
        session.get.return_value.text = _current_line(19, 1, 12.0) + "\n"

        fetch_year(14, 2019, session=session)

        session.get.assert_called_once()


class TestFetchStationDaily:
    @patch("azmet_gdd.ingest.azmet.requests.get")
    def test_spans_both_schema_eras(self, mock_get):
        files = {
            "0202rd.txt": [_legacy_line(2, 364, 8.0, stn_no=2), _legacy_line(2, 365, 9.0, stn_no=2), "."],
            "0203rd.txt": [
                _current_line(3, 1, 999, stn_no=2),
                _current_line(3, 1, 999, stn_no=2),
                _current_line(3, 3, 11.0, stn_no=2),
            ],
        }

        def fake_get(url, timeout):
            resp = MagicMock()
            resp.text = "\n".join(files[url.rsplit("/", 1)[1]]) + "\n"
            resp.raise_for_status.return_value = None
            return resp

        mock_get.side_effect = fake_get
        station = StationInfo(name="Yuma Valley", stn_no=2, start_yr=2002, end_yr=2003)

        df = fetch_station_daily(station)

        assert mock_get.call_count == 2
        assert df["date"].dt.date.tolist() == [
            date(2002, 12, 30), date(2002, 12, 31), date(2003, 1, 1),
            date(2003, 1, 2), date(2003, 1, 3),
        ]
        assert df["Tmean"].tolist()[:2] == [8.0, 9.0]
        assert df["Tmean"].isna().tolist() == [False, False, True, True, False]
        assert (df["stn_no"] == 2).all()
        assert df["year"].tolist() == [2002, 2002, 2003, 2003, 2003]

    @patch("azmet_gdd.ingest.azmet.requests.get")
    def test_failure_in_any_year_propagates(self, mock_get):
        mock_get.side_effect = requests.Timeout("timed out")
        station = StationInfo(name="Yuma Valley", stn_no=2, start_yr=2002, end_yr=2003)

        with pytest.raises(requests.Timeout):
            fetch_station_daily(station)

    @patch("azmet_gdd.ingest.azmet.requests.get")
    def test_sentinel_tmean_filled_from_climatology_in_cgdd(self, mock_get):
        files = {
            "1416rd.txt": [_current_line(16, 1, 20.0), _current_line(16, 2, 22.0), _current_line(16, 3, 24.0)],
            "1417rd.txt": [_current_line(17, 1, 20.0), _current_line(17, 2, 999), _current_line(17, 3, 24.0)],
        }

        def fake_get(url, timeout):
            resp = MagicMock()
            resp.text = "\n".join(files[url.rsplit("/", 1)[1]]) + "\n"
            resp.raise_for_status.return_value = None
            return resp

        mock_get.side_effect = fake_get
        station = StationInfo(name="Bonita", stn_no=14, start_yr=2016, end_yr=2017)

        result = calculate_cgdd(fetch_station_daily(station), station, t_base=10.0, doy_start=1)

        df = result.data.set_index("date")
        assert np.isnan(df.loc["2017-01-02", "Tmean"])
        # 2016 doy 2 is the only observation for that day of year
        assert df.loc["2017-01-02", "GDD"] == 12.0
        assert df.loc["2017-01-03", "CGDD"] == 10.0 + 12.0 + 14.0
