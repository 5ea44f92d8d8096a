"""
Test Suite for Data Loader Module
=================================

Tests for CSV cleaning and loading.
"""

import numpy as np
import pytest

from taxifare.data_loader import clean_line, load_data, prepare_data
from taxifare.schema import FIELD_NAMES, NUMERIC_POSITIONS

from conftest import CSV_HEADER


class TestCleanLine:
    """Tests for the per-line cleaning rule."""

    def test_blank_numeric_becomes_nan(self):
        assert clean_line("CMT,1,,1271,3.8,CRD,17.5") == "CMT,1,NaN,1271,3.8,CRD,17.5"

    def test_blank_text_becomes_empty(self):
        assert clean_line(" ,1,1,474,1.5,,8") == ",1,1,474,1.5,,8"

    def test_whitespace_numeric_becomes_nan(self):
        assert clean_line("VTS, ,1,637,1.4,CRD,") == "VTS,NaN,1,637,1.4,CRD,NaN"

    def test_clean_line_untouched(self):
        line = "VTS,1,1,1140,3.75,CRD,15.5"
        assert clean_line(line) == line


class TestPrepareData:
    """Tests for writing the cleaned CSV."""

    def test_header_preserved(self, dirty_trips_csv, tmp_path):
        out = prepare_data(dirty_trips_csv, tmp_path / "prepared.csv")
        lines = out.read_text().splitlines()

        assert lines[0] == CSV_HEADER
        assert len(lines) == 5

    def test_expected_output(self, dirty_trips_csv, tmp_path):
        out = prepare_data(dirty_trips_csv, tmp_path / "prepared.csv")

        assert out.read_text().splitlines()[1:] == [
            "CMT,1,NaN,1271,3.8,CRD,17.5",
            ",1,1,474,NaN,CRD,8",
            "VTS,NaN,1,637,1.4,,NaN",
            "CMT,1,1,181,0.6,CSH,4.5",
        ]

    def test_no_blank_numeric_cells(self, dirty_trips_csv, tmp_path):
        out = prepare_data(dirty_trips_csv, tmp_path / "prepared.csv")

        for line in out.read_text().splitlines()[1:]:
            columns = line.split(",")
            for position in NUMERIC_POSITIONS:
                value = columns[position]
                assert value.strip() != ""
                float(value)

    def test_idempotent(self, dirty_trips_csv, tmp_path):
        first = prepare_data(dirty_trips_csv, tmp_path / "first.csv")
        second = prepare_data(first, tmp_path / "second.csv")

        assert first.read_bytes() == second.read_bytes()

    def test_creates_parent_directory(self, dirty_trips_csv, tmp_path):
        out = prepare_data(dirty_trips_csv, tmp_path / "nested" / "prepared.csv")
        assert out.exists()

    def test_missing_source(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Data file not found"):
            prepare_data(tmp_path / "absent.csv", tmp_path / "prepared.csv")


class TestLoadData:
    """Tests for loading the cleaned CSV."""

    def test_columns_mapped_by_position(self, ten_trips_csv):
        df = load_data(ten_trips_csv)

        assert list(df.columns) == FIELD_NAMES
        assert len(df) == 10
        assert df.loc[6, "VendorId"] == "VTS"
        assert df.loc[6, "TripDistance"] == pytest.approx(3.75)
        assert df.loc[6, "FareAmount"] == pytest.approx(15.5)

    def test_numeric_dtypes(self, ten_trips_csv):
        df = load_data(ten_trips_csv)

        for name in ["RateCode", "PassengerCount", "TripTime", "TripDistance", "FareAmount"]:
            assert df[name].dtype == np.float64

    def test_missing_values_after_cleaning(self, dirty_trips_csv, tmp_path):
        df = load_data(prepare_data(dirty_trips_csv, tmp_path / "prepared.csv"))

        assert np.isnan(df.loc[0, "PassengerCount"])
        assert np.isnan(df.loc[2, "RateCode"])
        assert np.isnan(df.loc[2, "FareAmount"])
        assert df.loc[1, "VendorId"] == ""
        assert df.loc[2, "PaymentType"] == ""

    def test_malformed_numeric(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text(CSV_HEADER + "\nCMT,1,one,1271,3.8,CRD,17.5\n")

        with pytest.raises(ValueError, match="Malformed numeric value in column 'PassengerCount'"):
            load_data(path)

    def test_blank_numeric_rejected(self, dirty_trips_csv):
        with pytest.raises(ValueError, match="Malformed"):
            load_data(dirty_trips_csv)

    def test_wrong_column_count(self, tmp_path):
        path = tmp_path / "short.csv"
        path.write_text("a,b,c\n1,2,3\n")

        with pytest.raises(ValueError, match="Expected 7 columns"):
            load_data(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_data(tmp_path / "absent.csv")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
