"""
Shared fixtures for the test suite.
"""

import sys
from pathlib import Path

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from taxifare.schema import FIELD_NAMES

CSV_HEADER = "vendor_id,rate_code,passenger_count,trip_time_in_secs,trip_distance,payment_type,fare_amount"

# One 'UNK' payment type and one fare of 500
TEN_TRIPS_CSV = "\n".join([
    CSV_HEADER,
    "CMT,1,1,1271,3.8,CRD,17.5",
    "CMT,1,1,474,1.5,CRD,8",
    "CMT,1,1,637,1.4,CRD,8.5",
    "CMT,1,1,181,0.6,CSH,4.5",
    "VTS,1,2,661,1.1,CRD,8.5",
    "VTS,1,1,935,9.6,UNK,27.5",
    "VTS,1,1,1140,3.75,CRD,15.5",
    "VTS,2,1,1560,17.5,CRD,500",
    "VTS,1,3,420,1.2,CSH,7",
    "CMT,1,2,900,2.3,CSH,11",
]) + "\n"

DIRTY_TRIPS_CSV = "\n".join([
    CSV_HEADER,
    "CMT,1,,1271,3.8,CRD,17.5",
    ",1,1,474,,CRD,8",
    "VTS, ,1,637,1.4,,",
    "CMT,1,1,181,0.6,CSH,4.5",
]) + "\n"


def make_trips(n_samples: int = 300, seed: int = 42) -> pd.DataFrame:
    """Synthetic trips whose fare grows with distance and time."""
    rng = np.random.default_rng(seed)
    distance = rng.uniform(0.5, 12.0, n_samples).round(2)
    trip_time = (distance * rng.uniform(150, 300, n_samples)).round()
    fare = (2.5 + 2.5 * distance + 0.004 * trip_time + rng.normal(0, 0.5, n_samples)).round(1)

    return pd.DataFrame({
        "VendorId": rng.choice(["CMT", "VTS"], n_samples),
        "RateCode": np.ones(n_samples),
        "PassengerCount": rng.integers(1, 5, n_samples).astype(float),
        "TripTime": trip_time,
        "TripDistance": distance,
        "PaymentType": rng.choice(["CRD", "CSH"], n_samples),
        "FareAmount": fare,
    }, columns=FIELD_NAMES)


@pytest.fixture
def trips_df():
    return make_trips()


@pytest.fixture
def ten_trips_csv(tmp_path):
    path = tmp_path / "ten-trips.csv"
    path.write_text(TEN_TRIPS_CSV)
    return path


@pytest.fixture
def dirty_trips_csv(tmp_path):
    path = tmp_path / "dirty-trips.csv"
    path.write_text(DIRTY_TRIPS_CSV)
    return path


@pytest.fixture
def trips_csv(tmp_path, trips_df):
    """Synthetic trips written as a raw CSV file."""
    path = tmp_path / "taxi-fare-train.csv"
    trips_df.to_csv(path, index=False, header=CSV_HEADER.split(","))
    return path
