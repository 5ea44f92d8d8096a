"""
Trip Record Schema
==================

Fields of a taxi trip record, in the order they appear in the CSV file.

Each field carries its column position, whether it is numeric, and the
predicate used to decide whether a value is missing, so that reports can
walk every field generically.
"""

from typing import List, NamedTuple

import pandas as pd


class Field(NamedTuple):
    """A single column of the trip record."""

    name: str
    position: int
    numeric: bool

    def is_missing(self, values: pd.Series) -> pd.Series:
        """Boolean mask of missing values (NaN for numbers, blank for strings)."""
        if self.numeric:
            return values.isna()
        return values.fillna("").astype(str).str.strip() == ""


VENDOR_ID = "VendorId"
RATE_CODE = "RateCode"
PASSENGER_COUNT = "PassengerCount"
TRIP_TIME = "TripTime"
TRIP_DISTANCE = "TripDistance"
PAYMENT_TYPE = "PaymentType"
FARE_AMOUNT = "FareAmount"

FIELDS = (
    Field(VENDOR_ID, 0, False),
    Field(RATE_CODE, 1, True),
    Field(PASSENGER_COUNT, 2, True),
    Field(TRIP_TIME, 3, True),
    Field(TRIP_DISTANCE, 4, True),
    Field(PAYMENT_TYPE, 5, False),
    Field(FARE_AMOUNT, 6, True),
)

FIELD_NAMES: List[str] = [field.name for field in FIELDS]
NUMERIC_POSITIONS = frozenset(field.position for field in FIELDS if field.numeric)

# Missing-value sentinel written into numeric columns by the cleaner
MISSING_NUMERIC = "NaN"

LABEL_COLUMN = "Label"
TARGET_FIELD = FARE_AMOUNT

CATEGORICAL_FEATURES = [VENDOR_ID, PAYMENT_TYPE]
NUMERIC_FEATURES = [PASSENGER_COUNT, TRIP_TIME, TRIP_DISTANCE]

# Read, cleaned and reported, but not used as a model feature
EXCLUDED_FEATURES = [RATE_CODE]

INPUT_COLUMNS = [name for name in FIELD_NAMES if name != TARGET_FIELD]


def get_field(name: str) -> Field:
    """Look up a field by name, raising KeyError for unknown names."""
    for field in FIELDS:
        if field.name == name:
            return field
    raise KeyError(f"Unknown trip field: {name}")
