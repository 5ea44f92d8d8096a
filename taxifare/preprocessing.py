"""
Data Preprocessing Module
=========================

Handles row filtering, train/test splitting and the feature transformer.

Functions:
    - TripPreprocessor.filter: Drop unusable trips and shuffle the rest
    - TripPreprocessor.train_test_split: Seeded random split
    - build_feature_transformer: One-hot encoding + mean/variance scaling
    - split_features_label: Separate model inputs from the fare label
"""

import logging
from typing import Any, Dict, List, Tuple

import numpy as np
import pandas as pd
from sklearn.compose import ColumnTransformer
from sklearn.model_selection import train_test_split
from sklearn.preprocessing import OneHotEncoder, StandardScaler

from .config import PipelineConfig
from .schema import (
    FARE_AMOUNT,
    INPUT_COLUMNS,
    LABEL_COLUMN,
    NUMERIC_FEATURES,
    PASSENGER_COUNT,
    PAYMENT_TYPE,
    VENDOR_ID,
)

logger = logging.getLogger(__name__)


class TripPreprocessor:
    """
    Row-level preparation of trip records before training.

    Filters out trips that should not be learned from, shuffles the
    survivors reproducibly and splits them into train and test sets.
    """

    def __init__(
        self,
        excluded_payment_type: str = "UNK",
        fare_min: float = 1.0,
        fare_max: float = 150.0,
        min_passenger_count: float = 1.0,
        test_fraction: float = 0.2,
        random_state: int = 0
    ):
        """
        Initialize the preprocessor.

        Args:
            excluded_payment_type: Payment type whose trips are dropped
            fare_min: Smallest fare kept (inclusive)
            fare_max: Largest fare kept (inclusive)
            min_passenger_count: Smallest passenger count kept
            test_fraction: Fraction of trips held out for testing
            random_state: Seed for shuffling and splitting
        """
        if not 0.0 < test_fraction < 1.0:
            raise ValueError(f"test_fraction must be between 0 and 1, got {test_fraction}")
        if fare_min > fare_max:
            raise ValueError(f"fare_min ({fare_min}) must not exceed fare_max ({fare_max})")

        self.excluded_payment_type = excluded_payment_type
        self.fare_min = fare_min
        self.fare_max = fare_max
        self.min_passenger_count = min_passenger_count
        self.test_fraction = test_fraction
        self.random_state = random_state

    @classmethod
    def from_config(cls, config: PipelineConfig) -> 'TripPreprocessor':
        prep = config.preprocessing
        return cls(
            excluded_payment_type=prep.excluded_payment_type,
            fare_min=prep.fare_min,
            fare_max=prep.fare_max,
            min_passenger_count=prep.min_passenger_count,
            test_fraction=prep.test_fraction,
            random_state=config.random_state
        )

    def filter(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Drop unusable trips and shuffle the remaining ones.

        Steps, in order: drop the excluded payment type, shuffle, keep fares
        within [fare_min, fare_max], keep passenger counts of at least
        min_passenger_count. Rows with a missing fare or passenger count
        are dropped by the range checks.

        Args:
            df: Loaded trip records

        Returns:
            New filtered and shuffled DataFrame
        """
        n_start = len(df)

        filtered = df[df[PAYMENT_TYPE] != self.excluded_payment_type]
        n_payment = n_start - len(filtered)

        filtered = filtered.sample(frac=1.0, random_state=self.random_state)

        fare = filtered[FARE_AMOUNT]
        filtered = filtered[(fare >= self.fare_min) & (fare <= self.fare_max)]
        n_fare = n_start - n_payment - len(filtered)

        filtered = filtered[filtered[PASSENGER_COUNT] >= self.min_passenger_count]
        n_passenger = n_start - n_payment - n_fare - len(filtered)

        logger.info(
            f"Filtered trips: {n_start} -> {len(filtered)} "
            f"(payment type '{self.excluded_payment_type}': {n_payment}, "
            f"fare outside [{self.fare_min}, {self.fare_max}]: {n_fare}, "
            f"passengers < {self.min_passenger_count}: {n_passenger})"
        )

        return filtered.reset_index(drop=True)

    def train_test_split(self, df: pd.DataFrame) -> Tuple[pd.DataFrame, pd.DataFrame]:
        """
        Split trips into train and test sets with the configured seed.

        Args:
            df: Filtered trip records

        Returns:
            Tuple of (train_df, test_df)
        """
        if len(df) < 2:
            raise ValueError(f"Need at least 2 trips to split, got {len(df)}")

        train_df, test_df = train_test_split(
            df,
            test_size=self.test_fraction,
            random_state=self.random_state,
            shuffle=True
        )

        logger.info(
            f"Train/Test split: {len(train_df)} train samples, {len(test_df)} test samples"
        )

        return train_df.reset_index(drop=True), test_df.reset_index(drop=True)


def split_features_label(df: pd.DataFrame) -> Tuple[pd.DataFrame, pd.Series]:
    """
    Separate model inputs from the fare label.

    The input frame keeps RateCode; the feature transformer drops it.

    Returns:
        Tuple of (X, y) where y is the fare amount named 'Label'
    """
    X = df[INPUT_COLUMNS].copy()
    y = df[FARE_AMOUNT].rename(LABEL_COLUMN)
    return X, y


def build_feature_transformer() -> ColumnTransformer:
    """
    Create the unfitted feature transformer.

    Output columns, in order: VendorId indicators, PaymentType indicators,
    then standardized PassengerCount, TripTime and TripDistance. Columns not
    listed (RateCode) are dropped. Unseen categories encode as all zeros.

    Returns:
        ColumnTransformer ready to be fitted on training inputs
    """
    return ColumnTransformer(
        transformers=[
            (
                "VendorIdEncoded",
                OneHotEncoder(handle_unknown="ignore", sparse_output=False),
                [VENDOR_ID],
            ),
            (
                "PaymentTypeEncoded",
                OneHotEncoder(handle_unknown="ignore", sparse_output=False),
                [PAYMENT_TYPE],
            ),
        ] + [
            (name, StandardScaler(), [name])
            for name in NUMERIC_FEATURES
        ],
        remainder="drop"
    )


def preprocess_pipeline(df: pd.DataFrame, config: PipelineConfig) -> Dict[str, Any]:
    """
    Filter and split the trip records.

    Args:
        df: Loaded trip records
        config: Pipeline configuration

    Returns:
        Dictionary containing:
            - filtered: Filtered and shuffled trips
            - train, test: Split DataFrames
            - X_train, y_train, X_test, y_test: Inputs and labels
            - preprocessor: The TripPreprocessor used
    """
    logger.info("=" * 60)
    logger.info("STARTING DATA PREPROCESSING")
    logger.info("=" * 60)

    preprocessor = TripPreprocessor.from_config(config)

    filtered = preprocessor.filter(df)
    train_df, test_df = preprocessor.train_test_split(filtered)

    X_train, y_train = split_features_label(train_df)
    X_test, y_test = split_features_label(test_df)

    result = {
        'filtered': filtered,
        'train': train_df,
        'test': test_df,
        'X_train': X_train,
        'y_train': y_train,
        'X_test': X_test,
        'y_test': y_test,
        'preprocessor': preprocessor
    }

    logger.info("=" * 60)
    logger.info("PREPROCESSING COMPLETE")
    logger.info(f"  Trips after filtering: {len(filtered)}")
    logger.info(f"  Training samples: {len(train_df)}")
    logger.info(f"  Test samples: {len(test_df)}")
    logger.info("=" * 60)

    return result


def get_feature_names(transformer: ColumnTransformer) -> List[str]:
    """Names of the concatenated feature vector of a fitted transformer."""
    return [str(name) for name in transformer.get_feature_names_out()]


def print_preprocessing_summary(result: Dict[str, Any]) -> None:
    """
    Print a summary of the preprocessing results.

    Args:
        result: Dictionary from preprocess_pipeline
    """
    preprocessor = result['preprocessor']
    print(f"Trips after filtering: {len(result['filtered'])}")
    print(f"Training samples: {len(result['train'])}")
    print(f"Test samples: {len(result['test'])}")
    print(f"Fare range kept: [{preprocessor.fare_min}, {preprocessor.fare_max}]")
    print(f"Excluded payment type: {preprocessor.excluded_payment_type}")
    if len(result['y_train']):
        print(f"Mean fare (train): {np.mean(result['y_train']):.2f}")
