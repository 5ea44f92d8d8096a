"""
Prediction Module
=================

Single-trip inference from a persisted fare model.

The model is reloaded from disk so that the saved artifact, not the
in-memory training result, is what gets exercised.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Union

import numpy as np
import pandas as pd

from .model import FarePredictionModel
from .schema import FIELDS, FIELD_NAMES

logger = logging.getLogger(__name__)

# Example trip; the fare is ignored when predicting
SAMPLE_TRIP: Dict[str, Any] = {
    "VendorId": "VTS",
    "RateCode": 1.0,
    "PassengerCount": 1.0,
    "TripTime": 1140.0,
    "TripDistance": 3.75,
    "PaymentType": "CRD",
    "FareAmount": 0.0,
}

# Known fare of SAMPLE_TRIP, shown next to the prediction
REFERENCE_FARE = 15.5


def trip_to_frame(trip: Mapping[str, Any]) -> pd.DataFrame:
    """
    Build a one-row DataFrame from a trip mapping.

    Fields absent from the mapping are filled with their missing value.
    """
    unknown = set(trip) - set(FIELD_NAMES)
    if unknown:
        raise KeyError(f"Unknown trip fields: {sorted(unknown)}")

    row = {}
    for field in FIELDS:
        value = trip.get(field.name)
        if field.numeric:
            row[field.name] = [np.nan if value is None else float(value)]
        else:
            row[field.name] = ["" if value is None else str(value)]
    return pd.DataFrame(row, columns=FIELD_NAMES)


def predict_single(model: FarePredictionModel, trip: Mapping[str, Any]) -> float:
    """
    Predict the fare of one trip.

    Args:
        model: Trained fare model
        trip: Mapping of trip field name to value

    Returns:
        Predicted fare
    """
    prediction = model.predict(trip_to_frame(trip))
    return float(prediction[0])


def run_single_prediction(
    model_path: Union[str, Path],
    trip: Mapping[str, Any] = SAMPLE_TRIP,
    reference_fare: float = REFERENCE_FARE
) -> Dict[str, Any]:
    """
    Reload the saved model and predict one trip.

    Args:
        model_path: Path to the persisted model
        trip: Trip to predict
        reference_fare: Known fare reported next to the prediction

    Returns:
        Dictionary with the trip, predicted fare and reference fare

    Raises:
        FileNotFoundError: If the model file doesn't exist
    """
    model = FarePredictionModel.load(model_path)
    predicted = predict_single(model, trip)

    logger.info(f"Predicted fare {predicted:.4f} for trip {dict(trip)}")

    return {
        'trip': dict(trip),
        'predicted_fare': predicted,
        'reference_fare': reference_fare,
        'model_path': str(model_path)
    }


def format_fare(value: float) -> str:
    """Fare with at most four decimals, trailing zeros trimmed."""
    text = f"{value:.4f}".rstrip('0').rstrip('.')
    return "0" if text in ("-0", "") else text


def print_prediction_results(result: Dict[str, Any]) -> None:
    print(
        f"Predicted fare: {format_fare(result['predicted_fare'])}, "
        f"actual fare: {format_fare(result['reference_fare'])}"
    )
