"""
Data Loader Module
==================

Handles raw CSV cleaning and loading of trip records.

Functions:
    - clean_line: Replace blank cells in one CSV line
    - prepare_data: Write a cleaned copy of the raw CSV
    - load_data: Load the cleaned CSV into a typed DataFrame
    - print_data_summary: Print basic dataset information
"""

import logging
from pathlib import Path
from typing import List, Union

import numpy as np
import pandas as pd

from .schema import FIELDS, FIELD_NAMES, MISSING_NUMERIC, NUMERIC_POSITIONS

logger = logging.getLogger(__name__)


def clean_line(line: str) -> str:
    """
    Replace blank cells of a single data line.

    Blank numeric cells become the NaN sentinel, blank text cells become
    empty strings.

    Args:
        line: Comma separated data line (without newline)

    Returns:
        Cleaned line
    """
    columns = line.split(',')

    for i, value in enumerate(columns):
        if not value.strip():
            columns[i] = MISSING_NUMERIC if i in NUMERIC_POSITIONS else ""

    return ",".join(columns)


def prepare_data(
    source_path: Union[str, Path],
    destination_path: Union[str, Path]
) -> Path:
    """
    Write a cleaned copy of the raw CSV file.

    The header line is copied verbatim and line order is preserved.

    Args:
        source_path: Path to the raw CSV file
        destination_path: Path of the cleaned CSV to write

    Returns:
        Path to the cleaned file

    Raises:
        FileNotFoundError: If the source file doesn't exist
    """
    source_path = Path(source_path)
    destination_path = Path(destination_path)

    if not source_path.exists():
        raise FileNotFoundError(f"Data file not found: {source_path}")

    with open(source_path, 'r', newline='') as f:
        lines = f.read().splitlines()

    processed: List[str] = [
        line if index == 0 else clean_line(line)
        for index, line in enumerate(lines)
    ]

    destination_path.parent.mkdir(parents=True, exist_ok=True)
    with open(destination_path, 'w', newline='') as f:
        f.writelines(line + "\n" for line in processed)

    logger.info(f"Prepared {max(len(processed) - 1, 0)} data lines: {source_path} -> {destination_path}")
    return destination_path


def load_data(file_path: Union[str, Path]) -> pd.DataFrame:
    """
    Load a cleaned trip CSV into a DataFrame.

    Columns are mapped to trip fields by position; the header names in the
    file are ignored.

    Args:
        file_path: Path to the cleaned CSV file

    Returns:
        DataFrame with one column per trip field

    Raises:
        FileNotFoundError: If data file doesn't exist
        ValueError: If the column count is wrong or a numeric cell is malformed
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Data file not found: {file_path}")

    df = pd.read_csv(file_path, dtype=object, keep_default_na=False)

    if df.shape[1] != len(FIELDS):
        raise ValueError(
            f"Expected {len(FIELDS)} columns, but found {df.shape[1]}. "
            f"Columns: {list(df.columns)}"
        )

    df.columns = FIELD_NAMES

    for field in FIELDS:
        if field.numeric:
            try:
                df[field.name] = df[field.name].astype(np.float64)
            except ValueError as e:
                raise ValueError(
                    f"Malformed numeric value in column '{field.name}' of {file_path}: {e}"
                ) from e
        else:
            df[field.name] = df[field.name].fillna("").astype(str)

    logger.info(f"Loaded data from {file_path}: {df.shape[0]} rows × {df.shape[1]} columns")
    return df


def print_data_summary(df: pd.DataFrame) -> None:
    """
    Print a formatted summary of the dataset to console.

    Args:
        df: DataFrame to summarize
    """
    print("-" * 20 + " Dataset Summary " + "-" * 20)
    print(f"Shape: {df.shape[0]} rows × {df.shape[1]} columns")
    print(f"Memory Usage: {df.memory_usage(deep=True).sum() / 1024:.2f} KB")
    print("\nColumn Information:")

    for field in FIELDS:
        missing = int(field.is_missing(df[field.name]).sum())
        missing_pct = (missing / len(df)) * 100 if len(df) else 0.0
        print(f"  {field.name}: {df[field.name].dtype} | {missing_pct:.1f}% missing")

    numeric = df.select_dtypes(include=[np.number])
    if not numeric.empty and len(df):
        print("\nBasic Statistics:")
        print(numeric.describe().round(4).to_string())
