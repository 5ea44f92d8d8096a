"""
Dataset Reports Module
======================

Data-quality reports computed over the loaded trip records.

Functions:
    - missing_values_report: Count missing values per field
    - distinct_values_report: Collect distinct present values per field
    - frequency_counts: Value frequencies over fully populated records
    - plot_frequency_distributions: Bar charts of value frequencies
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns

from .schema import FIELDS, get_field

logger = logging.getLogger(__name__)

MAX_DISTINCT_EXAMPLES = 7

# Display names used by the frequency report headings
DISPLAY_NAMES = {
    "PaymentType": "Payment Type",
    "PassengerCount": "Passenger Count",
    "RateCode": "Rate Code",
    "VendorId": "Vendor Id",
}


def print_separator(
    separator_char: str = '*',
    count: int = 80,
    lines: int = 2,
    top_margin: bool = True,
    bottom_margin: bool = True
) -> None:
    """Print rule lines between console report sections."""
    if top_margin:
        print()
    for _ in range(lines):
        print(separator_char * count)
    if bottom_margin:
        print()


def format_value(value: Any) -> str:
    """Render a field value, dropping the trailing '.0' of integral floats."""
    if isinstance(value, (float, np.floating)):
        if np.isfinite(value) and float(value).is_integer():
            return str(int(value))
        return repr(float(value))
    return str(value)


def format_percentage(part: int, whole: int) -> str:
    """Percentage with five decimals, or '0.000%' for an empty total."""
    if whole == 0:
        return "0.000%"
    return f"{part / whole * 100.0:.5f}%"


def missing_values_report(df: pd.DataFrame) -> Dict[str, int]:
    """
    Count missing values for every trip field.

    Args:
        df: Loaded trip records

    Returns:
        Mapping of field name to number of missing values
    """
    return {
        field.name: int(field.is_missing(df[field.name]).sum())
        for field in FIELDS
    }


def print_missing_values_report(report: Dict[str, int]) -> None:
    print("-" * 20 + " Missing Values Report " + "-" * 20)
    for name, count in report.items():
        print(f"Column: [{name}] contains `{count}` missing value(s).")


def distinct_values_report(
    df: pd.DataFrame,
    categorical_only: bool = False
) -> Dict[str, List[Any]]:
    """
    Collect the distinct present values of each field.

    Values keep the order in which they are first seen.

    Args:
        df: Loaded trip records
        categorical_only: Only report the text fields

    Returns:
        Mapping of field name to list of distinct values
    """
    report = {}
    for field in FIELDS:
        if categorical_only and field.numeric:
            continue
        values = df[field.name]
        present = values[~field.is_missing(values)]
        report[field.name] = list(pd.unique(present))
    return report


def print_distinct_values_report(
    report: Dict[str, List[Any]],
    categorical_only: bool = False
) -> None:
    suffix = "" if categorical_only else " (For all properties)"
    print("-" * 20 + f" Distinct Values Report{suffix} " + "-" * 20)
    for name, values in report.items():
        print(f"Column: [{name}] contains `{len(values)}` distinct value(s).")
        for value in values[:MAX_DISTINCT_EXAMPLES]:
            print(f" - {format_value(value)}")
        if len(values) > MAX_DISTINCT_EXAMPLES:
            print(" - ...")


def complete_records(df: pd.DataFrame) -> pd.DataFrame:
    """Records in which every field is present."""
    mask = pd.Series(True, index=df.index)
    for field in FIELDS:
        mask &= ~field.is_missing(df[field.name])
    return df[mask]


def frequency_counts(df: pd.DataFrame, field_name: str) -> pd.DataFrame:
    """
    Frequency of each value of a field over fully populated records.

    Args:
        df: Loaded trip records
        field_name: Field to group by

    Returns:
        DataFrame with columns 'value', 'count' and 'percentage', in
        first-seen order of the values

    Raises:
        KeyError: If the field name is unknown
    """
    get_field(field_name)

    complete = complete_records(df)
    whole = len(complete)

    counts = complete.groupby(field_name, sort=False).size()

    frequencies = pd.DataFrame({
        "value": counts.index.to_list(),
        "count": counts.to_numpy(dtype=int),
    })
    frequencies["percentage"] = (
        frequencies["count"] / whole * 100.0 if whole else 0.0
    )
    frequencies.attrs["total"] = whole
    return frequencies


def print_frequency_counts(
    frequencies: pd.DataFrame,
    field_name: str,
    display_name: Optional[str] = None
) -> None:
    whole = frequencies.attrs.get("total", int(frequencies["count"].sum()))
    print(f"Frequency of [{display_name or field_name}]'s Values:")
    for value, count in zip(frequencies["value"], frequencies["count"]):
        print(
            f"{format_value(value)}: {count} - "
            f"Percentage ({format_percentage(int(count), whole)})"
        )


def plot_frequency_distributions(
    df: pd.DataFrame,
    field_names: Sequence[str],
    save_path: Optional[str] = None
) -> plt.Figure:
    """
    Bar charts of value frequencies for the given fields.

    Args:
        df: Loaded trip records
        field_names: Fields to chart, one subplot each
        save_path: Path to save the figure

    Returns:
        Matplotlib Figure object
    """
    n_fields = len(field_names)
    fig, axes = plt.subplots(1, n_fields, figsize=(5 * n_fields, 4), squeeze=False)

    for ax, name in zip(axes[0], field_names):
        frequencies = frequency_counts(df, name)
        labels = [format_value(v) for v in frequencies["value"]]
        sns.barplot(x=labels, y=frequencies["percentage"].to_numpy(), ax=ax, color='steelblue')
        ax.set_xlabel(DISPLAY_NAMES.get(name, name))
        ax.set_ylabel('Percentage (%)')
        ax.set_title(DISPLAY_NAMES.get(name, name), fontsize=10, fontweight='bold')

    plt.suptitle('Value Frequencies (complete records)', fontsize=14, fontweight='bold')
    plt.tight_layout()

    if save_path:
        Path(save_path).parent.mkdir(parents=True, exist_ok=True)
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        logger.info(f"Frequency distribution plot saved to {save_path}")

    return fig


def generate_dataset_report(
    df: pd.DataFrame,
    frequency_fields: Sequence[str] = ("PaymentType", "PassengerCount", "RateCode", "VendorId"),
    figures_dir: Optional[Path] = None
) -> Dict[str, Any]:
    """
    Compute and print all dataset reports.

    Args:
        df: Loaded trip records
        frequency_fields: Fields to print frequency counts for
        figures_dir: Directory for the frequency figure; no figure when None

    Returns:
        Dictionary with the missing, distinct and frequency reports
    """
    logger.info("Generating dataset reports...")

    missing = missing_values_report(df)
    total_missing = sum(missing.values())
    if total_missing:
        logger.warning(f"Missing values: {total_missing} across {len(df)} rows")
    print_missing_values_report(missing)

    print_separator()

    distinct = distinct_values_report(df)
    print_distinct_values_report(distinct)

    print_separator()

    frequencies = {}
    for name in frequency_fields:
        frequencies[name] = frequency_counts(df, name)
        print_frequency_counts(frequencies[name], name, DISPLAY_NAMES.get(name))

    report = {
        "missing": missing,
        "distinct": distinct,
        "frequencies": frequencies,
        "figures": [],
    }

    if figures_dir is not None:
        plot_frequency_distributions(
            df,
            list(frequency_fields),
            save_path=str(Path(figures_dir) / "frequency_distributions.png")
        )
        plt.close('all')
        report["figures"].append("frequency_distributions.png")

    return report
